"""policedash: administrative dashboard for police control rooms.

This package contains the source code for the policedash project: a client for
the face-recognition service (enrollment, matching, alerts, presigned images),
an accessor for the complaints/users/RTI data store, and the operator
workflows and Streamlit pages built on top of them.
"""
