"""Streamlit police admin dashboard.

Run:
    streamlit run src/policedash/ui/app.py

Complaints, citizen users and RTI requests are read from the data store
configured under ``[datastore]``; criminal records, enrollment, face matching
and alerts go through the face-recognition API at ``[api].base_url``.
"""

from __future__ import annotations

import streamlit as st

import policedash.ui.api as ui_api
from policedash.observability import configure_logging
from policedash.ui.state import SECTIONS, ensure_session_defaults
from policedash.ui.views import (
    admin_session,
    render_alerts,
    render_analytics,
    render_bulk_enroll,
    render_complaints,
    render_criminals,
    render_dashboard,
    render_diagnostics,
    render_enroll,
    render_login,
    render_match,
)

RENDERERS = {
    "Dashboard": render_dashboard,
    "Complaints": render_complaints,
    "Analytics": render_analytics,
    "Criminals": render_criminals,
    "Enroll": render_enroll,
    "Bulk Enroll": render_bulk_enroll,
    "Match": render_match,
    "Alerts": render_alerts,
    "Diagnostics": render_diagnostics,
}

configure_logging(ui_api.SETTINGS)
st.set_page_config(page_title="Police Admin Dashboard", page_icon="🚔", layout="wide")
ensure_session_defaults()

session = admin_session()
if not session.is_authenticated:
    render_login()
    st.stop()

# Sidebar controls
st.sidebar.header("Police Admin")
st.sidebar.caption(f"Signed in as {session.email}")
st.sidebar.radio("Section", SECTIONS, key="section")

with st.sidebar.expander("Connection", expanded=False):
    st.text_input("API Base URL", key="api_base")
    st.text_input("API Token", key="api_token", type="password")

if st.sidebar.button("Log out"):
    session.logout()
    ui_api.workflows().clear()
    st.rerun()

# Filled after the section runs so toasts raised by its actions show on this run.
notice_area = st.container()
RENDERERS[st.session_state["section"]]()
with notice_area:
    ui_api.render_notifications()
