"""Complaint triage section."""

from __future__ import annotations

import streamlit as st

from policedash.services.complaint_triage import ComplaintBucket, ComplaintTriage
from policedash.ui import api as ui_api

TAB_LABELS = {
    ComplaintBucket.PENDING: "Pending",
    ComplaintBucket.OPEN: "Open",
    ComplaintBucket.CLOSED: "Closed",
    ComplaintBucket.UNKNOWN: "Other",
}


def _triage() -> ComplaintTriage:
    def build() -> ComplaintTriage:
        triage = ComplaintTriage(ui_api.data_store(), notifier=ui_api.notifier())
        triage.subscribe()
        triage.refresh()
        return triage

    return ui_api.workflow("complaints", build)


def render_complaints() -> None:
    st.header("Complaints")
    triage = _triage()
    if st.button("Refresh", key="refresh_complaints"):
        triage.refresh()
    if triage.error:
        st.error(f"Failed to load complaints: {triage.error}")

    counts = triage.counts()
    # Streamlit tabs cannot be selected programmatically; show the active one first.
    order = [triage.active_tab] + [bucket for bucket in ComplaintBucket if bucket is not triage.active_tab]
    tabs = st.tabs([f"{TAB_LABELS[bucket]} ({counts[bucket]})" for bucket in order])
    for tab, bucket in zip(tabs, order):
        with tab:
            rows = triage.bucket(bucket)
            if not rows:
                st.info("No complaints in this category.")
            for row in rows:
                with st.container(border=True):
                    st.markdown(f"**{row.get('complaint_type') or 'Complaint'}** &middot; {row.get('status') or '-'}")
                    st.write(row.get("description") or "")
                    st.caption(f"{row.get('location') or 'Unknown location'} | {row.get('created_at')}")
                    if bucket is ComplaintBucket.PENDING:
                        accept_col, reject_col = st.columns(2)
                        if accept_col.button("Accept", key=f"accept_{row['id']}"):
                            triage.accept(row["id"])
                            st.rerun()
                        if reject_col.button("Reject", key=f"reject_{row['id']}"):
                            triage.reject(row["id"])
                            st.rerun()
