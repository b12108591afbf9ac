"""Backend connection diagnostics."""

from __future__ import annotations

import streamlit as st

from policedash.client.health import check_backend_connection
from policedash.ui import api as ui_api


def render_diagnostics() -> None:
    st.header("Diagnostics")
    client = ui_api.api_client()
    st.write(f"API base URL: `{client.base_url}`")
    if st.button("Check backend connection"):
        st.session_state["health_report"] = check_backend_connection(client)

    report = st.session_state.get("health_report")
    if report is None:
        return
    if report.success:
        st.success(report.message)
    else:
        st.warning(report.message)
    if report.details is not None:
        st.json(report.details)
