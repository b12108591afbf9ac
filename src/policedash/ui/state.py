"""Session state helpers for the police dashboard."""

from __future__ import annotations

from typing import Any

import streamlit as st

from policedash.settings import get_settings

SETTINGS = get_settings()

SECTIONS = (
    "Dashboard",
    "Complaints",
    "Analytics",
    "Criminals",
    "Enroll",
    "Bulk Enroll",
    "Match",
    "Alerts",
    "Diagnostics",
)


def ensure_session_defaults() -> None:
    """Populate Streamlit session state with the dashboard defaults."""

    defaults: dict[str, Any] = {
        "api_base": SETTINGS.api_base_url,
        "api_token": SETTINGS.api.token or "",
        "section": SECTIONS[0],
        "alert_status_filter": "All",
        "match_threshold": SETTINGS.match.default_threshold,
        "match_create_alert": SETTINGS.match.create_alert,
        "health_report": None,
        "editing_person_id": None,
        "enroll_upload_token": 0,
    }

    for key, value in defaults.items():
        st.session_state.setdefault(key, value)


__all__ = ["SECTIONS", "ensure_session_defaults"]
