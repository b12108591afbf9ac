"""Admin login gate."""

from __future__ import annotations

import streamlit as st

from policedash.services.auth import AdminSession
from policedash.ui import api as ui_api


def admin_session() -> AdminSession:
    return AdminSession(ui_api.data_store(), st.session_state)


def render_login() -> None:
    st.title("Police Admin Portal")
    st.caption("Sign in with your administrator account.")
    with st.form("login_form"):
        email = st.text_input("Email", placeholder="admin@police.gov.in")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in")

    if submitted:
        result = admin_session().login(email, password)
        if result.ok:
            st.rerun()
        else:
            st.error(result.error)
