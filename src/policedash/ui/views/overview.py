"""Dashboard (citizen users) and analytics sections."""

from __future__ import annotations

import streamlit as st

from policedash.services.analytics import Analytics
from policedash.services.citizens import CitizensOverview, is_fully_verified, is_mobile_verified
from policedash.ui import api as ui_api


def _citizens() -> CitizensOverview:
    def build() -> CitizensOverview:
        overview = CitizensOverview(ui_api.data_store())
        overview.subscribe()
        return overview

    return ui_api.workflow("citizens", build)


def render_dashboard() -> None:
    st.header("Citizen Users")
    overview = _citizens()
    if st.button("Refresh", key="refresh_users") or not overview.users:
        overview.refresh()
    if overview.error:
        st.error(f"Failed to load users: {overview.error}")

    stats = overview.stats
    total_col, mobile_col, verified_col = st.columns(3)
    total_col.metric("Total Users", stats.total_users)
    mobile_col.metric("Mobile Verified", stats.total_mobile_verified)
    verified_col.metric("Fully Verified", stats.total_verified)

    for user in overview.users:
        profile = user.get("profile_data") or {}
        auth = user.get("auth_data") or {}
        badge = "Verified" if is_fully_verified(user) else "Unverified"
        with st.expander(f"{profile.get('name') or 'Unknown'} ({badge})"):
            st.write(f"Chat ID: {user.get('chat_id')}")
            st.write(f"Address: {profile.get('address') or '-'}")
            st.write(f"Mobile: {auth.get('mobile_number') or '-'}")
            st.write(f"Mobile verified: {'yes' if is_mobile_verified(user) else 'no'}")
            st.write(f"Joined: {user.get('created_at')}")


def render_analytics() -> None:
    st.header("Analytics")
    analytics: Analytics = ui_api.workflow("analytics", lambda: Analytics(ui_api.data_store()))
    if st.button("Refresh", key="refresh_analytics") or analytics.report is None:
        analytics.refresh()
    if analytics.error:
        st.error(f"Failed to load analytics: {analytics.error}")
    report = analytics.report
    if report is None:
        return

    summary = report.summary
    cols = st.columns(5)
    cols[0].metric("Users", summary.total_users)
    cols[1].metric("Complaints", summary.total_complaints)
    cols[2].metric("Open", summary.open_complaints)
    cols[3].metric("Closed", summary.closed_complaints)
    cols[4].metric("RTI Requests", summary.total_rti)

    st.subheader("Monthly trend")
    st.bar_chart(
        {
            "Complaints": {bucket.label: bucket.complaints for bucket in report.monthly},
            "RTI": {bucket.label: bucket.rti for bucket in report.monthly},
        }
    )

    category_col, status_col = st.columns(2)
    with category_col:
        st.subheader("By category")
        if report.categories:
            st.bar_chart(report.categories)
    with status_col:
        st.subheader("By status")
        if report.statuses:
            st.bar_chart(report.statuses)

    st.subheader("Recent activity")
    st.dataframe(
        [
            {"Type": item.title, "Status": item.status, "Created": item.created_at}
            for item in report.recent
        ],
        hide_index=True,
    )
