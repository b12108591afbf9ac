"""Alert review section."""

from __future__ import annotations

import streamlit as st

from policedash.client.models import Alert
from policedash.services.alert_triage import STATUS_FILTERS, AlertTriage, alert_source, available_actions
from policedash.ui import api as ui_api

STATUS_BADGES = {"Pending": "🟡", "Verified": "🟢", "Rejected": "🔴"}


def _triage() -> AlertTriage:
    def build() -> AlertTriage:
        triage = AlertTriage(ui_api.api_client(), notifier=ui_api.notifier())
        triage.subscribe(ui_api.data_store())
        triage.refresh()
        return triage

    return ui_api.workflow("alerts", build)


def _render_alert(triage: AlertTriage, alert: Alert) -> None:
    badge = STATUS_BADGES.get(alert.status, "⚪")
    top = alert.matches[0] if alert.matches else None
    title = f"{badge} {alert.status} | {top.name if top else 'No match'} | via {alert_source(alert)}"
    with st.expander(title):
        detail = triage.view(alert) if st.session_state.get("alert_detail_id") == alert.alert_id else alert
        if detail.query_image_url:
            st.image(detail.query_image_url, caption="Query image", width=200)
        st.caption(f"Alert {detail.alert_id} | created {detail.created_at}")
        for match in detail.matches:
            st.write(f"- **{match.name}** (`{match.person_id}`): {match.confidence:.1f}%")
        if st.button("Load full detail", key=f"alert_detail_{alert.alert_id}"):
            st.session_state["alert_detail_id"] = alert.alert_id
            st.rerun()

        actions = available_actions(alert)
        if actions:
            cols = st.columns(len(actions))
            for col, action in zip(cols, actions):
                if col.button(action, key=f"alert_{action}_{alert.alert_id}"):
                    triage.transition(alert.alert_id, action)
                    st.rerun()


def render_alerts() -> None:
    st.header("Alerts")
    triage = _triage()

    filter_col, refresh_col = st.columns([3, 1])
    selected = filter_col.radio("Status", STATUS_FILTERS, horizontal=True, key="alert_status_filter")
    if selected != triage.status_filter:
        triage.set_filter(selected)
    if refresh_col.button("Refresh", key="refresh_alerts"):
        triage.refresh()

    if triage.connection_error:
        st.error(f"Connection error: {triage.connection_error}")

    counts = triage.counts()
    cols = st.columns(len(counts))
    for col, (status, count) in zip(cols, counts.items()):
        col.metric(status, count)

    if not triage.alerts:
        st.info("No alerts found.")
    for alert in triage.alerts:
        _render_alert(triage, alert)
