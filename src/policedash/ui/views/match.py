"""Face match section."""

from __future__ import annotations

import streamlit as st

from policedash.services.match_search import MatchSearch
from policedash.ui import api as ui_api


def render_match() -> None:
    st.header("Match Face")
    search: MatchSearch = ui_api.workflow(
        "match",
        lambda: MatchSearch(ui_api.api_client(), notifier=ui_api.notifier()),
    )

    uploaded = st.file_uploader("Probe image", type=["jpg", "jpeg", "png", "bmp", "gif", "webp"], key="match_image")
    marker = (uploaded.name, uploaded.size) if uploaded is not None else None
    if marker != st.session_state.get("match_selected_file"):
        st.session_state["match_selected_file"] = marker
        search.select_file(ui_api.to_upload(uploaded))
    if search.file is not None:
        st.image(search.file.content, width=240)

    search.parameters.similarity_threshold = st.slider(
        "Similarity threshold (%)",
        min_value=0.0,
        max_value=100.0,
        step=1.0,
        key="match_threshold",
    )
    search.parameters.create_alert = st.checkbox("Create alert on match", key="match_create_alert")

    if st.button("Search", type="primary"):
        with st.spinner("Matching..."):
            search.search()

    result = search.result
    if result is None:
        return
    if result.processing_time_ms is not None:
        st.caption(f"Processed in {result.processing_time_ms:.0f} ms")
    for match in result.matches:
        with st.container(border=True):
            image_col, detail_col = st.columns([1, 3])
            if match.image_url:
                image_col.image(match.image_url, width=120)
            detail_col.markdown(f"**{match.name}** (`{match.person_id}`)")
            detail_col.progress(min(max(match.confidence / 100.0, 0.0), 1.0), text=f"{match.confidence:.1f}%")
            detail_col.caption(
                " | ".join(part for part in (match.crime_type, match.gender, match.state, match.district) if part)
            )
