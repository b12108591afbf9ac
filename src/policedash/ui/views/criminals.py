"""Criminal records browser with inline editing."""

from __future__ import annotations

import streamlit as st

from policedash.client.models import CriminalRecord
from policedash.services.criminal_browser import CriminalBrowser, changed_fields, option_index
from policedash.ui import api as ui_api

GENDERS = ("", "male", "female", "other")


def _browser() -> CriminalBrowser:
    def build() -> CriminalBrowser:
        browser = CriminalBrowser(ui_api.api_client(), notifier=ui_api.notifier())
        browser.reset()
        return browser

    return ui_api.workflow("criminals", build)


def _on_filter_change(browser: CriminalBrowser, name: str) -> None:
    browser.set_filter(name, st.session_state.get(f"criminal_filter_{name}") or "")
    if name == "state":
        st.session_state["criminal_filter_district"] = ""
    # Streamlit reruns after every widget change; the debounced reload runs on this rerun.
    browser.debouncer.flush()


def _render_filters(browser: CriminalBrowser) -> None:
    browser.load_filter_options()
    search_col, crime_col, gender_col = st.columns([2, 1, 1])
    search_col.text_input(
        "Search by name or ID",
        key="criminal_filter_search",
        on_change=_on_filter_change,
        args=(browser, "search"),
    )
    crime_col.selectbox(
        "Crime type",
        ("", *browser.crime_types),
        key="criminal_filter_crime_type",
        on_change=_on_filter_change,
        args=(browser, "crime_type"),
    )
    gender_col.selectbox(
        "Gender",
        GENDERS,
        key="criminal_filter_gender",
        on_change=_on_filter_change,
        args=(browser, "gender"),
    )
    state_col, district_col = st.columns(2)
    state_col.selectbox(
        "State",
        ("", *browser.states),
        key="criminal_filter_state",
        on_change=_on_filter_change,
        args=(browser, "state"),
    )
    district_col.selectbox(
        "District",
        ("", *browser.districts),
        key="criminal_filter_district",
        on_change=_on_filter_change,
        args=(browser, "district"),
        disabled=not browser.filters.state,
    )


def _render_editor(browser: CriminalBrowser, record: CriminalRecord) -> None:
    with st.form(f"edit_{record.person_id}"):
        name = st.text_input("Name", value=record.name)
        crime_type = st.text_input("Crime type", value=record.crime_type or "")
        state = st.text_input("State", value=record.state or "")
        district = st.text_input("District", value=record.district or "")
        gender = st.selectbox("Gender", GENDERS, index=option_index(GENDERS, record.gender))
        image = st.file_uploader("Replace image", type=["jpg", "jpeg", "png", "bmp", "gif"])
        save_col, cancel_col = st.columns(2)
        saved = save_col.form_submit_button("Save")
        cancelled = cancel_col.form_submit_button("Cancel")

    if saved:
        values = {"name": name, "crime_type": crime_type, "state": state, "district": district, "gender": gender}
        changes = changed_fields(record, values)
        upload = ui_api.to_upload(image)
        if not changes and upload is None:
            st.session_state["editing_person_id"] = None
            st.rerun()
        if browser.save_edit(record.person_id, changes, upload) is not None:
            st.session_state["editing_person_id"] = None
            st.rerun()
    if cancelled:
        st.session_state["editing_person_id"] = None
        st.rerun()


def render_criminals() -> None:
    st.header("Criminal Records")
    browser = _browser()
    _render_filters(browser)
    if browser.error:
        st.error(browser.error)
    if not browser.records:
        st.info("No criminal records found.")

    for record in browser.records:
        with st.container(border=True):
            image_col, detail_col = st.columns([1, 3])
            url = browser.image_url(record)
            if url:
                image_col.image(url, width=120)
            detail_col.markdown(f"**{record.name}** (`{record.person_id}`)")
            detail_col.caption(
                " | ".join(part for part in (record.crime_type, record.gender, record.state, record.district) if part)
            )
            if detail_col.button("Edit", key=f"edit_btn_{record.person_id}"):
                st.session_state["editing_person_id"] = record.person_id
            if st.session_state.get("editing_person_id") == record.person_id:
                _render_editor(browser, record)

    if browser.has_more and st.button("Load more"):
        browser.load_more()
        st.rerun()
