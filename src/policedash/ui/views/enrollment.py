"""Single-image and bulk enrollment sections."""

from __future__ import annotations

import streamlit as st

from policedash.services.enrollment import AGE_RANGES, BulkEnrollment, EnrollmentWorkflow
from policedash.ui import api as ui_api

GENDERS = ("", "male", "female", "other")
IMAGE_TYPES = ["jpg", "jpeg", "png", "bmp", "gif"]


def _workflow() -> EnrollmentWorkflow:
    return ui_api.workflow(
        "enrollment",
        lambda: EnrollmentWorkflow(ui_api.api_client(), notifier=ui_api.notifier()),
    )


def _uploader_key() -> str:
    return f"enroll_image_{st.session_state.get('enroll_upload_token', 0)}"


def _clear_uploader() -> None:
    st.session_state["enroll_upload_token"] = st.session_state.get("enroll_upload_token", 0) + 1
    st.session_state.pop("enroll_selected_file", None)


def _render_duplicate_prompt(workflow: EnrollmentWorkflow) -> None:
    check = workflow.duplicate
    if check is None:
        return
    with st.container(border=True):
        st.warning(
            f"This person may already be enrolled: **{check.display_name}** "
            f"({check.confidence:.1f}% similarity, threshold {check.threshold:g}%)."
        )
        if check.existing is not None:
            existing = check.existing
            st.caption(
                " | ".join(
                    part
                    for part in (existing.person_id, existing.crime_type, existing.state, existing.district)
                    if part
                )
            )
        cancel_col, proceed_col = st.columns(2)
        if cancel_col.button("Cancel enrollment", key="duplicate_cancel"):
            workflow.cancel_duplicate()
            _clear_uploader()
            st.rerun()
        if proceed_col.button("Enroll anyway", key="duplicate_proceed"):
            workflow.proceed_anyway()
            st.rerun()


def render_enroll() -> None:
    st.header("Enroll Criminal")
    workflow = _workflow()

    uploaded = st.file_uploader("Face image", type=IMAGE_TYPES, key=_uploader_key())
    marker = (uploaded.name, uploaded.size) if uploaded is not None else None
    if marker != st.session_state.get("enroll_selected_file"):
        st.session_state["enroll_selected_file"] = marker
        with st.spinner("Checking for existing records..."):
            workflow.select_file(ui_api.to_upload(uploaded))
    if workflow.file is not None:
        st.image(workflow.file.content, width=200)
    if workflow.file_error:
        st.error(workflow.file_error)
    _render_duplicate_prompt(workflow)

    form = workflow.form
    if "enroll_states" not in st.session_state:
        st.session_state["enroll_states"] = workflow.load_states()
    states = st.session_state["enroll_states"]

    form.name = st.text_input("Name *", value=form.name)
    form.person_id = st.text_input("Person ID (optional)", value=form.person_id)
    form.crime_type = st.text_input("Crime type *", value=form.crime_type)
    form.gender = st.selectbox("Gender", GENDERS, index=GENDERS.index(form.gender) if form.gender in GENDERS else 0)

    state_options = ("", *states)
    state = st.selectbox(
        "State *",
        state_options,
        index=state_options.index(form.state) if form.state in state_options else 0,
    )
    if state != form.state:
        workflow.set_state(state)
    district_options = ("", *workflow.districts)
    form.district = st.selectbox(
        "District *",
        district_options,
        index=district_options.index(form.district) if form.district in district_options else 0,
        disabled=not form.state,
    )
    age_options = ("", *AGE_RANGES)
    form.age_range = st.selectbox(
        "Age range *",
        age_options,
        index=age_options.index(form.age_range) if form.age_range in age_options else 0,
    )
    form.apply_augmentations = st.checkbox("Apply augmentations", value=form.apply_augmentations)

    if st.button("Enroll", type="primary", disabled=workflow.awaiting_decision):
        with st.spinner("Enrolling..."):
            result = workflow.submit()
        if result is not None and result.success:
            _clear_uploader()
            st.rerun()


def render_bulk_enroll() -> None:
    st.header("Bulk Enroll")
    bulk: BulkEnrollment = ui_api.workflow(
        "bulk_enrollment",
        lambda: BulkEnrollment(ui_api.api_client(), notifier=ui_api.notifier()),
    )
    with st.form("bulk_enroll_form"):
        sheet = st.file_uploader("Excel / CSV sheet", type=["xlsx", "xls", "csv"])
        images_folder = st.text_input(
            "Images folder (on the server)",
            help="Image paths in the sheet are resolved against this folder on the backend host.",
        )
        submitted = st.form_submit_button("Start bulk enrollment")

    if submitted:
        with st.spinner("Enrolling..."):
            bulk.submit(ui_api.to_upload(sheet), images_folder.strip() or None)

    result = bulk.last_result
    if result is not None:
        st.metric("Records", result.total_criminals)
        st.metric("Images indexed", result.total_images_indexed)
        for error in result.errors:
            st.warning(error)
