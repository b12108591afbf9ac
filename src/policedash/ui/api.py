"""Client, data-store and workflow wiring for the Streamlit dashboard."""

from __future__ import annotations

from typing import Any, Callable, Optional, TypeVar

import streamlit as st

from policedash.client.http import FaceApiClient, TokenStore
from policedash.client.uploads import UploadFile
from policedash.services.notifications import Notifier, Variant
from policedash.settings import get_settings
from policedash.store.datastore import DataStore
from policedash.ui.registry import WorkflowRegistry

SETTINGS = get_settings()
API_BASE_URL = SETTINGS.api_base_url

T = TypeVar("T")


class SessionTokenStore(TokenStore):
    """Bearer token read from the sidebar's ``api_token`` widget.

    The widget's value cannot be changed once it has rendered, so a token the
    backend rejected is remembered and withheld until the operator edits it.
    """

    KEY = "api_token"
    REJECTED_KEY = "api_token_rejected"

    def get(self) -> str | None:
        token = st.session_state.get(self.KEY) or None
        if token is not None and token == st.session_state.get(self.REJECTED_KEY):
            return None
        return token

    def set(self, token: str | None) -> None:
        st.session_state[self.REJECTED_KEY] = None
        st.session_state[self.KEY] = token or ""

    def clear(self) -> None:
        st.session_state[self.REJECTED_KEY] = st.session_state.get(self.KEY)


@st.cache_resource
def data_store() -> DataStore:
    """One engine and change feed per server process."""

    return DataStore(settings=SETTINGS, create_schema=True)


def api_client() -> FaceApiClient:
    """Client bound to the base URL in the sidebar; rebuilt when it changes."""

    base = st.session_state.get("api_base") or API_BASE_URL
    current: Optional[FaceApiClient] = st.session_state.get("_api_client")
    if current is None or current.base_url != base.rstrip("/"):
        if current is not None:
            current.close()
        current = FaceApiClient(base_url=base, token_store=SessionTokenStore(), settings=SETTINGS)
        st.session_state["_api_client"] = current
        workflows().clear()
    return current


def notifier() -> Notifier:
    if "notifier" not in st.session_state:
        st.session_state["notifier"] = Notifier()
    return st.session_state["notifier"]


def workflows() -> WorkflowRegistry:
    if "_workflows" not in st.session_state:
        st.session_state["_workflows"] = WorkflowRegistry()
    return st.session_state["_workflows"]


def workflow(name: str, factory: Callable[[], T]) -> T:
    """Return the session's instance of a workflow, creating it on first use."""

    return workflows().get(name, factory)


def to_upload(uploaded: Any) -> Optional[UploadFile]:
    """Convert a Streamlit ``UploadedFile`` into the client's upload type."""

    if uploaded is None:
        return None
    return UploadFile(
        filename=uploaded.name,
        content=uploaded.getvalue(),
        content_type=uploaded.type or "application/octet-stream",
    )


def render_notifications() -> None:
    renderers = {
        Variant.SUCCESS: st.success,
        Variant.ERROR: st.error,
        Variant.WARNING: st.warning,
        Variant.DEFAULT: st.info,
    }
    for item in notifier().active():
        renderers[item.variant](f"**{item.title}**: {item.description}")


__all__ = [
    "API_BASE_URL",
    "SETTINGS",
    "SessionTokenStore",
    "api_client",
    "data_store",
    "notifier",
    "render_notifications",
    "to_upload",
    "workflow",
    "workflows",
]
