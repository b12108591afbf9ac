"""httpx-backed client for the face-recognition API.

The client owns the base URL, the fixed request timeout and the optional
bearer token. Every failure leaves this module as a member of the
:mod:`policedash.client.errors` taxonomy, so accessors only have to validate
their own inputs and shape payloads.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from policedash.settings import Settings, get_settings

from .errors import ApiError, HttpStatusError, NetworkError

LOGGER = logging.getLogger(__name__)

_STATUS_MESSAGES: Dict[int, str] = {
    400: "Invalid request",
    403: "Access forbidden",
    500: "Internal server error",
    503: "Service temporarily unavailable",
}


class TokenStore:
    """Holds the optional bearer token; the dashboard swaps in a session-backed store."""

    def __init__(self, token: str | None = None) -> None:
        self._token = token

    def get(self) -> str | None:
        return self._token

    def set(self, token: str | None) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


@dataclass
class Page:
    """A list payload plus the paging metadata the backend may attach."""

    items: List[Any] = field(default_factory=list)
    count: Optional[int] = None
    limit: Optional[int] = None
    offset: Optional[int] = None


def unwrap_envelope(payload: Any) -> Any:
    """Return ``payload["data"]`` for enveloped responses, else the payload itself."""

    if isinstance(payload, Mapping) and "data" in payload:
        return payload["data"]
    return payload


def unwrap_page(payload: Any) -> Page:
    """Normalize enveloped and bare list responses into a :class:`Page`."""

    if isinstance(payload, Mapping) and "data" in payload:
        items = payload.get("data") or []
        return Page(
            items=list(items),
            count=payload.get("count"),
            limit=payload.get("limit"),
            offset=payload.get("offset"),
        )
    if payload is None:
        return Page()
    if isinstance(payload, list):
        return Page(items=list(payload), count=len(payload))
    raise HttpStatusError("Unexpected response shape for list endpoint", 500, payload)


def extract_server_message(body: Any) -> str | None:
    """Pick the human-readable message from a backend error body."""

    if not isinstance(body, Mapping):
        return None
    for key in ("error", "detail", "message"):
        value = body.get(key)
        if value:
            return value if isinstance(value, str) else str(value)
    return None


class FaceApiClient:
    """Thin wrapper around :class:`httpx.Client` with the dashboard's error mapping."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        token_store: TokenStore | None = None,
        timeout: float | None = None,
        settings: Settings | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.base_url = (base_url or self.settings.api.base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else self.settings.api.timeout_seconds
        self.token_store = token_store or TokenStore(self.settings.api.token)
        self._http = httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    def __enter__(self) -> "FaceApiClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    # ------------------------------------------------------------------
    # Request helpers
    # ------------------------------------------------------------------
    def get(self, path: str, *, params: Mapping[str, Any] | None = None, timeout: float | None = None) -> Any:
        return self.request("GET", path, params=params, timeout=timeout)

    def post(
        self,
        path: str,
        *,
        json: Any = None,
        data: Mapping[str, Any] | None = None,
        files: Any = None,
    ) -> Any:
        return self.request("POST", path, json=json, data=data, files=files)

    def put(
        self,
        path: str,
        *,
        json: Any = None,
        data: Mapping[str, Any] | None = None,
        files: Any = None,
    ) -> Any:
        return self.request("PUT", path, json=json, data=data, files=files)

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
        data: Mapping[str, Any] | None = None,
        files: Any = None,
        timeout: float | None = None,
    ) -> Any:
        """Issue a request and return the decoded body, raising taxonomy errors on failure."""

        headers = self._auth_headers()
        LOGGER.debug("API request: %s %s%s %s", method, self.base_url, path, dict(params or {}))
        try:
            response = self._http.request(
                method,
                path,
                params=params,
                json=json,
                data=data,
                files=files,
                headers=headers,
                timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
            )
        except httpx.TransportError as exc:
            LOGGER.warning("Network error: no response from %s (%s)", self.base_url, exc)
            raise NetworkError(
                f"Network error: Unable to reach server at {self.base_url}. Please ensure the backend is running."
            ) from exc
        except (httpx.RequestError, httpx.InvalidURL, TypeError, ValueError) as exc:
            LOGGER.error("Request error: %s", exc)
            raise NetworkError(str(exc) or "Request setup failed") from exc

        body = _decode_body(response)
        LOGGER.debug("API response: %s %s%s", response.status_code, self.base_url, path)
        if response.is_error:
            raise self._status_error(response, body)
        return body

    def _auth_headers(self) -> Dict[str, str]:
        token = self.token_store.get()
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    def _status_error(self, response: httpx.Response, body: Any) -> ApiError:
        status = response.status_code
        server_message = extract_server_message(body)
        if status == 401:
            LOGGER.error("Unauthorized access")
            self.token_store.clear()
            return HttpStatusError("Unauthorized access", 401, body)
        if status == 404:
            LOGGER.error("Resource not found: %s", response.request.url)
            return HttpStatusError("Resource not found", 404, body)
        default = _STATUS_MESSAGES.get(status, "An error occurred")
        message = server_message or default
        LOGGER.error("API error %s: %s", status, message)
        return HttpStatusError(message, status, body)


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


__all__ = [
    "FaceApiClient",
    "Page",
    "TokenStore",
    "extract_server_message",
    "unwrap_envelope",
    "unwrap_page",
]
