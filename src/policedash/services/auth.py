"""Admin login against the ``admins`` table.

Credentials are compared in plaintext by the data store. This mirrors the
deployed schema and is not a secure design.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, MutableMapping, Optional

from policedash.store.datastore import DataStore, DataStoreError

LOGGER = logging.getLogger(__name__)

SESSION_KEY = "admin_session"
INVALID_CREDENTIALS = "Invalid email or password"
UNEXPECTED_ERROR = "An unexpected error occurred. Please try again."


@dataclass
class LoginResult:
    ok: bool
    error: Optional[str] = None


class AdminSession:
    """Login flag kept in a mutable mapping (``st.session_state`` in the app)."""

    def __init__(
        self,
        store: DataStore,
        session: MutableMapping[str, Any] | None = None,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store
        self.session: MutableMapping[str, Any] = session if session is not None else {}
        self._clock = clock or (lambda: datetime.now(tz=timezone.utc))

    def login(self, email: str, password: str) -> LoginResult:
        email = (email or "").strip()
        if not email or not password:
            return LoginResult(ok=False, error=INVALID_CREDENTIALS)
        try:
            admin = self.store.find_admin(email, password)
        except DataStoreError:
            LOGGER.exception("Admin lookup failed")
            return LoginResult(ok=False, error=UNEXPECTED_ERROR)
        if admin is None:
            LOGGER.info("Rejected login for %s", email)
            return LoginResult(ok=False, error=INVALID_CREDENTIALS)

        self.session[SESSION_KEY] = {"email": admin.get("email", email), "logged_in_at": self._clock().isoformat()}
        LOGGER.info("Admin %s logged in", email)
        return LoginResult(ok=True)

    def logout(self) -> None:
        self.session.pop(SESSION_KEY, None)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.session.get(SESSION_KEY))

    @property
    def email(self) -> Optional[str]:
        current = self.session.get(SESSION_KEY)
        return current.get("email") if current else None


__all__ = ["AdminSession", "INVALID_CREDENTIALS", "LoginResult", "SESSION_KEY", "UNEXPECTED_ERROR"]
