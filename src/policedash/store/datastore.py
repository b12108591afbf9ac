"""Row-level access to the complaints, users, RTI and admins tables."""

from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

import sqlalchemy as sa
from sqlalchemy import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from policedash.settings import Settings, get_settings
from policedash.store import tables
from policedash.store.changes import ChangeCallback, ChangeFeed, Subscription

LOGGER = logging.getLogger(__name__)


class DataStoreError(RuntimeError):
    """Raised when a data-store query or update fails."""


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def _table(name: str) -> sa.Table:
    try:
        return tables.TABLES[name]
    except KeyError as exc:
        raise DataStoreError(f"Unknown table '{name}'") from exc


class DataStore:
    """Direct table access plus a change feed that views subscribe to."""

    def __init__(
        self,
        *,
        engine: Engine | None = None,
        change_feed: ChangeFeed | None = None,
        settings: Settings | None = None,
        create_schema: bool = False,
    ) -> None:
        self.settings = settings or get_settings()
        self.engine = engine or tables.build_engine(settings=self.settings)
        self._session_factory: sessionmaker = tables.session_factory(engine=self.engine)
        self.changes = change_feed or ChangeFeed()
        if create_schema:
            try:
                tables.METADATA.create_all(self.engine)
            except SQLAlchemyError as exc:
                raise DataStoreError(f"Could not create schema: {exc}") from exc

    @contextmanager
    def _session_scope(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise DataStoreError(str(exc)) from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def select(
        self,
        table_name: str,
        *,
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        columns: Sequence[str] | None = None,
        limit: int | None = None,
    ) -> List[Dict[str, Any]]:
        """Return matching rows as plain dictionaries."""

        table = _table(table_name)
        selected = [table.c[name] for name in columns] if columns else [table]
        stmt = sa.select(*selected)
        for key, value in (filters or {}).items():
            stmt = stmt.where(table.c[key] == value)
        if order_by:
            column = table.c[order_by]
            stmt = stmt.order_by(column.desc() if descending else column.asc())
        if limit is not None:
            stmt = stmt.limit(limit)
        with self._session_scope() as session:
            rows = session.execute(stmt).mappings().all()
        return [dict(row) for row in rows]

    def count(self, table_name: str) -> int:
        table = _table(table_name)
        with self._session_scope() as session:
            return int(session.execute(sa.select(sa.func.count()).select_from(table)).scalar_one())

    def find_admin(self, email: str, password: str) -> Optional[Dict[str, Any]]:
        """Plaintext credential lookup against ``admins``. Insecure by construction."""

        rows = self.select("admins", filters={"email": email, "password": password}, limit=1)
        return rows[0] if rows else None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def insert(self, table_name: str, values: Mapping[str, Any]) -> Dict[str, Any]:
        table = _table(table_name)
        payload = dict(values)
        key_column = tables.primary_key_column(table)
        if isinstance(key_column.type, sa.String) and payload.get(key_column.name) is None:
            payload[key_column.name] = uuid.uuid4().hex
        if "created_at" in table.c and payload.get("created_at") is None:
            payload["created_at"] = _utcnow()
        with self._session_scope() as session:
            session.execute(sa.insert(table).values(**payload))
        self.changes.publish(table_name, "INSERT", payload)
        return payload

    def update(self, table_name: str, row_id: Any, values: Mapping[str, Any]) -> Dict[str, Any]:
        """Update one row by primary key and return the updated row."""

        table = _table(table_name)
        key_column = tables.primary_key_column(table)
        payload = dict(values)
        if "updated_at" in table.c and "updated_at" not in payload:
            payload["updated_at"] = _utcnow()
        with self._session_scope() as session:
            result = session.execute(sa.update(table).where(key_column == row_id).values(**payload))
            if result.rowcount == 0:
                raise DataStoreError(f"No {table_name} row with {key_column.name}={row_id!r}")
            row = session.execute(sa.select(table).where(key_column == row_id)).mappings().one()
            updated = dict(row)
        self.changes.publish(table_name, "UPDATE", updated)
        return updated

    # ------------------------------------------------------------------
    # Real-time
    # ------------------------------------------------------------------
    def subscribe(self, table_name: str, callback: ChangeCallback) -> Subscription:
        return self.changes.subscribe(table_name, callback)


__all__ = ["DataStore", "DataStoreError"]
