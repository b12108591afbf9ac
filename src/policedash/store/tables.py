"""SQLAlchemy metadata and engine helpers for the dashboard's data store."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import sqlalchemy as sa
from sqlalchemy import Engine
from sqlalchemy.dialects import postgresql
from sqlalchemy.engine import URL
from sqlalchemy.orm import sessionmaker

from policedash.settings import Settings, get_settings

JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), "postgresql")
TIMESTAMP = sa.DateTime(timezone=True)
ID_TYPE = sa.String(length=64)

METADATA = sa.MetaData()

complaints = sa.Table(
    "complaints",
    METADATA,
    sa.Column("id", ID_TYPE, primary_key=True),
    sa.Column("complaint_type", sa.Text(), nullable=True),
    sa.Column("description", sa.Text(), nullable=True),
    sa.Column("location", sa.Text(), nullable=True),
    sa.Column("status", sa.Text(), nullable=True),
    sa.Column("user_id", sa.Text(), nullable=True),
    sa.Column("created_at", TIMESTAMP, nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
    sa.Column("updated_at", TIMESTAMP, nullable=True),
)
sa.Index("idx_complaints_created_at", complaints.c.created_at)
sa.Index("idx_complaints_status", complaints.c.status)

users = sa.Table(
    "users",
    METADATA,
    sa.Column("chat_id", sa.BigInteger(), primary_key=True, autoincrement=False),
    sa.Column("profile_data", JSON_TYPE, nullable=True),
    sa.Column("auth_data", JSON_TYPE, nullable=True),
    sa.Column("verification_status", JSON_TYPE, nullable=True),
    sa.Column("created_at", TIMESTAMP, nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
)
sa.Index("idx_users_created_at", users.c.created_at)

rti_requests = sa.Table(
    "rti_requests",
    METADATA,
    sa.Column("id", ID_TYPE, primary_key=True),
    sa.Column("user_id", sa.Text(), nullable=True),
    sa.Column("subject", sa.Text(), nullable=True),
    sa.Column("status", sa.Text(), nullable=True),
    sa.Column("created_at", TIMESTAMP, nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
)
sa.Index("idx_rti_requests_created_at", rti_requests.c.created_at)

# Credentials are compared in plaintext; this mirrors the deployed schema and is not safe.
admins = sa.Table(
    "admins",
    METADATA,
    sa.Column("id", ID_TYPE, primary_key=True),
    sa.Column("email", sa.Text(), nullable=False, unique=True),
    sa.Column("password", sa.Text(), nullable=False),
    sa.Column("created_at", TIMESTAMP, nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
)

TABLES: dict[str, sa.Table] = {
    "complaints": complaints,
    "users": users,
    "rti_requests": rti_requests,
    "admins": admins,
}


def primary_key_column(table: sa.Table) -> sa.Column:
    return list(table.primary_key.columns)[0]


def _resolve_database_url(settings: Settings | None = None) -> str:
    """Return the SQLAlchemy URL, preferring an explicit URL over the SQLite path."""

    resolved = settings or get_settings()
    if resolved.datastore.url:
        return resolved.datastore.url
    sqlite_path = Path(resolved.datastore.sqlite_path)
    return URL.create("sqlite", database=sqlite_path.as_posix()).render_as_string(hide_password=False)


def build_engine(*, echo: bool = False, settings: Settings | None = None) -> Engine:
    """Engine for ``datastore.url``, or the SQLite file at ``datastore.sqlite_path``."""

    url = _resolve_database_url(settings)
    connect_args: dict[str, Any] = {}
    if url.startswith("sqlite:///"):
        connect_args["check_same_thread"] = False
        Path(url.removeprefix("sqlite:///")).parent.mkdir(parents=True, exist_ok=True)
    return sa.create_engine(url, echo=echo, future=True, pool_pre_ping=True, connect_args=connect_args)


def session_factory(*, engine: Engine | None = None, settings: Settings | None = None) -> sessionmaker:
    """Sessionmaker over ``engine`` (a new engine from settings when omitted)."""

    bound = engine or build_engine(settings=settings)
    return sessionmaker(bind=bound, autoflush=False, autocommit=False, future=True)
