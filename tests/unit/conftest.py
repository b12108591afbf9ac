"""Shared fixtures: settings, a mocked-transport API client and an isolated SQLite store."""

from __future__ import annotations

from typing import Callable, Iterator

import httpx
import pytest
import sqlalchemy as sa

from policedash.client.http import FaceApiClient, TokenStore
from policedash.observability import reset_observability_cache
from policedash.settings import Settings, reload_settings
from policedash.store import tables
from policedash.store.datastore import DataStore

BASE_URL = "http://faceapi.test"

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture()
def settings() -> Iterator[Settings]:
    reset_observability_cache()
    yield reload_settings(env="local")
    reset_observability_cache()


@pytest.fixture()
def make_client(settings: Settings) -> Iterator[Callable[..., FaceApiClient]]:
    """Build a FaceApiClient whose requests are answered by ``handler``."""

    clients: list[FaceApiClient] = []

    def _make(handler: Handler, token: str | None = None) -> FaceApiClient:
        client = FaceApiClient(
            base_url=BASE_URL,
            token_store=TokenStore(token),
            settings=settings,
            transport=httpx.MockTransport(handler),
        )
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()


@pytest.fixture()
def unreachable(make_client: Callable[..., FaceApiClient]) -> FaceApiClient:
    """Client whose transport fails the test if any request is issued."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError(f"unexpected request: {request.method} {request.url}")

    return make_client(handler)


@pytest.fixture()
def store(tmp_path, settings: Settings) -> Iterator[DataStore]:
    """Provide a DataStore backed by an isolated SQLite database."""

    db_path = tmp_path / "policedash.db"
    engine = sa.create_engine(f"sqlite:///{db_path}", future=True)
    tables.METADATA.create_all(engine)
    yield DataStore(engine=engine, settings=settings)
    engine.dispose()
