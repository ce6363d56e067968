"""Shared fixtures for the reading list tests."""
from __future__ import annotations

import pytest  # type: ignore[import-not-found]
from fastapi.testclient import TestClient

from reading_list_api.app.main import create_app
from reading_list_api.app.services.book_store import BookStore
from tests.fakes import AppSession


@pytest.fixture
def store() -> BookStore:
    return BookStore()


@pytest.fixture
def app(store):
    return create_app(store)


@pytest.fixture
def api(app):
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


@pytest.fixture
def api_session(api) -> AppSession:
    """A ``requests``-compatible session backed by the test app."""
    return AppSession(api)
