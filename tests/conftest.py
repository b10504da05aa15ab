"""
tests/conftest.py -- Shared test fixtures for the Book Catalog API tests.

This module provides:
  - _make_test_stores(): isolated in-memory DBs for users + books
  - _patch_lifespan(): wires test collaborators into app.state, bypassing real startup
  - api_client: TestClient plus a registered user's bearer token
  - user_store / credentials / tokens: unit-test fixtures, no HTTP

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker
thread. The named URI format (file:name?mode=memory&cache=shared&uri=true)
shares one in-memory instance across all connections in the same process.

SECRET_KEY must be set before any api/ import: api/main.py reads settings
at import time to configure CORS. BCRYPT_ROUNDS=4 (bcrypt's minimum) keeps
the suite fast without changing what is being tested.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: set before any api/ or core.config import.
os.environ.setdefault("SECRET_KEY", "test-secret-key-with-more-than-32-characters")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.credentials import CredentialStore
from auth.store import UserStore
from auth.tokens import TokenService
from catalog.store import BookStore

TEST_SECRET = os.environ["SECRET_KEY"]
TEST_ROUNDS = 4

TEST_NAME = "Test User"
TEST_EMAIL = "tester@example.com"
TEST_PASSWORD = "testpass123"


# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _make_test_stores(db_suffix: str) -> tuple[UserStore, BookStore]:
    """Create isolated named shared-memory SQLite stores for test isolation.

    Args:
        db_suffix: Unique string appended to the DB name so test modules
                   don't share state.
    """
    db_url = f"sqlite:///file:test_catalog_{db_suffix}?mode=memory&cache=shared&uri=true"
    return UserStore(db_url), BookStore(db_url)


def _patch_lifespan(user_store: UserStore, books: BookStore, tokens: TokenService):
    """Return an async context manager that replaces the real lifespan.

    Wires pre-created test collaborators into app.state so TestClient routes
    see isolated test DBs rather than the configured database.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        app.state.books = books
        app.state.credentials = CredentialStore(user_store, rounds=TEST_ROUNDS)
        app.state.tokens = tokens
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# Module-scoped fixtures -- one TestClient per test module for speed
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def api_client(request) -> Generator[tuple[TestClient, str, int], None, None]:
    """Yield (client, token, user_id) for API integration tests.

    The TestClient uses the real FastAPI app with a patched lifespan so tests
    hit real route handlers but use isolated in-memory stores. The user is
    registered before the client starts (name=TEST_NAME, email=TEST_EMAIL,
    password=TEST_PASSWORD) and a token is issued for Authorization headers.
    """
    user_store, books = _make_test_stores(request.module.__name__.rsplit(".", 1)[-1])
    tokens = TokenService(TEST_SECRET, expire_seconds=3600)

    user = CredentialStore(user_store, rounds=TEST_ROUNDS).register(TEST_NAME, TEST_EMAIL, TEST_PASSWORD)
    token = tokens.issue(user.id)

    app.router.lifespan_context = _patch_lifespan(user_store, books, tokens)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, token, user.id

    books.close()
    user_store.close()


# ---------------------------------------------------------------------------
# Unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def user_store() -> Generator[UserStore, None, None]:
    store = UserStore("sqlite:///:memory:")
    yield store
    store.close()


@pytest.fixture
def credentials(user_store: UserStore) -> CredentialStore:
    return CredentialStore(user_store, rounds=TEST_ROUNDS)


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(TEST_SECRET, expire_seconds=3600)


@pytest.fixture
def book_store() -> Generator[BookStore, None, None]:
    store = BookStore("sqlite:///:memory:")
    yield store
    store.close()
