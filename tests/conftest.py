"""Pytest configuration and fixtures."""

import asyncio
import os
import tempfile
from pathlib import Path

# Must be set before familyhub.config is imported
os.environ.setdefault("ENVIRONMENT", "test")

import pytest

from familyhub.auth import AuthClient
from familyhub.db import TableStore, init_db


@pytest.fixture
def temp_db_path():
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest.fixture
def temp_uploads_dir():
    """Create a temporary uploads directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def store(temp_db_path):
    """A tabular store on a freshly initialized database."""
    asyncio.run(init_db(temp_db_path))
    return TableStore(temp_db_path)


def _sign_up(store: TableStore, email: str):
    client = AuthClient(store)
    session = asyncio.run(client.sign_up(email, "secret123"))
    return client, session


@pytest.fixture
def host(store):
    """A signed-in host: (auth client, session)."""
    return _sign_up(store, "host@example.com")


@pytest.fixture
def other_user(store):
    """A second signed-in user."""
    return _sign_up(store, "other@example.com")
