# tests/conftest.py

from __future__ import annotations

import pytest

from taskboard import TaskboardApp, create_app
from taskboard.schemas.user import SessionUser
from taskboard.services import IdentityManager, TaskRepository
from taskboard.storage import KeyValueStore


@pytest.fixture()
def app() -> TaskboardApp:
    """
    Fully wired services over a private in-memory SQLite database.

    bcrypt runs at its minimum cost so registration stays fast, and logging
    is left to pytest so caplog keeps working.
    """
    return create_app("sqlite://", bcrypt_rounds=4, configure_logging=False)


@pytest.fixture()
def store(app: TaskboardApp) -> KeyValueStore:
    return app.store


@pytest.fixture()
def identity(app: TaskboardApp) -> IdentityManager:
    return app.identity


@pytest.fixture()
def repo(app: TaskboardApp) -> TaskRepository:
    return app.tasks


@pytest.fixture()
def alice(identity: IdentityManager) -> SessionUser:
    """Registered and signed in."""
    assert identity.register("alice", "secret1").success
    result = identity.login("alice", "secret1")
    assert result.success
    return result.data
