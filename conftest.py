# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Shared fixtures: every test gets a fresh in-memory MongoDB (mongomock) and a
publisher that records socket events instead of emitting them.
"""
from datetime import datetime, timedelta, timezone

import mongomock
import pytest

from taskhub.core.database import ensure_indexes
from taskhub.core.dependencies import init_dependencies
from taskhub.core.security import create_access_token, hash_password
from taskhub.models.user import ROLE_USER, User
from taskhub.repositories.user_repository import UserRepository


class RecordingPublisher:
    """Stands in for the Socket.IO publisher; keeps (event, payload, rooms) tuples."""

    def __init__(self):
        self.events = []

    def publish(self, event, payload, rooms):
        self.events.append((event, payload, list(rooms)))

    def named(self, event):
        return [e for e in self.events if e[0] == event]


@pytest.fixture(autouse=True)
def db():
    """Fresh database and service wiring for every test."""
    database = mongomock.MongoClient()["taskhub_test"]
    ensure_indexes(database)
    yield database


@pytest.fixture(autouse=True)
def publisher(db):
    recorder = RecordingPublisher()
    init_dependencies(db, recorder)
    return recorder


@pytest.fixture
def make_user(db):
    """Insert an account directly and return it with a ready-to-use auth header."""
    repo = UserRepository(db)
    counter = {"n": 0}

    def _make(role=ROLE_USER, name=None, email=None, password="secret123", must_reset=False):
        counter["n"] += 1
        doc = repo.create(User(
            _id=None,
            name=name or f"{role.title()} {counter['n']}",
            email=email or f"{role}{counter['n']}@example.com",
            password=hash_password(password),
            role=role,
            mustResetPassword=must_reset,
        ))
        token = create_access_token({"id": str(doc["_id"]), "role": role})
        return {
            "doc": doc,
            "id": str(doc["_id"]),
            "token": token,
            "headers": {"Authorization": f"Bearer {token}"},
        }

    return _make


@pytest.fixture
def due_date():
    return (datetime.now(timezone.utc) + timedelta(days=3)).isoformat()
