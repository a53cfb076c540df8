import itertools
import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from uuid import UUID

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# read at import time by taskmanager.db.session / core.config
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["MAIL_API_URL"] = ""

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

from taskmanager.core import clock  # noqa: E402
from taskmanager.db.session import get_session  # noqa: E402
from taskmanager.main import app  # noqa: E402

PASSWORD = "Passw0rd"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture
def client(engine) -> TestClient:
    def _get_session():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = _get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(client):
    """Register a user and return {"user_id", "email", "token", "headers"}."""

    def _make(name: str = "Alice", email: str = "alice@x.com", password: str = PASSWORD) -> dict:
        r = client.post("/auth/register", json={"name": name, "email": email, "password": password})
        assert r.status_code == 201, r.text
        data = r.json()["data"]
        return {
            "user_id": UUID(data["user"]["user_id"]),
            "email": data["user"]["email"],
            "token": data["token"],
            "headers": {"Authorization": f"Bearer {data['token']}"},
        }

    return _make


@pytest.fixture
def alice(make_user) -> dict:
    return make_user()


@pytest.fixture
def bob(make_user) -> dict:
    return make_user(name="Bob", email="bob@x.com")


@pytest.fixture
def ticking_clock(monkeypatch):
    """utcnow() advances one second per call so timestamps are strictly ordered."""
    start = datetime(2026, 1, 1, 9, 0, 0, tzinfo=timezone.utc)
    ticks = itertools.count()
    monkeypatch.setattr(clock, "utcnow", lambda: start + timedelta(seconds=next(ticks)))
    return start
