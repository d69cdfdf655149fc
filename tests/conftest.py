# tests/conftest.py
from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

TEST_DIR = Path(__file__).resolve().parent
if str(TEST_DIR) not in sys.path:
    sys.path.insert(0, str(TEST_DIR))

# tasker 모듈이 import 되기 전에 테스트용 환경을 고정
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["DB_AUTO_CREATE"] = "false"

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, create_engine  # noqa: E402

from tasker.core.security import build_password_context, get_password_context  # noqa: E402
from tasker.core.tokens import TokenService, get_token_service  # noqa: E402
from tasker.db.session import create_all_tables, get_session  # noqa: E402
from tasker.models.user import User  # noqa: E402

from fakes import FakeClock  # noqa: E402

TEST_SECRET = "test-secret"


@pytest.fixture()
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_all_tables(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def db(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture()
def pwd_context():
    # bcrypt 최소 cost로 테스트 속도 확보
    return build_password_context(4)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def token_service(clock: FakeClock) -> TokenService:
    return TokenService(TEST_SECRET, clock=clock)


@pytest.fixture()
def make_user(db):
    def _make(username: str) -> User:
        user = User(username=username, password_hash="not-a-real-hash")
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture()
def client(engine, pwd_context, token_service):
    from tasker.main import app

    def _session_override():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = _session_override
    app.dependency_overrides[get_token_service] = lambda: token_service
    app.dependency_overrides[get_password_context] = lambda: pwd_context
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def auth_headers(client):
    """Register + login a user and return its Authorization header."""

    def _login(username: str, password: str = "pw") -> dict[str, str]:
        r = client.post("/register", json={"username": username, "password": password})
        assert r.status_code == 200, r.text
        r = client.post("/login", json={"username": username, "password": password})
        assert r.status_code == 200, r.text
        return {"Authorization": f"Bearer {r.json()['token']}"}

    return _login
