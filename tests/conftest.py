import os
import re

# Must be set before anything from lawbook is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("APP_ENV", "test")

import pytest
from fastapi.testclient import TestClient

from lawbook import config
from lawbook.db import Base, SessionLocal, engine
from lawbook.main import app
from lawbook.models.user import UserRole
from lawbook.stores import users

CSRF_RE = re.compile(r'name="csrf_token" value="([^"]+)"')


@pytest.fixture(autouse=True)
def fast_hashing(monkeypatch):
    monkeypatch.setattr(config, "BCRYPT_ROUNDS", 4)


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    # https so the Secure session cookie is sent back
    with TestClient(app, base_url="https://testserver") as test_client:
        yield test_client


def csrf_token_from(response) -> str:
    match = CSRF_RE.search(response.text)
    assert match, "no csrf token in page"
    return match.group(1)


@pytest.fixture
def make_user(db):
    def _make(email="a@x.com", password="longenough1", role=UserRole.STUDENT, name="Ann"):
        return users.insert(db, name, email, password, role)
    return _make


@pytest.fixture
def login(client):
    def _login(email="a@x.com", password="longenough1"):
        token = csrf_token_from(client.get("/user/login"))
        return client.post(
            "/user/login",
            data={"email": email, "password": password, "csrf_token": token},
            follow_redirects=False,
        )
    return _login
