"""Shared fixtures: a fresh in-memory database and app per test."""

from typing import Optional

import pytest
from fastapi.testclient import TestClient

from placement_portal.core.config import Settings
from placement_portal.core.sessions import InMemorySessionStore
from placement_portal.db.database import Database
from placement_portal.main import create_app
from placement_portal.services.storage import DatabaseStorage

STRONG_PASSWORD = "Placement2025"
COOKIE_NAME = "placement_session"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        session_backend="memory",
        seed_demo_data=False,
        debug=False,
        log_level="WARNING",
    )


@pytest.fixture
def database():
    db = Database("sqlite://")
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def storage(database) -> DatabaseStorage:
    return DatabaseStorage(database)


@pytest.fixture
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def app(settings, database, session_store):
    return create_app(settings, database=database, session_store=session_store)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


def register(client: TestClient, username: str, role: str = "student", **overrides):
    """Register (and thereby log in as) a new user. Returns the response."""
    client.cookies.clear()
    payload = {
        "username": username,
        "password": STRONG_PASSWORD,
        "email": f"{username}@campus.edu",
        "name": username.title(),
        "role": role,
    }
    if role == "student":
        payload["studentDetails"] = {"department": "Computer Science", "cgpa": 8.4, "graduationYear": 2025}
    elif role == "employer":
        payload["employerDetails"] = {"companyName": f"{username.title()} Ltd", "industry": "Software"}
    payload.update(overrides)
    return client.post("/api/register", json=payload)


def login(client: TestClient, username: str, password: str = STRONG_PASSWORD):
    client.cookies.clear()
    return client.post("/api/login", json={"username": username, "password": password})


def post_job(client: TestClient, title: str = "Backend Engineer", **overrides):
    payload = {
        "title": title,
        "description": "Build and run our APIs.",
        "requirements": "Python, SQL",
        "location": "Remote",
        "salary": "$90,000",
    }
    payload.update(overrides)
    return client.post("/api/jobs", json=payload)


def user_id(response) -> int:
    return response.json()["id"]


def session_cookie(client: TestClient) -> Optional[str]:
    return client.cookies.get(COOKIE_NAME)
