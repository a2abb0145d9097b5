import os

# must be set before taskboard.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("APP_ENV", "test")

import uuid
from dataclasses import dataclass

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import taskboard.models  # noqa: F401
from taskboard.db import get_db
from taskboard.main import create_app
from taskboard.models.base import Base

@dataclass
class Account:
    id: str
    name: str
    email: str
    headers: dict[str, str]

@pytest.fixture()
def db_session() -> Session:
    # TEST_DATABASE_URL=postgresql+psycopg://... runs the suite on postgres
    database_url = os.environ.get("TEST_DATABASE_URL", "sqlite+pysqlite:///:memory:")

    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(database_url, pool_pre_ping=True)

    Base.metadata.create_all(engine)
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session: Session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()

@pytest.fixture()
def app(db_session: Session) -> FastAPI:
    app = create_app()

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    return app

@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app)

def _login(client, email: str, name: str | None = None) -> str:
    body = {"email": email}
    if name is not None:
        body["name"] = name
    r = client.post("/auth/request-link", json=body)
    assert r.status_code == 200, r.text
    token = r.json()["token"]

    r = client.post("/auth/redeem", json={"token": token})
    assert r.status_code == 200, r.text
    return r.json()["access_token"]

def _auth(jwt: str) -> dict[str, str]:
    return {"authorization": f"bearer {jwt}"}

@pytest.fixture()
def register(client):
    """Sign up a user through the magic-link flow and return its Account."""

    def _register(name: str) -> Account:
        # unique per test run to avoid collisions on a shared database
        email = f"{name.lower()}+{uuid.uuid4().hex[:8]}@example.com"
        headers = _auth(_login(client, email, name))
        r = client.get("/auth/me", headers=headers)
        assert r.status_code == 200, r.text
        return Account(id=r.json()["id"], name=name, email=email, headers=headers)

    return _register

@pytest.fixture()
def alice(register) -> Account:
    return register("Alice")

@pytest.fixture()
def bob(register) -> Account:
    return register("Bob")

@pytest.fixture()
def carol(register) -> Account:
    return register("Carol")
