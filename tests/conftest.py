"""Shared pytest fixtures for the finance tracker backend."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterator
from pathlib import Path

# Keep the application's module-level engine off the on-disk database.
os.environ.setdefault("FINANCE_DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool


def _insert_repo_root() -> None:
    """Make the repository root importable when the package is not installed."""

    repo_root = Path(__file__).resolve().parents[1]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


_insert_repo_root()

import finance_tracker.models  # noqa: E402,F401  # Ensure models are registered with metadata
from finance_tracker import auth, crud, database  # noqa: E402
from finance_tracker.database import Base  # noqa: E402
from finance_tracker.server import app  # noqa: E402


@pytest.fixture(scope="session")
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture()
def db_session(engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    TestingSessionLocal = sessionmaker(bind=connection, autoflush=False, autocommit=False, future=True)
    session: Session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


@pytest.fixture()
def alice(db_session):
    return crud.create_user(db_session, "alice")


@pytest.fixture()
def bob(db_session):
    return crud.create_user(db_session, "bob")


@pytest.fixture()
def login() -> dict[str, str | None]:
    """Mutable stand-in for the session; set ``login["username"]`` to sign in."""

    return {"username": None}


@pytest.fixture()
def client(db_session, login):
    def override_get_db():
        yield db_session

    def override_identity():
        return login["username"]

    app.dependency_overrides[database.get_db] = override_get_db
    app.dependency_overrides[auth.current_identity] = override_identity
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def cookie_client(db_session):
    """Client that resolves identity through the real signed session cookie."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[database.get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
