"""Shared pytest fixtures for postboard test suites."""

from collections.abc import Generator
import os
from pathlib import Path
import sys

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Settings are cached on first import, so they must be in place before the app loads.
os.environ.setdefault("POSTBOARD_DATABASE_URL", "sqlite://")
os.environ.setdefault("POSTBOARD_COOKIE_SECURE", "false")
os.environ.setdefault("POSTBOARD_RATE_LIMIT_DEFAULT", "1000/second")
os.environ.setdefault("POSTBOARD_RATE_LIMIT_SECURE", "1000/second")


@pytest.fixture
def db_session_factory() -> Generator[sessionmaker, None, None]:
    """Provide a session factory bound to a fresh in-memory database."""
    from postboard.db.models import Base

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, class_=Session)
    try:
        yield factory
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def db_session(db_session_factory: sessionmaker) -> Generator[Session, None, None]:
    session = db_session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_session_factory: sessionmaker) -> Generator[TestClient, None, None]:
    """Provide an API test client backed by the in-memory database."""
    from postboard.db.base import get_db_session
    from postboard.main import app

    def override_get_db_session() -> Generator[Session, None, None]:
        session = db_session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db_session] = override_get_db_session
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
