"""Database engine and session helpers for postboard."""

from __future__ import annotations

from collections.abc import Generator
import re

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm import sessionmaker

from postboard.core.config import get_settings

DATABASE_URL = get_settings().database_url

engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,
)

SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
    class_=Session,
)

_SQLITE_UNIQUE = re.compile(r"UNIQUE constraint failed: (\w+)\.(\w+)$")


def get_db_session() -> Generator[Session, None, None]:
    """Yield a database session for dependency injection."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def constraint_name(exc: IntegrityError) -> str | None:
    """Return the name of the constraint an ``IntegrityError`` reports, if any.

    PostgreSQL (psycopg) reports it directly. SQLite only reports the column,
    which is mapped to PostgreSQL's default ``<table>_<column>_key`` naming.
    """
    diag = getattr(exc.orig, "diag", None)
    name = getattr(diag, "constraint_name", None)
    if name:
        return name

    match = _SQLITE_UNIQUE.search(str(exc.orig))
    if match:
        return f"{match.group(1)}_{match.group(2)}_key"
    return None
