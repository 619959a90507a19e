"""Shared test fixtures for the portfolio-docs test suite.

All tests run against an in-memory SQLite database shared through a single
connection. Tables are dropped and recreated before each test for isolation.
"""

import os

# Use the in-memory database and readable logs before any app imports.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_FORMAT"] = "text"
os.environ["ENVIRONMENT"] = "development"

from typing import Optional

import pytest
from fastapi.testclient import TestClient

from portfolio_docs.database import Base, get_db, engine, SessionLocal
from portfolio_docs.main import app
from portfolio_docs.schemas.document import DocumentRecord


@pytest.fixture(autouse=True)
def _clean_tables():
    """Recreate all tables before each test.

    Runs before the test (not after) so test failures leave data
    available for debugging.
    """
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture()
def db():
    """Per-test database session."""
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture()
def client(db):
    """FastAPI TestClient with the DB dependency overridden to use the test session."""

    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def make_record(
    record_id: str,
    type: str = "file",
    name: Optional[str] = None,
    parent_id: Optional[str] = None,
    **overrides,
) -> DocumentRecord:
    """Factory for flat document records."""
    return DocumentRecord(
        id=record_id,
        company_id=overrides.pop("company_id", "company-1"),
        type=type,
        name=name if name is not None else record_id,
        parent_id=parent_id,
        **overrides,
    )
