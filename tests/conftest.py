"""
Central pytest configuration for the dental manager tests.

Provides the test environment, common entities and database fixtures
shared by unit and integration tests.
"""

import os
from datetime import datetime

import pytest

# Test database configuration (set early so import-time engines use it)
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["TESTING"] = "true"

from sqlalchemy.orm import sessionmaker  # noqa: E402

from dental_manager.db.session import Base, build_engine  # noqa: E402
from dental_manager.domain.entities import Customer, Dentist  # noqa: E402
from tests.factories.dates import TUESDAY, next_weekday  # noqa: E402


@pytest.fixture
def next_tuesday_10am() -> datetime:
    return next_weekday(TUESDAY, 10)


@pytest.fixture
def active_customer() -> Customer:
    return Customer(id=1, name="Maria Silva", email="maria@example.com", is_active=True)


@pytest.fixture
def active_dentist() -> Dentist:
    return Dentist(id=1, name="Dr. Carlos Lima", email="carlos@clinic.local")


@pytest.fixture
def db_engine():
    """Fresh in-memory SQLite database with all tables."""
    # Models must be imported so Base.metadata is populated
    from dental_manager.db import base  # noqa: F401

    engine = build_engine("sqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """Session bound to the per-test database."""
    session = sessionmaker(bind=db_engine, expire_on_commit=False)()
    yield session
    session.close()
