"""Pytest fixtures for overtime engine tests."""

from __future__ import annotations

from datetime import date, time
from typing import AsyncGenerator
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from overtime_engine.models import Base, OTSettings
from overtime_engine.schemas import OTSubmission
from overtime_engine.services import (
    NotificationDispatcher,
    RequestLifecycleService,
    SqlAlchemyRequestRepository,
)

# In-memory SQLite shared by every connection of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# A Wednesday
TODAY = date(2026, 1, 28)


@pytest.fixture
async def engine():
    """Create a fresh test database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def session(engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        session.add(OTSettings(cutoff_window_days=8, grace_period_enabled=False))
        await session.flush()
        yield session
        await session.rollback()


@pytest.fixture
def repository(session) -> SqlAlchemyRequestRepository:
    return SqlAlchemyRequestRepository(session)


@pytest.fixture
def received() -> list:
    """Notifications delivered during the test."""
    return []


@pytest.fixture
def dispatcher(received) -> NotificationDispatcher:
    dispatcher = NotificationDispatcher()
    dispatcher.on_all(received.append)
    return dispatcher


@pytest.fixture
def service(repository, dispatcher) -> RequestLifecycleService:
    return RequestLifecycleService(repository, dispatcher)


@pytest.fixture
def people() -> dict:
    """Ids for the actors of one approval chain."""
    return {
        "employee": uuid4(),
        "supervisor": uuid4(),
        "respective_supervisor": uuid4(),
        "hr": uuid4(),
        "management": uuid4(),
    }


def make_submission(**overrides) -> OTSubmission:
    """A 4-hour weekday claim worked the day before TODAY."""
    data = {
        "ot_date": date(2026, 1, 27),
        "start_time": time(18, 0),
        "end_time": time(22, 0),
        "reason": "Month-end closing",
        "ot_location_state": "SGR",
    }
    data.update(overrides)
    return OTSubmission(**data)
