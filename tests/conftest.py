"""Pytest configuration and fixtures for tests."""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from dateutil import tz
from datetime import datetime
from typing import Callable, Generator
from contextlib import contextmanager

from tipbuddy.database import Base
from tipbuddy.services.time_zone_service import TimeZoneService
import tipbuddy.models  # noqa: F401


def _create_engine():
    return create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )


@pytest.fixture(scope="function")
def test_db() -> Generator[Session, None, None]:
    """
    Create a test database session for each test.
    Uses an in-memory SQLite database for fast testing.
    """
    engine = _create_engine()
    Base.metadata.create_all(bind=engine)

    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@contextmanager
def get_test_db_session():
    """
    Context manager for creating test database sessions.
    Used for property-based tests where fixtures don't work well.
    """
    engine = _create_engine()
    Base.metadata.create_all(bind=engine)

    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


def fixed_clock(*args) -> Callable[[], datetime]:
    """Clock returning a fixed UTC instant, e.g. fixed_clock(2024, 1, 15, 12)."""
    instant = datetime(*args, tzinfo=tz.UTC)
    return lambda: instant


def make_time_zone_service(time_zone: str = "UTC", today=(2024, 1, 15, 12)) -> TimeZoneService:
    """Time zone service whose clock is frozen at ``today`` (UTC)."""
    return TimeZoneService(time_zone, clock=fixed_clock(*today))


@pytest.fixture
def utc_time_zone_service() -> TimeZoneService:
    """UTC time zone service frozen at 2024-01-15 12:00 UTC."""
    return make_time_zone_service()


class ScriptedRandom:
    """Random source replaying fixed draws, for asserting exact generator output.

    Each method pops from its own queue. ``choice`` values are indices into
    the sequence. Every call is recorded in ``calls``.
    """

    def __init__(self, randoms=(), randints=(), uniforms=(), choices=()):
        self.randoms = list(randoms)
        self.randints = list(randints)
        self.uniforms = list(uniforms)
        self.choices = list(choices)
        self.calls = []

    def random(self):
        self.calls.append(("random",))
        return self.randoms.pop(0)

    def randint(self, a, b):
        self.calls.append(("randint", a, b))
        value = self.randints.pop(0)
        assert a <= value <= b, f"scripted randint {value} outside [{a}, {b}]"
        return value

    def uniform(self, a, b):
        self.calls.append(("uniform", a, b))
        value = self.uniforms.pop(0)
        assert a <= value <= b, f"scripted uniform {value} outside [{a}, {b}]"
        return value

    def choice(self, seq):
        self.calls.append(("choice", len(seq)))
        return seq[self.choices.pop(0)]

    def exhausted(self) -> bool:
        return not (self.randoms or self.randints or self.uniforms or self.choices)
