"""Shared pytest setup and fixtures.

- environment set before the project is imported
- helpers to build schedules and timestamps
- in-memory database and a TestClient bound to it
"""

import os
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

# Settings must be in place before config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SALON_TIMEZONE"] = "Asia/Tokyo"

from salon_booking import models  # noqa: E402,F401
from salon_booking.config import SALON_TIMEZONE  # noqa: E402
from salon_booking.core import hour_to_unix  # noqa: E402
from salon_booking.db import get_session  # noqa: E402
from salon_booking.main import app  # noqa: E402
from salon_booking.models import Menu, Option, ReservationConfig, Staff  # noqa: E402
from salon_booking.schemas import DayOfWeek, WeeklyScheduleEntry  # noqa: E402
from salon_booking.services import today  # noqa: E402


# ============================================================================
# PYTEST CONFIGURATION
# ============================================================================


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: pure computation test")
    config.addinivalue_line("markers", "integration: HTTP + database test")


# ============================================================================
# HELPERS
# ============================================================================


def at(day, hour: str) -> int:
    """Unix ms for `hour` on `day` in the salon timezone."""
    return hour_to_unix(day, hour, SALON_TIMEZONE)


def week(start_hour="09:00", end_hour="18:00", closed=()):
    """Seven entries open start-end, except the days named in `closed`."""
    return [
        WeeklyScheduleEntry(
            day_of_week=d,
            is_open=d not in closed,
            start_hour=start_hour,
            end_hour=end_hour,
        )
        for d in DayOfWeek
    ]


# ============================================================================
# DATABASE / CLIENT
# ============================================================================


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    # no context manager: startup would create tables on the module engine
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def tomorrow():
    return today() + timedelta(days=1)


@pytest.fixture
def salon(session):
    """Salon 1 with four staff, a cut/color menu set and one option.

    Capacity is 3 seats and slots step by 30 minutes.
    """
    staff = [Staff(salon_id=1, name=name) for name in ("Aki", "Ben", "Chie", "Dai")]
    menus = [
        Menu(salon_id=1, name="Cut", working_minutes=60, categories=["cut"]),
        Menu(salon_id=1, name="Color", working_minutes=60, reserved_minutes=90, categories=["color"]),
        Menu(salon_id=1, name="Cut + Color", working_minutes=90, reserved_minutes=120, categories=["cut", "color"]),
    ]
    option = Option(salon_id=1, name="Head spa", working_minutes=15, reserved_minutes=30, order_limit=2)
    config = ReservationConfig(salon_id=1, interval_minutes=30, available_sheet=3, reservation_limit_days=60)

    session.add_all(staff + menus + [option, config])
    session.commit()
    for row in staff + menus + [option]:
        session.refresh(row)

    return {
        "staff": [s.id for s in staff],
        "cut": menus[0].id,
        "color": menus[1].id,
        "set": menus[2].id,
        "head_spa": option.id,
    }
