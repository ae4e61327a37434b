"""Shared fixtures: a file-backed SQLite database per test and a seeded schedule."""

from datetime import date, datetime, timedelta
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from booking_engine.database import get_db, make_engine
from booking_engine.models import (
    Appointments,
    Base,
    Customers,
    Services,
    Staff,
    StaffAvailability,
    StaffBreaks,
)
from booking_engine.redis_client import get_redis

SUNDAY = date(2026, 10, 18)
MONDAY = date(2026, 10, 19)
TUESDAY = date(2026, 10, 20)
WEDNESDAY = date(2026, 10, 21)


def at(day: date, hhmm: str) -> datetime:
    h, m = map(int, hhmm.split(":"))
    return datetime.combine(day, datetime.min.time()) + timedelta(hours=h, minutes=m)


def book(db, seeded, staff_id, hhmm, minutes=30, status="scheduled", day=MONDAY):
    """Insert an appointment directly, without validation."""
    start = at(day, hhmm)
    obj = Appointments(
        staff_id=staff_id,
        customer_id=seeded.customer_id,
        service_id=seeded.service_id,
        date_start=start,
        date_end=start + timedelta(minutes=minutes),
        duration_minutes=minutes,
        status=status,
    )
    db.add(obj)
    db.commit()
    return obj


@pytest.fixture
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'booking.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def seeded(db):
    """
    Staff "Alice": Monday and Wednesday 09:00-17:00, nothing on Tuesday.
    Staff "Bob": Monday 09:00-17:00 with a 12:00-13:00 break.
    Service: 30 minutes. One customer.
    """
    alice = Staff(name="Alice")
    bob = Staff(name="Bob")
    service = Services(name="Haircut", duration_minutes=30, price=25.0)
    long_service = Services(name="Colouring", duration_minutes=90)
    customer = Customers(first_name="Carol")
    db.add_all([alice, bob, service, long_service, customer])
    db.flush()

    db.add_all([
        StaffAvailability(staff_id=alice.id, day_of_week=1, start_time="09:00", end_time="17:00"),
        StaffAvailability(staff_id=alice.id, day_of_week=3, start_time="09:00", end_time="17:00"),
        StaffAvailability(staff_id=bob.id, day_of_week=1, start_time="09:00", end_time="17:00"),
        StaffBreaks(staff_id=bob.id, day_of_week=1, start_time="12:00", end_time="13:00"),
    ])
    db.commit()

    return SimpleNamespace(
        alice_id=alice.id,
        bob_id=bob.id,
        service_id=service.id,
        long_service_id=long_service.id,
        customer_id=customer.id,
    )


@pytest.fixture
def client(session_factory):
    from booking_engine.main import create_app

    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = lambda: None
    yield TestClient(app)
    app.dependency_overrides.clear()


class MemoryRedis:
    """Just enough of the redis-py client for the cache and the event queue."""

    def __init__(self):
        self.data = {}
        self.ttl = {}
        self.lists = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value, ex=None):
        self.data[key] = value
        self.ttl[key] = ex
        return True

    def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
        return removed

    def keys(self, pattern):
        prefix = pattern.rstrip("*")
        return [k for k in self.data if k.startswith(prefix)]

    def rpush(self, key, value):
        self.lists.setdefault(key, []).append(value)
        return len(self.lists[key])
