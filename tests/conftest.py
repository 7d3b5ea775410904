from datetime import datetime, time

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import sandwich_slots.config as config_mod
import sandwich_slots.db as db
from sandwich_slots.app_factory import create_app
from sandwich_slots.clock import get_clock
from sandwich_slots.models import Base, Ingredient, User, WorkingDay
from sandwich_slots.routes import limiter
from sandwich_slots.services.slot_generator import generate_time_slots

from tests.helpers import CATALOG, SERVICE_DAY, FrozenClock

# Test admin credentials
TEST_ADMIN_USERNAME = "testadmin"
TEST_ADMIN_PASSWORD = "testpassword123"


def _seed(session):
    session.add_all([
        User(name="Alice Rossi", email="alice@example.com"),
        User(name="Bruno Bianchi", email="bruno@example.com"),
        User(name="Carla Verdi", email="carla@example.com", enabled=False),
    ])
    session.add_all([
        Ingredient(name=name, code=code, category=category, is_available=available)
        for name, code, category, available in CATALOG
    ])
    session.commit()


@pytest.fixture
def engine():
    """In-memory SQLite shared by every connection (StaticPool)."""
    eng = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    s = factory()
    _seed(s)
    s.close()
    return factory


@pytest.fixture
def db_session(session_factory):
    s = session_factory()
    yield s
    s.close()


@pytest.fixture
def users(db_session):
    """Seeded users by first name."""
    return {u.name.split()[0].lower(): u for u in db_session.query(User).all()}


@pytest.fixture
def ingredient_ids(db_session):
    """Seeded ingredient ids by name."""
    return {i.name: i.id for i in db_session.query(Ingredient).all()}


@pytest.fixture
def sandwich(ingredient_ids):
    """A valid selection: one bread plus fillings."""
    return [ingredient_ids["Ciabatta"], ingredient_ids["Prosciutto Crudo"], ingredient_ids["Mozzarella"]]


@pytest.fixture
def make_working_day(db_session):
    """Create a committed working day with its 15-minute slots."""
    def _make(
        day=SERVICE_DAY,
        start_time=time(12, 0),
        end_time=time(13, 0),
        capacity=2,
        deadline_minutes=30,
        is_active=True,
    ):
        working_day = WorkingDay(
            day=day,
            location="Test Truck",
            capacity=capacity,
            deadline_minutes=deadline_minutes,
            start_time=start_time,
            end_time=end_time,
            is_active=is_active,
        )
        db_session.add(working_day)
        db_session.flush()
        generate_time_slots(db_session, working_day, 15)
        db_session.commit()
        return working_day
    return _make


@pytest.fixture
def frozen_clock():
    return FrozenClock(datetime.combine(SERVICE_DAY, time(10, 0)))


@pytest.fixture
def client(engine, session_factory, frozen_clock, monkeypatch):
    """Shared FastAPI TestClient on the in-memory database.

    Sets up test admin credentials, pins the clock and turns off the
    background sweep and rate limiting.
    """
    monkeypatch.setattr(config_mod, "ADMIN_USERNAME", TEST_ADMIN_USERNAME)
    monkeypatch.setattr(config_mod, "ADMIN_PASSWORD", TEST_ADMIN_PASSWORD)
    monkeypatch.setattr(limiter, "enabled", False)

    # Patch the db module used by the app
    monkeypatch.setattr(db, "engine", engine)
    monkeypatch.setattr(db, "SessionLocal", session_factory)

    app = create_app(sweep_enabled=False)

    # Override FastAPI DB dependency
    def override_get_db():
        db_sess = session_factory()
        try:
            yield db_sess
        finally:
            db_sess.close()

    app.dependency_overrides[db.get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: frozen_clock

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def admin_auth():
    """Returns HTTP Basic Auth tuple for admin endpoints."""
    return (TEST_ADMIN_USERNAME, TEST_ADMIN_PASSWORD)


@pytest.fixture
def as_user(users):
    """Headers identifying a seeded user: ``as_user("alice")``."""
    def _headers(name):
        return {"X-User-ID": str(users[name].id)}
    return _headers
