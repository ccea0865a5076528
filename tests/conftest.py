"""Shared test fixtures."""
from datetime import date, datetime, time
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from app.availability import AvailabilityCalculator
from app.conflicts import ConflictGuard
from app.db import create_db_and_tables, get_session
from app.lifecycle import BookingLifecycle, get_status_observers
from app.main import app
from app.models import Professional, ProfessionalService, Service, Tenant, User, WorkingHours
from app.schedule import ScheduleManager
from app.settings import SchedulingSettings, get_scheduling_settings
from app.stores import Stores

# Wednesday; MONDAY is the first working day after it
NOW = datetime(2025, 11, 26, 8, 0)
MONDAY = date(2025, 12, 1)


@pytest.fixture
def engine():
    """Fresh in-memory database shared by every connection of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def settings() -> SchedulingSettings:
    return SchedulingSettings(clock=lambda: NOW)


@pytest.fixture
def stores(session) -> Stores:
    return Stores.for_session(session)


@pytest.fixture
def events():
    """Status changes seen by the recording observer."""
    return []


@pytest.fixture
def calculator(stores, settings):
    return AvailabilityCalculator(stores, settings)


@pytest.fixture
def guard(stores, settings):
    return ConflictGuard(stores, settings)


@pytest.fixture
def manager(stores):
    return ScheduleManager(stores)


@pytest.fixture
def lifecycle(stores, settings, events):
    return BookingLifecycle(stores, settings, [events.append])


def _save(session, *rows):
    for row in rows:
        session.add(row)
    session.commit()
    for row in rows:
        session.refresh(row)


@pytest.fixture
def shop(session):
    """One tenant with two professionals and two services.

    Ana works Mondays 09:00-12:00 and does the 30 minute haircut.
    Bruno has no weekly hours and does both services.
    """
    tenant = Tenant(name="Barbearia Central")
    other_tenant = Tenant(name="Outra Barbearia")
    _save(session, tenant, other_tenant)

    ana = Professional(tenant_id=tenant.id, name="Ana")
    bruno = Professional(tenant_id=tenant.id, name="Bruno")
    outsider = Professional(tenant_id=other_tenant.id, name="Carla")
    haircut = Service(tenant_id=tenant.id, name="Haircut", duration_minutes=30)
    beard = Service(tenant_id=tenant.id, name="Beard trim", duration_minutes=60)
    _save(session, ana, bruno, outsider, haircut, beard)

    _save(
        session,
        ProfessionalService(professional_id=ana.id, service_id=haircut.id),
        ProfessionalService(professional_id=bruno.id, service_id=haircut.id),
        ProfessionalService(professional_id=bruno.id, service_id=beard.id),
        WorkingHours(
            tenant_id=tenant.id,
            professional_id=ana.id,
            weekday=1,
            open_time=time(9, 0),
            close_time=time(12, 0),
        ),
    )

    client = User(email="client@example.com", password_hash="x", role="client")
    other_client = User(email="other@example.com", password_hash="x", role="client")
    _save(session, client, other_client)

    return SimpleNamespace(
        tenant=tenant,
        other_tenant=other_tenant,
        ana=ana,
        bruno=bruno,
        outsider=outsider,
        haircut=haircut,
        beard=beard,
        client=client,
        other_client=other_client,
    )


@pytest.fixture
def client(engine, settings, events):
    """TestClient bound to the in-memory database and the fixed clock."""

    def override_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_scheduling_settings] = lambda: settings
    app.dependency_overrides[get_status_observers] = lambda: [events.append]
    yield TestClient(app)
    app.dependency_overrides.clear()
