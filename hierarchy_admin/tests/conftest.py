"""Shared fixtures: an in-memory SQLite store with foreign keys enforced."""

import uuid
from typing import Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from hierarchy_admin.database.database import enable_sqlite_foreign_keys
from hierarchy_admin.models import Base, Brand, Collaborator, EconomicGroup, Unit
from hierarchy_admin.services.hierarchy_service import HierarchyService
from hierarchy_admin.utils.auth import Actor, UserRole, get_mock_actor


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """Create a fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Generator[Session, None, None]:
    """Create a database session bound to the test engine."""
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    session = factory()
    yield session
    session.close()


@pytest.fixture
def service(session: Session) -> HierarchyService:
    """Create hierarchy service."""
    return HierarchyService(session)


@pytest.fixture
def admin_actor() -> Actor:
    """Create admin actor holding every permission."""
    return get_mock_actor(user_id=uuid.uuid4(), roles=[UserRole.ADMIN])


@pytest.fixture
def reader_actor() -> Actor:
    """Create actor that may only view."""
    return get_mock_actor(user_id=uuid.uuid4(), roles=[UserRole.USER])


@pytest.fixture
def hierarchy(session: Session) -> dict:
    """Persist one complete branch of the hierarchy."""
    group = EconomicGroup(name="Grupo Alpha")
    session.add(group)
    session.flush()

    brand = Brand(name="Bandeira X", economic_group_id=group.id)
    session.add(brand)
    session.flush()

    unit = Unit(
        trade_name="Unidade Centro",
        legal_name="Unidade Centro LTDA",
        tax_id="12345678000190",
        brand_id=brand.id,
    )
    session.add(unit)
    session.flush()

    collaborator = Collaborator(
        name="Joao Silva",
        email="joao.silva@example.com",
        personal_tax_id="12345678901",
        unit_id=unit.id,
    )
    session.add(collaborator)
    session.commit()

    return {
        "group": group,
        "brand": brand,
        "unit": unit,
        "collaborator": collaborator,
    }
