"""Shared test fixtures for all test modules."""

import contextlib
from decimal import Decimal

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.core import database as db_module
from app.core.database import Base, get_db
from app.models.ticket import ServiceType, Ticket
from app.repositories.ticket_repository import TicketRepository
from app.schemas.ticket import TicketCreate
from app.services.payment_status import derive_payment_status
from app.services.ticket_query_service import ticket_list_cache

# Create an in-memory SQLite engine with StaticPool so all connections
# share the same database state and there are no file-locking issues.
_test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_test_engine)


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and truncate all data after.

    Patches the module-level engine and SessionLocal so all application code
    uses the in-memory test database. Clears data after each test.
    """
    # Patch module-level engine and session factory
    original_engine = db_module.engine
    original_session = db_module.SessionLocal
    db_module.engine = _test_engine
    db_module.SessionLocal = _TestSessionLocal

    Base.metadata.create_all(bind=_test_engine)
    ticket_list_cache.invalidate()

    yield
    with _test_engine.connect() as conn:
        conn.execute(text("PRAGMA foreign_keys = OFF"))
        for table in reversed(Base.metadata.sorted_tables):
            with contextlib.suppress(OperationalError):
                conn.execute(table.delete())
        conn.execute(text("PRAGMA foreign_keys = ON"))
        conn.commit()
    # Truncation bypasses the ORM, so the change feed never sees it.
    ticket_list_cache.invalidate()

    # Restore originals
    db_module.engine = original_engine
    db_module.SessionLocal = original_session


@pytest.fixture
def db_session():
    """Create a database session for direct testing."""
    gen = get_db()
    db = next(gen)
    try:
        yield db
    finally:
        for _ in gen:
            pass


@pytest.fixture
def make_ticket(db_session):
    """Factory for tickets with nothing paid yet."""

    def _make(price="1500", **overrides) -> Ticket:
        data = {
            "passenger_name": "Aziz Karimov",
            "service_type": ServiceType.TICKET,
            "origin_code": "TAS",
            "destination_code": "IST",
            "airline_code": "HY",
            "agent_id": "agent-1",
            "agent_name": "Dilnoza",
            "price": Decimal(str(price)),
        }
        data.update(overrides)
        create = TicketCreate(**data)
        return TicketRepository(db_session).create(create, derive_payment_status(create.price, 0))

    return _make
