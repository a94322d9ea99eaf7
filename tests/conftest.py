import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_FILE", os.devnull)
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from glamrent.database import Base, get_db
from glamrent.main import app
from glamrent.models.listing_model import Listing
from glamrent.schemas.booking_schema import BookingCreate
from glamrent.security.auth import Principal, Role, create_access_token
from glamrent.services.booking_lifecycle import BookingLifecycle

CUSTOMER_ID = "customer-c"
OWNER_ID = "owner-o"
STRANGER_ID = "stranger-s"


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'glamrent-test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def listing(db):
    gown = Listing(
        owner_id=OWNER_ID,
        name="Emerald Ball Gown",
        price=2500,
        location="Makati City",
        image="https://img.example.com/emerald.jpg",
        has_makeup_service=True,
        makeup_price=800,
    )
    db.add(gown)
    db.commit()
    db.refresh(gown)
    return gown


@pytest.fixture
def customer():
    return Principal(id=CUSTOMER_ID, role=Role.customer)


@pytest.fixture
def owner():
    return Principal(id=OWNER_ID, role=Role.owner)


@pytest.fixture
def stranger():
    return Principal(id=STRANGER_ID, role=Role.customer)


@pytest.fixture
def lifecycle(db):
    return BookingLifecycle.for_session(db)


@pytest.fixture
def make_payload(listing):
    def _make(**overrides):
        data = {
            "customer_name": "Carla Reyes",
            "service_name": "Emerald Ball Gown",
            "listing_id": listing.id,
            "date": "2025-06-21",
            "time": "14:30",
            "price": 2500,
            "owner_id": OWNER_ID,
        }
        data.update(overrides)
        return BookingCreate(**data)

    return _make


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(principal_id: str, role: str = "customer") -> dict:
        token, _ = create_access_token({"sub": principal_id, "role": role})
        return {"Authorization": f"Bearer {token}"}

    return _headers
