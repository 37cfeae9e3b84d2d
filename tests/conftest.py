import os

# Configure before any app module builds its settings or engine
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("ADMIN_SECRET_KEY", "test-admin-secret")

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_store
from app.core.exceptions import StoreFailure
from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.models.show import Show
from app.models.user import User
from app.services.store import ShowStore

ADMIN_SECRET = os.environ["ADMIN_SECRET_KEY"]

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store(db):
    return ShowStore(db)


@pytest.fixture
def client(db):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Insert a user directly; the password hash is irrelevant for non-auth tests."""
    def _make_user(email="user@example.com", role="user"):
        user = User(email=email, password_hash="not-a-real-hash", role=role)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make_user


@pytest.fixture
def make_show(db):
    def _make_show(total_seats=25, price="10.00", days_ahead=7, name="Hamlet"):
        show = Show(
            name=name,
            description="A play",
            date=datetime.now(timezone.utc) + timedelta(days=days_ahead),
            venue="Globe",
            total_seats=total_seats,
            price=Decimal(price),
        )
        db.add(show)
        db.commit()
        db.refresh(show)
        return show
    return _make_show


def _token_headers(response):
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def register_user(client):
    """Register through the API and return bearer headers for the new user."""
    def _register(email="alice@example.com", password="secret123"):
        response = client.post("/api/v1/auth/register", json={"email": email, "password": password})
        return _token_headers(response)
    return _register


@pytest.fixture
def user_headers(register_user):
    return register_user()


@pytest.fixture
def admin_headers(client):
    response = client.post(
        "/api/v1/auth/admin/register",
        json={"email": "admin@example.com", "password": "secret123", "admin_secret": ADMIN_SECRET},
    )
    return _token_headers(response)


class FailingStore(ShowStore):
    """A store whose list reads and booking inserts fail as if the database were down."""

    def list_shows(self, upcoming=True):
        raise StoreFailure("Could not list shows")

    def list_user_bookings(self, user_id, status=None):
        raise StoreFailure("Could not list bookings")

    def insert_booking(self, user_id, show_id, seat_numbers, amount):
        raise StoreFailure("Booking failed. Please try again.")


@pytest.fixture
def failing_store(client):
    def override_get_store(db: Session = Depends(get_db)):
        return FailingStore(db)

    app.dependency_overrides[get_store] = override_get_store
    yield
    app.dependency_overrides.pop(get_store, None)
