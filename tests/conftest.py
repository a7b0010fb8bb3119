"""Shared fixtures: in-memory database, API client and user factories."""

import os

os.environ.setdefault("ENV", "test")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.base_class import Base
from app import create_table  # noqa: F401  (registers every model on Base.metadata)
from app.db.session import get_db
from app.api.models.profile import Profile
from app.api.services.permission_service import PermissionManager
from app.core.security import criar_token, get_password_hash

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

DEFAULT_PASSWORD = "senha-forte-123"


@pytest.fixture
def db():
    """Fresh schema and session for each test."""
    Base.metadata.create_all(bind=engine)
    PermissionManager.reset_rate_limits()
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        PermissionManager.reset_rate_limits()


@pytest.fixture
def client(db):
    """API client wired to the test session."""

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Factory for profiles with a known password."""
    counter = {"n": 0}

    def _make(**overrides) -> Profile:
        counter["n"] += 1
        values = {
            "email": f"user{counter['n']}@example.com",
            "password_hash": get_password_hash(DEFAULT_PASSWORD),
            "name": f"Usuário {counter['n']}",
            "role": "client",
            "plan": "free",
            "is_active": True,
        }
        values.update(overrides)
        profile = Profile(**values)
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile

    return _make


@pytest.fixture
def auth_headers():
    """Bearer header for a given profile."""

    def _headers(profile: Profile) -> dict:
        return {"Authorization": f"Bearer {criar_token({'sub': str(profile.id)})}"}

    return _headers


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def admin_user(make_user):
    return make_user(role="admin", email="admin@example.com")


@pytest.fixture
def super_admin(make_user):
    return make_user(role="superadmin", email="root@example.com")
