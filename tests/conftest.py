"""
Shared fixtures: in-memory SQLite database, seeded plans and test users.
"""
import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Token signing needs a key before app.core.config is imported
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from app.main import app
from app.db.base import Base
from app.db import models  # noqa: F401
from app.db.models.subscription_plan import SubscriptionPlan
from app.db.models.user import User
from app.core.security import hash_password, create_access_token
from app.services.plan_catalog import seed_default_plans


# Setup in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=test_engine)
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def plans(db):
    """Seed the default free/starter/pro catalog."""
    seed_default_plans(db)
    return {plan.name: plan for plan in db.query(SubscriptionPlan).all()}


def make_user(db, email="test@example.com", **kwargs):
    user = User(
        full_name=kwargs.pop("full_name", "Test User"),
        email=email,
        password_hash=hash_password(kwargs.pop("password", "testpass123")),
        **kwargs
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def test_user(db):
    """Create a test user (Turkish UI by default)."""
    return make_user(db)


@pytest.fixture
def client(db):
    """Test client wired to the in-memory database."""
    app.state.session_factory = TestSessionLocal
    return TestClient(app)


@pytest.fixture
def auth_headers(test_user):
    token = create_access_token({"sub": test_user.id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers():
    token = create_access_token({"sub": "admin@example.com", "role": "admin"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_factory(db):
    """Create extra users: user_factory("other@example.com", is_blocked=True)."""
    def factory(email, **kwargs):
        return make_user(db, email, **kwargs)
    return factory
