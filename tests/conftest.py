import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from leadcrm.core.security import create_access_token
from leadcrm.database import get_db
from leadcrm.db.base import Base
from leadcrm.main import app
from leadcrm.models import Lead, LeadStatus, User, UserRole

TEST_DATABASE_URL = "sqlite://"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(db, full_name, role=UserRole.USER, email=None):
    user = User(
        id=uuid.uuid4(),
        email=email or f"{full_name.lower().replace(' ', '.')}@example.com",
        full_name=full_name,
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_lead(db, name="Ravi Kumar", city="Pune", status=LeadStatus.NEW, created_at=None, **fields):
    fields.setdefault("mobile", "9876543210")
    lead = Lead(name=name, city=city, status=status, **fields)
    if created_at is not None:
        lead.created_at = created_at
    db.add(lead)
    db.commit()
    db.refresh(lead)
    return lead


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def admin_user(db_session):
    return make_user(db_session, "Asha Admin", role=UserRole.ADMIN)


@pytest.fixture
def sales_user(db_session):
    return make_user(db_session, "Sanjay Sales")


@pytest.fixture
def other_user(db_session):
    return make_user(db_session, "Priya Patel")


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers(admin_user)


@pytest.fixture
def user_headers(sales_user):
    return auth_headers(sales_user)


@pytest.fixture
def days_ago():
    now = datetime.now(timezone.utc)
    return lambda n: now - timedelta(days=n)
