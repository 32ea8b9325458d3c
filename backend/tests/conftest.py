import os

os.environ.setdefault("TIMEZONE", "UTC")
os.environ.setdefault("INIT_DB_ON_STARTUP", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from beacon.database import Base, get_db
from beacon.main import app
from beacon.models.checkin import Checkin
from beacon.models.user import UserProfile
from datetime import datetime

TEST_DB_URL = "sqlite:///./test_beacon.db"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def seed_profiles(db):
    profiles = [
        UserProfile(name="Alice", email="alice@example.com", city="Seoul", job_title="Engineer", company_name="Acme"),
        UserProfile(name="Bob", email="bob@example.com", city="Busan", job_title="Designer", company_name="Acme"),
        UserProfile(name="Carol", email="carol@example.com", city="Seoul", job_title="Engineer", company_name="Acme"),
        UserProfile(name="Dave", email="dave@example.com", city=None, job_title="Manager", company_name="Acme"),
    ]
    for profile in profiles:
        db.add(profile)
    db.commit()
    return profiles


def add_checkin(db, *, user_id, status, timestamp: datetime, message_id, user_name=None, user_email=None) -> Checkin:
    row = Checkin(
        user_id=user_id,
        user_name=user_name or user_id,
        user_email=user_email,
        status=status,
        timestamp=timestamp,
        message_id=message_id,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row
