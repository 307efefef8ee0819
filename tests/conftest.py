# tests/conftest.py
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["ADMIN_EMAIL"] = "admin@example.com"
os.environ["ADMIN_PASSWORD"] = "admin-password"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

# Import app and global variables
from dashboard_api import models  # noqa: F401  (registers the table)
from dashboard_api.auth import create_access_token
from dashboard_api.config import settings
from dashboard_api.database import Base, build_engine
from dashboard_api.main import app, get_db
from dashboard_api.repository import TransactionRepository

# A clean, in-memory SQLite database shared by all sessions of a test
test_engine = build_engine("sqlite://")

TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

SAMPLE_TRANSACTIONS = [
    {"id": 1, "user": "Alice Smith", "amount": 1500.0, "category": "Revenue", "status": "completed", "date": "2024-01-15"},
    {"id": 2, "user": "Bob Jones", "amount": 200.5, "category": "Marketing", "status": "pending", "date": "2024-01-20"},
    {"id": 3, "user": "Carol White", "amount": 3000.0, "category": "Revenue", "status": "completed", "date": "2024-02-03"},
    {"id": 4, "user": "Doe, John", "amount": 450.25, "category": "Travel", "status": "failed", "date": "2024-02-14"},
    {"id": 5, "user": "Alice Smith", "amount": 99.75, "category": "Software", "status": "pending", "date": "2024-03-01"},
]

@pytest.fixture(scope="function")
def db_session():
    """
    Creates a fresh database session for a single test.
    """
    Base.metadata.create_all(bind=test_engine)

    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()
        # Drop tables to clean up
        Base.metadata.drop_all(bind=test_engine)

@pytest.fixture(scope="function")
def client(db_session):
    """
    Overrides the dependency injection to use our test database.
    """
    def get_test_db_override():
        yield db_session

    app.dependency_overrides[get_db] = get_test_db_override

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()

@pytest.fixture(scope="function")
def seeded(db_session):
    """Loads the sample transactions into the test database."""
    TransactionRepository(db_session).add_many(dict(record) for record in SAMPLE_TRANSACTIONS)
    return SAMPLE_TRANSACTIONS

@pytest.fixture
def auth_headers():
    token = create_access_token(settings.ADMIN_EMAIL)
    return {"Authorization": f"Bearer {token}"}

@pytest.fixture
def session_factory(db_session):
    """Session factory bound to the same in-memory database as ``db_session``."""
    return TestSessionLocal
