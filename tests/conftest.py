import os

# Must be set before the application modules read their settings
os.environ["ENV"] = "test"
os.environ.setdefault("SESSION_SECRET", "test-session-secret")
# Explicit so a local .env file can never point the tests at a real database
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from shopfront.database import init_db, engine, drop_all_tables
from shopfront.main import app
from shopfront.models import Category


@pytest.fixture(scope="function", autouse=True)
def setup_test_db():
    init_db()  # Create all tables in in-memory SQLite
    yield
    drop_all_tables()


@pytest.fixture
def client():
    # Fresh client per test so session cookies never leak between tests
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(name="session")
def session_fixture():
    with Session(engine) as session:
        yield session


@pytest.fixture
def test_user_data():
    return {
        "name": "Test User",
        "email": "user1@example.com",
        "password": "testpassword123",
    }


@pytest.fixture
def network_codes():
    return {
        "success": [200, 201],
        "error": [400, 401, 404, 409, 422]
    }


@pytest.fixture
def make_categories(session):
    def make(*names):
        categories = [Category(name=name) for name in names]
        session.add_all(categories)
        session.commit()
        for category in categories:
            session.refresh(category)
        return categories
    return make


@pytest.fixture(autouse=True)
def fast_hashing(monkeypatch):
    # Full-cost bcrypt makes every signup take a noticeable fraction of a second
    from shopfront.services import passwords
    monkeypatch.setattr(passwords, "BCRYPT_ROUNDS", 4)


@pytest.fixture
def created_user(session, test_user_data):
    from shopfront.services.auth import signup_user
    return signup_user(session, **test_user_data)
