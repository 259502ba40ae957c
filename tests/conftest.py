"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.orm import sessionmaker

from src.api.dependencies import get_extraction_client
from src.config import get_settings
from src.database import Base, create_database_engine, get_db
from src.main import app
from src.models.category import Category
from src.models.kitchen import Kitchen
from src.models.user import User
from src.services.category_service import DEFAULT_CATEGORIES


class AuthHeaders(dict):
    """Dict subclass that also stores the user's identity."""

    def __init__(self, *args, subject: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.subject = subject


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace(
        "/kitchen_inventory", "/kitchen_inventory_test"
    )
else:
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

engine = create_database_engine(SQLALCHEMY_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def make_token(subject: str, email: str | None = None) -> str:
    """Mint a token the way the identity provider would."""
    settings = get_settings()
    claims = {"sub": subject}
    if email:
        claims["email"] = email
    return jwt.encode(claims, settings.auth_jwt_secret, algorithm=settings.auth_jwt_algorithm)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Bearer headers for a test identity."""
    token = make_token("user_test", email="test@example.com")
    return AuthHeaders({"Authorization": f"Bearer {token}"}, subject="user_test")


@pytest.fixture
def other_auth_headers():
    """Bearer headers for a second, unrelated identity."""
    token = make_token("user_other", email="other@example.com")
    return AuthHeaders({"Authorization": f"Bearer {token}"}, subject="user_other")


@pytest.fixture
def user(db):
    """A user row matching ``auth_headers``."""
    user = User(external_id="user_test", email="test@example.com")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def kitchen(db, user):
    """A default kitchen owned by ``user``."""
    kitchen = Kitchen(user_id=user.id, name="Home", is_default=True)
    db.add(kitchen)
    db.commit()
    db.refresh(kitchen)
    return kitchen


@pytest.fixture
def categories(db):
    """The default categories, keyed by name."""
    rows = [Category(**data) for data in DEFAULT_CATEGORIES]
    db.add_all(rows)
    db.commit()
    return {c.name: c for c in rows}


class FakeExtractionClient:
    """Stands in for the extraction client; returns a canned array or raises."""

    def __init__(self, result=None, error: Exception | None = None):
        self.result = result if result is not None else []
        self.error = error
        self.calls = []

    async def extract(self, document, categories=None):
        self.calls.append((document, categories))
        if self.error:
            raise self.error
        return self.result


@pytest.fixture
def fake_extraction(client):
    """Install a fake extraction client for the API; configure via attributes."""
    fake = FakeExtractionClient()
    app.dependency_overrides[get_extraction_client] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_extraction_client, None)
