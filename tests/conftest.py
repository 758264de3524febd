"""Pytest configuration and fixtures."""

import os

# Cheap hashes for the test run; must be set before src.config is imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi import Response
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker

from src.config import Settings, get_settings
from src.database import Base, build_engine_options, get_db
from src.main import app
from src.schemas.auth import LoginForm, RegisterForm
from src.services.auth import AuthService
from src.services.sessions import SessionManager
from src.services.user_store import UserStore

# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use a sibling test database
    _url = make_url(os.getenv("DATABASE_URL"))
    SQLALCHEMY_DATABASE_URL = _url.set(database=f"{_url.database}_test").render_as_string(
        hide_password=False
    )
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    **build_engine_options(Settings(database_url=SQLALCHEMY_DATABASE_URL)),
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_USERNAME = "alice_1"
TEST_PASSWORD = "secret1"


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    from src import models  # noqa: F401

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
def session_manager(db):
    """Session manager on the test database."""
    return SessionManager(db, get_settings())


@pytest.fixture
def auth_service(db, session_manager):
    """Auth service wired to the test database."""
    return AuthService(UserStore(db), session_manager)


@pytest.fixture
def registered_user(auth_service):
    """Register the standard test account."""
    return auth_service.register(
        RegisterForm(username=TEST_USERNAME, password=TEST_PASSWORD, confirm_password=TEST_PASSWORD)
    )


@pytest.fixture
def login_session(auth_service, registered_user):
    """Log the standard test account in and return its session."""
    return auth_service.login(LoginForm(username=TEST_USERNAME, password=TEST_PASSWORD), Response())


@pytest.fixture
def logged_in_client(client, registered_user):
    """Test client holding a valid session cookie."""
    response = client.post(
        "/login",
        data={"username": TEST_USERNAME, "password": TEST_PASSWORD},
        follow_redirects=False,
    )
    assert response.status_code == 303
    return client
