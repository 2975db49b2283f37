"""
Pytest configuration and fixtures for GalleryHQ API tests.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from galleryhq.database import Base, get_db
from galleryhq.limiter import limiter
from galleryhq.main import app
from galleryhq.models.message import Message, STATUS_APPROVED, STATUS_PENDING_REVIEW
from galleryhq.models.user import User, ROLE_ADMIN
from galleryhq.auth import get_password_hash, create_access_token

# Disable rate limiting for tests
limiter.enabled = False

# Use in-memory SQLite for tests with shared connection
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "testpassword123"
_password_hash = None

# Global session for sharing across requests
_test_session = None


def get_test_db():
    """Get the shared test database session."""
    yield _test_session


def _hashed_password():
    global _password_hash
    if _password_hash is None:
        _password_hash = get_password_hash(TEST_PASSWORD)
    return _password_hash


def make_user(db, username, role="user", is_active=True):
    user = User(
        email=f"{username}@example.com",
        username=username,
        hashed_password=_hashed_password(),
        display_name=username.title(),
        role=role,
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_message(db, sender, recipient, status=STATUS_APPROVED, **fields):
    """Insert a message directly, bypassing moderation. Returns its id."""
    message = Message(
        sender_id=sender.id,
        recipient_id=recipient.id,
        body=fields.pop("body", "Hello from the gallery"),
        moderation_status=status,
        **fields,
    )
    db.add(message)
    db.commit()
    return message.id


def headers_for(user):
    return {"Authorization": f"Bearer {create_access_token({'sub': user.id})}"}


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test."""
    global _test_session

    Base.metadata.create_all(bind=engine)
    _test_session = TestingSessionLocal()

    app.dependency_overrides[get_db] = get_test_db

    yield _test_session

    app.dependency_overrides.clear()
    _test_session.close()
    _test_session = None

    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    """Create a test client."""
    with TestClient(app) as c:
        yield c


@pytest.fixture(scope="function")
def sender(db):
    return make_user(db, "collector")


@pytest.fixture(scope="function")
def recipient(db):
    return make_user(db, "artist")


@pytest.fixture(scope="function")
def outsider(db):
    return make_user(db, "stranger")


@pytest.fixture(scope="function")
def admin(db):
    return make_user(db, "curator", role=ROLE_ADMIN)


@pytest.fixture(scope="function")
def second_admin(db):
    return make_user(db, "registrar", role=ROLE_ADMIN)


@pytest.fixture(scope="function")
def pending_message(db, sender, recipient):
    return make_message(db, sender, recipient, status=STATUS_PENDING_REVIEW)


@pytest.fixture(scope="function")
def approved_message(db, sender, recipient):
    return make_message(db, sender, recipient)
