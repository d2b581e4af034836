"""
Shared test fixtures.

Sets up an isolated SQLite database and replaces the hosted auth
backend with an in-memory fake, so tests need neither a database
server nor network access.
"""

import os

# Settings are validated at import time; provide the backend config
# before anything from drive_crm is imported.
os.environ.setdefault("SUPABASE_URL", "https://auth.test.local")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import uuid

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from drive_crm.auth.session import (
    ACCESS_COOKIE,
    AuthProviderError,
    SessionResolver,
)
from drive_crm.main import app
from drive_crm.models.base import Base, get_db
from drive_crm.models.enums import Role
from drive_crm.models.profile import Profile


TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


class FakeAuthProvider:
    """
    In-memory stand-in for the hosted auth backend.

    Users are keyed by access token; refresh tokens map to the
    user they renew. Setting ``down`` makes every call fail the
    way an unreachable backend does.
    """

    def __init__(self):
        self.users_by_token: dict[str, dict] = {}
        self.refresh_tokens: dict[str, dict] = {}
        self.passwords: dict[str, tuple[str, dict]] = {}
        self.signed_out: list[str] = []
        self.down = False

    def _check(self):
        if self.down:
            raise httpx.ConnectError("auth backend unreachable")

    def add_user(self, role="rider", user_id=None, email=None, password=None):
        user = {
            "id": user_id or str(uuid.uuid4()),
            "email": email or f"{uuid.uuid4().hex[:8]}@test.com",
            "user_metadata": {"role": role} if role is not None else {},
        }
        access_token = f"access-{uuid.uuid4().hex}"
        refresh_token = f"refresh-{uuid.uuid4().hex}"
        self.users_by_token[access_token] = user
        self.refresh_tokens[refresh_token] = user
        if password is not None:
            self.passwords[user["email"]] = (password, user)
        return user, access_token, refresh_token

    def _issue(self, user):
        access_token = f"access-{uuid.uuid4().hex}"
        refresh_token = f"refresh-{uuid.uuid4().hex}"
        self.users_by_token[access_token] = user
        self.refresh_tokens[refresh_token] = user
        return {
            "access_token": access_token,
            "refresh_token": refresh_token,
            "expires_in": 3600,
            "user": user,
        }

    async def get_user(self, access_token):
        self._check()
        return self.users_by_token.get(access_token)

    async def refresh_session(self, refresh_token):
        self._check()
        user = self.refresh_tokens.pop(refresh_token, None)
        if user is None:
            return None
        return self._issue(user)

    async def sign_in_with_password(self, email, password):
        self._check()
        stored = self.passwords.get(email)
        if stored is None or stored[0] != password:
            raise AuthProviderError("Invalid login credentials", status_code=401)
        return self._issue(stored[1])

    async def sign_up(self, email, password, metadata):
        self._check()
        if email in self.passwords:
            raise AuthProviderError("User already registered", status_code=400)
        user = {
            "id": str(uuid.uuid4()),
            "email": email,
            "user_metadata": dict(metadata),
        }
        self.passwords[email] = (password, user)
        return self._issue(user)

    async def sign_out(self, access_token):
        self._check()
        self.signed_out.append(access_token)
        self.users_by_token.pop(access_token, None)


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop them after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def auth_provider():
    return FakeAuthProvider()


@pytest.fixture
def client(db_session, auth_provider):
    """
    Provide a test client wired to the test database and the fake
    auth backend.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    original_resolver = app.state.session_resolver
    app.state.session_resolver = SessionResolver(auth_provider)
    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
    app.state.session_resolver = original_resolver


@pytest.fixture
def login_as(client, auth_provider, db_session):
    """
    Sign the test client in with a given role.

    Returns the user id. The matching profile is created up front
    so the user can be referenced as an instructor.
    """
    def _login(role="rider", user_id=None):
        user, access_token, _ = auth_provider.add_user(role=role, user_id=user_id)
        if db_session.get(Profile, user["id"]) is None:
            profile_role = Role.parse(role)
            if profile_role not in Role.assignable():
                profile_role = Role.RIDER
            db_session.add(Profile(id=user["id"], full_name=f"Test {role}", role=profile_role))
            db_session.commit()
        client.cookies.set(ACCESS_COOKIE, access_token)
        return user["id"]

    return _login


@pytest.fixture
def instructor(db_session):
    """An instructor profile to log attendance and lessons against."""
    profile = Profile(
        id=str(uuid.uuid4()), full_name="Ivan Instructor", role=Role.INSTRUCTOR
    )
    db_session.add(profile)
    db_session.commit()
    return profile
