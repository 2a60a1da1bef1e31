"""
Pytest fixtures for testing.

Provides:
- In-memory SQLite database, fresh per test
- Async HTTP client bound to the app with the DB dependency overridden
- Factory fixtures for users, roles, and permissions
- Login helper returning auth headers
"""

import os

# Must be set before backoffice.core.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("PASSWORD_KDF_ROUNDS", "50")

from typing import AsyncGenerator, Generator, Iterable, Optional
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import backoffice.models  # noqa: F401
from backoffice.core.config import settings
from backoffice.core.rate_limiter import limiter
from backoffice.db.base import Base
from backoffice.db.session import get_db
from backoffice.main import app
from backoffice.models.role import Role, Permission, RolePermission
from backoffice.models.user import User
from backoffice.services.auth_service import auth_service
from backoffice.services.rbac_service import rbac_service


DEFAULT_PASSWORD = "testpassword123"


@pytest.fixture(scope="function")
def db_engine():
    """Create test database engine."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine) -> Generator[Session, None, None]:
    """Database session shared by the test body and the app."""
    session = sessionmaker(bind=db_engine, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest_asyncio.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """
    Test client with database session override.
    """

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    limiter.reset()

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


# ============ Factory Fixtures ============


class RBACFactory:
    """Factory for creating users, roles, and permissions."""

    def __init__(self, db: Session):
        self.db = db

    def permission(self, name: str, description: Optional[str] = None) -> Permission:
        permission = rbac_service.get_or_create_permission(self.db, name, description)
        self.db.commit()
        return permission

    def role(self, name: Optional[str] = None, permissions: Iterable[str] = ()) -> Role:
        """Create a role holding the named permissions (created as needed)."""
        role = rbac_service.create_role(self.db, name or f"role-{uuid4().hex[:8]}")
        for perm_name in permissions:
            rbac_service.grant_permission(self.db, role.id, self.permission(perm_name).id)
        return role

    def user(
        self,
        username: Optional[str] = None,
        password: str = DEFAULT_PASSWORD,
        role: Optional[Role] = None,
    ) -> User:
        user = auth_service.create_user(
            self.db,
            username or f"user-{uuid4().hex[:8]}",
            password,
            role.name if role else None,
        )
        return user

    def grant_count(self, role_id: int) -> int:
        return self.db.query(RolePermission).filter(RolePermission.role_id == role_id).count()


@pytest.fixture
def factory(db: Session) -> RBACFactory:
    return RBACFactory(db)


@pytest.fixture
def admin_user(factory: RBACFactory) -> User:
    """User whose role holds manage_roles, manage_users, and view_forms."""
    role = factory.role("administrator", ["manage_roles", "manage_users", "view_forms"])
    return factory.user("admin", role=role)


@pytest.fixture
def plain_user(factory: RBACFactory) -> User:
    """User with no role at all."""
    return factory.user("nobody")


# ============ Auth Helpers ============


async def login(client: AsyncClient, username: str, password: str = DEFAULT_PASSWORD) -> dict[str, str]:
    """Log in and return a Cookie header carrying the session token.

    The client's cookie jar is cleared so later requests only carry a
    session when the test passes these headers explicitly.
    """
    response = await client.post(
        "/api/login", json={"username": username, "password": password},
    )
    assert response.status_code == 200, response.text
    token = response.cookies[settings.SESSION_COOKIE_NAME]
    client.cookies.clear()
    return {"Cookie": f"{settings.SESSION_COOKIE_NAME}={token}"}


@pytest_asyncio.fixture
async def admin_headers(client: AsyncClient, admin_user: User) -> dict[str, str]:
    return await login(client, admin_user.username)


@pytest_asyncio.fixture
async def plain_headers(client: AsyncClient, plain_user: User) -> dict[str, str]:
    return await login(client, plain_user.username)
