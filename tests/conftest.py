"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from uuid import uuid4

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["RESEND_API_KEY"] = ""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.services.invitation_notifier import InvitationNotice
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class RecordingNotifier:
    """Invitation notifier that keeps notices in memory."""

    def __init__(self) -> None:
        self.notices: list[InvitationNotice] = []
        self.fail = False

    async def send_invitation_notice(self, notice: InvitationNotice) -> None:
        if self.fail:
            raise RuntimeError("mail server down")
        self.notices.append(notice)


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database per test.

    StaticPool keeps the single connection alive so every session sees the
    same in-memory database.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
def uow_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SQLAlchemyUnitOfWork]:
    """UoW factory bound to the test database."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    return factory


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
        audience="authenticated",
    )


@pytest.fixture
def make_user() -> Callable[..., TokenUser]:
    """Build a distinct identity per call."""

    def _make(email: str | None = None, full_name: str | None = None) -> TokenUser:
        user_id = uuid4()
        return TokenUser(
            id=user_id,
            email=email or f"user-{user_id.hex[:8]}@example.com",
            full_name=full_name,
        )

    return _make


@pytest.fixture
def test_user(make_user: Callable[..., TokenUser]) -> TokenUser:
    """The default caller: creates albums in most tests."""
    return make_user(email="test@example.com", full_name="Test User")


@pytest.fixture
def headers_for(auth_provider: JWTAuthProvider) -> Callable[[TokenUser], dict[str, str]]:
    """Authorization headers for a given identity."""

    def _headers(user: TokenUser) -> dict[str, str]:
        return {"Authorization": f"Bearer {auth_provider.create_token(user)}"}

    return _headers


@pytest.fixture
def auth_headers(
    test_user: TokenUser, headers_for: Callable[[TokenUser], dict[str, str]]
) -> dict[str, str]:
    """Create authorization headers."""
    return headers_for(test_user)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def app(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork],
    auth_provider: JWTAuthProvider,
    notifier: RecordingNotifier,
) -> FastAPI:
    """
    Application wired to the in-memory database.

    - Auth provider validates test-signed HS256 tokens
    - Every service uses the test UoW factory
    - Invitation notices go to a RecordingNotifier
    """
    from api.dependencies.auth import get_auth_provider
    from api.dependencies.services import get_profile_service
    from api.v1.dependencies import (
        get_album_service,
        get_invitation_service,
        get_membership_service,
    )
    from domain.services.album_service import AlbumService
    from domain.services.invitation_service import InvitationService
    from domain.services.membership_service import MembershipService
    from domain.services.profile_service import ProfileService
    from main import create_app

    app = create_app()
    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    app.dependency_overrides[get_profile_service] = lambda: ProfileService(uow_factory)
    app.dependency_overrides[get_album_service] = lambda: AlbumService(uow_factory)
    app.dependency_overrides[get_membership_service] = lambda: MembershipService(uow_factory)
    app.dependency_overrides[get_invitation_service] = lambda: InvitationService(
        uow_factory,
        notifier=notifier,
        app_base_url="http://app.test",
    )
    return app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
