"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from domain.entities.album import Album, AlbumMember, AlbumPrivacy, AlbumRole


class FakeUnitOfWork:
    """Fake Unit of Work with repository mocks for unit testing."""

    def __init__(self) -> None:
        self.albums = AsyncMock()
        self.invitations = AsyncMock()
        self.profiles = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


def make_album(
    creator_id: UUID,
    members: dict[UUID, AlbumRole] | None = None,
    privacy: AlbumPrivacy = AlbumPrivacy.PRIVATE,
    album_id: UUID | None = None,
) -> Album:
    """Album aggregate with its membership list loaded."""
    album = Album(
        id=album_id or uuid4(),
        name="Family Trip",
        created_by=creator_id,
        privacy_level=privacy,
    )
    album.members = [
        AlbumMember(album_id=album.id, user_id=uid, role=role)
        for uid, role in (members or {}).items()
    ]
    return album


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def user_id() -> UUID:
    """A random user ID."""
    return uuid4()


@pytest.fixture
def album_id() -> UUID:
    """A random album ID."""
    return uuid4()


@pytest.fixture
def actor_id() -> UUID:
    """A random actor ID (distinct from user_id)."""
    return uuid4()
