"""Unit tests for ProfileService."""

from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID

import pytest
from sqlalchemy.exc import IntegrityError

from domain.entities.profile import Profile
from domain.services.profile_service import ProfileService
from tests.unit.conftest import FakeUnitOfWork


async def _echo(entity: Any) -> Any:
    return entity


@pytest.fixture
def service(uow: FakeUnitOfWork) -> ProfileService:
    return ProfileService(lambda: uow)


class TestEnsureProfile:
    async def test_creates_missing_profile(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ) -> None:
        uow.profiles.get.return_value = None
        uow.profiles.create.side_effect = _echo

        profile = await service.ensure_profile(user_id, " Jane@Example.com ", "Jane")

        assert profile.id == user_id
        assert profile.email == "jane@example.com"
        assert profile.full_name == "Jane"
        assert uow.committed

    async def test_unchanged_profile_is_not_written(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ) -> None:
        existing = Profile(id=user_id, email="jane@example.com", full_name="Jane")
        uow.profiles.get.return_value = existing

        assert await service.ensure_profile(user_id, "jane@example.com") is existing
        uow.profiles.update.assert_not_awaited()
        assert not uow.committed

    async def test_changed_email_is_refreshed(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ) -> None:
        uow.profiles.get.return_value = Profile(id=user_id, email="old@example.com")
        uow.profiles.update.side_effect = _echo

        profile = await service.ensure_profile(user_id, "new@example.com")

        assert profile.email == "new@example.com"
        assert uow.committed

    async def test_concurrent_create_rereads_winner(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ) -> None:
        winner = Profile(id=user_id, email="jane@example.com")
        uow.profiles.get = AsyncMock(side_effect=[None, winner])
        uow.profiles.create.side_effect = IntegrityError(
            "INSERT", {}, Exception("UNIQUE constraint failed: profiles.id")
        )

        assert await service.ensure_profile(user_id, "jane@example.com") is winner
        assert uow.rolled_back
