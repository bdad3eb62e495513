"""Profile service: keeps a local profile row for each authenticated user."""

from collections.abc import Callable
from datetime import datetime
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError

from core.exceptions import ProfileNotFoundError
from domain.entities.invitation import normalize_email
from domain.entities.profile import Profile
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class ProfileService:
    """Service layer for user profiles."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def ensure_profile(
        self,
        user_id: UUID,
        email: str,
        full_name: str | None = None,
        avatar_url: str | None = None,
    ) -> Profile:
        """Create or refresh the profile for an authenticated identity.

        Idempotent. Concurrent first requests from the same user race on the
        primary key; the loser re-reads the winner's row.
        """
        email = normalize_email(email)

        async with self._uow_factory() as uow:
            existing = await uow.profiles.get(user_id)
            if existing:
                unchanged = (
                    existing.email == email
                    and (not full_name or existing.full_name == full_name)
                    and (not avatar_url or existing.avatar_url == avatar_url)
                )
                if unchanged:
                    return existing
                existing.email = email
                existing.full_name = full_name or existing.full_name
                existing.avatar_url = avatar_url or existing.avatar_url
                existing.updated_at = datetime.utcnow()
                updated = await uow.profiles.update(existing)
                await uow.commit()
                return updated

            try:
                created = await uow.profiles.create(
                    Profile(
                        id=user_id,
                        email=email,
                        full_name=full_name,
                        avatar_url=avatar_url,
                    )
                )
                await uow.commit()
                logger.info("profile_created", user_id=str(user_id))
                return created
            except IntegrityError as exc:
                await uow.rollback()
                orig = str(exc.orig).lower() if exc.orig else ""
                if "unique" not in orig and "duplicate" not in orig:
                    raise
                logger.debug("profile_create_race_lost", user_id=str(user_id))

        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(user_id)
            if not profile:
                raise ProfileNotFoundError(str(user_id))
            return profile
