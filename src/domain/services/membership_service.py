"""Album membership service layer with business logic."""

from collections.abc import Callable
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError

from core.exceptions import (
    AlreadyAMemberError,
    InsufficientPermissionsError,
    MemberNotFoundError,
    NotAMemberError,
    ProfileNotFoundError,
)
from domain.entities.album import Album, AlbumMember, AlbumRole
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.album_access import load_album_access, require_capability

logger = structlog.get_logger()


class MembershipService:
    """Service layer for managing who belongs to an album and in which role."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_members(self, album_id: UUID, user_id: UUID) -> list[AlbumMember]:
        """Get all members of an album. Requires a role on the album."""
        async with self._uow_factory() as uow:
            _, role = await load_album_access(uow, album_id, user_id)
            if role is None:
                raise NotAMemberError(str(album_id))
            return await uow.albums.get_members(album_id)  # type: ignore[no-any-return]

    async def add_member(
        self,
        album_id: UUID,
        user_id: UUID,
        target_user_id: UUID,
        role: AlbumRole = AlbumRole.VIEWER,
    ) -> AlbumMember:
        """Add a user to an album directly. Requires member management."""
        async with self._uow_factory() as uow:
            album, _ = await require_capability(uow, album_id, user_id, "can_manage_members")

            if album.created_by == target_user_id or album.membership_for(target_user_id):
                raise AlreadyAMemberError(str(target_user_id))

            if not await uow.profiles.get(target_user_id):
                raise ProfileNotFoundError(str(target_user_id))

            member = AlbumMember(album_id=album_id, user_id=target_user_id, role=role)
            try:
                added = await uow.albums.add_member(member)
            except IntegrityError as exc:
                # Lost a race with an invitation acceptance for the same user.
                await uow.rollback()
                orig = str(exc.orig).lower() if exc.orig else ""
                if "unique" in orig or "duplicate" in orig:
                    raise AlreadyAMemberError(str(target_user_id)) from exc
                raise

            await uow.commit()

        logger.info(
            "member_added",
            album_id=str(album_id),
            user_id=str(target_user_id),
            role=role.value,
            added_by=str(user_id),
        )
        return added

    async def change_role(self, member_id: UUID, user_id: UUID, role: AlbumRole) -> AlbumMember:
        """Change a member's role. Requires member management.

        The album creator's standing and the caller's own row cannot be
        changed through this path.
        """
        async with self._uow_factory() as uow:
            member, _ = await self._require_manageable_member(uow, member_id, user_id)

            old_role = member.role
            updated = await uow.albums.update_member_role(member_id, role)
            await uow.commit()

        logger.info(
            "member_role_changed",
            album_id=str(member.album_id),
            user_id=str(member.user_id),
            old_role=old_role.value,
            new_role=role.value,
            changed_by=str(user_id),
        )
        return updated

    async def remove_member(self, member_id: UUID, user_id: UUID) -> bool:
        """Remove a member from an album. Requires member management."""
        async with self._uow_factory() as uow:
            member, _ = await self._require_manageable_member(uow, member_id, user_id)

            removed = await uow.albums.remove_member(member_id)
            await uow.commit()

        logger.info(
            "member_removed",
            album_id=str(member.album_id),
            user_id=str(member.user_id),
            removed_by=str(user_id),
        )
        return removed  # type: ignore[no-any-return]

    # --- Internal helpers ---

    async def _require_manageable_member(
        self, uow: IUnitOfWork, member_id: UUID, user_id: UUID
    ) -> tuple[AlbumMember, Album]:
        member = await uow.albums.get_member_by_id(member_id)
        if not member:
            raise MemberNotFoundError(str(member_id))

        album, _ = await require_capability(uow, member.album_id, user_id, "can_manage_members")

        if member.user_id == album.created_by:
            raise InsufficientPermissionsError(
                "creator", message="The album creator's admin role cannot be changed"
            )
        if member.user_id == user_id:
            raise InsufficientPermissionsError(
                "other member", message="You cannot change your own membership"
            )
        return member, album
