"""Album service layer with business logic."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

import structlog

from core.exceptions import AlbumNotFoundError, InvalidInputError, NotAMemberError
from domain.entities.album import Album, AlbumMember, AlbumPrivacy, AlbumRole
from domain.entities.permissions import Capabilities, get_capabilities
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.album_access import load_album_access, require_capability

logger = structlog.get_logger()


@dataclass(frozen=True)
class AlbumAccess:
    """A caller's resolved role and capabilities on one album."""

    album_id: UUID
    role: AlbumRole | None
    capabilities: Capabilities


class AlbumService:
    """Service layer for Album business logic."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_all_for_user(self, user_id: UUID) -> list[Album]:
        """Get all albums a user created or is a member of."""
        async with self._uow_factory() as uow:
            return await uow.albums.get_all_for_user(user_id)  # type: ignore[no-any-return]

    async def get_public(self) -> list[Album]:
        """Get all public albums."""
        async with self._uow_factory() as uow:
            return await uow.albums.get_public()  # type: ignore[no-any-return]

    async def get_by_id(self, album_id: UUID, user_id: UUID) -> Album:
        """Get an album. Private albums require a role on the album."""
        async with self._uow_factory() as uow:
            album, role = await load_album_access(uow, album_id, user_id)
            if role is None and not album.is_public:
                raise NotAMemberError(str(album_id))
            return album

    async def get_access(self, album_id: UUID, user_id: UUID) -> AlbumAccess:
        """Resolve a user's role and capabilities on an album.

        Never raises for non-members: they get no role and no capabilities.
        """
        async with self._uow_factory() as uow:
            _, role = await load_album_access(uow, album_id, user_id)
            return AlbumAccess(album_id=album_id, role=role, capabilities=get_capabilities(role))

    async def create(
        self,
        user_id: UUID,
        name: str,
        description: str | None = None,
        privacy_level: AlbumPrivacy = AlbumPrivacy.PRIVATE,
    ) -> Album:
        """Create an album and record the creator as an admin member."""
        name = name.strip()
        if not name:
            raise InvalidInputError("Album name is required", field="name")

        async with self._uow_factory() as uow:
            album = Album(
                name=name,
                description=(description or "").strip() or None,
                created_by=user_id,
                privacy_level=privacy_level,
            )
            created = await uow.albums.create(album)

            # The creator is admin regardless; the row makes the album show up
            # in membership listings.
            await uow.albums.add_member(
                AlbumMember(album_id=created.id, user_id=user_id, role=AlbumRole.ADMIN)
            )

            await uow.commit()

        logger.info("album_created", album_id=str(created.id), created_by=str(user_id))
        return created

    async def update(
        self,
        album_id: UUID,
        user_id: UUID,
        name: str | None = None,
        description: str | None = None,
        privacy_level: AlbumPrivacy | None = None,
    ) -> Album:
        """Update an album. Requires the edit-album capability."""
        async with self._uow_factory() as uow:
            album, _ = await require_capability(uow, album_id, user_id, "can_edit_album")

            if name is not None:
                name = name.strip()
                if not name:
                    raise InvalidInputError("Album name is required", field="name")
                album.name = name
            if description is not None:
                album.description = description.strip() or None
            if privacy_level is not None:
                album.privacy_level = privacy_level

            album.updated_at = datetime.utcnow()
            updated = await uow.albums.update(album)
            await uow.commit()
            return updated

    async def delete(self, album_id: UUID, user_id: UUID) -> bool:
        """Delete an album and everything scoped to it. Requires the delete-album capability."""
        async with self._uow_factory() as uow:
            await require_capability(uow, album_id, user_id, "can_delete_album")

            deleted = await uow.albums.delete(album_id)
            if not deleted:
                raise AlbumNotFoundError(str(album_id))
            await uow.commit()

        logger.info("album_deleted", album_id=str(album_id), deleted_by=str(user_id))
        return deleted  # type: ignore[no-any-return]
