"""Album access checks shared by the album, membership and invitation services.

Every service computes a caller's role through ``load_album_access`` so the
creator override and the membership lookup can never diverge.
"""

from uuid import UUID

from core.exceptions import (
    AlbumNotFoundError,
    InsufficientPermissionsError,
    NotAMemberError,
)
from domain.entities.album import Album, AlbumRole
from domain.entities.permissions import get_capabilities, resolve_role
from domain.repositories.unit_of_work import IUnitOfWork


async def load_album_access(
    uow: IUnitOfWork, album_id: UUID, user_id: UUID
) -> tuple[Album, AlbumRole | None]:
    """Load an album with its members and resolve the user's role on it."""
    album = await uow.albums.get_with_members(album_id)
    if not album:
        raise AlbumNotFoundError(str(album_id))
    return album, resolve_role(album, user_id)


async def require_capability(
    uow: IUnitOfWork, album_id: UUID, user_id: UUID, capability: str
) -> tuple[Album, AlbumRole]:
    """Verify the user holds a capability on the album. Raises on failure.

    ``NotAMemberError`` when the user has no relation to the album at all,
    ``InsufficientPermissionsError`` when their role lacks the capability.
    """
    album, role = await load_album_access(uow, album_id, user_id)
    if role is None:
        raise NotAMemberError(str(album_id))
    if not getattr(get_capabilities(role), capability):
        raise InsufficientPermissionsError(capability)
    return album, role


async def require_admin(
    uow: IUnitOfWork, album_id: UUID, user_id: UUID
) -> Album:
    """Verify the user resolves to the admin role exactly."""
    album, role = await load_album_access(uow, album_id, user_id)
    if role is None:
        raise NotAMemberError(str(album_id))
    if role != AlbumRole.ADMIN:
        raise InsufficientPermissionsError(
            "admin", message="Only album admins can perform this action"
        )
    return album
