"""Album role resolution and the role -> capability table.

Both functions are pure: no I/O, no clock, same output for the same input.
"""

from dataclasses import asdict, dataclass
from uuid import UUID

from domain.entities.album import Album, AlbumRole


@dataclass(frozen=True)
class Capabilities:
    """What a caller may do on one album."""

    can_invite_members: bool = False
    can_manage_members: bool = False
    can_edit_album: bool = False
    can_delete_album: bool = False
    can_create_posts: bool = False
    can_delete_others_posts: bool = False

    def as_dict(self) -> dict[str, bool]:
        return asdict(self)


NO_CAPABILITIES = Capabilities()

_CAPABILITIES_BY_ROLE: dict[AlbumRole, Capabilities] = {
    AlbumRole.ADMIN: Capabilities(
        can_invite_members=True,
        can_manage_members=True,
        can_edit_album=True,
        can_delete_album=True,
        can_create_posts=True,
        can_delete_others_posts=True,
    ),
    AlbumRole.CONTRIBUTOR: Capabilities(can_create_posts=True),
    AlbumRole.VIEWER: NO_CAPABILITIES,
}


def get_capabilities(role: AlbumRole | None) -> Capabilities:
    """Map a role (or no role) to its capability set."""
    if role is None:
        return NO_CAPABILITIES
    return _CAPABILITIES_BY_ROLE.get(role, NO_CAPABILITIES)


def resolve_role(album: Album, user_id: UUID) -> AlbumRole | None:
    """Resolve a user's effective role on an album.

    The creator is always admin, whatever their membership row says.
    Otherwise the membership row decides; no row means no role.
    ``album.members`` must be loaded.
    """
    if album.created_by == user_id:
        return AlbumRole.ADMIN
    membership = album.membership_for(user_id)
    return membership.role if membership else None
