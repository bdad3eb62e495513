"""Album repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.album import Album, AlbumMember, AlbumRole


class IAlbumRepository(Protocol):
    """Repository interface for Album entities and their memberships."""

    async def get(self, id: UUID) -> Album | None:
        """Get an album by ID (members not loaded)."""
        ...

    async def get_with_members(self, id: UUID) -> Album | None:
        """Get an album by ID with its membership list loaded."""
        ...

    async def get_all_for_user(self, user_id: UUID) -> list[Album]:
        """Get all albums a user created or is a member of."""
        ...

    async def get_public(self) -> list[Album]:
        """Get all public albums."""
        ...

    async def create(self, album: Album) -> Album:
        """Create a new album."""
        ...

    async def update(self, album: Album) -> Album:
        """Update an existing album."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete an album (cascade deletes members and invitations)."""
        ...

    async def get_member(self, album_id: UUID, user_id: UUID) -> AlbumMember | None:
        """Get a membership by album and user IDs."""
        ...

    async def get_member_by_id(self, member_id: UUID) -> AlbumMember | None:
        """Get a membership by its row ID."""
        ...

    async def get_members(self, album_id: UUID) -> list[AlbumMember]:
        """Get all members of an album, oldest first."""
        ...

    async def add_member(self, member: AlbumMember) -> AlbumMember:
        """Insert a membership. Raises IntegrityError on a duplicate pair."""
        ...

    async def update_member_role(self, member_id: UUID, role: AlbumRole) -> AlbumMember:
        """Change a member's role."""
        ...

    async def remove_member(self, member_id: UUID) -> bool:
        """Delete a membership row."""
        ...
