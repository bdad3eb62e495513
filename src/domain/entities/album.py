"""Album domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4


class AlbumRole(StrEnum):
    """Role a member holds on a single album."""

    ADMIN = "admin"
    CONTRIBUTOR = "contributor"
    VIEWER = "viewer"


class AlbumPrivacy(StrEnum):
    """Album visibility."""

    PRIVATE = "private"
    PUBLIC = "public"


@dataclass
class AlbumMember:
    """Domain entity for an album membership (one row per album/user pair)."""

    album_id: UUID
    user_id: UUID
    role: AlbumRole = AlbumRole.VIEWER
    id: UUID = field(default_factory=uuid4)
    joined_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class Album:
    """Domain entity for an Album.

    ``members`` is the materialized membership list used for role
    resolution. It is only populated by repository calls that load it
    (``get_with_members``); elsewhere it is empty.
    """

    name: str
    created_by: UUID
    id: UUID = field(default_factory=uuid4)
    description: str | None = None
    privacy_level: AlbumPrivacy = AlbumPrivacy.PRIVATE
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
    members: list[AlbumMember] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    @property
    def is_public(self) -> bool:
        return self.privacy_level == AlbumPrivacy.PUBLIC

    def membership_for(self, user_id: UUID) -> AlbumMember | None:
        """Return the explicit membership row for a user, if loaded."""
        return next((m for m in self.members if m.user_id == user_id), None)
