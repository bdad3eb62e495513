"""Invitation domain entity."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import StrEnum
from uuid import UUID, uuid4

from domain.entities.album import AlbumRole

# Email invitations are single use and expire after a week.
EMAIL_INVITATION_EXPIRY_DAYS = 7

# Shareable links live for 30 days unless revoked earlier.
SHAREABLE_INVITATION_EXPIRY_DAYS = 30

# Anti-abuse ceiling on simultaneously active shareable links per album.
MAX_ACTIVE_SHAREABLE_INVITATIONS = 10


class InvitationStatus(StrEnum):
    """Derived lifecycle state of an invitation."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    EXPIRED = "expired"
    EXHAUSTED = "exhausted"


@dataclass
class Invitation:
    """Domain entity for an album invitation.

    Email invitations carry a target ``email`` and are consumed by setting
    ``used_at``. Shareable invitations have an empty ``email`` and count
    acceptances in ``uses_count`` up to ``max_uses`` (``None`` = unlimited).
    """

    album_id: UUID
    invited_by: UUID
    role: AlbumRole
    token: str
    email: str = ""
    id: UUID = field(default_factory=uuid4)
    is_shareable: bool = False
    max_uses: int | None = None
    uses_count: int = 0
    created_at: datetime = field(default_factory=datetime.utcnow)
    expires_at: datetime = field(
        default_factory=lambda: datetime.utcnow() + timedelta(days=EMAIL_INVITATION_EXPIRY_DAYS)
    )
    used_at: datetime | None = None

    @property
    def is_expired(self) -> bool:
        """Check if the invitation has passed its expiry."""
        return datetime.utcnow() >= self.expires_at

    @property
    def is_active(self) -> bool:
        """Unused and not yet expired."""
        return self.used_at is None and not self.is_expired

    @property
    def has_uses_remaining(self) -> bool:
        """Whether a shareable invitation can still be accepted."""
        return self.max_uses is None or self.uses_count < self.max_uses

    @property
    def status(self) -> InvitationStatus:
        if self.used_at is not None:
            return InvitationStatus.ACCEPTED
        if self.is_expired:
            return InvitationStatus.EXPIRED
        if self.is_shareable and not self.has_uses_remaining:
            return InvitationStatus.EXHAUSTED
        return InvitationStatus.PENDING


def normalize_email(email: str) -> str:
    """Lowercase and trim an email address for storage and comparison."""
    return email.strip().lower()
