"""Invitation repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.invitation import Invitation


class IInvitationRepository(Protocol):
    """Repository interface for Invitation entities."""

    async def create(self, invitation: Invitation) -> Invitation:
        """Create a new invitation."""
        ...

    async def get_by_id(self, id: UUID) -> Invitation | None:
        """Get an invitation by its primary key, regardless of state."""
        ...

    async def get_active_by_token(self, token: str) -> Invitation | None:
        """Get an unused, unexpired invitation by token."""
        ...

    async def get_active_email_invitation(
        self, album_id: UUID, email: str
    ) -> Invitation | None:
        """Get an active email invitation for a specific album and email."""
        ...

    async def get_active_for_album(
        self, album_id: UUID, shareable: bool
    ) -> list[Invitation]:
        """Get active email or shareable invitations for an album, newest first."""
        ...

    async def get_active_for_email(self, email: str) -> list[Invitation]:
        """Get active email invitations addressed to an email."""
        ...

    async def count_active_shareable(self, album_id: UUID) -> int:
        """Count active shareable invitations for an album."""
        ...

    async def try_increment_uses(self, id: UUID) -> bool:
        """Atomically consume one use of an active shareable invitation.

        Returns False when the invitation is expired or already at max_uses.
        """
        ...

    async def try_mark_used(self, id: UUID) -> bool:
        """Atomically set used_at on an active email invitation.

        Returns False when it was already used or has expired.
        """
        ...

    async def expire_now(self, id: UUID) -> Invitation:
        """Set expires_at to now (soft revoke)."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete an invitation."""
        ...
