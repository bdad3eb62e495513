"""Outbound invitation notice protocol."""

from dataclasses import dataclass
from typing import Protocol

from domain.entities.album import AlbumRole


@dataclass(frozen=True)
class InvitationNotice:
    """Everything a notifier needs to tell someone they were invited."""

    recipient_email: str
    inviter_name: str
    album_name: str
    role: AlbumRole
    accept_url: str


class IInvitationNotifier(Protocol):
    """Delivers invitation notices (email, etc.).

    Implementations may raise on delivery failure; callers treat delivery
    as best-effort.
    """

    async def send_invitation_notice(self, notice: InvitationNotice) -> None:
        """Send one invitation notice."""
        ...
