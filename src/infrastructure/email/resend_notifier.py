"""Invitation notices delivered through the Resend email API."""

from html import escape

import httpx
import structlog

from core.config import settings
from core.exceptions import NotificationDeliveryError
from domain.entities.album import AlbumRole
from domain.services.invitation_notifier import InvitationNotice

logger = structlog.get_logger()

RESEND_API_URL = "https://api.resend.com"

_ROLE_DESCRIPTIONS = {
    AlbumRole.ADMIN: "manage the album and invite others",
    AlbumRole.CONTRIBUTOR: "add posts and memories",
    AlbumRole.VIEWER: "view content",
}


def render_subject(notice: InvitationNotice) -> str:
    return f'You\'re invited to join "{notice.album_name}" on Family Blog'


def render_html(notice: InvitationNotice) -> str:
    """Render the invitation email body."""
    inviter = escape(notice.inviter_name)
    album = escape(notice.album_name)
    url = escape(notice.accept_url, quote=True)
    ability = _ROLE_DESCRIPTIONS.get(notice.role, "view content")
    return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
  <h1 style="color: #333; text-align: center;">You're Invited!</h1>
  <div style="background-color: #f8f9fa; padding: 20px; border-radius: 8px; margin: 20px 0;">
    <p style="font-size: 16px; margin: 0 0 10px 0;">
      <strong>{inviter}</strong> has invited you to join the album <strong>"{album}"</strong> on Family Blog.
    </p>
    <p style="font-size: 14px; color: #666; margin: 0;">
      You'll be able to <strong>{ability}</strong> in this album.
    </p>
  </div>
  <div style="text-align: center; margin: 30px 0;">
    <a href="{url}" style="background-color: #007bff; color: white; padding: 12px 24px; text-decoration: none; border-radius: 5px; font-weight: bold; display: inline-block;">
      Accept Invitation
    </a>
  </div>
  <hr style="border: none; border-top: 1px solid #eee; margin: 30px 0;">
  <p style="font-size: 12px; color: #999; text-align: center;">
    This invitation will expire in 7 days. If you didn't expect this invitation, you can safely ignore this email.
  </p>
</div>
"""


class ResendInvitationNotifier:
    """IInvitationNotifier backed by Resend.

    Without an API key, notices are logged instead of sent so local
    development works without email credentials.
    """

    def __init__(
        self,
        api_key: str = settings.resend_api_key,
        from_email: str = settings.from_email,
        base_url: str = RESEND_API_URL,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.from_email = from_email
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport

    @property
    def enabled(self) -> bool:
        """Check if Resend is configured."""
        return bool(self.api_key)

    async def send_invitation_notice(self, notice: InvitationNotice) -> None:
        """
        Send an invitation email.

        Raises:
            NotificationDeliveryError: Resend rejected the request or was unreachable
        """
        if not self.enabled:
            logger.info(
                "invitation_notice_skipped",
                reason="RESEND_API_KEY not set",
                to_email=notice.recipient_email,
                album_name=notice.album_name,
                role=notice.role.value,
                accept_url=notice.accept_url,
            )
            return

        payload = {
            "from": self.from_email,
            "to": [notice.recipient_email],
            "subject": render_subject(notice),
            "html": render_html(notice),
        }

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(
                    f"{self.base_url}/emails",
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    json=payload,
                    timeout=self.timeout,
                )
        except httpx.HTTPError as exc:
            logger.error(
                "resend_error",
                error=str(exc),
                to_email=notice.recipient_email,
            )
            raise NotificationDeliveryError(str(exc)) from exc

        if response.is_success:
            logger.info(
                "resend_email_sent",
                to_email=notice.recipient_email,
                message_id=response.json().get("id"),
            )
            return

        try:
            error = response.json().get("message", response.text)
        except ValueError:
            error = response.text
        logger.error(
            "resend_email_failed",
            status_code=response.status_code,
            error=error,
            to_email=notice.recipient_email,
        )
        raise NotificationDeliveryError(f"Resend returned {response.status_code}")
