"""Dependency injection factories for API v1."""

from functools import lru_cache

from api.dependencies.services import get_uow_factory
from core.config import settings
from domain.services.album_service import AlbumService
from domain.services.invitation_service import InvitationService
from domain.services.membership_service import MembershipService
from infrastructure.email.resend_notifier import ResendInvitationNotifier


@lru_cache
def get_album_service() -> AlbumService:
    """Get Album service instance."""
    return AlbumService(get_uow_factory())


@lru_cache
def get_membership_service() -> MembershipService:
    """Get Membership service instance."""
    return MembershipService(get_uow_factory())


@lru_cache
def get_invitation_notifier() -> ResendInvitationNotifier:
    """Get the invitation email notifier."""
    return ResendInvitationNotifier()


@lru_cache
def get_invitation_service() -> InvitationService:
    """Get Invitation service instance."""
    return InvitationService(
        get_uow_factory(),
        notifier=get_invitation_notifier(),
        app_base_url=settings.app_base_url,
    )
