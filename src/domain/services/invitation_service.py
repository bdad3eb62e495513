"""Invitation service layer with business logic."""

import secrets
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError

from core.exceptions import (
    AlbumNotFoundError,
    AlreadyAMemberError,
    DuplicateInvitationError,
    InvalidInputError,
    InvalidOrExpiredInvitationError,
    InvitationEmailMismatchError,
    InvitationNotFoundError,
    InviteQuotaExceededError,
    MaxUsesReachedError,
)
from domain.entities.album import Album, AlbumMember, AlbumRole
from domain.entities.invitation import (
    EMAIL_INVITATION_EXPIRY_DAYS,
    MAX_ACTIVE_SHAREABLE_INVITATIONS,
    SHAREABLE_INVITATION_EXPIRY_DAYS,
    Invitation,
    normalize_email,
)
from domain.entities.permissions import resolve_role
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.album_access import (
    load_album_access,
    require_admin,
    require_capability,
)
from domain.services.invitation_notifier import IInvitationNotifier, InvitationNotice

logger = structlog.get_logger()


class InvitationService:
    """Service layer for album invitation business logic.

    Covers both invitation variants: single-use email invitations bound to
    one address, and multi-use shareable links.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        notifier: Optional["IInvitationNotifier"] = None,
        app_base_url: str = "",
    ) -> None:
        self._uow_factory = uow_factory
        self._notifier = notifier
        self._app_base_url = app_base_url.rstrip("/")

    # --- Issuance ---

    async def create_email_invitation(
        self,
        album_id: UUID,
        user_id: UUID,
        email: str,
        role: AlbumRole,
    ) -> Invitation:
        """Invite one email address to an album.

        Args:
            album_id: The album to invite to.
            user_id: The inviting user (needs the invite-members capability).
            email: Target address; normalized before any check.
            role: Role granted on acceptance.

        Returns:
            The persisted invitation.

        Raises:
            AlbumNotFoundError: If the album does not exist.
            NotAMemberError: If the inviter has no relation to the album.
            InsufficientPermissionsError: If the inviter cannot invite members.
            AlreadyAMemberError: If an account with that email is already a member.
            DuplicateInvitationError: If an active invitation already targets that email.
        """
        async with self._uow_factory() as uow:
            album, _ = await require_capability(uow, album_id, user_id, "can_invite_members")
            invitation = await self._issue_email_invitation(uow, album, user_id, email, role)
            await uow.commit()

            inviter = await uow.profiles.get(user_id)

        logger.info(
            "email_invitation_created",
            album_id=str(album_id),
            invitation_id=str(invitation.id),
            role=role.value,
        )
        await self._send_notice(
            invitation,
            album_name=album.name,
            inviter_name=inviter.full_name if inviter and inviter.full_name else None,
        )
        return invitation

    async def create_shareable_invitation(
        self,
        album_id: UUID,
        user_id: UUID,
        role: AlbumRole,
        max_uses: int | None = None,
    ) -> Invitation:
        """Create a shareable invitation link. Admins only.

        Args:
            album_id: The album the link grants access to.
            user_id: The creating user (must resolve to admin).
            role: Role granted to everyone who accepts.
            max_uses: Positive usage ceiling, or None for unlimited.

        Raises:
            AlbumNotFoundError: If the album does not exist.
            NotAMemberError: If the user has no relation to the album.
            InsufficientPermissionsError: If the user is not an admin.
            InviteQuotaExceededError: If the album already has too many active links.
            InvalidInputError: If max_uses is not positive.
        """
        if max_uses is not None and max_uses < 1:
            raise InvalidInputError("max_uses must be a positive integer", field="max_uses")

        async with self._uow_factory() as uow:
            await require_admin(uow, album_id, user_id)

            active = await uow.invitations.count_active_shareable(album_id)
            if active >= MAX_ACTIVE_SHAREABLE_INVITATIONS:
                raise InviteQuotaExceededError(MAX_ACTIVE_SHAREABLE_INVITATIONS)

            invitation = Invitation(
                album_id=album_id,
                invited_by=user_id,
                role=role,
                token=self._generate_token(),
                email="",
                is_shareable=True,
                max_uses=max_uses,
                uses_count=0,
                expires_at=datetime.utcnow() + timedelta(days=SHAREABLE_INVITATION_EXPIRY_DAYS),
            )
            created = await uow.invitations.create(invitation)
            await uow.commit()

        logger.info(
            "shareable_invitation_created",
            album_id=str(album_id),
            invitation_id=str(created.id),
            max_uses=max_uses,
        )
        return created

    async def request_to_join(self, album_id: UUID, user_id: UUID, user_email: str) -> Invitation:
        """Request access to a public album.

        The request is an ordinary email invitation addressed to the
        requester with the viewer role.

        Raises:
            AlbumNotFoundError: If the album does not exist or is not public.
            AlreadyAMemberError: If the requester already has a role on the album.
            DuplicateInvitationError: If the requester already has an active invitation.
        """
        async with self._uow_factory() as uow:
            album, role = await load_album_access(uow, album_id, user_id)
            if not album.is_public:
                raise AlbumNotFoundError(str(album_id))
            if role is not None:
                raise AlreadyAMemberError(str(user_id))

            invitation = await self._issue_email_invitation(
                uow, album, user_id, user_email, AlbumRole.VIEWER
            )
            await uow.commit()

            requester = await uow.profiles.get(user_id)

        logger.info(
            "join_requested", album_id=str(album_id), invitation_id=str(invitation.id)
        )
        await self._send_notice(
            invitation,
            album_name=album.name,
            inviter_name=requester.full_name if requester and requester.full_name else None,
        )
        return invitation

    # --- Acceptance ---

    async def accept_invitation(
        self,
        token: str,
        user_id: UUID,
        user_email: str,
    ) -> AlbumMember:
        """Accept an invitation of either variant by token.

        The consumption write (use counter or used_at) and the membership
        insert share one transaction: a failure after lookup leaves neither.

        Returns:
            The new membership; its album_id is the album the caller joined.

        Raises:
            InvalidOrExpiredInvitationError: Unknown, used, revoked or expired token.
            MaxUsesReachedError: Shareable link has no uses left.
            InvitationEmailMismatchError: Email invitation addressed to someone else.
            AlreadyAMemberError: Caller already has a role on the album.
        """
        async with self._uow_factory() as uow:
            invitation = await uow.invitations.get_active_by_token(token)
            if not invitation:
                raise InvalidOrExpiredInvitationError()

            if invitation.is_shareable:
                if not invitation.has_uses_remaining:
                    raise MaxUsesReachedError(invitation.max_uses)
            elif normalize_email(user_email) != normalize_email(invitation.email):
                raise InvitationEmailMismatchError()

            album, role = await load_album_access(uow, invitation.album_id, user_id)
            if role is not None:
                raise AlreadyAMemberError(str(user_id))

            # Conditional single-statement update; losing a race shows up as
            # zero affected rows, never as an over-count.
            if invitation.is_shareable:
                if not await uow.invitations.try_increment_uses(invitation.id):
                    raise MaxUsesReachedError(invitation.max_uses)
            elif not await uow.invitations.try_mark_used(invitation.id):
                raise InvalidOrExpiredInvitationError()

            member = AlbumMember(
                album_id=invitation.album_id,
                user_id=user_id,
                role=invitation.role,
            )
            try:
                added = await uow.albums.add_member(member)
            except IntegrityError as exc:
                await uow.rollback()
                orig = str(exc.orig).lower() if exc.orig else ""
                if "unique" in orig or "duplicate" in orig:
                    raise AlreadyAMemberError(str(user_id)) from exc
                raise

            await uow.commit()

        logger.info(
            "invitation_accepted",
            album_id=str(album.id),
            invitation_id=str(invitation.id),
            user_id=str(user_id),
            shareable=invitation.is_shareable,
        )
        return added

    async def get_invitation_details(self, token: str) -> tuple[Invitation, Album, str | None]:
        """Preview an active invitation by token.

        Returns:
            Tuple of (invitation, album, inviter display name or None).

        Raises:
            InvalidOrExpiredInvitationError: If the token is not active.
        """
        async with self._uow_factory() as uow:
            invitation = await uow.invitations.get_active_by_token(token)
            if not invitation:
                raise InvalidOrExpiredInvitationError()

            album = await uow.albums.get(invitation.album_id)
            if not album:
                raise InvalidOrExpiredInvitationError()

            inviter = await uow.profiles.get(invitation.invited_by)
            return invitation, album, inviter.full_name if inviter else None

    # --- Listing ---

    async def get_email_invitations(self, album_id: UUID, user_id: UUID) -> list[Invitation]:
        """Active email invitations for an album. Requires member management."""
        async with self._uow_factory() as uow:
            await require_capability(uow, album_id, user_id, "can_manage_members")
            return await uow.invitations.get_active_for_album(album_id, shareable=False)  # type: ignore[no-any-return]

    async def get_shareable_invitations(self, album_id: UUID, user_id: UUID) -> list[Invitation]:
        """Active shareable invitations for an album. Admins only."""
        async with self._uow_factory() as uow:
            await require_admin(uow, album_id, user_id)
            return await uow.invitations.get_active_for_album(album_id, shareable=True)  # type: ignore[no-any-return]

    async def get_user_pending_invitations(self, email: str) -> list[Invitation]:
        """Active email invitations addressed to an email.

        Used to show pending invitations on the dashboard.
        """
        async with self._uow_factory() as uow:
            return await uow.invitations.get_active_for_email(  # type: ignore[no-any-return]
                normalize_email(email)
            )

    # --- Cancellation ---

    async def cancel_invitation(self, invitation_id: UUID, user_id: UUID) -> None:
        """Hard-delete an invitation. Requires member management on its album.

        Raises:
            InvitationNotFoundError: If the invitation does not exist.
            NotAMemberError / InsufficientPermissionsError: On failed authorization.
        """
        async with self._uow_factory() as uow:
            invitation = await uow.invitations.get_by_id(invitation_id)
            if not invitation:
                raise InvitationNotFoundError(str(invitation_id))

            await require_capability(uow, invitation.album_id, user_id, "can_manage_members")

            await uow.invitations.delete(invitation_id)
            await uow.commit()

        logger.info(
            "invitation_cancelled", invitation_id=str(invitation_id), cancelled_by=str(user_id)
        )

    async def decline_invitation(self, token: str, user_id: UUID, user_email: str) -> None:
        """Let the target of an active email invitation delete it.

        Raises:
            InvalidOrExpiredInvitationError: If the token is not an active email invitation.
            InvitationEmailMismatchError: If the caller is not the invitation's target.
        """
        async with self._uow_factory() as uow:
            invitation = await uow.invitations.get_active_by_token(token)
            if not invitation or invitation.is_shareable:
                raise InvalidOrExpiredInvitationError()

            if normalize_email(user_email) != normalize_email(invitation.email):
                raise InvitationEmailMismatchError()

            await uow.invitations.delete(invitation.id)
            await uow.commit()

        logger.info(
            "invitation_declined", invitation_id=str(invitation.id), user_id=str(user_id)
        )

    async def revoke_shareable_invitation(self, invitation_id: UUID, user_id: UUID) -> Invitation:
        """Expire a shareable invitation immediately, keeping the row. Admins only.

        Raises:
            InvitationNotFoundError: If no shareable invitation has that ID.
            NotAMemberError / InsufficientPermissionsError: If the caller is not an admin.
        """
        async with self._uow_factory() as uow:
            invitation = await uow.invitations.get_by_id(invitation_id)
            if not invitation or not invitation.is_shareable:
                raise InvitationNotFoundError(str(invitation_id))

            await require_admin(uow, invitation.album_id, user_id)

            revoked = await uow.invitations.expire_now(invitation_id)
            await uow.commit()

        logger.info(
            "shareable_invitation_revoked",
            invitation_id=str(invitation_id),
            revoked_by=str(user_id),
        )
        return revoked

    # --- Internal helpers ---

    async def _issue_email_invitation(
        self,
        uow: IUnitOfWork,
        album: Album,
        user_id: UUID,
        email: str,
        role: AlbumRole,
    ) -> Invitation:
        """Validate and insert an email invitation. ``album.members`` must be loaded."""
        normalized = normalize_email(email)
        if not normalized:
            raise InvalidInputError("Email is required", field="email")

        existing_profile = await uow.profiles.get_by_email(normalized)
        if existing_profile and resolve_role(album, existing_profile.id) is not None:
            raise AlreadyAMemberError(str(existing_profile.id))

        existing = await uow.invitations.get_active_email_invitation(album.id, normalized)
        if existing:
            raise DuplicateInvitationError(normalized)

        invitation = Invitation(
            album_id=album.id,
            invited_by=user_id,
            role=role,
            token=self._generate_token(),
            email=normalized,
            expires_at=datetime.utcnow() + timedelta(days=EMAIL_INVITATION_EXPIRY_DAYS),
        )
        return await uow.invitations.create(invitation)  # type: ignore[no-any-return]

    async def _send_notice(
        self,
        invitation: Invitation,
        album_name: str,
        inviter_name: str | None,
    ) -> None:
        """Best-effort invitation notice. Failures are logged, never raised."""
        if not self._notifier:
            return

        notice = InvitationNotice(
            recipient_email=invitation.email,
            inviter_name=inviter_name or "Someone",
            album_name=album_name,
            role=invitation.role,
            accept_url=self.accept_url(invitation.token),
        )
        try:
            await self._notifier.send_invitation_notice(notice)
        except Exception:
            logger.exception(
                "invitation_notice_failed",
                invitation_id=str(invitation.id),
                to_email=invitation.email,
            )

    def accept_url(self, token: str) -> str:
        """Build the link a recipient follows to accept an invitation."""
        return f"{self._app_base_url}/invite/accept/{token}"

    @staticmethod
    def _generate_token() -> str:
        """Generate an unguessable invitation token."""
        return secrets.token_urlsafe(32)

