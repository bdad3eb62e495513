"""Invitation API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser, InitializedUser
from api.v1.dependencies import get_invitation_service
from api.v1.schemas.common import ErrorResponse
from api.v1.schemas.invitation import (
    AcceptInvitationResponse,
    CreateInvitationRequest,
    CreateShareableInvitationRequest,
    InvitationCreatedResponse,
    InvitationListResponse,
    InvitationPreviewResponse,
    InvitationResponse,
)
from core.rate_limit import ACCEPT_RATE_LIMIT, INVITE_RATE_LIMIT, limiter
from domain.entities.invitation import Invitation
from domain.services.invitation_service import InvitationService

# Album-scoped invitation routes
album_invitations_router = APIRouter(
    prefix="/albums/{album_id}",
    tags=["invitations"],
)

# Token-scoped invitation routes (preview, accept, decline, pending)
invitations_router = APIRouter(
    prefix="/invitations",
    tags=["invitations"],
)


def _created(invitation: Invitation, service: InvitationService) -> InvitationCreatedResponse:
    return InvitationCreatedResponse(
        data=InvitationResponse.from_entity(invitation),
        token=invitation.token,
        accept_url=service.accept_url(invitation.token),
    )


def _listed(invitations: list[Invitation]) -> InvitationListResponse:
    data = [InvitationResponse.from_entity(inv) for inv in invitations]
    return InvitationListResponse(data=data, meta={"total": len(data)})


@album_invitations_router.post(
    "/invitations",
    response_model=InvitationCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Invite an email address",
    responses={
        201: {"description": "Invitation created, notice sent best-effort"},
        403: {"description": "Not a member, or cannot invite members"},
        404: {"description": "Album not found"},
        409: {"description": "Duplicate invitation or already a member"},
    },
)
@limiter.limit(INVITE_RATE_LIMIT)  # type: ignore[untyped-decorator]
async def create_email_invitation(
    request: Request,
    album_id: UUID,
    body: CreateInvitationRequest,
    user: InitializedUser,
    service: InvitationService = Depends(get_invitation_service),
) -> InvitationCreatedResponse:
    """Invite one email address to the album with a pre-assigned role."""
    invitation = await service.create_email_invitation(
        album_id=album_id,
        user_id=user.id,
        email=body.email,
        role=body.role,
    )
    return _created(invitation, service)


@album_invitations_router.get(
    "/invitations",
    response_model=InvitationListResponse,
    summary="List pending email invitations",
    responses={
        403: {"description": "Requires member management permission"},
        404: {"description": "Album not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_email_invitations(
    request: Request,
    album_id: UUID,
    user: CurrentUser,
    service: InvitationService = Depends(get_invitation_service),
) -> InvitationListResponse:
    """List active email invitations for an album."""
    return _listed(await service.get_email_invitations(album_id, user.id))


@album_invitations_router.post(
    "/invitations/shareable",
    response_model=InvitationCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a shareable invitation link",
    responses={
        201: {"description": "Shareable link created"},
        403: {"description": "Admins only"},
        404: {"description": "Album not found"},
        429: {"description": "Too many active shareable links"},
    },
)
@limiter.limit(INVITE_RATE_LIMIT)  # type: ignore[untyped-decorator]
async def create_shareable_invitation(
    request: Request,
    album_id: UUID,
    body: CreateShareableInvitationRequest,
    user: InitializedUser,
    service: InvitationService = Depends(get_invitation_service),
) -> InvitationCreatedResponse:
    """Create a multi-use invitation link for the album."""
    invitation = await service.create_shareable_invitation(
        album_id=album_id,
        user_id=user.id,
        role=body.role,
        max_uses=body.max_uses,
    )
    return _created(invitation, service)


@album_invitations_router.get(
    "/invitations/shareable",
    response_model=InvitationListResponse,
    summary="List active shareable links",
    responses={403: {"description": "Admins only"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_shareable_invitations(
    request: Request,
    album_id: UUID,
    user: CurrentUser,
    service: InvitationService = Depends(get_invitation_service),
) -> InvitationListResponse:
    """List active shareable invitations for an album."""
    return _listed(await service.get_shareable_invitations(album_id, user.id))


@album_invitations_router.post(
    "/join",
    response_model=InvitationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Request to join a public album",
    responses={
        404: {"description": "Album not found or not public"},
        409: {"description": "Already a member or request already pending"},
    },
)
@limiter.limit(INVITE_RATE_LIMIT)  # type: ignore[untyped-decorator]
async def request_to_join(
    request: Request,
    album_id: UUID,
    user: InitializedUser,
    service: InvitationService = Depends(get_invitation_service),
) -> InvitationResponse:
    """Create a viewer invitation addressed to the caller for a public album."""
    invitation = await service.request_to_join(album_id, user.id, user.email)
    return InvitationResponse.from_entity(invitation)


# --- Token-scoped routes ---


@invitations_router.get(
    "/pending",
    response_model=InvitationListResponse,
    summary="Get pending invitations",
    responses={200: {"description": "Active email invitations for the caller's email"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_pending_invitations(
    request: Request,
    user: CurrentUser,
    service: InvitationService = Depends(get_invitation_service),
) -> InvitationListResponse:
    """Get all pending invitations for the current user's email."""
    return _listed(await service.get_user_pending_invitations(user.email))


@invitations_router.get(
    "/{token}",
    response_model=InvitationPreviewResponse,
    summary="Preview an invitation",
    responses={410: {"model": ErrorResponse, "description": "Invalid or expired invitation"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def preview_invitation(
    request: Request,
    token: str,
    service: InvitationService = Depends(get_invitation_service),
) -> InvitationPreviewResponse:
    """Show album name, role and inviter for an active invitation token."""
    invitation, album, inviter_name = await service.get_invitation_details(token)
    return InvitationPreviewResponse(
        album_id=album.id,
        album_name=album.name,
        album_description=album.description,
        role=invitation.role,
        inviter_name=inviter_name,
        is_shareable=invitation.is_shareable,
        email=invitation.email,
        expires_at=invitation.expires_at,
    )


@invitations_router.post(
    "/{token}/accept",
    response_model=AcceptInvitationResponse,
    summary="Accept invitation",
    responses={
        200: {"description": "Invitation accepted, caller added to album"},
        403: {"model": ErrorResponse, "description": "Email mismatch"},
        409: {"model": ErrorResponse, "description": "Already a member"},
        410: {"model": ErrorResponse, "description": "Invalid, expired, or exhausted invitation"},
    },
)
@limiter.limit(ACCEPT_RATE_LIMIT)  # type: ignore[untyped-decorator]
async def accept_invitation(
    request: Request,
    token: str,
    user: InitializedUser,
    service: InvitationService = Depends(get_invitation_service),
) -> AcceptInvitationResponse:
    """Accept an email or shareable invitation by token."""
    member = await service.accept_invitation(
        token=token,
        user_id=user.id,
        user_email=user.email,
    )
    return AcceptInvitationResponse(
        album_id=member.album_id,
        member_id=member.id,
        role=member.role,
    )


@invitations_router.post(
    "/{token}/decline",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Decline invitation",
    responses={
        403: {"description": "Invitation is for a different email"},
        410: {"description": "Invalid or expired invitation"},
    },
)
@limiter.limit(ACCEPT_RATE_LIMIT)  # type: ignore[untyped-decorator]
async def decline_invitation(
    request: Request,
    token: str,
    user: CurrentUser,
    service: InvitationService = Depends(get_invitation_service),
) -> None:
    """Delete a pending email invitation addressed to the caller."""
    await service.decline_invitation(token, user.id, user.email)
    return None


@invitations_router.delete(
    "/{invitation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Cancel invitation",
    responses={
        204: {"description": "Invitation deleted"},
        403: {"description": "Requires member management permission"},
        404: {"description": "Invitation not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def cancel_invitation(
    request: Request,
    invitation_id: UUID,
    user: CurrentUser,
    service: InvitationService = Depends(get_invitation_service),
) -> None:
    """Hard-delete an invitation of either kind."""
    await service.cancel_invitation(invitation_id, user.id)
    return None


@invitations_router.post(
    "/{invitation_id}/revoke",
    response_model=InvitationResponse,
    summary="Revoke shareable invitation",
    responses={
        403: {"description": "Admins only"},
        404: {"description": "Shareable invitation not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def revoke_shareable_invitation(
    request: Request,
    invitation_id: UUID,
    user: CurrentUser,
    service: InvitationService = Depends(get_invitation_service),
) -> InvitationResponse:
    """Expire a shareable link immediately, keeping its history."""
    invitation = await service.revoke_shareable_invitation(invitation_id, user.id)
    return InvitationResponse.from_entity(invitation)
