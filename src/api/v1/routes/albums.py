"""Album and membership API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser, InitializedUser
from api.v1.dependencies import get_album_service, get_membership_service
from api.v1.schemas.album import (
    AddMemberRequest,
    AlbumAccessResponse,
    AlbumCreate,
    AlbumDetailResponse,
    AlbumListResponse,
    AlbumMemberListResponse,
    AlbumMemberResponse,
    AlbumResponse,
    AlbumUpdate,
    UpdateMemberRoleRequest,
)
from core.rate_limit import limiter
from domain.services.album_service import AlbumService
from domain.services.membership_service import MembershipService

router = APIRouter(prefix="/albums", tags=["albums"])


@router.get(
    "",
    response_model=AlbumListResponse,
    summary="List user's albums",
    responses={200: {"description": "Albums the user created or belongs to"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_albums(
    request: Request,
    user: CurrentUser,
    service: AlbumService = Depends(get_album_service),
) -> AlbumListResponse:
    """Get all albums the authenticated user created or is a member of."""
    albums = await service.get_all_for_user(user.id)
    data = [AlbumResponse.from_entity(a) for a in albums]
    return AlbumListResponse(data=data, meta={"total": len(data)})


@router.get(
    "/public",
    response_model=AlbumListResponse,
    summary="List public albums",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_public_albums(
    request: Request,
    user: CurrentUser,
    service: AlbumService = Depends(get_album_service),
) -> AlbumListResponse:
    """Get all public albums (candidates for a join request)."""
    albums = await service.get_public()
    data = [AlbumResponse.from_entity(a) for a in albums]
    return AlbumListResponse(data=data, meta={"total": len(data)})


@router.post(
    "",
    response_model=AlbumDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an album",
    responses={201: {"description": "Album created, caller is admin"}},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_album(
    request: Request,
    body: AlbumCreate,
    user: InitializedUser,
    service: AlbumService = Depends(get_album_service),
) -> AlbumDetailResponse:
    """Create an album. The caller becomes its creator and admin."""
    album = await service.create(
        user_id=user.id,
        name=body.name,
        description=body.description,
        privacy_level=body.privacy_level,
    )
    return AlbumDetailResponse(data=AlbumResponse.from_entity(album))


@router.get(
    "/{album_id}",
    response_model=AlbumDetailResponse,
    summary="Get an album",
    responses={
        403: {"description": "Private album and caller is not a member"},
        404: {"description": "Album not found"},
    },
)
@limiter.limit("60/minute")  # type: ignore[untyped-decorator]
async def get_album(
    request: Request,
    album_id: UUID,
    user: CurrentUser,
    service: AlbumService = Depends(get_album_service),
) -> AlbumDetailResponse:
    """Get an album. Public albums are visible to any authenticated user."""
    album = await service.get_by_id(album_id, user.id)
    return AlbumDetailResponse(data=AlbumResponse.from_entity(album))


@router.patch(
    "/{album_id}",
    response_model=AlbumDetailResponse,
    summary="Update an album",
    responses={
        403: {"description": "Requires edit permission"},
        404: {"description": "Album not found"},
    },
)
@limiter.limit("20/minute")  # type: ignore[untyped-decorator]
async def update_album(
    request: Request,
    album_id: UUID,
    body: AlbumUpdate,
    user: CurrentUser,
    service: AlbumService = Depends(get_album_service),
) -> AlbumDetailResponse:
    """Update album name, description or privacy level."""
    album = await service.update(
        album_id=album_id,
        user_id=user.id,
        name=body.name,
        description=body.description,
        privacy_level=body.privacy_level,
    )
    return AlbumDetailResponse(data=AlbumResponse.from_entity(album))


@router.delete(
    "/{album_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an album",
    responses={
        204: {"description": "Album, memberships and invitations deleted"},
        403: {"description": "Requires delete permission"},
        404: {"description": "Album not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def delete_album(
    request: Request,
    album_id: UUID,
    user: CurrentUser,
    service: AlbumService = Depends(get_album_service),
) -> None:
    """Delete an album and everything scoped to it."""
    await service.delete(album_id, user.id)
    return None


@router.get(
    "/{album_id}/access",
    response_model=AlbumAccessResponse,
    summary="Resolve caller's role and capabilities",
    responses={404: {"description": "Album not found"}},
)
@limiter.limit("60/minute")  # type: ignore[untyped-decorator]
async def get_album_access(
    request: Request,
    album_id: UUID,
    user: CurrentUser,
    service: AlbumService = Depends(get_album_service),
) -> AlbumAccessResponse:
    """Get the caller's effective role and capability flags on an album."""
    access = await service.get_access(album_id, user.id)
    return AlbumAccessResponse(
        album_id=access.album_id,
        role=access.role,
        capabilities=access.capabilities.as_dict(),
    )


# --- Members ---


@router.get(
    "/{album_id}/members",
    response_model=AlbumMemberListResponse,
    summary="List album members",
    responses={
        403: {"description": "Not a member"},
        404: {"description": "Album not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_members(
    request: Request,
    album_id: UUID,
    user: CurrentUser,
    service: MembershipService = Depends(get_membership_service),
) -> AlbumMemberListResponse:
    """Get all members of an album."""
    members = await service.get_members(album_id, user.id)
    data = [AlbumMemberResponse.from_entity(m) for m in members]
    return AlbumMemberListResponse(data=data, meta={"total": len(data)})


@router.post(
    "/{album_id}/members",
    response_model=AlbumMemberResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a member directly",
    responses={
        403: {"description": "Requires member management permission"},
        404: {"description": "Album or user not found"},
        409: {"description": "Already a member"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def add_member(
    request: Request,
    album_id: UUID,
    body: AddMemberRequest,
    user: CurrentUser,
    service: MembershipService = Depends(get_membership_service),
) -> AlbumMemberResponse:
    """Add an existing user to an album without an invitation."""
    member = await service.add_member(
        album_id=album_id,
        user_id=user.id,
        target_user_id=body.user_id,
        role=body.role,
    )
    return AlbumMemberResponse.from_entity(member)


@router.patch(
    "/members/{member_id}",
    response_model=AlbumMemberResponse,
    summary="Change a member's role",
    responses={
        403: {"description": "Requires member management; creator and self are protected"},
        404: {"description": "Member not found"},
    },
)
@limiter.limit("20/minute")  # type: ignore[untyped-decorator]
async def update_member_role(
    request: Request,
    member_id: UUID,
    body: UpdateMemberRoleRequest,
    user: CurrentUser,
    service: MembershipService = Depends(get_membership_service),
) -> AlbumMemberResponse:
    """Change the role of an album member."""
    member = await service.change_role(member_id, user.id, body.role)
    return AlbumMemberResponse.from_entity(member)


@router.delete(
    "/members/{member_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a member",
    responses={
        204: {"description": "Member removed"},
        403: {"description": "Requires member management; creator and self are protected"},
        404: {"description": "Member not found"},
    },
)
@limiter.limit("20/minute")  # type: ignore[untyped-decorator]
async def remove_member(
    request: Request,
    member_id: UUID,
    user: CurrentUser,
    service: MembershipService = Depends(get_membership_service),
) -> None:
    """Remove a member from an album."""
    await service.remove_member(member_id, user.id)
    return None
