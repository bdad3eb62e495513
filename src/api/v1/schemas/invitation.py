"""Pydantic schemas for Invitation API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from domain.entities.album import AlbumRole
from domain.entities.invitation import Invitation, InvitationStatus


class CreateInvitationRequest(BaseModel):
    """Schema for inviting an email address to an album."""

    email: str = Field(..., min_length=3, max_length=255)
    role: AlbumRole = AlbumRole.VIEWER

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Basic email validation."""
        v = v.strip().lower()
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Invalid email address")
        return v


class CreateShareableInvitationRequest(BaseModel):
    """Schema for creating a shareable invitation link."""

    role: AlbumRole = AlbumRole.VIEWER
    max_uses: int | None = Field(None, ge=1, description="Omit for unlimited uses")


class InvitationResponse(BaseModel):
    """Schema for Invitation response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "album_id": "456e4567-e89b-12d3-a456-426614174000",
                "email": "user@example.com",
                "role": "contributor",
                "status": "pending",
                "is_shareable": False,
                "invited_by": "789e4567-e89b-12d3-a456-426614174000",
                "created_at": "2026-02-01T10:00:00",
                "expires_at": "2026-02-08T10:00:00",
            }
        },
    )

    id: UUID
    album_id: UUID
    email: str
    role: AlbumRole
    status: InvitationStatus
    is_shareable: bool
    max_uses: int | None = None
    uses_count: int = 0
    invited_by: UUID
    created_at: datetime
    expires_at: datetime
    used_at: datetime | None = None

    @classmethod
    def from_entity(cls, invitation: Invitation) -> "InvitationResponse":
        return cls(
            id=invitation.id,
            album_id=invitation.album_id,
            email=invitation.email,
            role=invitation.role,
            status=invitation.status,
            is_shareable=invitation.is_shareable,
            max_uses=invitation.max_uses,
            uses_count=invitation.uses_count,
            invited_by=invitation.invited_by,
            created_at=invitation.created_at,
            expires_at=invitation.expires_at,
            used_at=invitation.used_at,
        )


class InvitationListResponse(BaseModel):
    """Schema for list of Invitations response."""

    data: list[InvitationResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class InvitationCreatedResponse(BaseModel):
    """Schema for invitation creation response (includes token and link)."""

    data: InvitationResponse
    token: str
    accept_url: str


class InvitationPreviewResponse(BaseModel):
    """What an invitee sees before accepting."""

    album_id: UUID
    album_name: str
    album_description: str | None = None
    role: AlbumRole
    inviter_name: str | None = None
    is_shareable: bool
    email: str
    expires_at: datetime


class AcceptInvitationResponse(BaseModel):
    """Schema for accepting an invitation response."""

    album_id: UUID
    member_id: UUID
    role: AlbumRole
    message: str = "Invitation accepted successfully"
