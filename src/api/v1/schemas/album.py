"""Pydantic schemas for Album API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.album import Album, AlbumMember, AlbumPrivacy, AlbumRole


class AlbumCreate(BaseModel):
    """Schema for creating an album."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    privacy_level: AlbumPrivacy = AlbumPrivacy.PRIVATE


class AlbumUpdate(BaseModel):
    """Schema for updating an album. All fields optional."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    privacy_level: AlbumPrivacy | None = None


class AlbumResponse(BaseModel):
    """Schema for Album response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "name": "Summer 2026",
                "description": "Lake house trip",
                "created_by": "789e4567-e89b-12d3-a456-426614174000",
                "privacy_level": "private",
                "created_at": "2026-06-01T10:00:00",
                "updated_at": "2026-06-01T10:00:00",
            }
        },
    )

    id: UUID
    name: str
    description: str | None = None
    created_by: UUID
    privacy_level: AlbumPrivacy
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, album: Album) -> "AlbumResponse":
        return cls(
            id=album.id,
            name=album.name,
            description=album.description,
            created_by=album.created_by,
            privacy_level=album.privacy_level,
            created_at=album.created_at,
            updated_at=album.updated_at,
        )


class AlbumDetailResponse(BaseModel):
    """Schema for single album response."""

    data: AlbumResponse


class AlbumListResponse(BaseModel):
    """Schema for list of Albums response."""

    data: list[AlbumResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class AlbumAccessResponse(BaseModel):
    """Caller's effective role and capabilities on an album."""

    album_id: UUID
    role: AlbumRole | None = None
    capabilities: dict[str, bool]


# --- Members ---


class AddMemberRequest(BaseModel):
    """Schema for adding a user to an album directly."""

    user_id: UUID
    role: AlbumRole = AlbumRole.VIEWER


class UpdateMemberRoleRequest(BaseModel):
    """Schema for changing a member's role."""

    role: AlbumRole


class AlbumMemberResponse(BaseModel):
    """Schema for Album member response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    album_id: UUID
    user_id: UUID
    role: AlbumRole
    joined_at: datetime

    @classmethod
    def from_entity(cls, member: AlbumMember) -> "AlbumMemberResponse":
        return cls(
            id=member.id,
            album_id=member.album_id,
            user_id=member.user_id,
            role=member.role,
            joined_at=member.joined_at,
        )


class AlbumMemberListResponse(BaseModel):
    """Schema for list of Album members response."""

    data: list[AlbumMemberResponse]
    meta: dict[str, Any] = Field(default_factory=dict)
