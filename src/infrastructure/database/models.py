"""SQLAlchemy ORM models."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class ProfileModel(Base):
    """User profile model (synced from the identity provider)."""

    __tablename__ = "profiles"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    full_name: Mapped[str | None] = mapped_column(String(100))
    avatar_url: Mapped[str | None] = mapped_column(String(500))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    # Relationships
    album_memberships: Mapped[list["AlbumMemberModel"]] = relationship(
        "AlbumMemberModel",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    created_albums: Mapped[list["AlbumModel"]] = relationship(
        "AlbumModel",
        back_populates="creator",
        foreign_keys="AlbumModel.created_by",
    )


class AlbumModel(Base):
    """Album model."""

    __tablename__ = "albums"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    created_by: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    privacy_level: Mapped[str] = mapped_column(
        String(20),
        CheckConstraint(
            "privacy_level IN ('private', 'public')",
            name="ck_albums_privacy_level",
        ),
        nullable=False,
        default="private",
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    # Relationships
    creator: Mapped["ProfileModel"] = relationship(
        "ProfileModel",
        back_populates="created_albums",
        foreign_keys=[created_by],
    )
    members: Mapped[list["AlbumMemberModel"]] = relationship(
        "AlbumMemberModel",
        back_populates="album",
        cascade="all, delete-orphan",
    )
    invitations: Mapped[list["InvitationModel"]] = relationship(
        "InvitationModel",
        back_populates="album",
        cascade="all, delete-orphan",
    )


class AlbumMemberModel(Base):
    """Album membership model (one row per album/user pair)."""

    __tablename__ = "album_members"
    __table_args__ = (UniqueConstraint("album_id", "user_id", name="uq_album_members_album_user"),)

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    album_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("albums.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[str] = mapped_column(
        String(20),
        CheckConstraint(
            "role IN ('admin', 'contributor', 'viewer')",
            name="ck_album_members_role",
        ),
        nullable=False,
        default="viewer",
    )
    joined_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    album: Mapped["AlbumModel"] = relationship(
        "AlbumModel",
        back_populates="members",
    )
    user: Mapped["ProfileModel"] = relationship(
        "ProfileModel",
        back_populates="album_memberships",
    )


class InvitationModel(Base):
    """Album invitation model (email and shareable variants)."""

    __tablename__ = "album_invitations"
    __table_args__ = (
        CheckConstraint(
            "max_uses IS NULL OR uses_count <= max_uses",
            name="ck_album_invitations_uses_within_max",
        ),
        CheckConstraint(
            "max_uses IS NULL OR max_uses > 0",
            name="ck_album_invitations_max_uses_positive",
        ),
        Index(
            "ix_album_invitations_active",
            "album_id",
            "is_shareable",
            "used_at",
            "expires_at",
        ),
        Index("ix_album_invitations_email", "email"),
    )

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    album_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("albums.id", ondelete="CASCADE"),
        nullable=False,
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    role: Mapped[str] = mapped_column(
        String(20),
        CheckConstraint(
            "role IN ('admin', 'contributor', 'viewer')",
            name="ck_album_invitations_role",
        ),
        nullable=False,
        default="viewer",
    )
    token: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    invited_by: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    is_shareable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    max_uses: Mapped[int | None] = mapped_column(Integer)
    uses_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    used_at: Mapped[datetime | None] = mapped_column(DateTime)

    # Relationships
    album: Mapped["AlbumModel"] = relationship("AlbumModel", back_populates="invitations")
    inviter: Mapped["ProfileModel"] = relationship("ProfileModel")
