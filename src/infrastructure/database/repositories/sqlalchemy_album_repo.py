"""SQLAlchemy implementation of Album repository."""

from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from domain.entities.album import Album, AlbumMember, AlbumPrivacy, AlbumRole
from infrastructure.database.models import AlbumMemberModel, AlbumModel


class SQLAlchemyAlbumRepository:
    """SQLAlchemy implementation of IAlbumRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Album | None:
        """Get an album by ID (members not loaded)."""
        stmt = select(AlbumModel).where(AlbumModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_with_members(self, id: UUID) -> Album | None:
        """Get an album by ID with its membership list loaded."""
        stmt = (
            select(AlbumModel)
            .where(AlbumModel.id == id)
            .options(selectinload(AlbumModel.members))
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if not model:
            return None
        album = self._to_entity(model)
        album.members = [self._member_to_entity(m) for m in model.members]
        return album

    async def get_all_for_user(self, user_id: UUID) -> list[Album]:
        """Get all albums a user created or is a member of."""
        member_album_ids = select(AlbumMemberModel.album_id).where(
            AlbumMemberModel.user_id == user_id
        )
        stmt = (
            select(AlbumModel)
            .where(
                or_(
                    AlbumModel.created_by == user_id,
                    AlbumModel.id.in_(member_album_ids),
                )
            )
            .order_by(AlbumModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_public(self) -> list[Album]:
        """Get all public albums."""
        stmt = (
            select(AlbumModel)
            .where(AlbumModel.privacy_level == AlbumPrivacy.PUBLIC.value)
            .order_by(AlbumModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, album: Album) -> Album:
        """Create a new album."""
        model = self._to_model(album)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, album: Album) -> Album:
        """Update an existing album."""
        stmt = select(AlbumModel).where(AlbumModel.id == album.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Album {album.id} not found")

        model.name = album.name
        model.description = album.description
        model.privacy_level = album.privacy_level.value
        model.updated_at = album.updated_at

        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete an album (cascade deletes members and invitations)."""
        stmt = select(AlbumModel).where(AlbumModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    async def get_member(self, album_id: UUID, user_id: UUID) -> AlbumMember | None:
        """Get a membership by album and user IDs."""
        stmt = select(AlbumMemberModel).where(
            AlbumMemberModel.album_id == album_id,
            AlbumMemberModel.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._member_to_entity(model) if model else None

    async def get_member_by_id(self, member_id: UUID) -> AlbumMember | None:
        """Get a membership by its row ID."""
        stmt = select(AlbumMemberModel).where(AlbumMemberModel.id == member_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._member_to_entity(model) if model else None

    async def get_members(self, album_id: UUID) -> list[AlbumMember]:
        """Get all members of an album, oldest first."""
        stmt = (
            select(AlbumMemberModel)
            .where(AlbumMemberModel.album_id == album_id)
            .order_by(AlbumMemberModel.joined_at)
        )
        result = await self._session.execute(stmt)
        return [self._member_to_entity(model) for model in result.scalars()]

    async def add_member(self, member: AlbumMember) -> AlbumMember:
        """Insert a membership. The (album, user) unique constraint rejects duplicates."""
        model = self._member_to_model(member)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._member_to_entity(model)

    async def update_member_role(self, member_id: UUID, role: AlbumRole) -> AlbumMember:
        """Change a member's role."""
        stmt = select(AlbumMemberModel).where(AlbumMemberModel.id == member_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError("Member not found in album")

        model.role = role.value
        await self._session.flush()
        return self._member_to_entity(model)

    async def remove_member(self, member_id: UUID) -> bool:
        """Delete a membership row."""
        stmt = select(AlbumMemberModel).where(AlbumMemberModel.id == member_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    def _to_entity(self, model: AlbumModel) -> Album:
        """Convert ORM model to domain entity."""
        return Album(
            id=model.id,
            name=model.name,
            description=model.description,
            created_by=model.created_by,
            privacy_level=AlbumPrivacy(model.privacy_level),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Album) -> AlbumModel:
        """Convert domain entity to ORM model."""
        return AlbumModel(
            id=entity.id,
            name=entity.name,
            description=entity.description,
            created_by=entity.created_by,
            privacy_level=entity.privacy_level.value,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    def _member_to_entity(self, model: AlbumMemberModel) -> AlbumMember:
        """Convert member ORM model to domain entity."""
        return AlbumMember(
            id=model.id,
            album_id=model.album_id,
            user_id=model.user_id,
            role=AlbumRole(model.role),
            joined_at=model.joined_at,
        )

    def _member_to_model(self, entity: AlbumMember) -> AlbumMemberModel:
        """Convert member domain entity to ORM model."""
        return AlbumMemberModel(
            id=entity.id,
            album_id=entity.album_id,
            user_id=entity.user_id,
            role=entity.role.value,
            joined_at=entity.joined_at,
        )
