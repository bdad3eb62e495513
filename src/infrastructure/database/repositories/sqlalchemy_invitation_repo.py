"""SQLAlchemy implementation of Invitation repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.album import AlbumRole
from domain.entities.invitation import Invitation
from infrastructure.database.models import InvitationModel


def _active_filter(now: datetime) -> tuple:
    """WHERE clauses for an invitation that is still usable."""
    return (
        InvitationModel.used_at.is_(None),
        InvitationModel.expires_at > now,
    )


class SQLAlchemyInvitationRepository:
    """SQLAlchemy implementation of IInvitationRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, invitation: Invitation) -> Invitation:
        """Create a new invitation."""
        model = self._to_model(invitation)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def get_by_id(self, id: UUID) -> Invitation | None:
        """Get an invitation by its primary key, regardless of state."""
        stmt = select(InvitationModel).where(InvitationModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_active_by_token(self, token: str) -> Invitation | None:
        """Get an unused, unexpired invitation by token."""
        stmt = select(InvitationModel).where(
            InvitationModel.token == token,
            *_active_filter(datetime.utcnow()),
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_active_email_invitation(
        self, album_id: UUID, email: str
    ) -> Invitation | None:
        """Get an active email invitation for a specific album and email."""
        stmt = (
            select(InvitationModel)
            .where(
                InvitationModel.album_id == album_id,
                InvitationModel.is_shareable.is_(False),
                InvitationModel.email == email,
                *_active_filter(datetime.utcnow()),
            )
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_active_for_album(
        self, album_id: UUID, shareable: bool
    ) -> list[Invitation]:
        """Get active email or shareable invitations for an album, newest first."""
        stmt = (
            select(InvitationModel)
            .where(
                InvitationModel.album_id == album_id,
                InvitationModel.is_shareable.is_(shareable),
                *_active_filter(datetime.utcnow()),
            )
            .order_by(InvitationModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_active_for_email(self, email: str) -> list[Invitation]:
        """Get active email invitations addressed to an email."""
        stmt = (
            select(InvitationModel)
            .where(
                InvitationModel.email == email,
                InvitationModel.is_shareable.is_(False),
                *_active_filter(datetime.utcnow()),
            )
            .order_by(InvitationModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def count_active_shareable(self, album_id: UUID) -> int:
        """Count active shareable invitations for an album."""
        stmt = (
            select(func.count())
            .select_from(InvitationModel)
            .where(
                InvitationModel.album_id == album_id,
                InvitationModel.is_shareable.is_(True),
                *_active_filter(datetime.utcnow()),
            )
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def try_increment_uses(self, id: UUID) -> bool:
        """Atomically consume one use of an active shareable invitation.

        A single conditional UPDATE: concurrent callers serialize on the row
        lock and re-check the guard, so uses_count never passes max_uses.
        """
        stmt = (
            update(InvitationModel)
            .where(
                InvitationModel.id == id,
                InvitationModel.is_shareable.is_(True),
                *_active_filter(datetime.utcnow()),
                or_(
                    InvitationModel.max_uses.is_(None),
                    InvitationModel.uses_count < InvitationModel.max_uses,
                ),
            )
            .values(uses_count=InvitationModel.uses_count + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1  # type: ignore[attr-defined, no-any-return]

    async def try_mark_used(self, id: UUID) -> bool:
        """Atomically set used_at on an active email invitation."""
        now = datetime.utcnow()
        stmt = (
            update(InvitationModel)
            .where(
                InvitationModel.id == id,
                InvitationModel.is_shareable.is_(False),
                *_active_filter(now),
            )
            .values(used_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1  # type: ignore[attr-defined, no-any-return]

    async def expire_now(self, id: UUID) -> Invitation:
        """Set expires_at to now (soft revoke). Already expired rows keep their expiry."""
        stmt = select(InvitationModel).where(InvitationModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Invitation {id} not found")

        now = datetime.utcnow()
        if model.expires_at > now:
            model.expires_at = now
            await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete an invitation."""
        stmt = select(InvitationModel).where(InvitationModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    def _to_entity(self, model: InvitationModel) -> Invitation:
        """Convert ORM model to domain entity."""
        return Invitation(
            id=model.id,
            album_id=model.album_id,
            email=model.email,
            role=AlbumRole(model.role),
            token=model.token,
            invited_by=model.invited_by,
            is_shareable=model.is_shareable,
            max_uses=model.max_uses,
            uses_count=model.uses_count,
            created_at=model.created_at,
            expires_at=model.expires_at,
            used_at=model.used_at,
        )

    def _to_model(self, entity: Invitation) -> InvitationModel:
        """Convert domain entity to ORM model."""
        return InvitationModel(
            id=entity.id,
            album_id=entity.album_id,
            email=entity.email,
            role=entity.role.value,
            token=entity.token,
            invited_by=entity.invited_by,
            is_shareable=entity.is_shareable,
            max_uses=entity.max_uses,
            uses_count=entity.uses_count,
            created_at=entity.created_at,
            expires_at=entity.expires_at,
            used_at=entity.used_at,
        )
