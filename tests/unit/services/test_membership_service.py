"""Unit tests for MembershipService."""

from uuid import UUID, uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from core.exceptions import (
    AlbumNotFoundError,
    AlreadyAMemberError,
    InsufficientPermissionsError,
    MemberNotFoundError,
    NotAMemberError,
    ProfileNotFoundError,
)
from domain.entities.album import Album, AlbumMember, AlbumRole
from domain.entities.profile import Profile
from domain.services.membership_service import MembershipService
from tests.unit.conftest import FakeUnitOfWork, make_album


@pytest.fixture
def service(uow: FakeUnitOfWork) -> MembershipService:
    return MembershipService(lambda: uow)


@pytest.fixture
def album(user_id: UUID, album_id: UUID) -> Album:
    return make_album(user_id, album_id=album_id)


@pytest.fixture
def target(album: Album, uow: FakeUnitOfWork) -> AlbumMember:
    """A viewer on the album, looked up by member ID."""
    member = AlbumMember(album_id=album.id, user_id=uuid4(), role=AlbumRole.VIEWER)
    album.members.append(member)
    uow.albums.get_with_members.return_value = album
    uow.albums.get_member_by_id.return_value = member
    return member


class TestGetMembers:
    async def test_member_can_list(
        self, service: MembershipService, uow: FakeUnitOfWork, album: Album, target: AlbumMember
    ) -> None:
        uow.albums.get_members.return_value = [target]

        result = await service.get_members(album.id, target.user_id)

        assert result == [target]

    async def test_stranger_cannot_list(
        self, service: MembershipService, uow: FakeUnitOfWork, album: Album, actor_id: UUID
    ) -> None:
        uow.albums.get_with_members.return_value = album

        with pytest.raises(NotAMemberError):
            await service.get_members(album.id, actor_id)

    async def test_missing_album(
        self, service: MembershipService, uow: FakeUnitOfWork, album_id: UUID, user_id: UUID
    ) -> None:
        uow.albums.get_with_members.return_value = None

        with pytest.raises(AlbumNotFoundError):
            await service.get_members(album_id, user_id)


class TestAddMember:
    async def test_admin_adds_existing_user(
        self, service: MembershipService, uow: FakeUnitOfWork, album: Album, user_id: UUID
    ) -> None:
        new_user = uuid4()
        uow.albums.get_with_members.return_value = album
        uow.profiles.get.return_value = Profile(id=new_user, email="n@example.com")
        uow.albums.add_member.side_effect = lambda m: m

        member = await service.add_member(album.id, user_id, new_user, AlbumRole.CONTRIBUTOR)

        assert member.user_id == new_user
        assert member.role == AlbumRole.CONTRIBUTOR
        assert uow.committed

    async def test_already_member(
        self,
        service: MembershipService,
        uow: FakeUnitOfWork,
        album: Album,
        user_id: UUID,
        target: AlbumMember,
    ) -> None:
        with pytest.raises(AlreadyAMemberError):
            await service.add_member(album.id, user_id, target.user_id)

    async def test_creator_is_always_a_member(
        self, service: MembershipService, uow: FakeUnitOfWork, album: Album, user_id: UUID
    ) -> None:
        uow.albums.get_with_members.return_value = album

        with pytest.raises(AlreadyAMemberError):
            await service.add_member(album.id, user_id, user_id)

    async def test_unknown_user(
        self, service: MembershipService, uow: FakeUnitOfWork, album: Album, user_id: UUID
    ) -> None:
        uow.albums.get_with_members.return_value = album
        uow.profiles.get.return_value = None

        with pytest.raises(ProfileNotFoundError):
            await service.add_member(album.id, user_id, uuid4())

    async def test_race_with_acceptance_surfaces_as_already_member(
        self, service: MembershipService, uow: FakeUnitOfWork, album: Album, user_id: UUID
    ) -> None:
        uow.albums.get_with_members.return_value = album
        uow.profiles.get.return_value = Profile(id=uuid4(), email="n@example.com")
        uow.albums.add_member.side_effect = IntegrityError(
            "INSERT", {}, Exception("duplicate key value violates unique constraint")
        )

        with pytest.raises(AlreadyAMemberError):
            await service.add_member(album.id, user_id, uuid4())
        assert uow.rolled_back

    async def test_viewer_cannot_add(
        self, service: MembershipService, uow: FakeUnitOfWork, album: Album, target: AlbumMember
    ) -> None:
        with pytest.raises(InsufficientPermissionsError):
            await service.add_member(album.id, target.user_id, uuid4())


class TestChangeRole:
    async def test_admin_changes_role(
        self, service: MembershipService, uow: FakeUnitOfWork, user_id: UUID, target: AlbumMember
    ) -> None:
        uow.albums.update_member_role.return_value = AlbumMember(
            album_id=target.album_id, user_id=target.user_id, role=AlbumRole.CONTRIBUTOR, id=target.id
        )

        result = await service.change_role(target.id, user_id, AlbumRole.CONTRIBUTOR)

        assert result.role == AlbumRole.CONTRIBUTOR
        uow.albums.update_member_role.assert_awaited_once_with(target.id, AlbumRole.CONTRIBUTOR)
        assert uow.committed

    async def test_contributor_is_forbidden(
        self, service: MembershipService, uow: FakeUnitOfWork, album: Album, target: AlbumMember
    ) -> None:
        contributor = AlbumMember(album_id=album.id, user_id=uuid4(), role=AlbumRole.CONTRIBUTOR)
        album.members.append(contributor)

        with pytest.raises(InsufficientPermissionsError):
            await service.change_role(target.id, contributor.user_id, AlbumRole.ADMIN)
        uow.albums.update_member_role.assert_not_awaited()

    async def test_creator_row_is_protected(
        self, service: MembershipService, uow: FakeUnitOfWork, album: Album, user_id: UUID
    ) -> None:
        other_admin = AlbumMember(album_id=album.id, user_id=uuid4(), role=AlbumRole.ADMIN)
        creator_row = AlbumMember(album_id=album.id, user_id=user_id, role=AlbumRole.ADMIN)
        album.members.extend([other_admin, creator_row])
        uow.albums.get_with_members.return_value = album
        uow.albums.get_member_by_id.return_value = creator_row

        with pytest.raises(InsufficientPermissionsError):
            await service.change_role(creator_row.id, other_admin.user_id, AlbumRole.VIEWER)

    async def test_cannot_change_own_row(
        self, service: MembershipService, uow: FakeUnitOfWork, album: Album
    ) -> None:
        admin = AlbumMember(album_id=album.id, user_id=uuid4(), role=AlbumRole.ADMIN)
        album.members.append(admin)
        uow.albums.get_with_members.return_value = album
        uow.albums.get_member_by_id.return_value = admin

        with pytest.raises(InsufficientPermissionsError):
            await service.change_role(admin.id, admin.user_id, AlbumRole.VIEWER)

    async def test_member_not_found(
        self, service: MembershipService, uow: FakeUnitOfWork, user_id: UUID
    ) -> None:
        uow.albums.get_member_by_id.return_value = None

        with pytest.raises(MemberNotFoundError):
            await service.change_role(uuid4(), user_id, AlbumRole.VIEWER)


class TestRemoveMember:
    async def test_admin_removes(
        self, service: MembershipService, uow: FakeUnitOfWork, user_id: UUID, target: AlbumMember
    ) -> None:
        uow.albums.remove_member.return_value = True

        assert await service.remove_member(target.id, user_id) is True
        uow.albums.remove_member.assert_awaited_once_with(target.id)
        assert uow.committed

    async def test_stranger_is_not_a_member(
        self, service: MembershipService, uow: FakeUnitOfWork, target: AlbumMember
    ) -> None:
        with pytest.raises(NotAMemberError):
            await service.remove_member(target.id, uuid4())
        uow.albums.remove_member.assert_not_awaited()
