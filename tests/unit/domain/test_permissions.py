"""Unit tests for role resolution and the capability table."""

from datetime import datetime, timedelta
from uuid import uuid4

import pytest

from domain.entities.album import AlbumRole
from domain.entities.invitation import Invitation, InvitationStatus
from domain.entities.permissions import (
    NO_CAPABILITIES,
    Capabilities,
    get_capabilities,
    resolve_role,
)
from tests.unit.conftest import make_album

ALL_FALSE = {
    "can_invite_members": False,
    "can_manage_members": False,
    "can_edit_album": False,
    "can_delete_album": False,
    "can_create_posts": False,
    "can_delete_others_posts": False,
}


class TestGetCapabilities:
    def test_admin_has_everything(self) -> None:
        assert all(get_capabilities(AlbumRole.ADMIN).as_dict().values())

    def test_contributor_can_only_create_posts(self) -> None:
        assert get_capabilities(AlbumRole.CONTRIBUTOR).as_dict() == {
            **ALL_FALSE,
            "can_create_posts": True,
        }

    @pytest.mark.parametrize("role", [AlbumRole.VIEWER, None])
    def test_viewer_and_no_role_have_nothing(self, role: AlbumRole | None) -> None:
        assert get_capabilities(role).as_dict() == ALL_FALSE

    def test_is_deterministic(self) -> None:
        assert get_capabilities(AlbumRole.ADMIN) == get_capabilities(AlbumRole.ADMIN)
        assert get_capabilities(None) is NO_CAPABILITIES

    def test_capabilities_are_immutable(self) -> None:
        caps = get_capabilities(AlbumRole.VIEWER)
        with pytest.raises(AttributeError):
            caps.can_edit_album = True  # type: ignore[misc]

    def test_default_capabilities_are_empty(self) -> None:
        assert Capabilities() == NO_CAPABILITIES


class TestResolveRole:
    def test_creator_is_admin_without_membership_rows(self) -> None:
        creator = uuid4()
        album = make_album(creator)
        assert album.members == []
        assert resolve_role(album, creator) == AlbumRole.ADMIN

    def test_creator_override_beats_lesser_membership_row(self) -> None:
        creator = uuid4()
        album = make_album(creator, {creator: AlbumRole.VIEWER})
        assert resolve_role(album, creator) == AlbumRole.ADMIN

    @pytest.mark.parametrize("role", list(AlbumRole))
    def test_member_gets_row_role(self, role: AlbumRole) -> None:
        member = uuid4()
        album = make_album(uuid4(), {member: role})
        assert resolve_role(album, member) == role

    def test_stranger_has_no_role(self) -> None:
        album = make_album(uuid4(), {uuid4(): AlbumRole.ADMIN})
        assert resolve_role(album, uuid4()) is None
        assert get_capabilities(resolve_role(album, uuid4())) == NO_CAPABILITIES


class TestInvitationStatus:
    def _invitation(self, **kwargs: object) -> Invitation:
        return Invitation(
            album_id=uuid4(),
            invited_by=uuid4(),
            role=AlbumRole.VIEWER,
            token="tok",
            **kwargs,  # type: ignore[arg-type]
        )

    def test_new_invitation_is_pending_and_active(self) -> None:
        inv = self._invitation(email="a@example.com")
        assert inv.status == InvitationStatus.PENDING
        assert inv.is_active

    def test_used_invitation_is_accepted(self) -> None:
        inv = self._invitation(email="a@example.com", used_at=datetime.utcnow())
        assert inv.status == InvitationStatus.ACCEPTED
        assert not inv.is_active

    def test_expiry_boundary_is_inactive(self) -> None:
        inv = self._invitation(expires_at=datetime.utcnow() - timedelta(seconds=1))
        assert inv.status == InvitationStatus.EXPIRED
        assert not inv.is_active

    def test_shareable_at_max_uses_is_exhausted(self) -> None:
        inv = self._invitation(is_shareable=True, max_uses=2, uses_count=2)
        assert not inv.has_uses_remaining
        assert inv.status == InvitationStatus.EXHAUSTED

    def test_unlimited_shareable_always_has_uses(self) -> None:
        inv = self._invitation(is_shareable=True, max_uses=None, uses_count=10_000)
        assert inv.has_uses_remaining
