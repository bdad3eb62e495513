"""Integration tests for Invitations API."""

from collections.abc import Callable
from typing import Any

import pytest
from httpx import AsyncClient

from infrastructure.auth.provider import TokenUser
from tests.conftest import RecordingNotifier

Headers = Callable[[TokenUser], dict[str, str]]


@pytest.fixture
async def album(client: AsyncClient, auth_headers: dict[str, str]) -> dict[str, Any]:
    """A private album owned by test_user."""
    response = await client.post(
        "/api/v1/albums", json={"name": "Family Trip"}, headers=auth_headers
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def _invite(
    client: AsyncClient, album: dict[str, Any], headers: dict[str, str], email: str, role: str
) -> Any:
    return await client.post(
        f"/api/v1/albums/{album['id']}/invitations",
        json={"email": email, "role": role},
        headers=headers,
    )


async def _share(
    client: AsyncClient, album: dict[str, Any], headers: dict[str, str], **body: Any
) -> Any:
    return await client.post(
        f"/api/v1/albums/{album['id']}/invitations/shareable",
        json={"role": "viewer", **body},
        headers=headers,
    )


async def _members(
    client: AsyncClient, album: dict[str, Any], headers: dict[str, str]
) -> list[dict[str, Any]]:
    response = await client.get(f"/api/v1/albums/{album['id']}/members", headers=headers)
    return response.json()["data"]  # type: ignore[no-any-return]


class TestEmailInvitationFlow:
    async def test_scenario_invite_accept_and_reuse(
        self,
        client: AsyncClient,
        album: dict[str, Any],
        auth_headers: dict[str, str],
        make_user: Callable[..., TokenUser],
        headers_for: Headers,
        notifier: RecordingNotifier,
    ) -> None:
        created = await _invite(client, album, auth_headers, "New@Example.com", "contributor")
        assert created.status_code == 201, created.text
        body = created.json()
        assert body["data"]["email"] == "new@example.com"
        assert body["data"]["status"] == "pending"
        assert body["accept_url"] == f"http://app.test/invite/accept/{body['token']}"
        assert [n.recipient_email for n in notifier.notices] == ["new@example.com"]
        assert notifier.notices[0].inviter_name == "Test User"

        invitee = make_user(email="new@example.com")
        accepted = await client.post(
            f"/api/v1/invitations/{body['token']}/accept", headers=headers_for(invitee)
        )
        assert accepted.status_code == 200, accepted.text
        assert accepted.json()["album_id"] == album["id"]
        assert accepted.json()["role"] == "contributor"

        members = await _members(client, album, auth_headers)
        assert {m["user_id"]: m["role"] for m in members}[str(invitee.id)] == "contributor"

        again = await client.post(
            f"/api/v1/invitations/{body['token']}/accept", headers=headers_for(invitee)
        )
        assert again.status_code == 410
        assert again.json()["error_code"] == "INVALID_OR_EXPIRED_INVITATION"
        assert len(await _members(client, album, auth_headers)) == 2

    async def test_duplicate_invitation(
        self, client: AsyncClient, album: dict[str, Any], auth_headers: dict[str, str]
    ) -> None:
        await _invite(client, album, auth_headers, "dup@example.com", "viewer")

        response = await _invite(client, album, auth_headers, "DUP@example.com", "admin")

        assert response.status_code == 409
        assert response.json()["error_code"] == "DUPLICATE_INVITATION"

    async def test_inviting_existing_member(
        self, client: AsyncClient, album: dict[str, Any], auth_headers: dict[str, str]
    ) -> None:
        response = await _invite(client, album, auth_headers, "test@example.com", "viewer")

        assert response.status_code == 409
        assert response.json()["error_code"] == "ALREADY_A_MEMBER"

    async def test_email_mismatch_and_no_role(
        self,
        client: AsyncClient,
        album: dict[str, Any],
        auth_headers: dict[str, str],
        make_user: Callable[..., TokenUser],
        headers_for: Headers,
    ) -> None:
        token = (await _invite(client, album, auth_headers, "new@example.com", "viewer")).json()[
            "token"
        ]
        stranger = headers_for(make_user(email="someone@else.org"))

        response = await client.post(f"/api/v1/invitations/{token}/accept", headers=stranger)
        assert response.status_code == 403
        assert response.json()["error_code"] == "INVITATION_EMAIL_MISMATCH"

        access = await client.get(f"/api/v1/albums/{album['id']}/access", headers=stranger)
        assert access.json()["role"] is None
        assert not any(access.json()["capabilities"].values())

    async def test_notice_failure_still_creates_invitation(
        self,
        client: AsyncClient,
        album: dict[str, Any],
        auth_headers: dict[str, str],
        notifier: RecordingNotifier,
    ) -> None:
        notifier.fail = True

        response = await _invite(client, album, auth_headers, "new@example.com", "viewer")

        assert response.status_code == 201
        listed = await client.get(
            f"/api/v1/albums/{album['id']}/invitations", headers=auth_headers
        )
        assert [i["email"] for i in listed.json()["data"]] == ["new@example.com"]

    async def test_preview_pending_and_decline(
        self,
        client: AsyncClient,
        album: dict[str, Any],
        auth_headers: dict[str, str],
        make_user: Callable[..., TokenUser],
        headers_for: Headers,
    ) -> None:
        token = (await _invite(client, album, auth_headers, "new@example.com", "viewer")).json()[
            "token"
        ]
        invitee = headers_for(make_user(email="new@example.com"))

        preview = await client.get(f"/api/v1/invitations/{token}")
        assert preview.status_code == 200
        assert preview.json()["album_name"] == "Family Trip"
        assert preview.json()["inviter_name"] == "Test User"

        pending = await client.get("/api/v1/invitations/pending", headers=invitee)
        assert [i["album_id"] for i in pending.json()["data"]] == [album["id"]]

        declined = await client.post(f"/api/v1/invitations/{token}/decline", headers=invitee)
        assert declined.status_code == 204

        assert (await client.get(f"/api/v1/invitations/{token}")).status_code == 410
        pending = await client.get("/api/v1/invitations/pending", headers=invitee)
        assert pending.json()["data"] == []

    async def test_admin_cancels(
        self, client: AsyncClient, album: dict[str, Any], auth_headers: dict[str, str]
    ) -> None:
        created = (await _invite(client, album, auth_headers, "new@example.com", "viewer")).json()

        response = await client.delete(
            f"/api/v1/invitations/{created['data']['id']}", headers=auth_headers
        )

        assert response.status_code == 204
        assert (await client.get(f"/api/v1/invitations/{created['token']}")).status_code == 410


class TestShareableInvitationFlow:
    async def test_scenario_max_uses_two(
        self,
        client: AsyncClient,
        album: dict[str, Any],
        auth_headers: dict[str, str],
        make_user: Callable[..., TokenUser],
        headers_for: Headers,
    ) -> None:
        created = await _share(client, album, auth_headers, max_uses=2)
        assert created.status_code == 201, created.text
        token = created.json()["token"]
        assert created.json()["data"]["email"] == ""

        results = [
            await client.post(f"/api/v1/invitations/{token}/accept", headers=headers_for(make_user()))
            for _ in range(3)
        ]

        assert [r.status_code for r in results] == [200, 200, 410]
        assert results[2].json()["error_code"] == "MAX_USES_REACHED"
        assert len(await _members(client, album, auth_headers)) == 3

        links = await client.get(
            f"/api/v1/albums/{album['id']}/invitations/shareable", headers=auth_headers
        )
        [link] = links.json()["data"]
        assert link["uses_count"] == 2
        assert link["status"] == "exhausted"

    async def test_member_cannot_use_link_twice(
        self,
        client: AsyncClient,
        album: dict[str, Any],
        auth_headers: dict[str, str],
        make_user: Callable[..., TokenUser],
        headers_for: Headers,
    ) -> None:
        token = (await _share(client, album, auth_headers)).json()["token"]
        joiner = headers_for(make_user())

        await client.post(f"/api/v1/invitations/{token}/accept", headers=joiner)
        again = await client.post(f"/api/v1/invitations/{token}/accept", headers=joiner)

        assert again.status_code == 409
        assert again.json()["error_code"] == "ALREADY_A_MEMBER"

    async def test_revoked_link_is_dead(
        self,
        client: AsyncClient,
        album: dict[str, Any],
        auth_headers: dict[str, str],
        make_user: Callable[..., TokenUser],
        headers_for: Headers,
    ) -> None:
        created = (await _share(client, album, auth_headers, max_uses=5)).json()

        revoked = await client.post(
            f"/api/v1/invitations/{created['data']['id']}/revoke", headers=auth_headers
        )
        assert revoked.status_code == 200
        assert revoked.json()["status"] == "expired"

        response = await client.post(
            f"/api/v1/invitations/{created['token']}/accept", headers=headers_for(make_user())
        )
        assert response.status_code == 410
        assert response.json()["error_code"] == "INVALID_OR_EXPIRED_INVITATION"

    async def test_quota_of_ten_active_links(
        self, client: AsyncClient, album: dict[str, Any], auth_headers: dict[str, str]
    ) -> None:
        for _ in range(10):
            assert (await _share(client, album, auth_headers)).status_code == 201

        response = await _share(client, album, auth_headers)

        assert response.status_code == 429
        assert response.json()["error_code"] == "INVITE_QUOTA_EXCEEDED"

    async def test_rejects_zero_max_uses(
        self, client: AsyncClient, album: dict[str, Any], auth_headers: dict[str, str]
    ) -> None:
        response = await _share(client, album, auth_headers, max_uses=0)

        assert response.status_code == 422


class TestContributorRestrictions:
    async def test_scenario_contributor_is_forbidden(
        self,
        client: AsyncClient,
        album: dict[str, Any],
        auth_headers: dict[str, str],
        make_user: Callable[..., TokenUser],
        headers_for: Headers,
    ) -> None:
        contributor = make_user(email="contrib@example.com")
        token = (
            await _invite(client, album, auth_headers, "contrib@example.com", "contributor")
        ).json()["token"]
        await client.post(f"/api/v1/invitations/{token}/accept", headers=headers_for(contributor))

        share = await _share(client, album, headers_for(contributor))
        assert share.status_code == 403
        assert share.json()["error_code"] == "INSUFFICIENT_PERMISSIONS"

        creator_row = next(
            m for m in await _members(client, album, auth_headers) if m["role"] == "admin"
        )
        change = await client.patch(
            f"/api/v1/albums/members/{creator_row['id']}",
            json={"role": "viewer"},
            headers=headers_for(contributor),
        )
        assert change.status_code == 403
        assert change.json()["error_code"] == "INSUFFICIENT_PERMISSIONS"

    async def test_stranger_gets_not_a_member(
        self,
        client: AsyncClient,
        album: dict[str, Any],
        make_user: Callable[..., TokenUser],
        headers_for: Headers,
    ) -> None:
        response = await _share(client, album, headers_for(make_user()))

        assert response.status_code == 403
        assert response.json()["error_code"] == "NOT_A_MEMBER"


class TestJoinRequest:
    async def test_public_album_join_request(
        self,
        client: AsyncClient,
        auth_headers: dict[str, str],
        make_user: Callable[..., TokenUser],
        headers_for: Headers,
    ) -> None:
        album = (
            await client.post(
                "/api/v1/albums",
                json={"name": "Open", "privacy_level": "public"},
                headers=auth_headers,
            )
        ).json()["data"]
        requester = make_user(email="fan@example.com")

        response = await client.post(
            f"/api/v1/albums/{album['id']}/join", headers=headers_for(requester)
        )
        assert response.status_code == 201
        assert response.json()["email"] == "fan@example.com"
        assert response.json()["role"] == "viewer"

        again = await client.post(
            f"/api/v1/albums/{album['id']}/join", headers=headers_for(requester)
        )
        assert again.status_code == 409
        assert again.json()["error_code"] == "DUPLICATE_INVITATION"

    async def test_private_album_join_is_not_found(
        self,
        client: AsyncClient,
        album: dict[str, Any],
        make_user: Callable[..., TokenUser],
        headers_for: Headers,
    ) -> None:
        response = await client.post(
            f"/api/v1/albums/{album['id']}/join", headers=headers_for(make_user())
        )

        assert response.status_code == 404
