"""Integration tests for Workspaces API: onboarding, isolation and partner management."""

from uuid import uuid4

import pytest
from httpx import AsyncClient

from tests.conftest import add_partner, bearer, onboard, register_user


class TestOnboarding:
    @pytest.mark.asyncio
    async def test_onboarding_creates_sole_trader_with_settings(self, client: AsyncClient) -> None:
        owner = await register_user(client, "owner@x.com")

        response = await client.post(
            "/api/v1/workspaces/onboarding",
            json={"name": "Male FX", "default_buy_rate": 15.40},
            headers=bearer(owner["access_token"]),
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["name"] == "Male FX"
        assert data["type"] == "SOLE_TRADER"
        assert data["member_count"] == 1
        assert data["settings"]["default_buy_rate"] == 15.4
        assert data["settings"]["default_sell_rate"] == 15.5

    @pytest.mark.asyncio
    async def test_second_onboarding_is_rejected(self, client: AsyncClient) -> None:
        owner = await register_user(client, "owner@x.com")
        await onboard(client, owner["access_token"])

        response = await client.post(
            "/api/v1/workspaces/onboarding",
            json={"name": "Another"},
            headers=bearer(owner["access_token"]),
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "WORKSPACE_ALREADY_EXISTS"


class TestIsolation:
    @pytest.mark.asyncio
    async def test_outsider_cannot_read_another_workspace(self, client: AsyncClient) -> None:
        owner = await register_user(client, "owner@x.com")
        outsider = await register_user(client, "outsider@x.com")
        workspace = await onboard(client, owner["access_token"])
        await onboard(client, outsider["access_token"], name="Other desk")

        for path in (
            f"/api/v1/workspaces/{workspace['id']}",
            f"/api/v1/cards?workspace_id={workspace['id']}",
            f"/api/v1/dashboard/stats?workspace_id={workspace['id']}",
        ):
            response = await client.get(path, headers=bearer(outsider["access_token"]))
            assert response.status_code == 403, path
            assert response.json()["error_code"] == "NOT_A_MEMBER"

    @pytest.mark.asyncio
    async def test_unknown_workspace_is_denied_not_missing(self, client: AsyncClient) -> None:
        owner = await register_user(client, "owner@x.com")

        response = await client.get(
            f"/api/v1/workspaces/{uuid4()}", headers=bearer(owner["access_token"])
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_scoped_route_without_workspace_id(self, client: AsyncClient) -> None:
        owner = await register_user(client, "owner@x.com")
        await onboard(client, owner["access_token"])

        response = await client.get("/api/v1/cards", headers=bearer(owner["access_token"]))

        assert response.status_code == 400
        assert response.json()["error_code"] == "WORKSPACE_ID_REQUIRED"

    @pytest.mark.asyncio
    async def test_malformed_workspace_id_is_denied(self, client: AsyncClient) -> None:
        owner = await register_user(client, "owner@x.com")

        response = await client.get(
            "/api/v1/cards?workspace_id=not-a-uuid", headers=bearer(owner["access_token"])
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_unauthenticated_request(self, client: AsyncClient) -> None:
        response = await client.get(f"/api/v1/workspaces/{uuid4()}")

        assert response.status_code == 401


class TestUpdate:
    @pytest.mark.asyncio
    async def test_promote_is_one_way(self, client: AsyncClient) -> None:
        owner = await register_user(client, "owner@x.com")
        workspace = await onboard(client, owner["access_token"])
        url = f"/api/v1/workspaces/{workspace['id']}"
        headers = bearer(owner["access_token"])

        promoted = await client.patch(
            url, json={"name": "Male FX Partners", "type": "PARTNERSHIP"}, headers=headers
        )
        assert promoted.status_code == 200
        assert promoted.json()["data"]["type"] == "PARTNERSHIP"

        demoted = await client.patch(url, json={"type": "SOLE_TRADER"}, headers=headers)
        assert demoted.status_code == 400
        assert demoted.json()["error_code"] == "VALIDATION_ERROR"


class TestMembers:
    @pytest.mark.asyncio
    async def test_members_listing_reports_split_total(self, client: AsyncClient) -> None:
        owner = await register_user(client, "owner@x.com")
        workspace = await onboard(client, owner["access_token"])
        await add_partner(client, owner["access_token"], workspace["id"], "partner@x.com")

        response = await client.get(
            f"/api/v1/workspaces/{workspace['id']}/members",
            headers=bearer(owner["access_token"]),
        )

        body = response.json()
        assert [m["email"] for m in body["data"]] == ["owner@x.com", "partner@x.com"]
        assert body["profit_split_total"] == 140.0
        assert body["profit_split_balanced"] is False

    @pytest.mark.asyncio
    async def test_owner_rebalances_splits(self, client: AsyncClient) -> None:
        owner = await register_user(client, "owner@x.com")
        workspace = await onboard(client, owner["access_token"])
        partner = await add_partner(client, owner["access_token"], workspace["id"], "p@x.com")
        headers = bearer(owner["access_token"])
        members_url = f"/api/v1/workspaces/{workspace['id']}/members"

        owner_member = (await client.get(members_url, headers=headers)).json()["data"][0]
        await client.patch(
            f"{members_url}/profit-split",
            json={"member_id": owner_member["id"], "profit_split": 60},
            headers=headers,
        )

        body = (await client.get(members_url, headers=headers)).json()
        assert body["profit_split_total"] == 100.0
        assert body["profit_split_balanced"] is True
        assert partner["member_id"] in [m["id"] for m in body["data"]]

    @pytest.mark.asyncio
    async def test_owner_cannot_be_removed(self, client: AsyncClient) -> None:
        owner = await register_user(client, "owner@x.com")
        workspace = await onboard(client, owner["access_token"])
        headers = bearer(owner["access_token"])
        members_url = f"/api/v1/workspaces/{workspace['id']}/members"
        owner_member = (await client.get(members_url, headers=headers)).json()["data"][0]

        response = await client.delete(f"{members_url}/{owner_member['id']}", headers=headers)

        assert response.status_code == 400
        assert response.json()["error_code"] == "CANNOT_REMOVE_OWNER"

    @pytest.mark.asyncio
    async def test_removed_partner_loses_access(self, client: AsyncClient) -> None:
        owner = await register_user(client, "owner@x.com")
        workspace = await onboard(client, owner["access_token"])
        partner = await add_partner(client, owner["access_token"], workspace["id"], "p@x.com")

        removed = await client.delete(
            f"/api/v1/workspaces/{workspace['id']}/members/{partner['member_id']}",
            headers=bearer(owner["access_token"]),
        )
        assert removed.status_code == 200

        response = await client.get(
            f"/api/v1/workspaces/{workspace['id']}", headers=bearer(partner["access_token"])
        )
        assert response.status_code == 403


class TestRoleGate:
    @pytest.mark.asyncio
    async def test_member_cannot_manage(self, client: AsyncClient) -> None:
        owner = await register_user(client, "owner@x.com")
        workspace = await onboard(client, owner["access_token"])
        partner = await add_partner(client, owner["access_token"], workspace["id"], "p@x.com")
        headers = bearer(partner["access_token"])

        rename = await client.patch(
            f"/api/v1/workspaces/{workspace['id']}", json={"name": "Mine"}, headers=headers
        )
        invite = await client.post(
            f"/api/v1/workspaces/{workspace['id']}/invitations",
            json={"email": "friend@x.com"},
            headers=headers,
        )
        rates = await client.patch(
            f"/api/v1/settings/rates?workspace_id={workspace['id']}",
            json={"buy_rate": 1},
            headers=headers,
        )

        for response in (rename, invite, rates):
            assert response.status_code == 403
            assert response.json()["error_code"] == "INSUFFICIENT_PERMISSIONS"

    @pytest.mark.asyncio
    async def test_member_can_still_read(self, client: AsyncClient) -> None:
        owner = await register_user(client, "owner@x.com")
        workspace = await onboard(client, owner["access_token"])
        partner = await add_partner(client, owner["access_token"], workspace["id"], "p@x.com")

        response = await client.get(
            f"/api/v1/settings/rates?workspace_id={workspace['id']}",
            headers=bearer(partner["access_token"]),
        )

        assert response.status_code == 200
        assert response.json() == {"buy_rate": 15.42, "sell_rate": 15.5}
