"""Integration tests for the auth API and the refresh token lifecycle."""

import pytest
from httpx import AsyncClient

from tests.conftest import TEST_PASSWORD, bearer, onboard, register_user


class TestRegisterAndLogin:
    @pytest.mark.asyncio
    async def test_register_returns_session_and_sets_cookie(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/auth/register",
            json={"email": "A@X.com", "password": TEST_PASSWORD, "name": "Aisha"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["user"]["email"] == "a@x.com"
        assert body["user"]["provider"] == "EMAIL"
        assert body["token_type"] == "bearer"
        assert body["access_token"] and body["refresh_token"]
        assert f"refresh_token={body['refresh_token']}" in response.headers["set-cookie"]
        assert "password_hash" not in body["user"]

    @pytest.mark.asyncio
    async def test_duplicate_registration_conflicts(self, client: AsyncClient) -> None:
        await register_user(client, "a@x.com")

        response = await client.post(
            "/api/v1/auth/register", json={"email": "a@x.com", "password": TEST_PASSWORD}
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "EMAIL_ALREADY_REGISTERED"

    @pytest.mark.asyncio
    async def test_short_password_is_invalid(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/auth/register", json={"email": "a@x.com", "password": "short"}
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_login(self, client: AsyncClient) -> None:
        await register_user(client, "a@x.com")

        response = await client.post(
            "/api/v1/auth/login", json={"email": "a@x.com", "password": TEST_PASSWORD}
        )

        assert response.status_code == 200
        assert response.json()["user"]["email"] == "a@x.com"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "email,password",
        [("a@x.com", "wrong-password"), ("nobody@x.com", TEST_PASSWORD)],
    )
    async def test_login_failures_are_indistinguishable(
        self, client: AsyncClient, email: str, password: str
    ) -> None:
        await register_user(client, "a@x.com")

        response = await client.post(
            "/api/v1/auth/login", json={"email": email, "password": password}
        )

        assert response.status_code == 401
        assert response.json()["error_code"] == "INVALID_CREDENTIALS"


class TestRefreshLifecycle:
    @pytest.mark.asyncio
    async def test_rotation_logout_and_access_token_lifetime(self, client: AsyncClient) -> None:
        session = await register_user(client, "a@x.com")
        first_refresh = session["refresh_token"]

        rotated = await client.post(
            "/api/v1/auth/refresh", json={"refresh_token": first_refresh}
        )
        assert rotated.status_code == 200
        second = rotated.json()
        assert second["refresh_token"] != first_refresh
        client.cookies.clear()

        # The consumed token cannot be replayed
        replay = await client.post("/api/v1/auth/refresh", json={"refresh_token": first_refresh})
        assert replay.status_code == 401
        assert replay.json()["error_code"] == "INVALID_REFRESH_TOKEN"

        logout = await client.post(
            "/api/v1/auth/logout", json={"refresh_token": second["refresh_token"]}
        )
        assert logout.status_code == 200
        client.cookies.clear()

        after_logout = await client.post(
            "/api/v1/auth/refresh", json={"refresh_token": second["refresh_token"]}
        )
        assert after_logout.status_code == 401

        # Access tokens stay valid until they expire
        me = await client.get("/api/v1/auth/me", headers=bearer(session["access_token"]))
        assert me.status_code == 200
        assert me.json()["user"]["email"] == "a@x.com"

    @pytest.mark.asyncio
    async def test_refresh_reads_cookie(self, client: AsyncClient) -> None:
        await register_user(client, "a@x.com")
        login = await client.post(
            "/api/v1/auth/login", json={"email": "a@x.com", "password": TEST_PASSWORD}
        )
        assert "refresh_token" in client.cookies

        response = await client.post("/api/v1/auth/refresh")

        assert response.status_code == 200
        assert response.json()["refresh_token"] != login.json()["refresh_token"]

    @pytest.mark.asyncio
    async def test_missing_refresh_token(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/auth/refresh")

        assert response.status_code == 401
        assert response.json()["message"] == "Refresh token required"

    @pytest.mark.asyncio
    async def test_logout_with_unknown_token_still_succeeds(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/auth/logout", json={"refresh_token": "unknown"})

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_logout_all_revokes_every_session(self, client: AsyncClient) -> None:
        session = await register_user(client, "a@x.com")
        second_login = await client.post(
            "/api/v1/auth/login", json={"email": "a@x.com", "password": TEST_PASSWORD}
        )
        client.cookies.clear()

        response = await client.post(
            "/api/v1/auth/logout-all", headers=bearer(session["access_token"])
        )

        assert response.status_code == 200
        assert response.json()["revoked_count"] == 2
        for token in (session["refresh_token"], second_login.json()["refresh_token"]):
            refresh = await client.post("/api/v1/auth/refresh", json={"refresh_token": token})
            assert refresh.status_code == 401


class TestProfile:
    @pytest.mark.asyncio
    async def test_me_requires_authentication(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/auth/me")

        assert response.status_code == 401
        assert response.json()["error_code"] == "UNAUTHORIZED"

    @pytest.mark.asyncio
    async def test_garbage_token_is_rejected(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/auth/me", headers=bearer("not.a.jwt"))

        assert response.status_code == 401
        assert response.json()["error_code"] == "INVALID_TOKEN"

    @pytest.mark.asyncio
    async def test_onboarding_status_and_memberships(self, client: AsyncClient) -> None:
        session = await register_user(client, "a@x.com")
        headers = bearer(session["access_token"])

        before = await client.get("/api/v1/auth/onboarding-status", headers=headers)
        assert before.json() == {"has_workspace": False, "workspace": None}

        workspace = await onboard(client, session["access_token"])

        after = await client.get("/api/v1/auth/onboarding-status", headers=headers)
        assert after.json()["has_workspace"] is True
        assert after.json()["workspace"]["id"] == workspace["id"]

        me = await client.get("/api/v1/auth/me", headers=headers)
        (membership,) = me.json()["memberships"]
        assert membership["role"] == "OWNER"
        assert membership["is_owner"] is True
        assert membership["profit_split"] == 100.0
