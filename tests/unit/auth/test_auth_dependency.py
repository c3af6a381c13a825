"""Unit tests for authentication and workspace authorization dependencies."""

from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest
from fastapi.security import HTTPAuthorizationCredentials
from starlette.requests import Request

from api.dependencies.auth import (
    WorkspaceContext,
    get_current_user,
    get_optional_user,
    require_role,
    require_workspace,
)
from core.exceptions import (
    AuthenticationError,
    ErrorCode,
    InsufficientPermissionsError,
    NotAMemberError,
    WorkspaceIdRequiredError,
)
from domain.entities.user import User
from domain.entities.workspace import Workspace, WorkspaceMember, WorkspaceRole
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import AuthenticatedUser


def _request(
    cookies: dict[str, str] | None = None,
    path_params: dict[str, Any] | None = None,
    query: str = "",
) -> Request:
    headers = []
    if cookies:
        cookie_header = "; ".join(f"{k}={v}" for k, v in cookies.items())
        headers.append((b"cookie", cookie_header.encode()))
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": "/",
            "headers": headers,
            "query_string": query.encode(),
            "path_params": path_params or {},
        }
    )


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    return JWTAuthProvider(secret_key="test-secret", algorithm="HS256", expire_minutes=30)


@pytest.fixture
def user() -> User:
    return User(email="test@example.com", name="Test User")


@pytest.fixture
def auth_service(user: User) -> AsyncMock:
    service = AsyncMock()
    service.get_user.return_value = user
    return service


@pytest.fixture
def authenticated(user: User) -> AuthenticatedUser:
    return AuthenticatedUser(id=user.id, email=user.email, name=user.name)


# --- get_current_user ---


class TestGetCurrentUser:
    @pytest.mark.asyncio
    async def test_returns_user_with_valid_bearer_token(
        self, auth_provider: JWTAuthProvider, auth_service: AsyncMock, user: User
    ):
        token = auth_provider.create_access_token(user.id, user.email)

        result = await get_current_user(_request(), _bearer(token), auth_provider, auth_service)

        assert result == AuthenticatedUser(id=user.id, email=user.email, name=user.name)
        auth_service.get_user.assert_called_once_with(user.id)

    @pytest.mark.asyncio
    async def test_falls_back_to_access_token_cookie(
        self, auth_provider: JWTAuthProvider, auth_service: AsyncMock, user: User
    ):
        token = auth_provider.create_access_token(user.id, user.email)

        result = await get_current_user(
            _request(cookies={"access_token": token}), None, auth_provider, auth_service
        )

        assert result.id == user.id

    @pytest.mark.asyncio
    async def test_raises_when_no_credentials(
        self, auth_provider: JWTAuthProvider, auth_service: AsyncMock
    ):
        with pytest.raises(AuthenticationError) as exc_info:
            await get_current_user(_request(), None, auth_provider, auth_service)

        assert exc_info.value.error_code == ErrorCode.UNAUTHORIZED
        assert exc_info.value.message == "Authentication required"

    @pytest.mark.asyncio
    async def test_raises_when_invalid_token(
        self, auth_provider: JWTAuthProvider, auth_service: AsyncMock
    ):
        with pytest.raises(AuthenticationError) as exc_info:
            await get_current_user(
                _request(), _bearer("invalid.jwt.token"), auth_provider, auth_service
            )

        assert exc_info.value.error_code == ErrorCode.INVALID_TOKEN
        auth_service.get_user.assert_not_called()

    @pytest.mark.asyncio
    async def test_raises_when_expired_token(self, auth_service: AsyncMock, user: User):
        # Negative lifetime produces an already-expired token
        expired_provider = JWTAuthProvider(secret_key="test-secret", expire_minutes=-1)
        token = expired_provider.create_access_token(user.id, user.email)
        normal_provider = JWTAuthProvider(secret_key="test-secret", expire_minutes=30)

        with pytest.raises(AuthenticationError) as exc_info:
            await get_current_user(_request(), _bearer(token), normal_provider, auth_service)

        assert exc_info.value.error_code == ErrorCode.INVALID_TOKEN

    @pytest.mark.asyncio
    async def test_raises_when_user_was_deleted(
        self, auth_provider: JWTAuthProvider, auth_service: AsyncMock, user: User
    ):
        auth_service.get_user.side_effect = AuthenticationError(
            "User not found", ErrorCode.USER_NOT_FOUND
        )
        token = auth_provider.create_access_token(user.id, user.email)

        with pytest.raises(AuthenticationError) as exc_info:
            await get_current_user(_request(), _bearer(token), auth_provider, auth_service)

        assert exc_info.value.error_code == ErrorCode.USER_NOT_FOUND


# --- get_optional_user ---


class TestGetOptionalUser:
    @pytest.mark.asyncio
    async def test_returns_user_with_valid_token(
        self, auth_provider: JWTAuthProvider, auth_service: AsyncMock, user: User
    ):
        token = auth_provider.create_access_token(user.id, user.email)

        result = await get_optional_user(_request(), _bearer(token), auth_provider, auth_service)

        assert result is not None
        assert result.email == user.email

    @pytest.mark.asyncio
    async def test_returns_none_when_no_credentials(
        self, auth_provider: JWTAuthProvider, auth_service: AsyncMock
    ):
        assert await get_optional_user(_request(), None, auth_provider, auth_service) is None

    @pytest.mark.asyncio
    async def test_returns_none_for_invalid_token(
        self, auth_provider: JWTAuthProvider, auth_service: AsyncMock
    ):
        result = await get_optional_user(
            _request(), _bearer("invalid.jwt.token"), auth_provider, auth_service
        )
        assert result is None


# --- require_workspace ---


class TestRequireWorkspace:
    @pytest.fixture
    def workspace(self) -> Workspace:
        return Workspace(name="Desk")

    @pytest.fixture
    def workspace_service(self) -> AsyncMock:
        return AsyncMock()

    @pytest.mark.asyncio
    async def test_resolves_from_path_parameter(
        self,
        authenticated: AuthenticatedUser,
        workspace: Workspace,
        workspace_service: AsyncMock,
    ):
        member = WorkspaceMember(
            workspace_id=workspace.id, user_id=authenticated.id, role=WorkspaceRole.ADMIN
        )
        workspace_service.resolve_access.return_value = (workspace, member)

        ctx = await require_workspace(
            _request(path_params={"workspace_id": str(workspace.id)}),
            authenticated,
            workspace_service,
        )

        assert ctx.workspace_id == workspace.id
        assert ctx.role == WorkspaceRole.ADMIN
        assert ctx.user is authenticated
        workspace_service.resolve_access.assert_called_once_with(authenticated.id, workspace.id)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("param", ["workspace_id", "workspaceId"])
    async def test_resolves_from_query_string(
        self,
        param: str,
        authenticated: AuthenticatedUser,
        workspace: Workspace,
        workspace_service: AsyncMock,
    ):
        member = WorkspaceMember(workspace_id=workspace.id, user_id=authenticated.id)
        workspace_service.resolve_access.return_value = (workspace, member)

        ctx = await require_workspace(
            _request(query=f"{param}={workspace.id}"), authenticated, workspace_service
        )

        assert ctx.workspace is workspace

    @pytest.mark.asyncio
    async def test_missing_id_is_rejected(
        self, authenticated: AuthenticatedUser, workspace_service: AsyncMock
    ):
        with pytest.raises(WorkspaceIdRequiredError) as exc_info:
            await require_workspace(_request(), authenticated, workspace_service)

        assert exc_info.value.status_code == 400
        workspace_service.resolve_access.assert_not_called()

    @pytest.mark.asyncio
    async def test_malformed_id_is_denied(
        self, authenticated: AuthenticatedUser, workspace_service: AsyncMock
    ):
        with pytest.raises(NotAMemberError) as exc_info:
            await require_workspace(
                _request(query="workspace_id=not-a-uuid"), authenticated, workspace_service
            )

        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_non_member_is_denied(
        self, authenticated: AuthenticatedUser, workspace_service: AsyncMock
    ):
        workspace_service.resolve_access.return_value = None

        with pytest.raises(NotAMemberError) as exc_info:
            await require_workspace(
                _request(query=f"workspace_id={uuid4()}"), authenticated, workspace_service
            )

        assert exc_info.value.status_code == 403
        assert exc_info.value.message == "Access denied to this workspace"


# --- require_role ---


def _context(role: WorkspaceRole, user_id: UUID | None = None) -> WorkspaceContext:
    workspace = Workspace(name="Desk")
    uid = user_id or uuid4()
    return WorkspaceContext(
        user=AuthenticatedUser(id=uid, email="m@x.com"),
        workspace=workspace,
        member=WorkspaceMember(
            workspace_id=workspace.id,
            user_id=uid,
            role=role,
            is_owner=role == WorkspaceRole.OWNER,
        ),
    )


class TestRequireRole:
    @pytest.mark.asyncio
    async def test_allows_listed_role(self):
        checker = require_role(WorkspaceRole.OWNER, WorkspaceRole.ADMIN)
        ctx = _context(WorkspaceRole.ADMIN)

        assert await checker(ctx) is ctx

    @pytest.mark.asyncio
    async def test_rejects_unlisted_role(self):
        checker = require_role(WorkspaceRole.OWNER, WorkspaceRole.ADMIN)

        with pytest.raises(InsufficientPermissionsError) as exc_info:
            await checker(_context(WorkspaceRole.MEMBER))

        assert exc_info.value.status_code == 403
        assert exc_info.value.details == {"allowed_roles": ["ADMIN", "OWNER"]}

    @pytest.mark.asyncio
    async def test_owner_does_not_imply_admin(self):
        checker = require_role(WorkspaceRole.ADMIN)

        with pytest.raises(InsufficientPermissionsError):
            await checker(_context(WorkspaceRole.OWNER))

    @pytest.mark.asyncio
    async def test_check_has_no_side_effects(self):
        checker = require_role(WorkspaceRole.OWNER)
        owner = _context(WorkspaceRole.OWNER)
        member = _context(WorkspaceRole.MEMBER)

        assert await checker(owner) is owner
        assert await checker(owner) is owner
        for _ in range(2):
            with pytest.raises(InsufficientPermissionsError):
                await checker(member)
        assert owner.member.role == WorkspaceRole.OWNER
