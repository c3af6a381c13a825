"""Authentication and workspace authorization dependencies for FastAPI.

Every protected route resolves, in order: the session (bearer header, then
the access-token cookie), then the workspace membership, then the role set.
Each step produces an immutable context object for the next one.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.dependencies.services import (
    get_auth_provider,
    get_auth_service,
    get_workspace_service,
)
from core.config import settings
from core.exceptions import (
    AppException,
    AuthenticationError,
    ErrorCode,
    InsufficientPermissionsError,
    NotAMemberError,
    WorkspaceIdRequiredError,
)
from domain.entities.workspace import Workspace, WorkspaceMember, WorkspaceRole
from domain.services.auth_service import AuthService
from domain.services.workspace_service import WorkspaceService
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import AuthenticatedUser

# Security scheme for OpenAPI docs
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class WorkspaceContext:
    """The authenticated user acting inside one workspace."""

    user: AuthenticatedUser
    workspace: Workspace
    member: WorkspaceMember

    @property
    def workspace_id(self) -> UUID:
        return self.workspace.id

    @property
    def role(self) -> WorkspaceRole:
        return self.member.role


def _extract_token(
    request: Request, credentials: HTTPAuthorizationCredentials | None
) -> str | None:
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.access_token_cookie_name) or None


async def get_current_user(
    request: Request,
    credentials: Annotated[
        HTTPAuthorizationCredentials | None,
        Depends(security),
    ],
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthenticatedUser:
    """
    Dependency to get the current authenticated user.

    Raises:
        AuthenticationError: If no token provided, the token is invalid or
            the user no longer exists
    """
    token = _extract_token(request, credentials)
    if not token:
        raise AuthenticationError(
            message="Authentication required",
            error_code=ErrorCode.UNAUTHORIZED,
        )

    claims = auth_provider.verify_access_token(token)
    if not claims:
        raise AuthenticationError(
            message="Invalid or expired token",
            error_code=ErrorCode.INVALID_TOKEN,
        )

    user = await auth_service.get_user(claims.user_id)
    return AuthenticatedUser(id=user.id, email=user.email, name=user.name)


async def get_optional_user(
    request: Request,
    credentials: Annotated[
        HTTPAuthorizationCredentials | None,
        Depends(security),
    ],
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthenticatedUser | None:
    """
    Dependency to get the current user if authenticated.

    Returns:
        AuthenticatedUser if authenticated, None otherwise (no exception raised)
    """
    try:
        return await get_current_user(request, credentials, auth_provider, auth_service)
    except AppException:
        return None


# Type alias for convenience in route handlers
CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]
OptionalUser = Annotated[AuthenticatedUser | None, Depends(get_optional_user)]


def _workspace_id_from_request(request: Request) -> str | None:
    return (
        request.path_params.get("workspace_id")
        or request.query_params.get("workspace_id")
        or request.query_params.get("workspaceId")
    )


async def require_workspace(
    request: Request,
    user: CurrentUser,
    workspace_service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceContext:
    """
    Resolve the workspace named by the request and the caller's membership.

    The id is taken from the ``workspace_id`` path parameter, else the
    ``workspace_id`` (or ``workspaceId``) query parameter.

    Raises:
        WorkspaceIdRequiredError: If the request names no workspace
        NotAMemberError: If the id is malformed or the user is not a member
    """
    raw_id = _workspace_id_from_request(request)
    if not raw_id:
        raise WorkspaceIdRequiredError()

    try:
        workspace_id = UUID(str(raw_id))
    except ValueError:
        raise NotAMemberError() from None

    access = await workspace_service.resolve_access(user.id, workspace_id)
    if access is None:
        raise NotAMemberError(str(workspace_id))

    workspace, member = access
    return WorkspaceContext(user=user, workspace=workspace, member=member)


def require_role(*roles: WorkspaceRole) -> Callable[..., Awaitable[WorkspaceContext]]:
    """Build a dependency admitting only members whose role is in ``roles``."""
    allowed = frozenset(roles)

    async def role_checker(
        ctx: Annotated[WorkspaceContext, Depends(require_workspace)],
    ) -> WorkspaceContext:
        if ctx.member.role not in allowed:
            raise InsufficientPermissionsError(sorted(role.value for role in allowed))
        return ctx

    return role_checker


WorkspaceMemberContext = Annotated[WorkspaceContext, Depends(require_workspace)]
WorkspaceManagerContext = Annotated[
    WorkspaceContext, Depends(require_role(WorkspaceRole.OWNER, WorkspaceRole.ADMIN))
]
WorkspaceOwnerContext = Annotated[WorkspaceContext, Depends(require_role(WorkspaceRole.OWNER))]
