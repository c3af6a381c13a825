"""Auth API routes: registration, login and the refresh token lifecycle."""

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status

from api.dependencies.auth import CurrentUser
from api.dependencies.services import get_auth_service
from api.v1.schemas.auth import (
    AuthResponse,
    LoginRequest,
    LogoutAllResponse,
    MembershipSummary,
    MeResponse,
    OnboardingStatusResponse,
    RefreshRequest,
    RegisterRequest,
    UserResponse,
    WorkspaceSummary,
)
from api.v1.schemas.common import MessageResponse
from core.config import settings
from core.exceptions import InvalidRefreshTokenError
from core.rate_limit import CREDENTIALS_LIMIT, READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.user import User
from domain.services.auth_service import AuthService
from infrastructure.auth.provider import TokenPair

router = APIRouter(prefix="/auth", tags=["auth"])


def _build_user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        avatar=user.avatar,
        provider=user.provider.value,
        email_verified=user.email_verified,
        created_at=user.created_at,
    )


def _set_refresh_cookie(response: Response, refresh_token: str) -> None:
    response.set_cookie(
        key=settings.refresh_token_cookie_name,
        value=refresh_token,
        max_age=settings.refresh_token_max_age,
        httponly=True,
        secure=settings.refresh_cookie_secure,
        samesite="lax",
    )


def _clear_refresh_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.refresh_token_cookie_name,
        httponly=True,
        secure=settings.refresh_cookie_secure,
        samesite="lax",
    )


def _session_response(response: Response, user: User, pair: TokenPair) -> AuthResponse:
    _set_refresh_cookie(response, pair.refresh_token)
    return AuthResponse(
        user=_build_user_response(user),
        access_token=pair.access_token,
        refresh_token=pair.refresh_token,
    )


def _presented_refresh_token(request: Request, body: Optional[RefreshRequest]) -> str | None:
    """Cookie first, then the request body."""
    token = request.cookies.get(settings.refresh_token_cookie_name)
    if not token and body is not None:
        token = body.refresh_token
    return token or None


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register with email and password",
    responses={
        201: {"description": "Account created and signed in"},
        409: {"description": "Email already registered"},
    },
)
@limiter.limit(CREDENTIALS_LIMIT)  # type: ignore[untyped-decorator]
async def register(
    request: Request,
    response: Response,
    body: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Create an account. The refresh token is set as an HTTP-only cookie."""
    user, pair = await service.register(body.email, body.password, body.name)
    return _session_response(response, user, pair)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Sign in with email and password",
    responses={401: {"description": "Invalid credentials"}},
)
@limiter.limit(CREDENTIALS_LIMIT)  # type: ignore[untyped-decorator]
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    user, pair = await service.login(body.email, body.password)
    return _session_response(response, user, pair)


@router.post(
    "/refresh",
    response_model=AuthResponse,
    summary="Rotate the refresh token",
    responses={401: {"description": "Refresh token missing, invalid or already used"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def refresh(
    request: Request,
    response: Response,
    body: Optional[RefreshRequest] = None,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    Exchange a refresh token for a new access token and refresh token.

    The presented token is consumed; presenting it again fails.
    """
    token = _presented_refresh_token(request, body)
    if not token:
        raise InvalidRefreshTokenError("Refresh token required")

    user, pair = await service.refresh(token)
    return _session_response(response, user, pair)


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Sign out of this session",
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def logout(
    request: Request,
    response: Response,
    body: Optional[RefreshRequest] = None,
    service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Revoke the presented refresh token. Always succeeds."""
    await service.logout(_presented_refresh_token(request, body))
    _clear_refresh_cookie(response)
    return MessageResponse(message="Logged out successfully")


@router.post(
    "/logout-all",
    response_model=LogoutAllResponse,
    summary="Sign out of every session",
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def logout_all(
    request: Request,
    response: Response,
    user: CurrentUser,
    service: AuthService = Depends(get_auth_service),
) -> LogoutAllResponse:
    """
    Revoke every refresh token of the caller.

    Access tokens already issued stay valid until they expire.
    """
    revoked = await service.logout_all(user.id)
    _clear_refresh_cookie(response)
    return LogoutAllResponse(message="Logged out from all devices", revoked_count=revoked)


@router.get("/me", response_model=MeResponse, summary="Current user profile")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_me(
    request: Request,
    user: CurrentUser,
    service: AuthService = Depends(get_auth_service),
) -> MeResponse:
    profile, memberships = await service.get_profile(user.id)
    return MeResponse(
        user=_build_user_response(profile),
        memberships=[
            MembershipSummary(
                workspace_id=workspace.id,
                workspace_name=workspace.name,
                workspace_type=workspace.type.value,
                member_id=member.id,
                role=member.role.value,
                is_owner=member.is_owner,
                profit_split=member.profit_split,
            )
            for member, workspace in memberships
        ],
    )


@router.get(
    "/onboarding-status",
    response_model=OnboardingStatusResponse,
    summary="Whether the caller has a workspace yet",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_onboarding_status(
    request: Request,
    user: CurrentUser,
    service: AuthService = Depends(get_auth_service),
) -> OnboardingStatusResponse:
    workspace = await service.get_onboarding_status(user.id)
    if workspace is None:
        return OnboardingStatusResponse(has_workspace=False)
    return OnboardingStatusResponse(
        has_workspace=True,
        workspace=WorkspaceSummary(id=workspace.id, name=workspace.name, type=workspace.type.value),
    )
