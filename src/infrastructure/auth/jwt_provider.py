"""JWT access token provider.

Access tokens are HS256-signed JWTs with the payload::

    {
        "sub": "user-uuid",
        "email": "user@example.com",
        "type": "access",
        "iat": 1234567000,
        "exp": 1234567890
    }
"""

from datetime import datetime, timedelta
from typing import Any, Optional
from uuid import UUID

from jose import JWTError, jwt

from infrastructure.auth.provider import TokenClaims

ACCESS_TOKEN_TYPE = "access"


class JWTAuthProvider:
    """Issues and verifies access tokens with a shared secret.

    The secret is fixed at construction; a provider without one cannot be
    built.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expire_minutes: int = 15,
    ) -> None:
        if not secret_key:
            raise RuntimeError("JWT secret key is not configured")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    @property
    def expire_minutes(self) -> int:
        return self._expire_minutes

    def create_access_token(
        self,
        user_id: UUID,
        email: str,
        now: Optional[datetime] = None,
    ) -> str:
        """
        Create a signed access token.

        Args:
            user_id: Subject of the token
            email: Email claim
            now: Issue instant (defaults to the current UTC time)

        Returns:
            The encoded JWT
        """
        issued_at = now or datetime.utcnow()
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "email": email,
            "type": ACCESS_TOKEN_TYPE,
            "iat": issued_at,
            "exp": issued_at + timedelta(minutes=self._expire_minutes),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify_access_token(self, token: str) -> Optional[TokenClaims]:
        """
        Verify an access token and extract its claims.

        Malformed tokens, bad signatures, expiry, a wrong ``type`` and missing
        claims all yield None.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_aud": False},
            )
        except JWTError:
            return None

        if payload.get("type") != ACCESS_TOKEN_TYPE:
            return None

        subject = payload.get("sub")
        email = payload.get("email")
        issued_at = payload.get("iat")
        expires_at = payload.get("exp")
        if not subject or not email or issued_at is None or expires_at is None:
            return None

        try:
            user_id = UUID(subject)
        except (ValueError, TypeError):
            return None

        return TokenClaims(
            user_id=user_id,
            email=email,
            issued_at=datetime.utcfromtimestamp(issued_at),
            expires_at=datetime.utcfromtimestamp(expires_at),
        )
