"""JWT token utilities.

Access tokens are issued by the auth provider (Supabase-compatible) and
signed with the project JWT secret. The subject claim carries the user id.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from pydantic import BaseModel, Field

from rally.config import AuthSettings


class TokenPayload(BaseModel):
    """JWT token payload."""

    user_id: str
    email: str | None = None
    user_metadata: dict[str, Any] = Field(default_factory=dict)
    exp: datetime


class JWTError(Exception):
    """JWT-related error."""

    pass


def create_token(
    user_id: str,
    settings: AuthSettings,
    email: str | None = None,
    user_metadata: dict[str, Any] | None = None,
    expires_in: timedelta = timedelta(hours=1),
) -> str:
    """Create a provider-style access token.

    Used by local tooling and tests; in production the auth provider mints
    the tokens.

    Args:
        user_id: User ID (subject)
        settings: Authentication settings
        email: Optional email claim
        user_metadata: Optional provider user metadata
        expires_in: Token lifetime

    Returns:
        Encoded JWT token
    """
    payload = {
        "sub": user_id,
        "aud": settings.jwt_audience,
        "role": "authenticated",
        "email": email,
        "user_metadata": user_metadata or {},
        "exp": datetime.now(timezone.utc) + expires_in,
    }

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, settings: AuthSettings) -> TokenPayload:
    """Verify and decode a JWT token.

    Args:
        token: JWT token to verify
        settings: Authentication settings

    Returns:
        Token payload if valid

    Raises:
        JWTError: If token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise JWTError("Token has expired")
    except jwt.InvalidTokenError:
        raise JWTError("Invalid token")

    return TokenPayload(
        user_id=payload["sub"],
        email=payload.get("email"),
        user_metadata=payload.get("user_metadata") or {},
        exp=payload["exp"],
    )
