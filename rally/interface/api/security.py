"""Request authentication.

Access tokens come from the auth provider, either in the auth cookie set by
the frontend or as an ``Authorization: Bearer`` header.
"""

from fastapi import Request

from rally.domain.service import JWTService
from rally.interface.error import AuthenticationError
from rally.util.jwt import JWTError, TokenPayload


def read_access_token(request: Request, cookie_name: str) -> str | None:
    """Extract the raw access token, preferring the Authorization header."""
    authorization = request.headers.get("authorization")
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    return request.cookies.get(cookie_name)


def authenticate(request: Request, jwt_service: JWTService) -> TokenPayload:
    """Verify the caller's access token.

    Args:
        request: Incoming request
        jwt_service: JWT service from DI

    Returns:
        Verified token payload

    Raises:
        AuthenticationError: If the token is missing, invalid or expired
    """
    token = read_access_token(request, jwt_service.auth_settings.cookie_name)
    if not token:
        raise AuthenticationError("Authentication required")

    try:
        return jwt_service.verify_token(token)
    except JWTError as e:
        raise AuthenticationError(str(e))
