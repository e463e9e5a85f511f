"""Bearer-token authentication dependency."""
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.config import Settings, get_app_settings
from core.security import AuthenticatedUser, AuthenticationError, decode_access_token


# HTTP Bearer token scheme
security = HTTPBearer(auto_error=False)


def validate_token(token: str | None, settings: Settings) -> AuthenticatedUser:
    """
    Validate a session token against the configured signing secret.

    Pure computation: no database lookup, so a valid token for a since-deleted
    account still authenticates (its bookmark queries simply match nothing).

    Raises:
        AuthenticationError: If the token is missing or fails verification.
    """
    if not token:
        raise AuthenticationError("No authorization token")
    return decode_access_token(token, settings.jwt_secret_key, settings.jwt_algorithm)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    settings: Settings = Depends(get_app_settings),
) -> AuthenticatedUser:
    """Dependency that validates the bearer token and returns the caller's identity."""
    token = credentials.credentials if credentials is not None else None
    try:
        return validate_token(token, settings)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
