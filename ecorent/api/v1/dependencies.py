# Standard library imports
from typing import Optional

# External package imports
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

# Local application imports
from ...application.dto.user_dto import AuthenticatedUser
from ...core.security import decode_jwt_token


security_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
) -> AuthenticatedUser:
    """
    FastAPI dependency to get the caller from a bearer JWT

    Args:
        credentials: HTTP Bearer token credentials, if any were sent

    Returns:
        AuthenticatedUser built from the token claims

    Raises:
        HTTPException: 401 if no token was sent, 403 if it is invalid
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token is required"
        )

    try:
        payload = decode_jwt_token(credentials.credentials)
    except ValueError as exception:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(exception)
        )

    user_id = payload.get("id") or payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid token: missing user ID"
        )

    return AuthenticatedUser(
        id=str(user_id),
        name=payload.get("name"),
        surname=payload.get("surname"),
    )
