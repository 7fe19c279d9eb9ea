"""
FastAPI dependencies for authentication and authorization.

Tokens are read from the "Authorization: Bearer <token>" header. A missing
or invalid token is not an error by itself: get_current_user returns None,
and the ensure_* guards decide whether the endpoint needs a user.
"""

from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from pydantic import BaseModel

from app.core.security import decode_token

# HTTP Bearer token scheme; auto_error=False lets anonymous requests through
security = HTTPBearer(auto_error=False)


class CurrentUser(BaseModel):
    """Claims taken from a validated token."""
    username: str
    is_admin: bool = False


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[CurrentUser]:
    """
    Extract the user from the JWT token, if one was supplied and is valid.

    Returns None for anonymous requests and for tokens that fail validation.
    """
    if not credentials:
        return None

    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        return None

    username = payload.get("sub")
    if username is None:
        return None

    return CurrentUser(username=username, is_admin=bool(payload.get("is_admin", False)))


def ensure_logged_in(
    user: Optional[CurrentUser] = Depends(get_current_user)
) -> CurrentUser:
    """
    Require a valid token.

    Raises:
        HTTPException 401: If no valid token was supplied
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def ensure_admin(user: CurrentUser = Depends(ensure_logged_in)) -> CurrentUser:
    """
    Require a token belonging to an admin.

    Raises:
        HTTPException 401: If no valid token was supplied
        HTTPException 403: If the user is not an admin
    """
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required"
        )
    return user


def ensure_correct_user_or_admin(
    username: str,
    user: CurrentUser = Depends(ensure_logged_in)
) -> CurrentUser:
    """
    Require the token to belong to the user named in the path, or to an admin.

    Used on routes with a {username} path parameter.

    Raises:
        HTTPException 401: If no valid token was supplied
        HTTPException 403: If the token belongs to a different, non-admin user
    """
    if not (user.is_admin or user.username == username):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not allowed to access this user"
        )
    return user
