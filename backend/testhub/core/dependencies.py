"""FastAPI dependencies for caller identity."""

from typing import Annotated

import jwt
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from testhub.core.security import decode_claims
from testhub.db.session import get_db
from testhub.models.user import User, UserRole


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    authorization: Annotated[str | None, Header()] = None,
    db: Session = Depends(get_db),
) -> User:
    """Resolve the caller from a ``Bearer`` access token.

    401 for a missing, malformed, or unknown token subject; 403 for an
    inactive account.
    """
    if not authorization:
        raise _unauthorized("Authorization header missing")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise _unauthorized("Invalid authorization header format. Expected: Bearer <token>")

    try:
        claims = decode_claims(token.strip())
    except (jwt.InvalidTokenError, ValueError) as e:
        raise _unauthorized(f"Invalid or expired token: {e}") from e

    user = db.get(User, claims.user_id)
    if user is None:
        raise _unauthorized("User not found")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User account is inactive")
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


def can_read_user_data(caller: User, owner_id) -> bool:
    """Owners read their own data; admins read anyone's."""
    return caller.id == owner_id or caller.role == UserRole.ADMIN.value
