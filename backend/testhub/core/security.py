"""Access token handling.

Tokens are issued by the authentication service and shared with this API
through ``JWT_SECRET``. Here they are only decoded into ``TokenClaims``;
``create_access_token`` exists for operators and tests.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID, uuid4

import jwt

from testhub.core.config import settings

ACCESS_TOKEN_TYPE = "access"


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a verified access token."""

    user_id: UUID
    role: str | None


def _secret() -> str:
    if not settings.JWT_SECRET:
        raise ValueError("JWT_SECRET must be set")
    return settings.JWT_SECRET


def create_access_token(user_id: str, role: str) -> str:
    """Create a JWT access token."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "role": role,
        "iat": now,
        "exp": now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        "jti": str(uuid4()),
        "type": ACCESS_TOKEN_TYPE,
    }
    return jwt.encode(payload, _secret(), algorithm=settings.JWT_ALG)


def verify_access_token(token: str) -> dict[str, Any]:
    """Verify and decode a JWT access token."""
    try:
        payload = jwt.decode(token, _secret(), algorithms=[settings.JWT_ALG])
    except jwt.ExpiredSignatureError:
        raise jwt.InvalidTokenError("Token has expired") from None
    except jwt.InvalidTokenError as e:
        raise jwt.InvalidTokenError(f"Invalid token: {e}") from e

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise jwt.InvalidTokenError("Token is not an access token")
    return payload


def decode_claims(token: str) -> TokenClaims:
    """Verify a token and extract the caller's identity.

    Raises:
        jwt.InvalidTokenError: If the token is invalid, expired, or its
            subject is not a user id
    """
    payload = verify_access_token(token)
    try:
        user_id = UUID(str(payload["sub"]))
    except (KeyError, ValueError) as e:
        raise jwt.InvalidTokenError("Token subject is not a user id") from e
    return TokenClaims(user_id=user_id, role=payload.get("role"))
