"""
Signed session tokens (PyJWT).

Access tokens carry the user id in ``sub`` plus the email and display name
so a request can be bound to a user without a store round-trip.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from studyhub.config import Settings, get_settings


def create_access_token(
    uid: str,
    email: str,
    name: str,
    settings: Settings | None = None,
) -> tuple[str, datetime]:
    """
    Create a short-lived access token.

    Returns:
        Tuple of (encoded JWT, expiry time).
    """
    settings = settings or get_settings()
    now = datetime.now(timezone.utc)
    expires_at = now + timedelta(minutes=settings.jwt_access_token_expire_minutes)
    payload: dict[str, Any] = {
        "sub": uid,
        "email": email,
        "name": name,
        "iat": now,
        "exp": expires_at,
        "iss": settings.jwt_issuer,
        "type": "access",
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm), expires_at


def verify_token(token: str, settings: Settings | None = None, expected_type: str = "access") -> dict[str, Any]:
    """
    Verify and decode a token.

    Raises:
        jwt.InvalidTokenError: If the token is invalid, expired, or wrong type.
    """
    settings = settings or get_settings()
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            issuer=settings.jwt_issuer,
        )
    except jwt.ExpiredSignatureError:
        msg = "Token has expired"
        raise jwt.InvalidTokenError(msg) from None

    if payload.get("type") != expected_type:
        msg = f"Expected token type '{expected_type}', got '{payload.get('type')}'"
        raise jwt.InvalidTokenError(msg)

    return payload
