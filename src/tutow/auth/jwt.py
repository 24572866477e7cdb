"""
Bearer tokens for learner sessions.

Tokens are HS256 JWTs. ``sub`` holds the user id and ``username`` is there
for the client to display; the API always reloads the user, so a renamed or
deleted account is picked up on the next request.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from tutow.config import get_settings

ACCESS_TOKEN_TYPE = "access"


def access_token_lifetime() -> int:
    """Access token lifetime in seconds."""
    return get_settings().jwt_access_token_expire_minutes * 60


def create_access_token(user_id: int, username: str) -> str:
    settings = get_settings()
    issued_at = datetime.now(timezone.utc)
    claims: dict[str, Any] = {
        "sub": str(user_id),
        "username": username,
        "type": ACCESS_TOKEN_TYPE,
        "iss": settings.jwt_issuer,
        "iat": issued_at,
        "exp": issued_at + timedelta(seconds=access_token_lifetime()),
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str, expected_type: str = ACCESS_TOKEN_TYPE) -> dict[str, Any]:
    """
    Decode a token and check signature, issuer, expiry and ``type``.

    Raises:
        jwt.InvalidTokenError: With a message suitable for a 401 response.
    """
    settings = get_settings()
    try:
        claims: dict[str, Any] = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            issuer=settings.jwt_issuer,
            options={"require": ["sub", "exp", "type"]},
        )
    except jwt.ExpiredSignatureError:
        msg = "Token has expired"
        raise jwt.InvalidTokenError(msg) from None

    token_type = claims["type"]
    if token_type != expected_type:
        msg = f"Expected token type '{expected_type}', got '{token_type}'"
        raise jwt.InvalidTokenError(msg)
    return claims
