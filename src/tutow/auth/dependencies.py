"""FastAPI authentication dependencies."""

from __future__ import annotations

import jwt
from fastapi import Depends, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from tutow.auth.jwt import ACCESS_TOKEN_TYPE, verify_token
from tutow.auth.service import get_user_by_id
from tutow.database import get_session
from tutow.db.models import User

_bearer = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=401, detail=detail, headers={"WWW-Authenticate": "Bearer"})


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer),
    db: AsyncSession = Depends(get_session),
) -> User:
    """
    The learner named by the bearer token.

    Responds 401 when the token is missing, invalid or expired, or the account
    no longer exists.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")
    try:
        claims = verify_token(credentials.credentials, expected_type=ACCESS_TOKEN_TYPE)
    except jwt.InvalidTokenError as e:
        raise _unauthorized(str(e)) from e

    try:
        user_id = int(claims["sub"])
    except ValueError as e:
        raise _unauthorized("Invalid token subject") from e

    user = await get_user_by_id(db, user_id)
    if user is None:
        raise _unauthorized("User not found")
    return user
