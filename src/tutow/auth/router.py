"""Authentication router: all /api/v1/auth/* endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from tutow.auth.jwt import access_token_lifetime, create_access_token
from tutow.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from tutow.auth.service import authenticate_user, register_user
from tutow.database import get_session

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


@router.post("/register", response_model=UserResponse, status_code=201)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_session),
) -> UserResponse:
    """Register a learner account. Duplicate email/username and invalid fields give 400."""
    try:
        user = await register_user(
            db,
            name=body.name,
            email=body.email,
            username=body.username,
            password=body.password,
            school=body.school,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    await db.commit()
    return UserResponse.model_validate(user)


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_session),
) -> TokenResponse:
    """Login with email + password and receive a bearer token."""
    try:
        user = await authenticate_user(db, body.email, body.password)
    except ValueError as e:
        raise HTTPException(status_code=401, detail=str(e)) from e
    await db.commit()
    return TokenResponse(
        access_token=create_access_token(user.id, user.username),
        expires_in=access_token_lifetime(),
        user=UserResponse.model_validate(user),
    )
