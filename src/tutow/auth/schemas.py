"""Request/response schemas for authentication endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator


class RegisterRequest(BaseModel):
    """Learner registration. ``school`` is optional."""

    name: str = Field(..., max_length=100)
    email: EmailStr
    username: str = Field(..., max_length=50)
    password: str = Field(..., max_length=128)
    school: str | None = Field(None, max_length=200)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Normalize email to lowercase."""
        return v.lower().strip()

    @field_validator("name", "username")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        return v.strip()


class LoginRequest(BaseModel):
    """Login with email + password."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Normalize email to lowercase."""
        return v.lower().strip()


class UserResponse(BaseModel):
    """Full user profile (own account only). Never includes the password hash."""

    model_config = {"from_attributes": True}

    id: int
    name: str
    email: str
    username: str
    school: str | None = None
    current_grade: int | None = None
    xp: int
    gold: int
    created_at: datetime


class TokenResponse(BaseModel):
    """Bearer token issued on login."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse
