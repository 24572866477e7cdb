"""Profile request schemas. Responses reuse ``tutow.auth.schemas.UserResponse``."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ProfileUpdateRequest(BaseModel):
    name: str = Field(..., max_length=100)
    school: str | None = Field(None, max_length=200)
    current_grade: int | None = None
