"""Schemas for grades, materials, courses and course progress."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class GradeResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    name: str
    display_name: str
    order: int


class RegistryEntryResponse(BaseModel):
    model_config = {"from_attributes": True}

    key: str
    renderer: str
    title: str
    description: str
    estimated_time: str
    difficulty: str
    topics: list[str]
    grade_level: int
    material_type: str


class CourseResponse(BaseModel):
    id: int
    material_id: int
    title: str
    description: str | None = None
    level: int
    order: int
    xp_reward: int
    content: dict[str, Any]
    interactive: RegistryEntryResponse | None = None


class MaterialResponse(BaseModel):
    id: int
    grade_id: int
    name: str
    display_name: str
    description: str | None = None
    image_url: str | None = None
    order: int
    course_count: int
    courses: list[CourseResponse] = []


class MaterialListResponse(BaseModel):
    materials: list[MaterialResponse]


class GradeListResponse(BaseModel):
    grades: list[GradeResponse]


class MaterialCoursesResponse(BaseModel):
    grade: GradeResponse
    material: MaterialResponse
    courses: list[CourseResponse]


class RegistryListResponse(BaseModel):
    courses: list[RegistryEntryResponse]


class ProgressRequest(BaseModel):
    course_id: int
    completed: bool
    score: int | None = Field(None, ge=0, le=100)


class ProgressResponse(BaseModel):
    model_config = {"from_attributes": True}

    course_id: int
    material_id: int
    completed: bool
    score: int | None = None
    completed_at: datetime | None = None
    updated_at: datetime


class ProgressListResponse(BaseModel):
    progress: list[ProgressResponse]


class ProgressUpdateResponse(BaseModel):
    success: bool
    progress: ProgressResponse
    xp_earned: int
