"""Course content endpoints: grades, materials, courses, the course registry and progress."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from tutow.auth.dependencies import get_current_user
from tutow.content import registry
from tutow.content.schemas import (
    CourseResponse,
    GradeListResponse,
    GradeResponse,
    MaterialCoursesResponse,
    MaterialListResponse,
    MaterialResponse,
    ProgressListResponse,
    ProgressRequest,
    ProgressResponse,
    ProgressUpdateResponse,
    RegistryEntryResponse,
    RegistryListResponse,
)
from tutow.content.service import (
    get_material,
    list_grades,
    list_materials,
    list_progress,
    update_progress,
)
from tutow.database import get_session
from tutow.db.models import Course, Material, User

router = APIRouter(prefix="/api/v1", tags=["Content"])


def _course_response(course: Course) -> CourseResponse:
    entry = registry.resolve_course(course.registry_key, course.title)
    return CourseResponse(
        id=course.id,
        material_id=course.material_id,
        title=course.title,
        description=course.description,
        level=course.level,
        order=course.order,
        xp_reward=course.xp_reward,
        content=course.content or {},
        interactive=RegistryEntryResponse.model_validate(entry) if entry else None,
    )


def _material_response(material: Material, *, with_courses: bool = True) -> MaterialResponse:
    return MaterialResponse(
        id=material.id,
        grade_id=material.grade_id,
        name=material.name,
        display_name=material.display_name,
        description=material.description,
        image_url=material.image_url,
        order=material.order,
        course_count=len(material.courses),
        courses=[_course_response(c) for c in material.courses] if with_courses else [],
    )


# ── Public endpoints ──


@router.get("/grades", response_model=GradeListResponse)
async def get_grades(db: AsyncSession = Depends(get_session)) -> GradeListResponse:
    """All grades in order."""
    grades = await list_grades(db)
    return GradeListResponse(grades=[GradeResponse.model_validate(g) for g in grades])


@router.get("/materials", response_model=MaterialListResponse)
async def get_materials(
    grade_id: int | None = Query(None),
    db: AsyncSession = Depends(get_session),
) -> MaterialListResponse:
    """Materials of one grade with their courses."""
    if grade_id is None:
        raise HTTPException(status_code=400, detail="grade_id is required")
    materials = await list_materials(db, grade_id)
    return MaterialListResponse(materials=[_material_response(m) for m in materials])


@router.get("/courses", response_model=MaterialCoursesResponse)
async def get_courses(
    material_id: int | None = Query(None),
    db: AsyncSession = Depends(get_session),
) -> MaterialCoursesResponse:
    """Courses of one material, ordered by level then position."""
    if material_id is None:
        raise HTTPException(status_code=400, detail="material_id is required")
    material = await get_material(db, material_id)
    if material is None:
        raise HTTPException(status_code=404, detail="Material not found")
    return MaterialCoursesResponse(
        grade=GradeResponse.model_validate(material.grade),
        material=_material_response(material, with_courses=False),
        courses=[_course_response(c) for c in material.courses],
    )


@router.get("/courses/registry", response_model=RegistryListResponse)
async def get_course_registry(
    grade: int | None = Query(None, ge=1, le=6),
    material_type: str | None = Query(None),
) -> RegistryListResponse:
    """Registered interactive courses, optionally filtered by grade or material type."""
    entries = registry.all_courses()
    if grade is not None:
        entries = [e for e in entries if e.grade_level == grade]
    if material_type is not None:
        entries = [e for e in entries if e.material_type == material_type]
    return RegistryListResponse(courses=[RegistryEntryResponse.model_validate(e) for e in entries])


@router.get("/courses/registry/{key}", response_model=RegistryEntryResponse)
async def get_course_registry_entry(key: str) -> RegistryEntryResponse:
    """Look up one interactive course by key, title or alias."""
    entry = registry.get_course_entry(key)
    if entry is None:
        raise HTTPException(status_code=404, detail="Course not registered")
    return RegistryEntryResponse.model_validate(entry)


# ── Authenticated endpoints ──


@router.get("/progress", response_model=ProgressListResponse)
async def get_progress(
    material_id: int | None = Query(None),
    grade_id: int | None = Query(None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> ProgressListResponse:
    """The user's course progress, optionally for one material or grade."""
    rows = await list_progress(db, user.id, material_id=material_id, grade_id=grade_id)
    return ProgressListResponse(progress=[ProgressResponse.model_validate(r) for r in rows])


@router.post("/progress", response_model=ProgressUpdateResponse)
async def post_progress(
    body: ProgressRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> ProgressUpdateResponse:
    """Record a course attempt; first completion grants the course XP."""
    try:
        update = await update_progress(db, user, body.course_id, body.completed, body.score)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    await db.commit()
    return ProgressUpdateResponse(
        success=True,
        progress=ProgressResponse.model_validate(update.progress),
        xp_earned=update.xp_earned,
    )
