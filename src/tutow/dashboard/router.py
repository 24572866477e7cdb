"""Dashboard endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tutow.auth.dependencies import get_current_user
from tutow.dashboard.schemas import DashboardResponse
from tutow.dashboard.service import get_dashboard
from tutow.database import get_session
from tutow.db.models import User

router = APIRouter(prefix="/api/v1/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardResponse)
async def dashboard(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> dict:
    """Profile summary, current-grade progress, recent badges and daily tasks."""
    return await get_dashboard(db, user)
