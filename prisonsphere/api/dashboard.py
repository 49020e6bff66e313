"""Dashboard and recent activity routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from .. import activity, metrics, schemas
from ..db import get_db
from ..security import get_current_user

router = APIRouter(tags=["dashboard"], dependencies=[Depends(get_current_user)])


@router.get("/dashboard/stats", response_model=schemas.DashboardStats)
async def dashboard_stats(db: AsyncSession = Depends(get_db)):
    """Headline counts for the dashboard."""
    return await metrics.get_stats(db)


@router.get("/dashboard/analytics", response_model=schemas.DashboardAnalytics)
async def dashboard_analytics(db: AsyncSession = Depends(get_db)):
    """Monthly admissions and releases plus the current status mix."""
    return await metrics.get_analytics(db)


@router.get("/recent-activities", response_model=list[schemas.RecentActivity])
async def recent_activities(db: AsyncSession = Depends(get_db)):
    """Activity feed of the last 24 hours, newest first."""
    return await activity.list_recent(db)
