"""
Dashboard API routes.
"""
from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from crm_backend.config import settings
from crm_backend.database import get_session
from crm_backend.services.dashboard_service import DashboardService
from crm_backend.schemas.dashboard import DashboardStats
from crm_backend.api.deps import get_current_user
from crm_backend.models.user import User

router = APIRouter(prefix=f"{settings.API_PREFIX}/dashboard", tags=["dashboard"])


@router.get("/", response_model=DashboardStats)
async def get_dashboard_stats(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Get dashboard statistics."""
    dashboard_service = DashboardService(session)
    return await dashboard_service.get_stats(current_user.id)
