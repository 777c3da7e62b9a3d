"""
Statistics endpoints for API v1.

Provides the aggregated figures shown on the dashboard.
"""

from fastapi import APIRouter, Depends

from health_system_api.app.api.dependencies import get_store
from health_system_api.app.core.security import get_current_user
from health_system_api.app.core.store import HealthSystemStore
from health_system_api.app.schemas.common import ApiResponse
from health_system_api.app.schemas.statistics import DashboardStats
from health_system_api.app.services.statistics_service import StatisticsService

router = APIRouter()


@router.get("/dashboard", response_model=ApiResponse[DashboardStats])
async def dashboard(
    store: HealthSystemStore = Depends(get_store),
    current_user: dict = Depends(get_current_user),
) -> ApiResponse[DashboardStats]:
    """Return client and program totals, active enrollments and recent clients."""
    stats = await StatisticsService.overview(store)
    return ApiResponse[DashboardStats](data=stats)
