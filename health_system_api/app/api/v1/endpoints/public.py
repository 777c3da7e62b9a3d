"""
Public endpoints for API v1.

These routes do not require authentication.  They expose only basic
program information (id, name, description) so that a landing page
can advertise the available programs.
"""

from typing import List

from fastapi import APIRouter, Depends

from health_system_api.app.api.dependencies import get_store
from health_system_api.app.core.store import HealthSystemStore
from health_system_api.app.schemas.common import ApiResponse
from health_system_api.app.schemas.program import PublicProgramRead
from health_system_api.app.services.program_service import ProgramService

router = APIRouter()


@router.get("/programs", response_model=ApiResponse[List[PublicProgramRead]])
async def list_public_programs(
    store: HealthSystemStore = Depends(get_store),
) -> ApiResponse[List[PublicProgramRead]]:
    programs = await ProgramService.list_public_programs(store)
    return ApiResponse[List[PublicProgramRead]](data=programs)
