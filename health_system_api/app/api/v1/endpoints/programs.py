"""
Health program endpoints for API v1.

CRUD routes for health programs.  ``GET /programs/{id}`` embeds every
enrollment of the program with its client.  Deleting a program also
deletes its enrollments.  All routes require authentication; the
unauthenticated program listing lives in ``public.py``.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from health_system_api.app.api.dependencies import get_store
from health_system_api.app.core.security import get_current_user
from health_system_api.app.core.store import HealthSystemStore
from health_system_api.app.schemas.common import ApiResponse
from health_system_api.app.schemas.enrollment import ProgramWithClientsRead
from health_system_api.app.schemas.program import ProgramCreate, ProgramRead, ProgramUpdate
from health_system_api.app.services.program_service import ProgramService

router = APIRouter()


@router.get("/", response_model=ApiResponse[List[ProgramRead]])
async def list_programs(
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    store: HealthSystemStore = Depends(get_store),
    current_user: dict = Depends(get_current_user),
) -> ApiResponse[List[ProgramRead]]:
    programs = await ProgramService.list_programs(store, limit=limit, offset=offset)
    return ApiResponse[List[ProgramRead]](data=programs)


@router.post("/", response_model=ApiResponse[ProgramRead], status_code=status.HTTP_201_CREATED)
async def create_program(
    program_in: ProgramCreate,
    store: HealthSystemStore = Depends(get_store),
    current_user: dict = Depends(get_current_user),
) -> ApiResponse[ProgramRead]:
    program = await ProgramService.create_program(store, program_in)
    return ApiResponse[ProgramRead](data=program, message="Health program created successfully")


@router.get("/{program_id}", response_model=ApiResponse[ProgramWithClientsRead])
async def get_program(
    program_id: str,
    store: HealthSystemStore = Depends(get_store),
    current_user: dict = Depends(get_current_user),
) -> ApiResponse[ProgramWithClientsRead]:
    """Retrieve a program with all enrollments and their clients."""
    program = await ProgramService.get_program_with_clients(store, program_id)
    if program is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Health program not found")
    return ApiResponse[ProgramWithClientsRead](data=program)


@router.put("/{program_id}", response_model=ApiResponse[ProgramRead])
async def update_program(
    program_id: str,
    program_in: ProgramUpdate,
    store: HealthSystemStore = Depends(get_store),
    current_user: dict = Depends(get_current_user),
) -> ApiResponse[ProgramRead]:
    program = await ProgramService.update_program(store, program_id, program_in)
    if program is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Health program not found")
    return ApiResponse[ProgramRead](data=program, message="Health program updated successfully")


@router.delete("/{program_id}", response_model=ApiResponse[None])
async def delete_program(
    program_id: str,
    store: HealthSystemStore = Depends(get_store),
    current_user: dict = Depends(get_current_user),
) -> ApiResponse[None]:
    """Delete a program and all of its enrollments."""
    deleted = await ProgramService.delete_program(store, program_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Health program not found")
    return ApiResponse[None](message="Health program deleted successfully")
