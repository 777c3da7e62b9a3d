"""
Enrollment endpoints for API v1.

``POST /enrollments`` enrolls a client in a program.  Re‑submitting
the same pair while the enrollment is active returns the existing
enrollment instead of creating a duplicate.  ``DELETE`` does not
remove the record: it withdraws the enrollment (status
``withdrawn``) so the history is kept.  All routes require
authentication.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from health_system_api.app.api.dependencies import get_store
from health_system_api.app.core.security import get_current_user
from health_system_api.app.core.store import EnrollmentStatus, HealthSystemStore
from health_system_api.app.schemas.common import ApiResponse
from health_system_api.app.schemas.enrollment import EnrollmentCreate, EnrollmentRead, EnrollmentUpdate
from health_system_api.app.services.enrollment_service import EnrollmentService

router = APIRouter()


@router.get("/", response_model=ApiResponse[List[EnrollmentRead]])
async def list_enrollments(
    status_filter: Optional[EnrollmentStatus] = Query(None, alias="status"),
    client_id: Optional[str] = Query(None),
    program_id: Optional[str] = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    store: HealthSystemStore = Depends(get_store),
    current_user: dict = Depends(get_current_user),
) -> ApiResponse[List[EnrollmentRead]]:
    """Return enrollments, optionally filtered by status, client or program."""
    enrollments = await EnrollmentService.list_enrollments(
        store,
        status=status_filter,
        client_id=client_id,
        program_id=program_id,
        limit=limit,
        offset=offset,
    )
    return ApiResponse[List[EnrollmentRead]](data=enrollments)


@router.post("/", response_model=ApiResponse[EnrollmentRead], status_code=status.HTTP_201_CREATED)
async def create_enrollment(
    enrollment_in: EnrollmentCreate,
    store: HealthSystemStore = Depends(get_store),
    current_user: dict = Depends(get_current_user),
) -> ApiResponse[EnrollmentRead]:
    """Enroll a client in a health program.

    Returns HTTP 400 if the client or the program does not exist.
    """
    enrollment = await EnrollmentService.enroll(store, enrollment_in)
    if enrollment is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Failed to enroll client. Client or program not found.",
        )
    return ApiResponse[EnrollmentRead](data=enrollment, message="Client enrolled in program successfully")


@router.get("/{enrollment_id}", response_model=ApiResponse[EnrollmentRead])
async def get_enrollment(
    enrollment_id: str,
    store: HealthSystemStore = Depends(get_store),
    current_user: dict = Depends(get_current_user),
) -> ApiResponse[EnrollmentRead]:
    enrollment = await EnrollmentService.get_enrollment(store, enrollment_id)
    if enrollment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Enrollment not found")
    return ApiResponse[EnrollmentRead](data=enrollment)


@router.put("/{enrollment_id}", response_model=ApiResponse[EnrollmentRead])
async def update_enrollment(
    enrollment_id: str,
    enrollment_in: EnrollmentUpdate,
    store: HealthSystemStore = Depends(get_store),
    current_user: dict = Depends(get_current_user),
) -> ApiResponse[EnrollmentRead]:
    """Change the status or notes of an enrollment."""
    enrollment = await EnrollmentService.update_enrollment(store, enrollment_id, enrollment_in)
    if enrollment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Enrollment not found")
    return ApiResponse[EnrollmentRead](data=enrollment, message="Enrollment updated successfully")


@router.delete("/{enrollment_id}", response_model=ApiResponse[None])
async def withdraw_enrollment(
    enrollment_id: str,
    store: HealthSystemStore = Depends(get_store),
    current_user: dict = Depends(get_current_user),
) -> ApiResponse[None]:
    """Withdraw an enrollment; the record itself is kept."""
    cancelled = await EnrollmentService.cancel_enrollment(store, enrollment_id)
    if not cancelled:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Enrollment not found")
    return ApiResponse[None](message="Enrollment withdrawn successfully")
