"""
Client endpoints for API v1.

These routes expose a CRUD API for clients.  ``GET /clients/{id}``
returns the client together with every enrollment and the program
each enrollment belongs to, so a client profile can be rendered from
a single request.  Deleting a client also deletes its enrollments.
All routes require authentication.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from health_system_api.app.api.dependencies import get_store
from health_system_api.app.core.security import get_current_user
from health_system_api.app.core.store import HealthSystemStore
from health_system_api.app.schemas.client import ClientCreate, ClientRead, ClientUpdate
from health_system_api.app.schemas.common import ApiResponse
from health_system_api.app.schemas.enrollment import ClientWithProgramsRead
from health_system_api.app.services.client_service import ClientService

router = APIRouter()


@router.get("/", response_model=ApiResponse[List[ClientRead]])
async def list_clients(
    search: Optional[str] = Query(None, description="Match name, email or contact number"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    store: HealthSystemStore = Depends(get_store),
    current_user: dict = Depends(get_current_user),
) -> ApiResponse[List[ClientRead]]:
    """Return registered clients, optionally filtered by a search term."""
    clients = await ClientService.list_clients(store, search=search, limit=limit, offset=offset)
    return ApiResponse[List[ClientRead]](data=clients)


@router.post("/", response_model=ApiResponse[ClientRead], status_code=status.HTTP_201_CREATED)
async def create_client(
    client_in: ClientCreate,
    store: HealthSystemStore = Depends(get_store),
    current_user: dict = Depends(get_current_user),
) -> ApiResponse[ClientRead]:
    """Register a new client."""
    client = await ClientService.create_client(store, client_in)
    return ApiResponse[ClientRead](data=client, message="Client created successfully")


@router.get("/{client_id}", response_model=ApiResponse[ClientWithProgramsRead])
async def get_client(
    client_id: str,
    store: HealthSystemStore = Depends(get_store),
    current_user: dict = Depends(get_current_user),
) -> ApiResponse[ClientWithProgramsRead]:
    """Retrieve a client with all enrollments and their programs.

    Returns HTTP 404 if the client is not found.
    """
    client = await ClientService.get_client_with_programs(store, client_id)
    if client is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    return ApiResponse[ClientWithProgramsRead](data=client)


@router.put("/{client_id}", response_model=ApiResponse[ClientRead])
async def update_client(
    client_id: str,
    client_in: ClientUpdate,
    store: HealthSystemStore = Depends(get_store),
    current_user: dict = Depends(get_current_user),
) -> ApiResponse[ClientRead]:
    """Update the provided fields of a client."""
    client = await ClientService.update_client(store, client_id, client_in)
    if client is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    return ApiResponse[ClientRead](data=client, message="Client updated successfully")


@router.delete("/{client_id}", response_model=ApiResponse[None])
async def delete_client(
    client_id: str,
    store: HealthSystemStore = Depends(get_store),
    current_user: dict = Depends(get_current_user),
) -> ApiResponse[None]:
    """Delete a client and all of its enrollments."""
    deleted = await ClientService.delete_client(store, client_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    return ApiResponse[None](message="Client deleted successfully")
