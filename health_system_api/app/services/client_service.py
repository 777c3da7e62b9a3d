"""
Service layer for clients.

This module provides CRUD operations for clients, the client search
used by the client list, and the client detail view which embeds
every enrollment together with its program.  Deleting a client also
removes its enrollments; the store performs that cascade.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from health_system_api.app.core.store import HealthSystemStore
from health_system_api.app.schemas.client import ClientCreate, ClientRead, ClientUpdate
from health_system_api.app.schemas.enrollment import ClientWithProgramsRead, EnrollmentWithProgramRead
from health_system_api.app.schemas.program import ProgramRead
from health_system_api.app.services.enrollment_service import EnrollmentService


logger = logging.getLogger(__name__)


class ClientService:
    """Service class for managing clients."""

    @classmethod
    async def create_client(cls, store: HealthSystemStore, data: ClientCreate) -> ClientRead:
        """Register a new client and return the created record."""
        client = store.add_client(data.model_dump())
        logger.info("Created client %s", client.id)
        return ClientRead.model_validate(client)

    @classmethod
    async def list_clients(
        cls,
        store: HealthSystemStore,
        search: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[ClientRead]:
        """Return clients in registration order, optionally filtered by ``search``.

        The search term is matched against first name, last name and
        email (case‑insensitive) and the contact number.  An empty
        term disables filtering.
        """
        clients = store.search_clients(search)
        return [ClientRead.model_validate(c) for c in clients[offset:offset + limit]]

    @classmethod
    async def get_client_with_programs(
        cls, store: HealthSystemStore, client_id: str
    ) -> Optional[ClientWithProgramsRead]:
        """Return the client with all of its enrollments and their programs."""
        joined = store.get_client_with_programs(client_id)
        if joined is None:
            return None
        enrollments = [
            EnrollmentWithProgramRead.model_validate(
                {
                    **EnrollmentService.enrollment_fields(item.enrollment),
                    "program": ProgramRead.model_validate(item.program) if item.program is not None else None,
                }
            )
            for item in joined.enrollments
        ]
        return ClientWithProgramsRead(
            **ClientRead.model_validate(joined.client).model_dump(),
            enrollments=enrollments,
        )

    @classmethod
    async def update_client(
        cls, store: HealthSystemStore, client_id: str, data: ClientUpdate
    ) -> Optional[ClientRead]:
        """Update an existing client.

        Only fields provided in ``data`` will be updated; explicit
        ``null`` clears ``email`` or ``medical_history``.  Returns
        ``None`` if the client does not exist.
        """
        changes = data.model_dump(exclude_unset=True)
        client = store.update_client(client_id, changes)
        if client is None:
            logger.debug("Update of unknown client %s", client_id)
            return None
        logger.info("Updated client %s fields=%s", client_id, sorted(changes))
        return ClientRead.model_validate(client)

    @classmethod
    async def delete_client(cls, store: HealthSystemStore, client_id: str) -> bool:
        """Delete a client and its enrollments.

        Returns ``True`` if a client was deleted, ``False`` otherwise.
        """
        deleted = store.delete_client(client_id)
        if deleted:
            logger.info("Deleted client %s", client_id)
        return deleted
