"""
Service layer for health programs.

Provides CRUD operations for programs plus the program detail view
with every enrollment and its client embedded.  Deleting a program
also removes its enrollments; the store performs that cascade.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from health_system_api.app.core.store import HealthSystemStore
from health_system_api.app.schemas.client import ClientRead
from health_system_api.app.schemas.enrollment import EnrollmentWithClientRead, ProgramWithClientsRead
from health_system_api.app.schemas.program import ProgramCreate, ProgramRead, ProgramUpdate, PublicProgramRead
from health_system_api.app.services.enrollment_service import EnrollmentService


logger = logging.getLogger(__name__)


class ProgramService:
    """Service class for managing health programs."""

    @classmethod
    async def create_program(cls, store: HealthSystemStore, data: ProgramCreate) -> ProgramRead:
        program = store.add_program(data.model_dump())
        logger.info("Created program %s (%s)", program.id, program.name)
        return ProgramRead.model_validate(program)

    @classmethod
    async def list_programs(cls, store: HealthSystemStore, limit: int = 100, offset: int = 0) -> List[ProgramRead]:
        programs = store.programs[offset:offset + limit]
        return [ProgramRead.model_validate(p) for p in programs]

    @classmethod
    async def list_public_programs(cls, store: HealthSystemStore) -> List[PublicProgramRead]:
        """Return the basic, unauthenticated view of every program."""
        return [PublicProgramRead.model_validate(p) for p in store.programs]

    @classmethod
    async def get_program_with_clients(
        cls, store: HealthSystemStore, program_id: str
    ) -> Optional[ProgramWithClientsRead]:
        """Return the program with all of its enrollments and their clients."""
        joined = store.get_program_with_clients(program_id)
        if joined is None:
            return None
        enrollments = [
            EnrollmentWithClientRead.model_validate(
                {
                    **EnrollmentService.enrollment_fields(item.enrollment),
                    "client": ClientRead.model_validate(item.client) if item.client is not None else None,
                }
            )
            for item in joined.enrollments
        ]
        return ProgramWithClientsRead(
            **ProgramRead.model_validate(joined.program).model_dump(),
            enrollments=enrollments,
        )

    @classmethod
    async def update_program(
        cls, store: HealthSystemStore, program_id: str, data: ProgramUpdate
    ) -> Optional[ProgramRead]:
        """Update an existing program.

        Only fields provided in ``data`` will be updated.  Returns
        ``None`` if the program does not exist.
        """
        changes = data.model_dump(exclude_unset=True)
        program = store.update_program(program_id, changes)
        if program is None:
            logger.debug("Update of unknown program %s", program_id)
            return None
        logger.info("Updated program %s fields=%s", program_id, sorted(changes))
        return ProgramRead.model_validate(program)

    @classmethod
    async def delete_program(cls, store: HealthSystemStore, program_id: str) -> bool:
        """Delete a program and its enrollments.

        Returns ``True`` if a program was deleted, ``False`` otherwise.
        """
        deleted = store.delete_program(program_id)
        if deleted:
            logger.info("Deleted program %s", program_id)
        return deleted
