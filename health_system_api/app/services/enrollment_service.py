"""
Service layer for enrollments.

Enrolling is idempotent while an enrollment is active: submitting the
same client/program pair again returns the existing active
enrollment.  Cancelling marks an enrollment as ``withdrawn`` and keeps
it as history; a later enrollment of the same pair creates a new
record.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Dict, List, Optional

from health_system_api.app.core.store import Enrollment, EnrollmentStatus, HealthSystemStore
from health_system_api.app.schemas.enrollment import EnrollmentCreate, EnrollmentRead, EnrollmentUpdate


logger = logging.getLogger(__name__)


class EnrollmentService:
    """Service class for enrolling clients in health programs."""

    @classmethod
    async def enroll(cls, store: HealthSystemStore, data: EnrollmentCreate) -> Optional[EnrollmentRead]:
        """Enroll a client in a program.

        Returns ``None`` when the client or the program does not exist.
        """
        before = store.find_active_enrollment(data.client_id, data.program_id)
        enrollment = store.enroll_client_in_program(data.client_id, data.program_id, data.notes)
        if enrollment is None:
            logger.warning(
                "Enrollment rejected: client %s or program %s not found",
                data.client_id,
                data.program_id,
            )
            return None
        if before is not None:
            logger.info(
                "Client %s already actively enrolled in program %s (%s)",
                data.client_id,
                data.program_id,
                enrollment.id,
            )
        else:
            logger.info(
                "Enrolled client %s in program %s (%s)",
                data.client_id,
                data.program_id,
                enrollment.id,
            )
        return EnrollmentRead.model_validate(enrollment)

    @classmethod
    async def list_enrollments(
        cls,
        store: HealthSystemStore,
        status: Optional[EnrollmentStatus] = None,
        client_id: Optional[str] = None,
        program_id: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[EnrollmentRead]:
        enrollments = [
            e
            for e in store.enrollments
            if (status is None or e.status == status)
            and (client_id is None or e.client_id == client_id)
            and (program_id is None or e.program_id == program_id)
        ]
        return [EnrollmentRead.model_validate(e) for e in enrollments[offset:offset + limit]]

    @classmethod
    async def get_enrollment(cls, store: HealthSystemStore, enrollment_id: str) -> Optional[EnrollmentRead]:
        enrollment = store.get_enrollment_by_id(enrollment_id)
        if enrollment is None:
            return None
        return EnrollmentRead.model_validate(enrollment)

    @classmethod
    async def update_enrollment(
        cls, store: HealthSystemStore, enrollment_id: str, data: EnrollmentUpdate
    ) -> Optional[EnrollmentRead]:
        changes = data.model_dump(exclude_unset=True)
        enrollment = store.update_enrollment(enrollment_id, changes)
        if enrollment is None:
            logger.debug("Update of unknown enrollment %s", enrollment_id)
            return None
        logger.info("Updated enrollment %s fields=%s", enrollment_id, sorted(changes))
        return EnrollmentRead.model_validate(enrollment)

    @classmethod
    async def cancel_enrollment(cls, store: HealthSystemStore, enrollment_id: str) -> bool:
        """Mark an enrollment as withdrawn.

        Returns ``True`` if the enrollment existed.
        """
        cancelled = store.cancel_enrollment(enrollment_id)
        if cancelled:
            logger.info("Withdrew enrollment %s", enrollment_id)
        return cancelled

    @staticmethod
    def enrollment_fields(enrollment: Enrollment) -> Dict[str, Any]:
        """Shallow field mapping of an enrollment, for building embedded views."""
        return {f.name: getattr(enrollment, f.name) for f in dataclasses.fields(enrollment)}
