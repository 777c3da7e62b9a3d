"""
Pydantic schemas for enrollments and the client/program views that embed them.

An enrollment links one client to one health program with a status
(``active``, ``completed`` or ``withdrawn``) and optional notes.
``ClientWithProgramsRead`` and ``ProgramWithClientsRead`` are the
detail views returned by ``GET /clients/{id}`` and
``GET /programs/{id}``: every enrollment is listed with the related
program (or client) embedded.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from health_system_api.app.core.store import EnrollmentStatus
from .client import ClientRead
from .common import ensure_not_blank
from .program import ProgramRead


class EnrollmentCreate(BaseModel):
    """Schema for enrolling a client in a program."""

    client_id: str = Field(..., description="ID of the client to enroll")
    program_id: str = Field(..., description="ID of the health program")
    notes: Optional[str] = Field(None, examples=["Initial screening"])

    @field_validator("client_id")
    @classmethod
    def validate_client_id(cls, v):
        return ensure_not_blank(v, "Client ID")

    @field_validator("program_id")
    @classmethod
    def validate_program_id(cls, v):
        return ensure_not_blank(v, "Program ID")


class EnrollmentUpdate(BaseModel):
    """Schema for updating an enrollment.

    Any status may be set; there is no enforced transition order.
    """

    status: Optional[EnrollmentStatus] = None
    notes: Optional[str] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        if v is None:
            raise ValueError("status cannot be null")
        return v


class EnrollmentRead(BaseModel):
    """Schema for reading an enrollment."""

    id: str
    client_id: str
    program_id: str
    enrollment_date: datetime
    status: EnrollmentStatus
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True,
    }


class EnrollmentWithProgramRead(EnrollmentRead):
    program: Optional[ProgramRead] = None


class EnrollmentWithClientRead(EnrollmentRead):
    client: Optional[ClientRead] = None


class ClientWithProgramsRead(ClientRead):
    """A client together with all of its enrollments (any status)."""

    enrollments: List[EnrollmentWithProgramRead] = []


class ProgramWithClientsRead(ProgramRead):
    """A health program together with all of its enrollments (any status)."""

    enrollments: List[EnrollmentWithClientRead] = []
