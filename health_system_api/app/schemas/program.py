"""
Pydantic schemas for health programs.

A health program is a named service offering (e.g. "HIV Prevention")
that clients can be enrolled in.  Both the name and the description
are required when a program is created.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .common import ensure_not_blank


class ProgramCreate(BaseModel):
    """Schema for creating a new health program."""

    name: str = Field(..., description="Program name", examples=["HIV Prevention"])
    description: str = Field(..., description="What the program offers")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return ensure_not_blank(v, "Program name")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return ensure_not_blank(v, "Program description")


class ProgramUpdate(BaseModel):
    """Schema for updating a health program.

    All fields are optional; only provided values will be updated.
    Provided values must not be empty.
    """

    name: Optional[str] = None
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return ensure_not_blank(v, "Program name")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return ensure_not_blank(v, "Program description")


class ProgramRead(BaseModel):
    """Schema for reading a health program."""

    id: str
    name: str
    description: str
    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True,
    }


class PublicProgramRead(BaseModel):
    """Program fields exposed without authentication."""

    id: str
    name: str
    description: str

    model_config = {
        "from_attributes": True,
    }
