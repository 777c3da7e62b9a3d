"""
Pydantic schemas for clients.

A client is a person receiving services.  On creation the names,
date of birth, gender, contact number and address are required;
email and medical history are optional.  Updates accept any subset
of fields, but required fields cannot be cleared.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from health_system_api.app.core.store import Gender
from .common import ensure_email, ensure_not_blank


_REQUIRED_TEXT_FIELDS = {
    "first_name": "First name",
    "last_name": "Last name",
    "contact_number": "Contact number",
    "address": "Address",
}


class ClientCreate(BaseModel):
    """Schema for registering a new client."""

    first_name: str = Field(..., examples=["John"])
    last_name: str = Field(..., examples=["Doe"])
    date_of_birth: date = Field(..., examples=["1985-05-15"])
    gender: Gender
    contact_number: str = Field(..., examples=["+1234567890"])
    email: Optional[str] = Field(None, examples=["john.doe@example.com"])
    address: str = Field(..., examples=["123 Main St"])
    medical_history: Optional[str] = None

    @field_validator("first_name", "last_name", "contact_number", "address")
    @classmethod
    def validate_required_text(cls, v, info):
        return ensure_not_blank(v, _REQUIRED_TEXT_FIELDS[info.field_name])

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return ensure_email(v)


class ClientUpdate(BaseModel):
    """Schema for updating a client.

    Omitted fields keep their current value.  ``email`` and
    ``medical_history`` may be set to ``null`` to clear them; every
    other field must hold a value when present.
    """

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    contact_number: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    medical_history: Optional[str] = None

    @field_validator("first_name", "last_name", "contact_number", "address")
    @classmethod
    def validate_required_text(cls, v, info):
        return ensure_not_blank(v, _REQUIRED_TEXT_FIELDS[info.field_name])

    @field_validator("date_of_birth", "gender")
    @classmethod
    def validate_not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return ensure_email(v)


class ClientRead(BaseModel):
    """Schema for reading a client."""

    id: str
    first_name: str
    last_name: str
    date_of_birth: date
    gender: Gender
    contact_number: str
    email: Optional[str] = None
    address: str
    medical_history: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True,
    }
