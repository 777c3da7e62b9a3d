"""
Response envelope and validation helpers shared by all schemas.

Every endpoint answers with ``ApiResponse``: ``success`` tells the
caller whether the request worked, ``data`` carries the payload,
``error`` a short error category (``"Validation error"``,
``"Not found"``, ...) and ``message`` a human readable sentence.
"""

import re
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field


T = TypeVar("T")

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class ApiResponse(BaseModel, Generic[T]):
    """Uniform response body."""

    success: bool = Field(True, description="Whether the request succeeded")
    data: Optional[T] = Field(None, description="Payload of a successful request")
    error: Optional[str] = Field(None, description="Short error category")
    message: Optional[str] = Field(None, description="Human readable message")


def ensure_not_blank(value, field_name: str):
    """Reject ``None`` and whitespace‑only strings for a required field."""
    if value is None or not str(value).strip():
        raise ValueError(f"{field_name} is required")
    return value


def ensure_email(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    if not _EMAIL_RE.match(value):
        raise ValueError("Invalid email")
    return value
