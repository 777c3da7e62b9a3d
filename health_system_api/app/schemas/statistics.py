"""Pydantic schema for the dashboard overview."""

from typing import List

from pydantic import BaseModel

from .client import ClientRead


class DashboardStats(BaseModel):
    total_clients: int
    total_programs: int
    active_enrollments: int
    recent_clients: List[ClientRead]
