"""
Service layer for the dashboard overview.

The dashboard shows how many clients and programs are registered, how
many enrollments are currently active and the most recently
registered clients.
"""

from __future__ import annotations

from health_system_api.app.core.store import EnrollmentStatus, HealthSystemStore
from health_system_api.app.schemas.client import ClientRead
from health_system_api.app.schemas.statistics import DashboardStats


RECENT_CLIENTS_LIMIT = 5


class StatisticsService:
    """Service providing aggregated figures for the dashboard."""

    @classmethod
    async def overview(cls, store: HealthSystemStore) -> DashboardStats:
        active = sum(1 for e in store.enrollments if e.status == EnrollmentStatus.ACTIVE)
        # newest first; equal timestamps keep reverse registration order
        recent = sorted(reversed(store.clients), key=lambda c: c.created_at, reverse=True)[:RECENT_CLIENTS_LIMIT]
        return DashboardStats(
            total_clients=len(store.clients),
            total_programs=len(store.programs),
            active_enrollments=active,
            recent_clients=[ClientRead.model_validate(c) for c in recent],
        )
