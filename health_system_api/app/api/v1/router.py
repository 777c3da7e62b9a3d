"""
Top‑level router for version 1 of the API.

This router aggregates domain‑specific routers (clients, programs,
enrollments, statistics and the public listing) under a unified
prefix.  When new domains are introduced, update this file to include
their routers.
"""

from fastapi import APIRouter

from .endpoints import (
    clients,
    enrollments,
    programs,
    public,
    statistics,
)

router = APIRouter()

router.include_router(clients.router, prefix="/clients", tags=["clients"])
router.include_router(programs.router, prefix="/programs", tags=["programs"])
router.include_router(enrollments.router, prefix="/enrollments", tags=["enrollments"])
router.include_router(statistics.router, prefix="/statistics", tags=["statistics"])
router.include_router(public.router, prefix="/public", tags=["public"])
