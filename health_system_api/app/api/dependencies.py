"""
Shared FastAPI dependencies.

The entity store is created by ``create_app`` and attached to
``app.state``; handlers receive it through ``Depends(get_store)``
rather than importing a module‑level instance.
"""

from fastapi import Request

from health_system_api.app.core.store import HealthSystemStore


def get_store(request: Request) -> HealthSystemStore:
    """Return the store attached to the running application."""
    return request.app.state.store
