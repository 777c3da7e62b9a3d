"""
Main entrypoint for the Health System API.

This module assembles the FastAPI application, sets up logging,
creates the entity store and includes versioned routers.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``.  Run it with uvicorn,
e.g.::

    uvicorn health_system_api.app.main:app --reload

Every response, including errors, uses the ``ApiResponse`` envelope:
request validation failures become HTTP 400, ``HTTPException`` keeps
its status code, and any other exception becomes HTTP 500.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.logging_config import setup_logging
from .core.seed import seed_demo_data
from .core.storage import SnapshotStorage
from .core.store import HealthSystemStore


logger = logging.getLogger(__name__)

_ERROR_LABELS = {
    status.HTTP_400_BAD_REQUEST: "Bad request",
    status.HTTP_401_UNAUTHORIZED: "Unauthorized",
    status.HTTP_403_FORBIDDEN: "Forbidden",
    status.HTTP_404_NOT_FOUND: "Not found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "Method not allowed",
}


def _error_body(error: str, message: Optional[str]) -> Dict[str, Any]:
    return {"success": False, "data": None, "error": error, "message": message}


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    msg = str(first.get("msg", "Invalid value"))
    # pydantic prefixes messages raised from validators
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, "):]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    if loc and first.get("type") != "value_error":
        return f"{'.'.join(loc)}: {msg}"
    return msg


def build_store() -> HealthSystemStore:
    """Create the store described by the settings and load its snapshot."""
    storage = SnapshotStorage(settings.storage_path) if settings.storage_path else None
    store = HealthSystemStore(storage=storage)
    store.load()
    if settings.seed_demo_data:
        seed_demo_data(store)
    return store


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        message = _first_validation_message(exc)
        logger.info("Validation error on %s %s: %s", request.method, request.url.path, message)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body("Validation error", message),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        label = _ERROR_LABELS.get(exc.status_code, "Error")
        return JSONResponse(
            status_code=exc.status_code,
            content=jsonable_encoder(_error_body(label, exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body("Server error", "An unexpected error occurred"),
        )


def create_app(store: Optional[HealthSystemStore] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    store : Optional[HealthSystemStore]
        Store to serve.  When omitted, one is built from the settings
        (snapshot file and demo data).

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Logging first so that store loading below is logged.
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)
    app.state.store = store if store is not None else build_store()

    register_exception_handlers(app)

    @app.get("/api/health", tags=["health"])
    async def health() -> Dict[str, str]:
        """Liveness probe; does not require authentication."""
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    app.include_router(v1_router, prefix="/api/v1")

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
