"""
Application package initializer.

This package contains the main entrypoint for the API and all of its
submodules.  The in‑memory entity store and its snapshot persistence
live in ``core``; request and response models in ``schemas``;
service classes in ``services``; and each domain (clients, programs,
enrollments) exposes a router defined in ``api/v1/endpoints``.
Versioning is handled by grouping routers under the
``api/<version>/`` hierarchy.
"""

from .main import app  # noqa: F401
