"""
Top‑level package for the Health System API.

This file makes ``health_system_api`` a Python package so that
modules within ``app`` can be imported using fully qualified names
like ``health_system_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
