"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
API can start without any configuration; in a production deployment
you should at least override ``SECRET_KEY`` and point
``STORAGE_PATH`` at a writable location.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Health System API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))
    algorithm: str = os.getenv("ALGORITHM", "HS256")

    # Optional long‑lived operator token.  Requests carrying this token in
    # the Authorization header are accepted without JWT decoding.
    static_api_token: str = os.getenv("STATIC_API_TOKEN", "")

    # Path of the JSON snapshot file.  When empty the store lives purely
    # in memory and is lost on restart.  Relative paths are resolved
    # against the current working directory by the storage module.
    storage_path: str = os.getenv("STORAGE_PATH", "")

    # Populate an empty store with the demo programs and clients on startup.
    seed_demo_data: bool = os.getenv("SEED_DEMO_DATA", "false").lower() in {"1", "true", "yes"}


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
