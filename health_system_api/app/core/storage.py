"""
JSON snapshot persistence for the entity store.

The store keeps its three collections in memory.  This module
provides the load‑at‑startup / save‑on‑mutation boundary: the whole
state is written as a single JSON document keyed by a fixed store
name and restored verbatim on the next start.  There is no schema
versioning; the document layout is defined by
``HealthSystemStore.to_snapshot``.

Writes go to a temporary file in the target directory which then
replaces the snapshot atomically, so a crash mid‑write never leaves a
truncated file behind.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional


STORE_NAME = "health-system-storage"

logger = logging.getLogger(__name__)


class SnapshotError(Exception):
    """Raised when a snapshot cannot be read, parsed or decoded into entities."""


def resolve_storage_path(path: str) -> Path:
    """Resolve ``path`` against the current working directory unless absolute."""
    storage_path = Path(path)
    if not storage_path.is_absolute():
        storage_path = Path.cwd() / storage_path
    return storage_path.resolve()


class SnapshotStorage:
    """Read and write the store snapshot at a fixed file path."""

    def __init__(self, path: str) -> None:
        self.path = resolve_storage_path(path)

    def load(self) -> Optional[Dict[str, Any]]:
        """Return the stored state, or ``None`` if no snapshot exists yet.

        Raises
        ------
        SnapshotError
            If the file exists but is not valid JSON or lacks the
            ``health-system-storage`` key.
        """
        if not self.path.exists():
            logger.info("No snapshot at %s, starting with an empty store", self.path)
            return None
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                document = json.load(fh)
        except (OSError, json.JSONDecodeError) as exc:
            raise SnapshotError(f"Cannot read snapshot {self.path}: {exc}") from exc
        if not isinstance(document, dict) or not isinstance(document.get(STORE_NAME), dict):
            raise SnapshotError(f"Snapshot {self.path} has no '{STORE_NAME}' entry")
        logger.info("Loaded snapshot from %s", self.path)
        return document[STORE_NAME]

    def save(self, state: Dict[str, Any]) -> None:
        """Write ``state`` under the store name, replacing any previous snapshot."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump({STORE_NAME: state}, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise
        logger.debug("Saved snapshot to %s", self.path)
