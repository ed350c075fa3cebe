"""
Local JSON snapshot of stored file paths and their metadata.

The snapshot is an auxiliary cache kept next to the service. It is loaded
once at startup and rewritten after each successful upload. MongoDB stays the
source of truth; nothing reads records back from the snapshot.

File format: a JSON array of ``[stored file path, metadata]`` pairs.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)


class SnapshotCache:
    def __init__(self, path: Path) -> None:
        self.path = path
        self._entries: Dict[str, Any] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def put(self, content_path: str, metadata: Any) -> None:
        self._entries[content_path] = metadata

    def load(self) -> None:
        """
        Replace the in-memory entries with the snapshot file's contents.

        An empty file leaves the current entries untouched. A missing or
        unreadable file resets the cache to empty.
        """
        try:
            data = self.path.read_text(encoding="utf-8")
            if data.strip() == "":
                logger.warning(f"Snapshot {self.path} is empty, nothing to load")
                return
            self._entries = {content_path: metadata for content_path, metadata in json.loads(data)}
        except (OSError, ValueError, TypeError) as exc:
            logger.error(f"Error loading snapshot from {self.path}: {exc}")
            self._entries = {}
            return
        logger.info(f"Loaded {len(self)} snapshot entries from {self.path}")

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [[content_path, metadata] for content_path, metadata in self._entries.items()]
        self.path.write_text(json.dumps(payload), encoding="utf-8")

    def save_quietly(self) -> bool:
        try:
            self.save()
        except (OSError, TypeError, ValueError) as exc:
            logger.error(f"Error updating snapshot {self.path}: {exc}")
            return False
        logger.info("PDF files snapshot updated successfully")
        return True
