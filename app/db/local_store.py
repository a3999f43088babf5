"""Local durable key -> JSON blob store.

Synchronous by contract: reads never wait on the network. When a directory is
configured each key is one ``<key>.json`` file; otherwise blobs live in memory
for the lifetime of the process.
"""
from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from app.common.errors import StorageUnavailable

logger = logging.getLogger("storage.local")


class StorageKeys:
    CURRENT_USER = "eco_current_user"
    USERS = "eco_users"
    SUBMISSIONS = "eco_submissions"
    LESSONS = "eco_lessons"
    QUIZZES = "eco_quizzes"
    CHALLENGES = "eco_challenges"
    ADMIN_CODES = "eco_admin_codes"
    ACTIVITY_LOGS = "eco_activity_logs"
    PENDING_SYNC = "eco_pending_sync"


class LocalStore:
    def __init__(self, root: Optional[str | Path] = None) -> None:
        self.root = Path(root) if root else None
        self._memory: Dict[str, str] = {}
        if self.root is not None:
            self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        assert self.root is not None
        return self.root / f"{key}.json"

    def _read_raw(self, key: str) -> Optional[str]:
        if self.root is None:
            return self._memory.get(key)
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageUnavailable(f"Local store read failed for {key}") from exc

    def has(self, key: str) -> bool:
        return self._read_raw(key) is not None

    def get(self, key: str, default: Any = None) -> Any:
        raw = self._read_raw(key)
        if raw is None:
            return copy.deepcopy(default)
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            logger.warning("local_store corrupt blob key=%s; treating as empty", key)
            return copy.deepcopy(default)

    def set(self, key: str, value: Any) -> None:
        try:
            raw = json.dumps(value, default=str, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise StorageUnavailable(f"Value for {key} is not JSON serialisable") from exc
        if self.root is None:
            self._memory[key] = raw
            return
        try:
            fd, tmp = tempfile.mkstemp(dir=self.root, prefix=f".{key}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(raw)
            os.replace(tmp, self._path(key))
        except OSError as exc:
            raise StorageUnavailable(f"Local store write failed for {key}") from exc

    def remove(self, key: str) -> None:
        if self.root is None:
            self._memory.pop(key, None)
            return
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as exc:
            raise StorageUnavailable(f"Local store remove failed for {key}") from exc
