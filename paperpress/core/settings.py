"""Persistent key-value storage for user settings."""
import json
import logging
import os
import tempfile
import threading
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class SettingsStore:
    """A small JSON-backed key-value store.

    Values live in a single JSON object on disk. Every read goes back to the
    file so edits made by other processes (or by hand) are picked up without
    a restart. When ``path`` is None the store only lives in memory.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = os.path.expanduser(path) if path else None
        self._memory: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, Any]:
        if self.path is None:
            return dict(self._memory)

        if not os.path.exists(self.path):
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read settings file {self.path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Settings file {self.path} does not hold a JSON object, ignoring it")
            return {}
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        if self.path is None:
            self._memory = dict(data)
            return

        directory = os.path.dirname(self.path) or "."
        os.makedirs(directory, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".settings-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value for ``key`` or ``default``."""
        with self._lock:
            return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``."""
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def delete(self, key: str) -> None:
        """Remove ``key`` if present."""
        with self._lock:
            data = self._read()
            if key in data:
                del data[key]
                self._write(data)

    def all(self) -> Dict[str, Any]:
        """Return a copy of every stored value."""
        with self._lock:
            return self._read()
