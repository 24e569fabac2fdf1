"""
JSON file key-value store.

All keys live in one JSON object on disk. Writes go to a temporary file
that atomically replaces the original, so a crash mid-write never leaves
a truncated file behind.
"""

import json
import os
import tempfile
from pathlib import Path
from threading import RLock

from loguru import logger

from paper_trading.core.exceptions.paper_trading import StorageError
from paper_trading.core.interfaces.storage import IKeyValueStore


class JsonFileKeyValueStore(IKeyValueStore):
    """Persists string values in a single JSON object file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = RLock()

    def _read_all(self) -> dict[str, str]:
        """Read the whole file; a missing or corrupted file reads as empty."""
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable store file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring store file {self.path}: expected a JSON object")
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: dict[str, str]) -> None:
        """Atomically replace the file with data."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                    json.dump(data, tmp, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            logger.error(f"File system error writing {self.path}: {e}")
            raise StorageError(f"Failed to write store file {self.path}") from e

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read_all()
            data[key] = value
            self._write_all(data)
            logger.debug(f"Stored {len(value)} chars under '{key}' in {self.path}")
