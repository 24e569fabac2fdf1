"""
In-memory key-value store.
"""

from threading import RLock

from paper_trading.core.interfaces.storage import IKeyValueStore


class InMemoryKeyValueStore(IKeyValueStore):
    """Thread-safe dictionary-backed store, scoped to the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self._lock = RLock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
