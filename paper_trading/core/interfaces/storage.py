"""
Storage interfaces.

The portfolio store depends only on this key-value capability, never on
a concrete backend.
"""

from abc import ABC, abstractmethod


class IKeyValueStore(ABC):
    """Abstract interface for string key-value persistence."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the value stored under key, or None if absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any prior value."""
