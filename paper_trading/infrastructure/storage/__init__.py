"""
Key-value storage backends.

This module provides the concrete stores the portfolio store persists into.
"""

from .json_file_store import JsonFileKeyValueStore
from .memory_store import InMemoryKeyValueStore

__all__ = ["InMemoryKeyValueStore", "JsonFileKeyValueStore"]
