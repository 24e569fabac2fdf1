"""
Position identifier generation.

Identifiers must stay unique for positions opened within the same clock
tick, so they come from a random 128-bit token rather than a timestamp.
"""

import uuid
from collections.abc import Callable

IdFactory = Callable[[], str]


def new_position_id() -> str:
    """Return a fresh random position identifier."""
    return uuid.uuid4().hex
