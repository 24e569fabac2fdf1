"""
Domain models and the position lifecycle engine.
"""

from .portfolio import OpenResult, Portfolio
from .portfolio_trading import (
    OpenPositionParams,
    close_position,
    close_position_strict,
    open_position,
)
from .position import Position
from .trade import Trade

__all__ = [
    "OpenPositionParams",
    "OpenResult",
    "Portfolio",
    "Position",
    "Trade",
    "close_position",
    "close_position_strict",
    "open_position",
]
