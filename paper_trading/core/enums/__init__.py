"""
Core enumerations for the paper trading engine.

This module provides centralized enumerations for position direction,
trade outcomes and declined-open reasons.
"""

from .position_types import Direction, OpenErrorKind, TradeResult

__all__ = ["Direction", "TradeResult", "OpenErrorKind"]
