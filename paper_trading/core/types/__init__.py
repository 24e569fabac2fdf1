"""
Core financial types and helpers.

This module provides the numeric helpers used by the position lifecycle engine.
"""

from .financial import (
    ZERO,
    PositionLike,
    calc_rr,
    calc_unrealized_pnl,
    calculate_margin,
    calculate_pnl,
    calculate_quantity,
    classify_result,
    is_finite_positive,
    round_pnl,
)

__all__ = [
    "ZERO",
    "PositionLike",
    "calc_rr",
    "calc_unrealized_pnl",
    "calculate_margin",
    "calculate_pnl",
    "calculate_quantity",
    "classify_result",
    "is_finite_positive",
    "round_pnl",
]
