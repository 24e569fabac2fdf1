"""
Financial helpers for paper trading calculations.

All values are plain floats. Quantities are approximated at entry:
quantity = notional size / entry price. Leverage never re-enters the
PnL formulas because it is already reflected in the notional size.

IMPORTANT PRECISION CONSIDERATIONS:
- Unrealized PnL is returned unrounded; callers round for display
- Realized PnL is rounded to PNL_DECIMALS when a trade is booked
- Break-even detection uses a tolerance relative to the entry price
"""

import math
from typing import Protocol

from paper_trading.core.constants import (
    BREAKEVEN_TOLERANCE,
    NO_RR_LABEL,
    PNL_DECIMALS,
    RR_DECIMALS,
)
from paper_trading.core.enums import Direction, TradeResult

ZERO = 0.0


class PositionLike(Protocol):
    """Anything that can be valued like an open position."""

    direction: Direction
    entry_price: float
    size_usdt: float


def is_finite_positive(value: float) -> bool:
    """Check that a value is a finite number greater than zero."""
    return math.isfinite(value) and value > ZERO


def round_pnl(pnl: float) -> float:
    """Round PnL to the booked precision.

    Args:
        pnl: PnL value to round

    Returns:
        Rounded PnL as float
    """
    return round(pnl, PNL_DECIMALS)


def calculate_margin(size_usdt: float, leverage: float) -> float:
    """Calculate the margin locked for a notional size.

    Args:
        size_usdt: Notional position size in quote currency
        leverage: Leverage multiplier

    Returns:
        Required margin as float

    Raises:
        ValueError: If leverage is not positive
    """
    if leverage <= ZERO:
        raise ValueError(f"Leverage must be positive, got {leverage}")
    return size_usdt / leverage


def calculate_quantity(size_usdt: float, entry_price: float) -> float:
    """Approximate base-asset quantity at entry."""
    return size_usdt / entry_price


def calculate_pnl(
    direction: Direction,
    entry_price: float,
    exit_price: float,
    size_usdt: float,
) -> float:
    """Calculate unrounded PnL between entry and exit.

    Args:
        direction: Long or Short
        entry_price: Entry price of position
        exit_price: Exit (or current) price
        size_usdt: Notional position size in quote currency

    Returns:
        PnL as float
    """
    quantity = calculate_quantity(size_usdt, entry_price)
    if direction == Direction.LONG:
        return (exit_price - entry_price) * quantity
    return (entry_price - exit_price) * quantity


def calc_rr(entry: float, stop_loss: float, take_profit: float) -> str:
    """Format the risk:reward ratio of a trade plan.

    Sides of stop-loss and take-profit are not checked against direction;
    any numeric combination is accepted.

    Examples:
        >>> calc_rr(100, 90, 120)
        '1:3.00'
        >>> calc_rr(100, 100, 120)
        '—'
    """
    risk = abs(entry - stop_loss)
    reward = abs(take_profit - entry)
    if risk == ZERO:
        return NO_RR_LABEL
    return f"1:{reward / risk:.{RR_DECIMALS}f}"


def calc_unrealized_pnl(position: PositionLike, current_price: float) -> float:
    """Mark an open position to a hypothetical current price.

    Examples:
        >>> from types import SimpleNamespace
        >>> pos = SimpleNamespace(direction=Direction.LONG, entry_price=100.0, size_usdt=1000.0)
        >>> calc_unrealized_pnl(pos, 110.0)
        100.0
    """
    return calculate_pnl(
        direction=position.direction,
        entry_price=position.entry_price,
        exit_price=current_price,
        size_usdt=position.size_usdt,
    )


def classify_result(direction: Direction, entry_price: float, close_price: float) -> TradeResult:
    """Classify a close as Win, Loss or BreakEven from price action alone.

    Stop-loss and take-profit levels are not consulted: closing at any
    price goes through the same rule.
    """
    move = close_price - entry_price if direction == Direction.LONG else entry_price - close_price
    if abs(move) < BREAKEVEN_TOLERANCE * entry_price:
        return TradeResult.BREAK_EVEN
    return TradeResult.WIN if move > ZERO else TradeResult.LOSS
