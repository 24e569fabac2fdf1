"""
Shared fixtures for paper trading tests.
"""

import itertools

import pytest

from paper_trading.core.enums import Direction
from paper_trading.core.models import OpenPositionParams, Portfolio


@pytest.fixture
def fresh_portfolio() -> Portfolio:
    """Portfolio with the starting balance and no activity."""
    return Portfolio.fresh()


@pytest.fixture
def sequential_ids():
    """Deterministic id factory: pos-1, pos-2, ..."""
    counter = itertools.count(1)
    return lambda: f"pos-{next(counter)}"


@pytest.fixture
def long_params() -> OpenPositionParams:
    """5x long, $1000 notional at 100 (margin 200, quantity 10)."""
    return OpenPositionParams(
        pair="BTC/USDT",
        direction=Direction.LONG,
        leverage=5,
        size_usdt=1000.0,
        entry_price=100.0,
        stop_loss=90.0,
        take_profit=120.0,
        tags=("OB", "FVG"),
        notes="Breakout retest",
        opened_at="Mar 05, 2025 14:30",
    )
