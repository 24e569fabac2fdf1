"""
Portfolio metrics and reporting.

Read-only views over a portfolio snapshot: the headline summary shown
next to the portfolio, and pandas frames of the closed-trade history.
"""

from collections.abc import Mapping
from dataclasses import asdict, dataclass

import pandas as pd

from paper_trading.core.enums import TradeResult

from .portfolio import Portfolio
from .trade import TRADE_WIRE_KEYS


@dataclass(frozen=True)
class PortfolioSummary:
    """Headline figures of a portfolio."""

    balance: float
    locked_margin: float
    equity: float
    unrealized_pnl: float
    realized_pnl: float
    closed_trades: int
    wins: int
    losses: int
    break_evens: int
    win_rate: float | None

    def to_dict(self) -> dict[str, float | int | None]:
        """Convert summary to dictionary."""
        return asdict(self)


def summarize(portfolio: Portfolio, prices: Mapping[str, float] | None = None) -> PortfolioSummary:
    """Compute the portfolio summary.

    Args:
        portfolio: Portfolio snapshot
        prices: Current prices keyed by position id or by pair. Positions
            without a price are valued at entry (zero unrealized PnL).

    Returns:
        PortfolioSummary
    """
    prices = prices or {}
    unrealized = 0.0
    for position in portfolio.open_positions:
        price = prices.get(position.id, prices.get(position.pair, position.entry_price))
        unrealized += position.unrealized_pnl(price)

    results = [t.result for t in portfolio.history]
    wins = results.count(TradeResult.WIN)
    closed = len(results)

    return PortfolioSummary(
        balance=portfolio.balance,
        locked_margin=portfolio.locked_margin,
        equity=portfolio.equity,
        unrealized_pnl=unrealized,
        realized_pnl=portfolio.realized_pnl,
        closed_trades=closed,
        wins=wins,
        losses=results.count(TradeResult.LOSS),
        break_evens=results.count(TradeResult.BREAK_EVEN),
        win_rate=(wins / closed * 100) if closed else None,
    )


def history_frame(portfolio: Portfolio) -> pd.DataFrame:
    """One row per closed trade, most recent first, with persisted column names."""
    columns = list(TRADE_WIRE_KEYS.values())
    if not portfolio.history:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame([t.to_dict() for t in portfolio.history], columns=columns)


def pair_breakdown(portfolio: Portfolio) -> pd.DataFrame:
    """Aggregate closed trades per pair.

    Returns:
        DataFrame indexed by pair with trades, wins, realizedPnL and winRate
        columns, sorted by realized PnL descending
    """
    frame = history_frame(portfolio)
    if frame.empty:
        return pd.DataFrame(
            columns=["trades", "wins", "realizedPnL", "winRate"],
            index=pd.Index([], name="pair"),
        )

    frame["isWin"] = frame["result"] == TradeResult.WIN.value
    grouped = frame.groupby("pair").agg(
        trades=("id", "count"),
        wins=("isWin", "sum"),
        realizedPnL=("realizedPnL", "sum"),
    )
    grouped["winRate"] = grouped["wins"] / grouped["trades"] * 100
    return grouped.sort_values("realizedPnL", ascending=False)
