"""
Portfolio snapshot model.

A Portfolio is an immutable value: every engine operation receives one
snapshot and returns a new one. Collections are ordered most recent first.
"""

import math
from dataclasses import dataclass
from typing import Any

from paper_trading.core.constants import DEFAULT_BALANCE
from paper_trading.core.enums import OpenErrorKind
from paper_trading.core.exceptions.paper_trading import ValidationError

from .position import Position
from .trade import Trade


@dataclass(frozen=True)
class Portfolio:
    """Free balance plus open positions and closed-trade history.

    ``balance`` is uncommitted capital only; margin locked in open
    positions is not part of it.
    """

    balance: float
    open_positions: tuple[Position, ...] = ()
    history: tuple[Trade, ...] = ()

    def __post_init__(self) -> None:
        """Freeze collections passed as lists."""
        object.__setattr__(self, "open_positions", tuple(self.open_positions))
        object.__setattr__(self, "history", tuple(self.history))

    @classmethod
    def fresh(cls, balance: float = DEFAULT_BALANCE) -> "Portfolio":
        """Create a portfolio with the starting balance and no activity."""
        return cls(balance=balance)

    def find_position(self, position_id: str) -> Position | None:
        """Return the open position with the given id, if any."""
        return next((p for p in self.open_positions if p.id == position_id), None)

    @property
    def locked_margin(self) -> float:
        """Total margin locked by open positions."""
        return sum((p.margin for p in self.open_positions), 0.0)

    @property
    def equity(self) -> float:
        """Equity baseline absent market movement: balance + locked margin."""
        return self.balance + self.locked_margin

    @property
    def realized_pnl(self) -> float:
        """Total realized PnL over the history."""
        return sum((t.realized_pnl for t in self.history), 0.0)

    def to_dict(self) -> dict[str, Any]:
        """Convert portfolio to its persisted snapshot."""
        return {
            "balance": self.balance,
            "openPositions": [p.to_dict() for p in self.open_positions],
            "history": [t.to_dict() for t in self.history],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Portfolio":
        """Restore a portfolio from its persisted snapshot.

        Raises:
            ValidationError: If the snapshot is malformed
        """
        if not isinstance(data, dict):
            raise ValidationError(f"Portfolio snapshot must be a mapping, got {type(data).__name__}")

        balance = data.get("balance")
        if isinstance(balance, bool) or not isinstance(balance, int | float):
            raise ValidationError(f"Portfolio balance must be a number, got {balance!r}")
        if not math.isfinite(balance):
            raise ValidationError(f"Portfolio balance must be finite, got {balance}")

        positions = data.get("openPositions", [])
        history = data.get("history", [])
        if not isinstance(positions, list) or not isinstance(history, list):
            raise ValidationError("Portfolio openPositions and history must be lists")

        return cls(
            balance=float(balance),
            open_positions=tuple(Position.from_dict(p) for p in positions),
            history=tuple(Trade.from_dict(t) for t in history),
        )


@dataclass(frozen=True)
class OpenResult:
    """Outcome of an open-position request.

    A declined request carries the caller's original portfolio object
    together with a human-readable error and its kind.
    """

    portfolio: Portfolio
    error: str | None = None
    error_kind: OpenErrorKind | None = None

    @property
    def ok(self) -> bool:
        """True when the position was opened."""
        return self.error is None
