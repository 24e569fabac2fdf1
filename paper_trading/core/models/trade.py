"""
Trade domain model.

A Trade is the immutable, terminal snapshot of a closed Position.
"""

from dataclasses import dataclass
from typing import Any

from paper_trading.core.enums import Direction, TradeResult
from paper_trading.core.exceptions.paper_trading import ValidationError
from paper_trading.core.types.financial import (
    calculate_pnl,
    classify_result,
    round_pnl,
)
from paper_trading.core.utils.validation import (
    validate_direction,
    validate_finite,
    validate_positive,
    validate_tags,
)

from .position import POSITION_WIRE_KEYS, Position, read_wire_fields

TRADE_WIRE_KEYS: dict[str, str] = {
    **POSITION_WIRE_KEYS,
    "closed_at": "closedAt",
    "close_price": "closePrice",
    "realized_pnl": "realizedPnL",
    "result": "result",
}


@dataclass(frozen=True)
class Trade:
    """Represents a closed, realized trade."""

    id: str
    opened_at: str
    pair: str
    direction: Direction
    leverage: float
    size_usdt: float
    margin: float
    entry_price: float
    stop_loss: float
    take_profit: float
    rr: str
    tags: tuple[str, ...]
    notes: str
    closed_at: str
    close_price: float
    realized_pnl: float
    result: TradeResult

    def __post_init__(self) -> None:
        """Normalize enums and collections after initialization."""
        object.__setattr__(self, "direction", validate_direction(self.direction))
        object.__setattr__(self, "tags", validate_tags(self.tags))
        try:
            object.__setattr__(self, "result", TradeResult(self.result))
        except ValueError as e:
            raise ValidationError(f"Invalid trade result: {self.result}") from e
        for name in ("entry_price", "leverage", "size_usdt", "margin", "close_price"):
            validate_positive(getattr(self, name), name)
        for name in ("stop_loss", "take_profit", "realized_pnl"):
            validate_finite(getattr(self, name), name)

    @classmethod
    def from_position(cls, position: Position, close_price: float, closed_at: str) -> "Trade":
        """Book a position at a close price.

        Realized PnL is rounded to 4 decimal places and the result is
        classified from price action alone.
        """
        pnl = calculate_pnl(
            direction=position.direction,
            entry_price=position.entry_price,
            exit_price=close_price,
            size_usdt=position.size_usdt,
        )
        return cls(
            id=position.id,
            opened_at=position.opened_at,
            pair=position.pair,
            direction=position.direction,
            leverage=position.leverage,
            size_usdt=position.size_usdt,
            margin=position.margin,
            entry_price=position.entry_price,
            stop_loss=position.stop_loss,
            take_profit=position.take_profit,
            rr=position.rr,
            tags=position.tags,
            notes=position.notes,
            closed_at=closed_at,
            close_price=close_price,
            realized_pnl=round_pnl(pnl),
            result=classify_result(position.direction, position.entry_price, close_price),
        )

    @property
    def return_on_margin(self) -> float:
        """Realized PnL as a percentage of the locked margin."""
        return self.realized_pnl / self.margin * 100 if self.margin else 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert trade to its persisted representation."""
        record = {wire: getattr(self, name) for name, wire in TRADE_WIRE_KEYS.items()}
        record["direction"] = self.direction.value
        record["result"] = self.result.value
        record["tags"] = list(self.tags)
        return record

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Trade":
        """Restore a trade from its persisted representation.

        Raises:
            ValidationError: If the record is malformed
        """
        fields = read_wire_fields(data, TRADE_WIRE_KEYS)
        try:
            return cls(**fields)
        except TypeError as e:
            raise ValidationError(f"Malformed trade record: {e}") from e
