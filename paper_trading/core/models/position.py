"""
Position domain model.

A Position is created only by the open operation and destroyed only by the
matching close, which replaces it 1:1 with a Trade.
"""

from dataclasses import dataclass
from typing import Any

from paper_trading.core.enums import Direction
from paper_trading.core.exceptions.paper_trading import ValidationError
from paper_trading.core.types.financial import calc_unrealized_pnl, calculate_quantity
from paper_trading.core.utils.validation import (
    validate_direction,
    validate_finite,
    validate_positive,
    validate_tags,
)

# Snapshot field name -> persisted key
POSITION_WIRE_KEYS: dict[str, str] = {
    "id": "id",
    "opened_at": "openedAt",
    "pair": "pair",
    "direction": "direction",
    "leverage": "leverage",
    "size_usdt": "sizeUSDT",
    "margin": "margin",
    "entry_price": "entryPrice",
    "stop_loss": "stopLoss",
    "take_profit": "takeProfit",
    "rr": "rr",
    "tags": "tags",
    "notes": "notes",
}


def read_wire_fields(data: dict[str, Any], wire_keys: dict[str, str]) -> dict[str, Any]:
    """Map persisted keys back to field names.

    Raises:
        ValidationError: If the record is not a mapping or a key is missing
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Expected a mapping, got {type(data).__name__}")
    missing = [wire for wire in wire_keys.values() if wire not in data]
    if missing:
        raise ValidationError(f"Missing fields: {', '.join(missing)}")
    return {name: data[wire] for name, wire in wire_keys.items()}


@dataclass(frozen=True)
class Position:
    """An open, unrealized leveraged position.

    ``size_usdt`` is the full notional exposure in quote currency and
    ``margin`` the share of it locked from the free balance
    (size_usdt / leverage). ``opened_at`` is an opaque display string.
    """

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
    tags: tuple[str, ...] = ()
    notes: str = ""

    def __post_init__(self) -> None:
        """Normalize collections and validate position data."""
        object.__setattr__(self, "direction", validate_direction(self.direction))
        object.__setattr__(self, "tags", validate_tags(self.tags))

        if not self.id:
            raise ValidationError("Position id must be non-empty")
        validate_positive(self.entry_price, "Entry price")
        validate_positive(self.leverage, "Leverage")
        validate_positive(self.size_usdt, "Position size")
        validate_positive(self.margin, "Margin")
        validate_finite(self.stop_loss, "Stop loss")
        validate_finite(self.take_profit, "Take profit")

    @property
    def quantity(self) -> float:
        """Base-asset quantity approximated at entry."""
        return calculate_quantity(self.size_usdt, self.entry_price)

    def unrealized_pnl(self, current_price: float) -> float:
        """Calculate unrealized PnL at a hypothetical current price.

        Args:
            current_price: Current market price

        Returns:
            Unrealized PnL as float (unrounded)
        """
        return calc_unrealized_pnl(self, current_price)

    def to_dict(self) -> dict[str, Any]:
        """Convert position to its persisted representation."""
        record = {wire: getattr(self, name) for name, wire in POSITION_WIRE_KEYS.items()}
        record["direction"] = self.direction.value
        record["tags"] = list(self.tags)
        return record

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Position":
        """Restore a position from its persisted representation.

        Raises:
            ValidationError: If the record is malformed
        """
        fields = read_wire_fields(data, POSITION_WIRE_KEYS)
        try:
            return cls(**fields)
        except TypeError as e:
            raise ValidationError(f"Malformed position record: {e}") from e
