"""
Position direction and trade outcome enumerations.

Values match the persisted snapshot format, so they must not change.
"""

from enum import StrEnum


class Direction(StrEnum):
    """
    Allowed position directions.

    Defines whether a position profits from rising or falling prices.
    """

    LONG = "Long"
    SHORT = "Short"

    @property
    def is_long(self) -> bool:
        """Check if direction is long."""
        return self == self.LONG

    @property
    def is_short(self) -> bool:
        """Check if direction is short."""
        return self == self.SHORT

    def opposite(self) -> "Direction":
        """Get the opposite direction."""
        return self.SHORT if self.is_long else self.LONG  # type: ignore[return-value]

    @classmethod
    def from_string(cls, value: str) -> "Direction":
        """
        Convert string to Direction enum, with case-insensitive matching.

        Args:
            value: String representation of direction ("long", "SHORT", ...)

        Returns:
            Corresponding Direction enum value

        Raises:
            ValueError: If direction is not supported
        """
        for member in cls:
            if member.value.lower() == value.strip().lower():
                return member
        raise ValueError(
            f"Unsupported direction: {value}. "
            f"Supported directions: {', '.join([d.value for d in cls])}"
        )


class TradeResult(StrEnum):
    """
    Outcome classification of a closed trade.

    Derived from price action at close time only.
    """

    WIN = "Win"
    LOSS = "Loss"
    BREAK_EVEN = "BreakEven"

    @property
    def is_win(self) -> bool:
        """Check if the trade was a win."""
        return self == self.WIN


class OpenErrorKind(StrEnum):
    """Reasons an open-position request is declined."""

    INSUFFICIENT_MARGIN = "insufficient_margin"
    INVALID_LEVERAGE = "invalid_leverage"
    INVALID_SIZE = "invalid_size"
    INVALID_ENTRY_PRICE = "invalid_entry_price"
    INVALID_INPUT = "invalid_input"
