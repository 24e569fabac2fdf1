"""
Display formatting helpers.
"""

from datetime import datetime

from paper_trading.core.constants import OPENED_AT_FORMAT


def format_timestamp(moment: datetime | None = None) -> str:
    """Format a moment as the opaque display timestamp stored on positions.

    Args:
        moment: Time to format (default now)

    Returns:
        String such as "Mar 05, 2025 14:30"
    """
    return (moment or datetime.now()).strftime(OPENED_AT_FORMAT)


def format_signed_amount(amount: float, prefix: str = "$") -> str:
    """Format an amount with an explicit sign, e.g. "+$12.50" or "-$3.00"."""
    sign = "+" if amount >= 0 else "-"
    return f"{sign}{prefix}{abs(amount):.2f}"
