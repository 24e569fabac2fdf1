"""
Validation utilities for core domain models.

Provides consistent validation across the application.
"""

import math
from typing import Any

from paper_trading.core.enums import Direction
from paper_trading.core.exceptions.paper_trading import ValidationError


def validate_direction(direction: Any, param_name: str = "direction") -> Direction:
    """Validate that a value is, or can be read as, a Direction.

    Args:
        direction: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The validated Direction

    Raises:
        ValidationError: If direction is not Long or Short
    """
    if isinstance(direction, Direction):
        return direction
    if isinstance(direction, str):
        try:
            return Direction.from_string(direction)
        except ValueError as e:
            raise ValidationError(f"Invalid {param_name}: {e}") from e
    raise ValidationError(f"{param_name} must be Direction enum, got {type(direction).__name__}")


def validate_finite(value: float, param_name: str) -> float:
    """Validate that a numeric value is finite (not NaN or infinite).

    Raises:
        ValidationError: If value is NaN or infinite
    """
    if not isinstance(value, int | float) or isinstance(value, bool):
        raise ValidationError(f"{param_name} must be a number, got {type(value).__name__}")
    if not math.isfinite(value):
        raise ValidationError(f"{param_name} must be finite, got {value}")
    return float(value)


def validate_positive(value: float, param_name: str) -> float:
    """Validate that a numeric value is finite and positive.

    Args:
        value: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The validated value

    Raises:
        ValidationError: If value is not positive
    """
    value = validate_finite(value, param_name)
    if value <= 0:
        raise ValidationError(f"{param_name} must be positive, got {value}")
    return value


def validate_tags(tags: Any, param_name: str = "tags") -> tuple[str, ...]:
    """Validate a tag collection and return it as a tuple.

    Duplicates are kept as given.
    """
    if isinstance(tags, str):
        raise ValidationError(f"{param_name} must be a collection of strings, not a string")
    try:
        items = tuple(tags)
    except TypeError as e:
        raise ValidationError(f"{param_name} must be iterable, got {type(tags).__name__}") from e
    for tag in items:
        if not isinstance(tag, str):
            raise ValidationError(f"{param_name} entries must be strings, got {type(tag).__name__}")
    return items


def validate_pair(pair: Any, param_name: str = "pair") -> str:
    """Validate a free-form pair symbol such as "BTC/USDT"."""
    if not isinstance(pair, str) or not pair.strip():
        raise ValidationError(f"{param_name} must be a non-empty string")
    return pair.strip()
