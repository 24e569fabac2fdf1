"""
Utility decorators for logging and open-position checks.
"""

import dataclasses
import functools
import inspect
import time
import uuid
from collections.abc import Callable
from typing import Any, TypeVar

from loguru import logger

from paper_trading.core.exceptions.paper_trading import PositionNotFoundError

F = TypeVar("F", bound=Callable[..., Any])

_CONTEXT_PARAMS = (
    "position_id",
    "pair",
    "direction",
    "leverage",
    "size_usdt",
    "entry_price",
    "close_price",
)


def _serialize_parameter_value(value: Any) -> Any:
    """Serialize parameter value for logging."""
    if hasattr(value, "value"):
        return str(value.value)  # Handle enum values
    return value


def _extract_trading_context(bound_args: inspect.BoundArguments) -> dict[str, Any]:
    """Extract trading context from function arguments.

    Dataclass arguments (e.g. open-position parameters) are flattened so
    their trading fields land in the context too.
    """
    context: dict[str, Any] = {}
    for param_name, value in bound_args.arguments.items():
        if param_name == "self":
            continue
        if param_name in _CONTEXT_PARAMS:
            context[param_name] = _serialize_parameter_value(value)
        elif dataclasses.is_dataclass(value) and not isinstance(value, type):
            for field in dataclasses.fields(value):
                if field.name in _CONTEXT_PARAMS:
                    context[field.name] = _serialize_parameter_value(getattr(value, field.name))
    return context


def _outcome_fields(result: Any) -> dict[str, Any]:
    """Summarize a returned value for the completion log record."""
    fields: dict[str, Any] = {"result_type": type(result).__name__}
    if isinstance(result, bool | int | float | str):
        fields["result"] = result
    elif getattr(result, "error", None) is not None:
        fields["declined"] = str(result.error)
    return fields


def log_trades(func: F) -> F:
    """Decorator to log trading operations with correlation IDs.

    Every call gets a start record, then a success or failure record that
    repeats the trading context plus elapsed time. Exceptions propagate.
    """
    signature = inspect.signature(func)

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        bound_args = signature.bind(*args, **kwargs)
        bound_args.apply_defaults()
        context = {
            "correlation_id": uuid.uuid4().hex[:8],
            "timestamp": str(time.time()),
            **_extract_trading_context(bound_args),
        }
        name = func.__name__

        logger.info(f"Trading operation started: {name}", extra=context)
        started = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            logger.error(
                f"Trading operation failed: {name}",
                extra={
                    **context,
                    "success": False,
                    "execution_time_ms": round((time.perf_counter() - started) * 1000, 2),
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            )
            raise

        logger.success(
            f"Trading operation completed: {name}",
            extra={
                **context,
                "success": True,
                "execution_time_ms": round((time.perf_counter() - started) * 1000, 2),
                **_outcome_fields(result),
            },
        )
        return result

    return wrapper  # type: ignore


def require_open_position(
    id_param: str = "position_id",
) -> Callable[[F], F]:
    """Decorator to ensure a position is open before executing the method.

    The decorated method's owner must expose a ``portfolio`` attribute.
    """

    def decorator(func: F) -> F:
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            bound = signature.bind(*args, **kwargs).arguments
            portfolio = getattr(bound.get("self"), "portfolio", None)
            position_id = bound.get(id_param)
            if portfolio is not None and position_id is not None:
                if portfolio.find_position(position_id) is None:
                    raise PositionNotFoundError(position_id)
            return func(*args, **kwargs)

        return wrapper  # type: ignore

    return decorator
