"""
Position lifecycle operations.

This module opens positions (reserving margin from the free balance) and
closes them (releasing margin plus realized PnL back to the balance).
Both operations are pure transformations: they never mutate the input
snapshot and never touch storage.
"""

from dataclasses import dataclass, replace

from loguru import logger

from paper_trading.core.enums import Direction, OpenErrorKind
from paper_trading.core.exceptions.paper_trading import (
    InsufficientFundsError,
    PositionNotFoundError,
    ValidationError,
)
from paper_trading.core.identifiers import IdFactory, new_position_id
from paper_trading.core.types.financial import calc_rr, calculate_margin, is_finite_positive
from paper_trading.core.utils.validation import (
    validate_direction,
    validate_finite,
    validate_pair,
    validate_positive,
    validate_tags,
)

from .portfolio import OpenResult, Portfolio
from .position import Position
from .trade import Trade

# Parameter name -> declined-open reason for non-positive values
_POSITIVE_PARAMS: tuple[tuple[str, OpenErrorKind], ...] = (
    ("leverage", OpenErrorKind.INVALID_LEVERAGE),
    ("size_usdt", OpenErrorKind.INVALID_SIZE),
    ("entry_price", OpenErrorKind.INVALID_ENTRY_PRICE),
)


@dataclass(frozen=True)
class OpenPositionParams:
    """Inputs for opening a position.

    ``size_usdt`` is the notional (margin × leverage). ``opened_at`` is an
    opaque display timestamp supplied by the caller.
    """

    pair: str
    direction: Direction
    leverage: float
    size_usdt: float
    entry_price: float
    stop_loss: float
    take_profit: float
    tags: tuple[str, ...] = ()
    notes: str = ""
    opened_at: str = ""


def _validate_open_params(params: OpenPositionParams) -> None:
    """Reject inputs that would corrupt margin or PnL arithmetic.

    Raises:
        ValidationError: With the offending parameter named first
    """
    for name, _ in _POSITIVE_PARAMS:
        validate_positive(getattr(params, name), name)
    validate_finite(params.stop_loss, "stop_loss")
    validate_finite(params.take_profit, "take_profit")


def _classify_validation_error(params: OpenPositionParams) -> OpenErrorKind:
    """Find which parameter failed validation, positive-valued ones first."""
    for name, kind in _POSITIVE_PARAMS:
        try:
            validate_positive(getattr(params, name), name)
        except ValidationError:
            return kind
    return OpenErrorKind.INVALID_INPUT


def _check_margin(margin: float, balance: float) -> None:
    """Raise when the free balance cannot cover the margin."""
    if margin > balance:
        raise InsufficientFundsError(required=margin, available=balance, operation="opening position")


def open_position(
    portfolio: Portfolio,
    params: OpenPositionParams,
    id_factory: IdFactory | None = None,
) -> OpenResult:
    """Open a new position, reserving its margin from the free balance.

    Declined requests return the original portfolio object unchanged together
    with an error message and kind; nothing is raised for them.

    Args:
        portfolio: Current portfolio snapshot
        params: Position parameters
        id_factory: Identifier generator (defaults to a random token)

    Returns:
        OpenResult with the new portfolio, or the input portfolio and an error
    """
    try:
        _validate_open_params(params)
        pair = validate_pair(params.pair)
        direction = validate_direction(params.direction)
        tags = validate_tags(params.tags)
    except ValidationError as e:
        kind = _classify_validation_error(params)
        logger.warning(f"Open declined: {e}")
        return OpenResult(portfolio=portfolio, error=str(e), error_kind=kind)

    margin = calculate_margin(params.size_usdt, params.leverage)
    if not is_finite_positive(margin):
        logger.warning(f"Open declined: margin {margin} out of range")
        return OpenResult(
            portfolio=portfolio,
            error=(
                f"Position size {params.size_usdt} at leverage {params.leverage} "
                "does not give a usable margin."
            ),
            error_kind=OpenErrorKind.INVALID_SIZE,
        )
    try:
        _check_margin(margin, portfolio.balance)
    except InsufficientFundsError as e:
        logger.warning(f"Open declined: {e}")
        return OpenResult(
            portfolio=portfolio,
            error=(
                f"Insufficient balance. Need ${e.required:.2f} margin "
                f"(available ${e.available:.2f})."
            ),
            error_kind=OpenErrorKind.INSUFFICIENT_MARGIN,
        )

    position = Position(
        id=(id_factory or new_position_id)(),
        opened_at=params.opened_at,
        pair=pair,
        direction=direction,
        leverage=params.leverage,
        size_usdt=params.size_usdt,
        margin=margin,
        entry_price=params.entry_price,
        stop_loss=params.stop_loss,
        take_profit=params.take_profit,
        rr=calc_rr(params.entry_price, params.stop_loss, params.take_profit),
        tags=tags,
        notes=params.notes,
    )
    logger.info(
        f"Opened {position.direction} {position.pair} x{position.leverage} "
        f"size={position.size_usdt:.2f} margin={margin:.2f} id={position.id}"
    )

    return OpenResult(
        portfolio=replace(
            portfolio,
            balance=portfolio.balance - margin,
            open_positions=(position, *portfolio.open_positions),
        )
    )


def _book_close(
    portfolio: Portfolio, position: Position, close_price: float, closed_at: str
) -> Portfolio:
    """Move a position into the history at close_price.

    Raises:
        ValidationError: If close_price or the resulting balance is not usable
    """
    validate_positive(close_price, "close_price")
    trade = Trade.from_position(position, close_price, closed_at)
    balance = validate_finite(portfolio.balance + trade.margin + trade.realized_pnl, "balance")
    logger.info(
        f"Closed {trade.direction} {trade.pair} id={trade.id} at {close_price} "
        f"pnl={trade.realized_pnl:.4f} result={trade.result}"
    )

    return Portfolio(
        balance=balance,
        open_positions=tuple(p for p in portfolio.open_positions if p.id != position.id),
        history=(trade, *portfolio.history),
    )


def close_position(
    portfolio: Portfolio,
    position_id: str,
    close_price: float,
    closed_at: str,
) -> Portfolio:
    """Close an open position at a price and book it into the history.

    An unknown ``position_id`` or a close price that is not a finite positive
    number is a silent no-op: the input portfolio is returned as is, so
    callers must not read the return value as success.
    Realized losses are not capped at the locked margin; the resulting
    balance may be negative.

    Args:
        portfolio: Current portfolio snapshot
        position_id: Identifier of the open position
        close_price: Price the position is closed at
        closed_at: Opaque display timestamp of the close

    Returns:
        Updated portfolio
    """
    position = portfolio.find_position(position_id)
    if position is None:
        logger.debug(f"Close ignored, no open position with id {position_id}")
        return portfolio

    try:
        return _book_close(portfolio, position, close_price, closed_at)
    except ValidationError as e:
        logger.warning(f"Close ignored for id {position_id}: {e}")
        return portfolio


def close_position_strict(
    portfolio: Portfolio,
    position_id: str,
    close_price: float,
    closed_at: str,
) -> Portfolio:
    """Close a position, raising instead of silently ignoring unknown ids.

    Raises:
        PositionNotFoundError: If no open position matches ``position_id``
        ValidationError: If close_price is not a finite positive number
    """
    position = portfolio.find_position(position_id)
    if position is None:
        raise PositionNotFoundError(position_id)
    return _book_close(portfolio, position, close_price, closed_at)
