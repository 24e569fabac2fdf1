"""
Unit tests for the position lifecycle operations.
Testing open/close semantics, capital conservation and declined opens.
"""

import math
from dataclasses import replace

import pytest

from paper_trading.core.constants import DEFAULT_BALANCE
from paper_trading.core.enums import Direction, OpenErrorKind, TradeResult
from paper_trading.core.exceptions.paper_trading import PositionNotFoundError, ValidationError
from paper_trading.core.models import (
    OpenPositionParams,
    Portfolio,
    close_position,
    close_position_strict,
    open_position,
)


class TestOpenPosition:
    """Test opening positions against the free balance."""

    def test_should_reserve_margin_and_prepend_position(
        self, fresh_portfolio: Portfolio, long_params: OpenPositionParams, sequential_ids
    ) -> None:
        """Test that a valid open deducts margin and adds the position first."""
        # Act
        result = open_position(fresh_portfolio, long_params, id_factory=sequential_ids)

        # Assert
        assert result.ok
        assert result.error is None
        assert result.error_kind is None
        portfolio = result.portfolio
        assert portfolio.balance == 800.0  # 1000 - 1000 / 5
        assert len(portfolio.open_positions) == 1
        position = portfolio.open_positions[0]
        assert position.id == "pos-1"
        assert position.margin == 200.0
        assert position.rr == "1:3.00"
        assert position.tags == ("OB", "FVG")
        assert position.notes == "Breakout retest"
        assert position.opened_at == "Mar 05, 2025 14:30"
        assert portfolio.history == ()

    def test_should_not_mutate_input_portfolio(
        self, fresh_portfolio: Portfolio, long_params: OpenPositionParams
    ) -> None:
        """Test that open returns a new snapshot and leaves the input alone."""
        result = open_position(fresh_portfolio, long_params)

        assert result.portfolio is not fresh_portfolio
        assert fresh_portfolio.balance == DEFAULT_BALANCE
        assert fresh_portfolio.open_positions == ()

    def test_should_put_most_recent_position_first(
        self, fresh_portfolio: Portfolio, long_params: OpenPositionParams, sequential_ids
    ) -> None:
        """Test ordering of open positions."""
        first = open_position(fresh_portfolio, long_params, id_factory=sequential_ids)
        second = open_position(
            first.portfolio,
            replace(long_params, pair="ETH/USDT", direction=Direction.SHORT),
            id_factory=sequential_ids,
        )

        ids = [p.id for p in second.portfolio.open_positions]
        assert ids == ["pos-2", "pos-1"]
        assert second.portfolio.balance == 600.0
        assert second.portfolio.open_positions[0].direction == Direction.SHORT

    def test_should_generate_unique_ids_for_rapid_opens(self, fresh_portfolio: Portfolio) -> None:
        """Test that default ids never collide within the same tick."""
        params = OpenPositionParams(
            pair="SOL/USDT",
            direction=Direction.LONG,
            leverage=1,
            size_usdt=10.0,
            entry_price=150.0,
            stop_loss=140.0,
            take_profit=170.0,
        )
        portfolio = fresh_portfolio
        for _ in range(50):
            portfolio = open_position(portfolio, params).portfolio

        ids = {p.id for p in portfolio.open_positions}
        assert len(ids) == 50
        assert portfolio.balance == pytest.approx(500.0)

    def test_should_allow_margin_equal_to_balance(self, fresh_portfolio: Portfolio) -> None:
        """Test that the whole balance may be committed."""
        params = OpenPositionParams(
            pair="BTC/USDT",
            direction=Direction.LONG,
            leverage=5,
            size_usdt=5000.0,
            entry_price=100.0,
            stop_loss=95.0,
            take_profit=110.0,
        )

        result = open_position(fresh_portfolio, params)

        assert result.ok
        assert result.portfolio.balance == 0.0

    def test_should_decline_when_margin_exceeds_balance(
        self, fresh_portfolio: Portfolio, long_params: OpenPositionParams
    ) -> None:
        """Test that insufficient balance returns the original portfolio and an error."""
        params = replace(long_params, size_usdt=10000.0, leverage=2)

        result = open_position(fresh_portfolio, params)

        assert not result.ok
        assert result.portfolio is fresh_portfolio
        assert result.error_kind == OpenErrorKind.INSUFFICIENT_MARGIN
        assert "Insufficient balance" in result.error
        assert "$5000.00" in result.error
        assert "$1000.00" in result.error

    @pytest.mark.parametrize(
        ("field", "value", "kind"),
        [
            ("leverage", 0, OpenErrorKind.INVALID_LEVERAGE),
            ("leverage", -5, OpenErrorKind.INVALID_LEVERAGE),
            ("leverage", math.nan, OpenErrorKind.INVALID_LEVERAGE),
            ("size_usdt", 0.0, OpenErrorKind.INVALID_SIZE),
            ("size_usdt", -100.0, OpenErrorKind.INVALID_SIZE),
            ("size_usdt", math.inf, OpenErrorKind.INVALID_SIZE),
            ("entry_price", 0.0, OpenErrorKind.INVALID_ENTRY_PRICE),
            ("entry_price", -1.0, OpenErrorKind.INVALID_ENTRY_PRICE),
            ("stop_loss", math.nan, OpenErrorKind.INVALID_INPUT),
            ("pair", "   ", OpenErrorKind.INVALID_INPUT),
            ("direction", "Sideways", OpenErrorKind.INVALID_INPUT),
        ],
    )
    def test_should_reject_invalid_inputs(
        self,
        fresh_portfolio: Portfolio,
        long_params: OpenPositionParams,
        field: str,
        value: object,
        kind: OpenErrorKind,
    ) -> None:
        """Test that invalid inputs are declined before any margin arithmetic."""
        result = open_position(fresh_portfolio, replace(long_params, **{field: value}))

        assert not result.ok
        assert result.portfolio is fresh_portfolio
        assert result.error_kind == kind
        assert result.error

    def test_should_accept_direction_given_as_string(
        self, fresh_portfolio: Portfolio, long_params: OpenPositionParams
    ) -> None:
        """Test that "short" is read as Direction.SHORT."""
        result = open_position(fresh_portfolio, replace(long_params, direction="short"))

        assert result.ok
        assert result.portfolio.open_positions[0].direction == Direction.SHORT

    def test_should_not_validate_stop_loss_side(
        self, fresh_portfolio: Portfolio, long_params: OpenPositionParams
    ) -> None:
        """Test that stop-loss above entry on a long is accepted."""
        params = replace(long_params, stop_loss=105.0, take_profit=130.0)

        result = open_position(fresh_portfolio, params)

        assert result.ok
        assert result.portfolio.open_positions[0].rr == "1:6.00"

    def test_should_label_zero_risk_plan(
        self, fresh_portfolio: Portfolio, long_params: OpenPositionParams
    ) -> None:
        """Test that stop-loss at entry yields the dash label."""
        result = open_position(fresh_portfolio, replace(long_params, stop_loss=100.0))

        assert result.portfolio.open_positions[0].rr == "—"

    @pytest.mark.parametrize(
        "size_usdt, leverage",
        [(5e-320, 1e10), (1e300, 1e-300)],
    )
    def test_should_decline_when_margin_is_not_representable(
        self,
        fresh_portfolio: Portfolio,
        long_params: OpenPositionParams,
        size_usdt: float,
        leverage: float,
    ) -> None:
        """Test that a margin underflowing to zero or overflowing is declined, not raised."""
        result = open_position(
            fresh_portfolio, replace(long_params, size_usdt=size_usdt, leverage=leverage)
        )

        assert not result.ok
        assert result.portfolio is fresh_portfolio
        assert result.error_kind == OpenErrorKind.INVALID_SIZE


class TestClosePosition:
    """Test closing positions and booking trades."""

    @pytest.fixture
    def opened(
        self, fresh_portfolio: Portfolio, long_params: OpenPositionParams, sequential_ids
    ) -> Portfolio:
        """Portfolio holding one 5x long at 100 (margin 200)."""
        return open_position(fresh_portfolio, long_params, id_factory=sequential_ids).portfolio

    def test_should_book_winning_long(self, opened: Portfolio) -> None:
        """Test closing a long above entry."""
        # Act
        closed = close_position(opened, "pos-1", 110.0, "Mar 06, 2025 09:00")

        # Assert
        assert closed.balance == pytest.approx(1100.0)  # 800 + 200 margin + 100 PnL
        assert closed.open_positions == ()
        assert len(closed.history) == 1
        trade = closed.history[0]
        assert trade.id == "pos-1"
        assert trade.realized_pnl == 100.0
        assert trade.result == TradeResult.WIN
        assert trade.close_price == 110.0
        assert trade.closed_at == "Mar 06, 2025 09:00"
        assert trade.opened_at == "Mar 05, 2025 14:30"
        assert trade.tags == ("OB", "FVG")

    def test_should_book_losing_short(
        self, fresh_portfolio: Portfolio, long_params: OpenPositionParams
    ) -> None:
        """Test closing a short above entry."""
        opened = open_position(
            fresh_portfolio, replace(long_params, direction=Direction.SHORT), id_factory=lambda: "s1"
        ).portfolio

        closed = close_position(opened, "s1", 110.0, "later")

        assert closed.history[0].realized_pnl == -100.0
        assert closed.history[0].result == TradeResult.LOSS
        assert closed.balance == pytest.approx(900.0)

    def test_should_restore_balance_when_closed_at_entry(self, opened: Portfolio) -> None:
        """Test round trip at entry price: break-even and no net PnL."""
        closed = close_position(opened, "pos-1", 100.0, "later")

        trade = closed.history[0]
        assert trade.result == TradeResult.BREAK_EVEN
        assert trade.realized_pnl == pytest.approx(0.0)
        assert closed.balance == pytest.approx(DEFAULT_BALANCE)

    def test_should_classify_small_move_as_break_even(self, opened: Portfolio) -> None:
        """Test the relative break-even band (0.01% of entry)."""
        closed = close_position(opened, "pos-1", 100.005, "later")

        trade = closed.history[0]
        assert trade.result == TradeResult.BREAK_EVEN
        assert trade.realized_pnl == pytest.approx(0.05)
        assert closed.balance == pytest.approx(1000.05)

    def test_should_conserve_capital_on_close(self, opened: Portfolio) -> None:
        """Test balance_after = balance_before + margin + realized PnL."""
        position = opened.open_positions[0]

        closed = close_position(opened, "pos-1", 93.7, "later")

        trade = closed.history[0]
        assert closed.balance == pytest.approx(opened.balance + position.margin + trade.realized_pnl)
        assert len(closed.open_positions) == len(opened.open_positions) - 1
        assert len(closed.history) == len(opened.history) + 1

    def test_should_round_realized_pnl_to_four_decimals(self, fresh_portfolio: Portfolio) -> None:
        """Test realized PnL precision."""
        params = OpenPositionParams(
            pair="XRP/USDT",
            direction=Direction.LONG,
            leverage=1,
            size_usdt=1000.0,
            entry_price=3.0,
            stop_loss=2.8,
            take_profit=3.6,
        )
        opened = open_position(fresh_portfolio, params, id_factory=lambda: "x").portfolio

        closed = close_position(opened, "x", 3.1, "later")

        assert closed.history[0].realized_pnl == 33.3333
        assert closed.balance == pytest.approx(1033.3333)

    def test_should_allow_negative_balance_after_leveraged_loss(
        self, fresh_portfolio: Portfolio
    ) -> None:
        """Test that realized losses are not capped at the locked margin."""
        params = OpenPositionParams(
            pair="BTC/USDT",
            direction=Direction.SHORT,
            leverage=20,
            size_usdt=20000.0,
            entry_price=100.0,
            stop_loss=102.0,
            take_profit=90.0,
        )
        opened = open_position(fresh_portfolio, params, id_factory=lambda: "big").portfolio
        assert opened.balance == 0.0

        closed = close_position(opened, "big", 110.0, "later")

        assert closed.history[0].realized_pnl == -2000.0
        assert closed.balance == pytest.approx(-1000.0)

    def test_should_ignore_unknown_position_id(self, opened: Portfolio) -> None:
        """Test that closing an unknown id is a silent no-op."""
        result = close_position(opened, "missing", 110.0, "later")

        assert result is opened
        assert result == opened

    @pytest.mark.parametrize("price", [math.nan, math.inf, -math.inf, 0.0, -5.0])
    def test_should_ignore_close_at_invalid_price(self, opened: Portfolio, price: float) -> None:
        """Test that a non-finite or non-positive price leaves the portfolio untouched."""
        closed = close_position(opened, "pos-1", price, "now")

        assert closed is opened
        assert closed.balance == 800.0
        assert closed.history == ()

    def test_should_ignore_close_that_overflows_pnl(self, opened: Portfolio) -> None:
        """Test that a price too large to book keeps the position open."""
        closed = close_position(opened, "pos-1", 1e308, "now")

        assert closed is opened
        assert math.isfinite(closed.balance)

    def test_should_not_close_same_position_twice(self, opened: Portfolio) -> None:
        """Test that a closed id cannot be closed again."""
        closed = close_position(opened, "pos-1", 110.0, "later")

        again = close_position(closed, "pos-1", 120.0, "even later")

        assert again is closed
        assert len(again.history) == 1

    def test_should_put_most_recent_trade_first(self, fresh_portfolio, long_params, sequential_ids) -> None:
        """Test history ordering and that only the closed position is removed."""
        portfolio = fresh_portfolio
        for _ in range(3):
            portfolio = open_position(portfolio, long_params, id_factory=sequential_ids).portfolio

        portfolio = close_position(portfolio, "pos-1", 105.0, "t1")
        portfolio = close_position(portfolio, "pos-3", 95.0, "t2")

        assert [t.id for t in portfolio.history] == ["pos-3", "pos-1"]
        assert [p.id for p in portfolio.open_positions] == ["pos-2"]

    def test_should_not_mutate_input_on_close(self, opened: Portfolio) -> None:
        """Test that the input snapshot keeps its open position."""
        close_position(opened, "pos-1", 110.0, "later")

        assert len(opened.open_positions) == 1
        assert opened.history == ()
        assert opened.balance == 800.0


class TestClosePositionStrict:
    """Test the raising variant of close."""

    def test_should_raise_for_unknown_id(self, fresh_portfolio: Portfolio) -> None:
        """Test that unknown ids raise PositionNotFoundError."""
        with pytest.raises(PositionNotFoundError, match="missing"):
            close_position_strict(fresh_portfolio, "missing", 100.0, "now")

    def test_should_close_known_id(
        self, fresh_portfolio: Portfolio, long_params: OpenPositionParams
    ) -> None:
        """Test that known ids close exactly like close_position."""
        opened = open_position(fresh_portfolio, long_params, id_factory=lambda: "k").portfolio

        strict = close_position_strict(opened, "k", 110.0, "now")

        assert strict == close_position(opened, "k", 110.0, "now")

    @pytest.mark.parametrize("price", [math.nan, math.inf, 0.0, -1.0])
    def test_should_raise_for_invalid_price(
        self, fresh_portfolio: Portfolio, long_params: OpenPositionParams, price: float
    ) -> None:
        """Test that an unusable close price raises ValidationError."""
        opened = open_position(fresh_portfolio, long_params, id_factory=lambda: "k").portfolio

        with pytest.raises(ValidationError, match="close_price"):
            close_position_strict(opened, "k", price, "now")
