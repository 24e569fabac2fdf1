#!/usr/bin/env python3
"""
Paper Trading CLI

Opens and closes virtual leveraged positions against a portfolio kept in a
local JSON file, and prints the portfolio with its summary.
"""

import argparse
import sys
from pathlib import Path

from loguru import logger

from paper_trading.core.constants import LEVERAGE_OPTIONS
from paper_trading.core.enums import Direction
from paper_trading.core.exceptions.paper_trading import PositionNotFoundError, ValidationError
from paper_trading.core.logging_setup import setup_logging
from paper_trading.core.models import OpenPositionParams, Portfolio, close_position_strict, open_position
from paper_trading.core.models.portfolio_metrics import pair_breakdown, summarize
from paper_trading.core.models.portfolio_store import PairRegistry, PortfolioStore, known_pairs
from paper_trading.core.utils.formatting import format_signed_amount, format_timestamp
from paper_trading.infrastructure.storage import JsonFileKeyValueStore

DEFAULT_STORE_PATH = Path.home() / ".paper_trading" / "portfolio.json"


def print_portfolio(portfolio: Portfolio) -> None:
    """Print balance, open positions, recent history and summary."""
    summary = summarize(portfolio)
    print(f"Balance:        ${summary.balance:.2f}")
    print(f"Locked margin:  ${summary.locked_margin:.2f}")
    print(f"Equity:         ${summary.equity:.2f}")
    print(f"Realized PnL:   {format_signed_amount(summary.realized_pnl)}")
    win_rate = "—" if summary.win_rate is None else f"{summary.win_rate:.0f}%"
    print(f"Win rate:       {win_rate} ({summary.wins}/{summary.closed_trades})")

    print(f"\nOpen positions ({len(portfolio.open_positions)}):")
    for p in portfolio.open_positions:
        print(
            f"  {p.id}  {p.opened_at}  {p.pair} {p.direction} x{p.leverage:g}  "
            f"size ${p.size_usdt:.2f}  margin ${p.margin:.2f}  entry {p.entry_price}  "
            f"SL {p.stop_loss}  TP {p.take_profit}  R:R {p.rr}"
        )

    print(f"\nHistory ({len(portfolio.history)}):")
    for t in portfolio.history[:10]:
        print(
            f"  {t.id}  {t.closed_at}  {t.pair} {t.direction}  "
            f"{t.entry_price} -> {t.close_price}  {format_signed_amount(t.realized_pnl)}  {t.result}"
        )

    breakdown = pair_breakdown(portfolio)
    if not breakdown.empty:
        print("\nBy pair:")
        print(breakdown.to_string())


def cmd_show(store: PortfolioStore, _args: argparse.Namespace) -> int:
    print_portfolio(store.load())
    return 0


def cmd_open(store: PortfolioStore, args: argparse.Namespace) -> int:
    params = OpenPositionParams(
        pair=args.pair,
        direction=Direction.from_string(args.direction),
        leverage=args.leverage,
        size_usdt=args.size,
        entry_price=args.entry,
        stop_loss=args.stop_loss,
        take_profit=args.take_profit,
        tags=tuple(args.tag or ()),
        notes=args.notes,
        opened_at=format_timestamp(),
    )
    result = open_position(store.load(), params)
    if not result.ok:
        logger.error(result.error)
        return 1
    store.save(result.portfolio)
    logger.success(f"Opened position {result.portfolio.open_positions[0].id}")
    print_portfolio(result.portfolio)
    return 0


def cmd_close(store: PortfolioStore, args: argparse.Namespace) -> int:
    try:
        updated = close_position_strict(
            store.load(), args.position_id, args.price, format_timestamp()
        )
    except (PositionNotFoundError, ValidationError) as e:
        logger.error(str(e))
        return 1
    store.save(updated)
    trade = updated.history[0]
    logger.success(f"Closed {trade.pair}: {format_signed_amount(trade.realized_pnl)} ({trade.result})")
    print_portfolio(updated)
    return 0


def cmd_reset(store: PortfolioStore, _args: argparse.Namespace) -> int:
    print_portfolio(store.reset())
    return 0


def cmd_pairs(store: PortfolioStore, args: argparse.Namespace) -> int:
    registry = PairRegistry(store.backend)
    if args.add:
        try:
            added = registry.add(args.add)
        except ValidationError as e:
            logger.error(f"Cannot add pair: {e}")
            return 1
        if added:
            logger.success(f"Added pair {args.add}")
        else:
            logger.info(f"Pair {args.add} already known")
    for pair in known_pairs(store.load(), registry.custom_pairs()):
        print(pair)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Virtual leveraged long/short trading against a local portfolio",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Open a 5x long on BTC with $500 notional
  python paper_trade.py open --pair BTC/USDT --direction long --leverage 5 --size 500 \\
      --entry 60000 --stop-loss 58000 --take-profit 66000 --tag OB --tag FVG

  # Close it
  python paper_trade.py close <position-id> --price 61000

  # Show portfolio / start over
  python paper_trade.py show
  python paper_trade.py reset
        """,
    )
    parser.add_argument(
        "--store", type=Path, default=DEFAULT_STORE_PATH, help="Portfolio JSON file"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("show", help="Show the portfolio").set_defaults(func=cmd_show)

    open_p = sub.add_parser("open", help="Open a position")
    open_p.add_argument("--pair", required=True)
    open_p.add_argument("--direction", required=True, choices=["long", "short", "Long", "Short"])
    open_p.add_argument(
        "--leverage", type=float, default=1.0, help=f"Common: {', '.join(map(str, LEVERAGE_OPTIONS))}"
    )
    open_p.add_argument("--size", type=float, required=True, help="Notional size in USDT")
    open_p.add_argument("--entry", type=float, required=True)
    open_p.add_argument("--stop-loss", type=float, required=True)
    open_p.add_argument("--take-profit", type=float, required=True)
    open_p.add_argument("--tag", action="append", help="Setup tag (repeatable)")
    open_p.add_argument("--notes", default="")
    open_p.set_defaults(func=cmd_open)

    close_p = sub.add_parser("close", help="Close a position")
    close_p.add_argument("position_id")
    close_p.add_argument("--price", type=float, required=True)
    close_p.set_defaults(func=cmd_close)

    sub.add_parser("reset", help="Reset to the starting balance").set_defaults(func=cmd_reset)

    pairs_p = sub.add_parser("pairs", help="List known pairs")
    pairs_p.add_argument("--add", help="Register a custom pair")
    pairs_p.set_defaults(func=cmd_pairs)

    return parser


def main() -> int:
    args = build_parser().parse_args()
    setup_logging(debug=args.debug)
    store = PortfolioStore(JsonFileKeyValueStore(args.store))
    return args.func(store, args)


if __name__ == "__main__":
    sys.exit(main())
