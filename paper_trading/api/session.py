"""
Portfolio session.

Holds the one in-memory authoritative portfolio of a process. Every
mutation is a read-modify-write under a lock followed by a save, so two
concurrent requests can never both act on the same stale snapshot.
"""

from threading import RLock

from loguru import logger

from paper_trading.core.config import Settings
from paper_trading.core.interfaces.storage import IKeyValueStore
from paper_trading.core.models import (
    OpenPositionParams,
    OpenResult,
    Portfolio,
    close_position,
    open_position,
)
from paper_trading.core.models.portfolio_store import PairRegistry, PortfolioStore, known_pairs
from paper_trading.core.utils.decorators import log_trades, require_open_position
from paper_trading.core.utils.formatting import format_timestamp
from paper_trading.infrastructure.storage import InMemoryKeyValueStore, JsonFileKeyValueStore


def build_store(settings: Settings) -> IKeyValueStore:
    """Pick the storage backend configured in settings."""
    if settings.storage_path is None:
        logger.info("Using in-memory portfolio storage")
        return InMemoryKeyValueStore()
    logger.info(f"Using portfolio storage file {settings.storage_path}")
    return JsonFileKeyValueStore(settings.storage_path)


class PortfolioSession:
    """Serializes portfolio operations and persists after each change."""

    def __init__(self, store: IKeyValueStore, storage_key: str | None = None) -> None:
        self._store = PortfolioStore(store, key=storage_key) if storage_key else PortfolioStore(store)
        self._pairs = PairRegistry(store)
        self._lock = RLock()
        self._portfolio = self._store.load()

    @classmethod
    def from_settings(cls, settings: Settings) -> "PortfolioSession":
        """Create a session from application settings."""
        return cls(build_store(settings), storage_key=settings.storage_key)

    @property
    def portfolio(self) -> Portfolio:
        """Current authoritative snapshot."""
        with self._lock:
            return self._portfolio

    def _commit(self, portfolio: Portfolio) -> None:
        self._store.save(portfolio)
        self._portfolio = portfolio

    @log_trades
    def open(self, params: OpenPositionParams) -> OpenResult:
        """Open a position; declined requests leave state untouched."""
        with self._lock:
            result = open_position(self._portfolio, params)
            if result.ok:
                self._commit(result.portfolio)
            return result

    @log_trades
    def close(self, position_id: str, close_price: float, closed_at: str | None = None) -> Portfolio:
        """Close a position; unknown ids leave state untouched."""
        with self._lock:
            updated = close_position(
                self._portfolio, position_id, close_price, closed_at or format_timestamp()
            )
            if updated is not self._portfolio:
                self._commit(updated)
            return updated

    @log_trades
    def reset(self) -> Portfolio:
        """Restore the starting balance and drop all activity."""
        with self._lock:
            self._portfolio = self._store.reset()
            return self._portfolio

    @require_open_position()
    def unrealized_pnl(self, position_id: str, price: float) -> float:
        """Mark one open position to a price.

        Raises:
            PositionNotFoundError: If the position is not open
        """
        position = self.portfolio.find_position(position_id)
        return position.unrealized_pnl(price)  # type: ignore[union-attr]

    def known_pairs(self) -> list[str]:
        """Pairs to offer: defaults, custom, and those already traded."""
        return known_pairs(self.portfolio, self._pairs.custom_pairs())

    def add_pair(self, pair: str) -> bool:
        """Register a custom pair; False if already known."""
        return self._pairs.add(pair)
