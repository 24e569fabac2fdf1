"""
Portfolio persistence.

Loads, saves and resets the single portfolio snapshot of a storage scope,
and keeps the user's custom trading pairs next to it. Both depend only on
the key-value store interface.
"""

import json
from collections.abc import Iterable

from loguru import logger

from paper_trading.core.constants import (
    DEFAULT_BALANCE,
    DEFAULT_PAIRS,
    PAIRS_STORAGE_KEY,
    PAPER_STORAGE_KEY,
)
from paper_trading.core.exceptions.paper_trading import ValidationError
from paper_trading.core.interfaces.storage import IKeyValueStore
from paper_trading.core.utils.validation import validate_pair

from .portfolio import Portfolio


class PortfolioStore:
    """Persists a portfolio snapshot under a fixed well-known key."""

    def __init__(
        self,
        store: IKeyValueStore,
        key: str = PAPER_STORAGE_KEY,
        starting_balance: float = DEFAULT_BALANCE,
    ) -> None:
        self._store = store
        self.key = key
        self.starting_balance = starting_balance

    @property
    def backend(self) -> IKeyValueStore:
        """Key-value store the snapshot lives in."""
        return self._store

    def _fresh(self) -> Portfolio:
        return Portfolio.fresh(self.starting_balance)

    def load(self) -> Portfolio:
        """Return the persisted snapshot, or a fresh portfolio.

        A missing or malformed snapshot never raises; it falls back to a
        fresh portfolio.
        """
        raw = self._store.get(self.key)
        if not raw:
            logger.debug(f"No portfolio stored under '{self.key}', starting fresh")
            return self._fresh()

        try:
            return Portfolio.from_dict(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Discarding malformed portfolio snapshot under '{self.key}': {e}")
            return self._fresh()

    def save(self, portfolio: Portfolio) -> None:
        """Persist the full snapshot, replacing any prior one."""
        self._store.set(self.key, json.dumps(portfolio.to_dict(), ensure_ascii=False))

    def reset(self) -> Portfolio:
        """Discard positions and history, persist and return a fresh portfolio."""
        fresh = self._fresh()
        self.save(fresh)
        logger.info(f"Portfolio reset to starting balance {self.starting_balance:.2f}")
        return fresh


def known_pairs(portfolio: Portfolio, custom_pairs: Iterable[str] = ()) -> list[str]:
    """List every pair worth offering, without duplicates.

    Order: defaults, custom pairs, open-position pairs, then history pairs.
    """
    candidates = [
        *DEFAULT_PAIRS,
        *custom_pairs,
        *(p.pair for p in portfolio.open_positions),
        *(t.pair for t in portfolio.history),
    ]
    return list(dict.fromkeys(candidates))


class PairRegistry:
    """Custom trading pairs added by the user, persisted as a JSON list."""

    def __init__(self, store: IKeyValueStore, key: str = PAIRS_STORAGE_KEY) -> None:
        self._store = store
        self.key = key

    def custom_pairs(self) -> list[str]:
        """Return the stored custom pairs; malformed data reads as none."""
        raw = self._store.get(self.key)
        if not raw:
            return []
        try:
            pairs = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Discarding malformed pair list under '{self.key}': {e}")
            return []
        if not isinstance(pairs, list) or not all(isinstance(p, str) for p in pairs):
            logger.warning(f"Discarding malformed pair list under '{self.key}'")
            return []
        return pairs

    def add(self, pair: str) -> bool:
        """Add a custom pair.

        Returns:
            False if the pair is already a default or custom pair

        Raises:
            ValidationError: If pair is empty
        """
        pair = validate_pair(pair)
        current = self.custom_pairs()
        if pair in DEFAULT_PAIRS or pair in current:
            return False
        self._store.set(self.key, json.dumps([*current, pair]))
        return True
