"""
In-memory quote cache.

Bounds upstream request rate: a quote younger than the TTL is served without
a fetch. Entries are never evicted, so the last good quote stays available as
a stale fallback after a failed live fetch.
"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from inav_arbitrage.infrastructure.observability import get_storage_logger
from inav_arbitrage.ingestion.config.value_objects import CacheConfig
from inav_arbitrage.shared.models.quotes import Quote

log = get_storage_logger("quote-cache")


@dataclass(frozen=True)
class CacheEntry:
    """A stored quote and the clock reading at which it was stored."""

    quote: Quote
    stored_at: float

    def age(self, now: float) -> float:
        return now - self.stored_at


class QuoteCache:
    """Per-symbol, TTL-bounded quote store with stale-fallback reads."""

    def __init__(
        self,
        config: CacheConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or CacheConfig()
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, CacheEntry] = {}

    @property
    def ttl(self) -> float:
        return self.config.ttl_seconds

    def put(self, symbol: str, quote: Quote) -> None:
        """Store `quote`, replacing any previous entry and restarting its TTL."""
        entry = CacheEntry(quote=quote, stored_at=self._clock())
        with self._lock:
            self._entries[symbol] = entry

    def get_fresh(self, symbol: str) -> Quote | None:
        """Stored quote if younger than the TTL, else None. Never evicts."""
        with self._lock:
            entry = self._entries.get(symbol)
        if entry is None:
            return None
        if entry.age(self._clock()) < self.ttl:
            return entry.quote
        return None

    def get_stale_fallback(self, symbol: str) -> Quote | None:
        """Last stored quote regardless of age, flagged stale. None if never stored."""
        with self._lock:
            entry = self._entries.get(symbol)
        if entry is None:
            return None
        log.debug(
            "stale_fallback_served",
            symbol=symbol,
            age_seconds=round(entry.age(self._clock()), 3),
        )
        return entry.quote.as_stale()

    def symbols(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, symbol: str) -> bool:
        with self._lock:
            return symbol in self._entries
