"""
Batch Orchestrator
Fetches the instrument universe in paced, bounded-concurrency windows.
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from inav_arbitrage.infrastructure.observability import get_ingestion_logger
from inav_arbitrage.ingestion.config.value_objects import BatchConfig
from inav_arbitrage.shared.models.quotes import InstrumentConfig, Quote
from inav_arbitrage.storage.quote_cache import QuoteCache

log = get_ingestion_logger("batch-orchestrator", upstream="nse")


class IQuoteFetcher(Protocol):
    async def fetch_quote(
        self, symbol: str, instrument: InstrumentConfig | None = None
    ) -> Quote: ...


@dataclass(frozen=True)
class SymbolError:
    """A symbol that produced no quote at all in a batch."""

    symbol: str
    error: str


@dataclass
class BatchResult:
    """Quotes in input order plus one error per symbol that yielded nothing."""

    quotes: list[Quote] = field(default_factory=list)
    errors: list[SymbolError] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.quotes)

    @property
    def stale_count(self) -> int:
        return sum(1 for q in self.quotes if q.stale)


@dataclass
class SingleQuoteResult:
    """Outcome of a single-symbol lookup.

    `error` carries the live-fetch failure message when a stale quote was
    substituted; `cached` marks a fresh cache hit.
    """

    quote: Quote
    error: str | None = None
    cached: bool = False


@dataclass
class _Outcome:
    symbol: str
    quote: Quote | None = None
    error: str | None = None


class BatchOrchestrator:
    """
    Coordinates cache lookups and live fetches across many symbols.

    Responsibilities:
    - Serve fresh cache hits without touching the upstream
    - Fetch misses through the injected fetcher, at most `window_size` at once
    - Downgrade failures to stale quotes, or to per-symbol error entries
    - NOT responsible for: sessions, retries, parsing (delegated to the fetcher)
    """

    def __init__(
        self,
        fetcher: IQuoteFetcher,
        cache: QuoteCache,
        config: BatchConfig | None = None,
        instrument_lookup: Callable[[str], InstrumentConfig | None] | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.fetcher = fetcher
        self.cache = cache
        self.config = config or BatchConfig()
        self.instrument_lookup = instrument_lookup or (lambda symbol: None)
        self._sleep = sleep

    async def fetch_all(self, symbols: Sequence[str]) -> BatchResult:
        """
        Fetch every symbol, never failing wholesale.

        Args:
            symbols: Symbols in the order results should be returned

        Returns:
            BatchResult whose quotes follow `symbols` order
        """
        window_size = self.config.window_size
        windows = [
            list(symbols[i : i + window_size])
            for i in range(0, len(symbols), window_size)
        ]
        log.info("batch_started", symbols=len(symbols), windows=len(windows))

        result = BatchResult()
        for index, window in enumerate(windows):
            outcomes = await asyncio.gather(*(self._resolve(s) for s in window))
            # gather preserves argument order, so output order is positional.
            for outcome in outcomes:
                if outcome.quote is not None:
                    result.quotes.append(outcome.quote)
                else:
                    result.errors.append(
                        SymbolError(symbol=outcome.symbol, error=outcome.error or "")
                    )

            if index < len(windows) - 1:
                await self._sleep(self.config.pacing_delay)

        log.info(
            "batch_completed",
            quotes=result.count,
            stale=result.stale_count,
            errors=len(result.errors),
        )
        return result

    async def fetch_one(self, symbol: str) -> SingleQuoteResult:
        """
        Fetch one symbol, preferring a stale quote over a hard failure.

        Raises:
            NseAPIError: When the live fetch fails and nothing was ever cached
        """
        cached = self.cache.get_fresh(symbol)
        if cached is not None:
            return SingleQuoteResult(quote=cached, cached=True)

        try:
            quote = await self.fetcher.fetch_quote(symbol, self.instrument_lookup(symbol))
        except Exception as e:
            stale = self.cache.get_stale_fallback(symbol)
            if stale is None:
                log.error("quote_unavailable", symbol=symbol, error=str(e))
                raise
            log.warning("stale_quote_served", symbol=symbol, error=str(e))
            return SingleQuoteResult(quote=stale, error=str(e))

        self.cache.put(symbol, quote)
        return SingleQuoteResult(quote=quote)

    async def _resolve(self, symbol: str) -> _Outcome:
        cached = self.cache.get_fresh(symbol)
        if cached is not None:
            return _Outcome(symbol=symbol, quote=cached)

        try:
            quote = await self.fetcher.fetch_quote(symbol, self.instrument_lookup(symbol))
        except Exception as e:
            # One symbol's failure must never abort its window.
            stale = self.cache.get_stale_fallback(symbol)
            if stale is not None:
                log.warning("stale_quote_served", symbol=symbol, error=str(e))
                return _Outcome(symbol=symbol, quote=stale)
            log.error(
                "quote_unavailable",
                symbol=symbol,
                error_type=type(e).__name__,
                error=str(e),
            )
            return _Outcome(symbol=symbol, error=str(e))

        self.cache.put(symbol, quote)
        return _Outcome(symbol=symbol, quote=quote)
