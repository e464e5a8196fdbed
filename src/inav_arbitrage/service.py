"""
ArbitrageService: public entrypoint consumed by the dashboard / API layer.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from inav_arbitrage.analytics.arbitrage import ArbitrageCalculator
from inav_arbitrage.config.state import ConfigState
from inav_arbitrage.infrastructure.observability import get_service_logger
from inav_arbitrage.ingestion.adapters.nse_plugin.client import NseClient
from inav_arbitrage.ingestion.adapters.nse_plugin.dependency_container import (
    NseDependencyContainer,
)
from inav_arbitrage.ingestion.adapters.nse_plugin.session_manager import SessionManager
from inav_arbitrage.ingestion.adapters.nse_plugin.symbol_registry import (
    InstrumentRegistry,
)
from inav_arbitrage.ingestion.orchestration.batch_fetcher import (
    BatchOrchestrator,
    BatchResult,
    SingleQuoteResult,
    SymbolError,
)
from inav_arbitrage.ingestion.ports.http import IHttpClient
from inav_arbitrage.shared.models.enums import AssetClass
from inav_arbitrage.shared.models.quotes import (
    HealthSnapshot,
    IndexQuote,
    InstrumentConfig,
)
from inav_arbitrage.shared.models.signals import ArbitrageSignal, DashboardStats
from inav_arbitrage.storage.quote_cache import QuoteCache

log = get_service_logger()


@dataclass
class IndicesResult:
    indices: list[IndexQuote] = field(default_factory=list)
    errors: list[SymbolError] = field(default_factory=list)


class ArbitrageService:
    """Composes session, fetch pipeline, cache, batching and analytics.

    Every collaborator is owned by the instance; nothing is process-global.
    """

    def __init__(
        self,
        client: NseClient,
        session_manager: SessionManager,
        cache: QuoteCache,
        orchestrator: BatchOrchestrator,
        registry: InstrumentRegistry,
        calculator: ArbitrageCalculator | None = None,
        http_client: IHttpClient | None = None,
    ) -> None:
        self.client = client
        self.session_manager = session_manager
        self.cache = cache
        self.orchestrator = orchestrator
        self.registry = registry
        self.calculator = calculator or ArbitrageCalculator()
        self._http_client = http_client

    @classmethod
    def from_config(
        cls,
        state: ConfigState | None = None,
        container: NseDependencyContainer | None = None,
    ) -> ArbitrageService:
        """Build a fully wired service from configuration state."""
        state = state or ConfigState()
        container = container or NseDependencyContainer(state.to_nse_config())
        registry = (
            InstrumentRegistry(state.instruments)
            if state.instruments
            else InstrumentRegistry.with_defaults()
        )
        cache = QuoteCache(state.to_cache_config())
        client = container.create_nse_client()
        orchestrator = BatchOrchestrator(
            fetcher=client,
            cache=cache,
            config=state.to_batch_config(),
            instrument_lookup=registry.get,
        )
        return cls(
            client=client,
            session_manager=container.session_manager,
            cache=cache,
            orchestrator=orchestrator,
            registry=registry,
            http_client=container.http_client,
        )

    async def __aenter__(self) -> ArbitrageService:
        await self.warm_up()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def warm_up(self) -> bool:
        """Initial session refresh; failure is logged and tolerated."""
        ok = await self.session_manager.refresh()
        log.info("service_warmed_up", session_connected=ok)
        return ok

    async def close(self) -> None:
        if self._http_client is not None:
            await self._http_client.close()

    # ------------------------------------------------------------------
    # Quotes
    # ------------------------------------------------------------------

    async def fetch_all(self, universe: Sequence[str] | None = None) -> BatchResult:
        """Quotes for `universe` (default: every registered instrument)."""
        symbols = (
            [s.upper() for s in universe] if universe is not None else self.registry.symbols()
        )
        # One session check up front so the first window doesn't race to refresh.
        await self.session_manager.get_headers()
        return await self.orchestrator.fetch_all(symbols)

    async def fetch_one(self, symbol: str) -> SingleQuoteResult:
        """Quote for one symbol; stale data with the error beats a failure."""
        return await self.orchestrator.fetch_one(symbol.strip().upper())

    async def get_indices(self) -> IndicesResult:
        """Every configured index, sequentially; failures are reported per index."""
        result = IndicesResult()
        for key in self.client.index_registry.keys():
            try:
                result.indices.append(await self.client.fetch_index(key))
            except Exception as e:
                log.warning("index_unavailable", index=key, error=str(e))
                result.errors.append(SymbolError(symbol=key, error=str(e)))
        return result

    # ------------------------------------------------------------------
    # Analytics
    # ------------------------------------------------------------------

    async def arbitrage_signals(
        self, universe: Sequence[str] | None = None
    ) -> list[ArbitrageSignal]:
        batch = await self.fetch_all(universe)
        return self.calculator.derive(batch.quotes)

    async def dashboard_stats(
        self, universe: Sequence[str] | None = None
    ) -> DashboardStats:
        batch = await self.fetch_all(universe)
        return self.calculator.summarize(batch.quotes)

    # ------------------------------------------------------------------
    # Instruments, session, health
    # ------------------------------------------------------------------

    def register_instrument(
        self, symbol: str, name: str, asset_class: AssetClass | str = AssetClass.OTHER
    ) -> InstrumentConfig:
        """Add or overwrite an instrument.

        Raises:
            ValueError: If symbol or name is blank
        """
        if not symbol or not symbol.strip() or not name or not name.strip():
            raise ValueError("Missing required fields: symbol, name")
        return self.registry.register(symbol, name.strip(), asset_class)

    def list_instruments(self) -> list[InstrumentConfig]:
        return self.registry.all()

    async def force_session_refresh(self) -> bool:
        ok = await self.session_manager.refresh()
        log.info("session_refresh_requested", success=ok)
        return ok

    async def health_snapshot(self, probe: bool = False) -> HealthSnapshot:
        """Cache coverage and session state; `probe` forces a session refresh first."""
        if probe:
            await self.session_manager.refresh()
        age = self.session_manager.age_seconds
        return HealthSnapshot(
            cached_symbols=self.cache.symbols(),
            total_symbols=len(self.registry),
            session_connected=self.session_manager.is_connected,
            session_age_seconds=round(age, 1) if age is not None else None,
        )
