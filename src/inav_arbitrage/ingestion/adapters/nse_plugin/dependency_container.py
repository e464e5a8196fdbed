"""Dependency injection container for the NSE ingestion layer.

This is the single place where concrete implementations are chosen.

Usage:
    container = NseDependencyContainer(NseConfig())
    client = container.create_nse_client()
"""

from inav_arbitrage.ingestion.adapters.nse_plugin.client import NseClient
from inav_arbitrage.ingestion.adapters.nse_plugin.retry_handler import NseRetryHandler
from inav_arbitrage.ingestion.adapters.nse_plugin.session_manager import SessionManager
from inav_arbitrage.ingestion.adapters.nse_plugin.symbol_registry import IndexRegistry
from inav_arbitrage.ingestion.config.value_objects import NseConfig
from inav_arbitrage.ingestion.connectors.aiohttp_client import AiohttpClient
from inav_arbitrage.ingestion.ports.http import IHttpClient


class NseDependencyContainer:
    """Dependency injection container for the NSE client.

    Responsible for:
    1. Choosing concrete implementations for each protocol
    2. Wiring dependencies together, sharing one HTTP client and one session

    Tests can subclass this and override factory methods to inject mocks.
    """

    def __init__(self, config: NseConfig | None = None):
        self.config = config or NseConfig()
        self._http_client: IHttpClient | None = None
        self._session_manager: SessionManager | None = None

    def create_http_client(self) -> IHttpClient:
        """Create HTTP client implementation (currently AiohttpClient)."""
        return AiohttpClient(self.config.http_config)

    @property
    def http_client(self) -> IHttpClient:
        if self._http_client is None:
            self._http_client = self.create_http_client()
        return self._http_client

    def create_session_manager(self) -> SessionManager:
        return SessionManager(self.config, self.http_client)

    @property
    def session_manager(self) -> SessionManager:
        if self._session_manager is None:
            self._session_manager = self.create_session_manager()
        return self._session_manager

    def create_retry_handler(self) -> NseRetryHandler:
        return NseRetryHandler(self.config.retry_config)

    def create_index_registry(self) -> IndexRegistry:
        return IndexRegistry()

    def create_nse_client(self) -> NseClient:
        """Create fully-wired NseClient sharing the container's session."""
        return NseClient(
            config=self.config,
            http_client=self.http_client,
            session_provider=self.session_manager,
            retry_handler=self.create_retry_handler(),
            index_registry=self.create_index_registry(),
        )
