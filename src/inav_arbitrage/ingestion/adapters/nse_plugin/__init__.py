"""NSE portal plugin: session cookies, quote/index fetches and response mapping."""

from inav_arbitrage.ingestion.adapters.nse_plugin.client import NseClient
from inav_arbitrage.ingestion.adapters.nse_plugin.dependency_container import (
    NseDependencyContainer,
)
from inav_arbitrage.ingestion.adapters.nse_plugin.exceptions import (
    AuthError,
    NetworkError,
    NseAPIError,
    ParseError,
    UnsupportedIndexError,
    UpstreamStatusError,
)
from inav_arbitrage.ingestion.adapters.nse_plugin.session_manager import SessionManager
from inav_arbitrage.ingestion.adapters.nse_plugin.symbol_registry import (
    IndexRegistry,
    InstrumentRegistry,
)

__all__ = [
    "AuthError",
    "IndexRegistry",
    "InstrumentRegistry",
    "NetworkError",
    "NseAPIError",
    "NseClient",
    "NseDependencyContainer",
    "ParseError",
    "SessionManager",
    "UnsupportedIndexError",
    "UpstreamStatusError",
]
