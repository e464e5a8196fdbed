from inav_arbitrage.shared.models.enums import (
    AssetClass,
    RecommendationBand,
    SignalKind,
    Upstream,
)
from inav_arbitrage.shared.models.quotes import (
    HealthSnapshot,
    IndexConfig,
    IndexQuote,
    InstrumentConfig,
    Quote,
)
from inav_arbitrage.shared.models.signals import ArbitrageSignal, DashboardStats

__all__ = [
    "ArbitrageSignal",
    "AssetClass",
    "DashboardStats",
    "HealthSnapshot",
    "IndexConfig",
    "IndexQuote",
    "InstrumentConfig",
    "Quote",
    "RecommendationBand",
    "SignalKind",
    "Upstream",
]
