from inav_arbitrage.ingestion.config.value_objects import (
    BatchConfig,
    CacheConfig,
    HttpClientConfig,
    NseConfig,
    RetryConfig,
    SessionConfig,
)

__all__ = [
    "BatchConfig",
    "CacheConfig",
    "HttpClientConfig",
    "NseConfig",
    "RetryConfig",
    "SessionConfig",
]
