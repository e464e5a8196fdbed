"""
Observability for the quote core: structured logging shared by the session,
fetch, cache, batching and analytics components so that upstream rejections,
retries, stale fallbacks and per-symbol failures can be traced end to end.
"""

from .logging import (
    get_analytics_logger,
    get_infrastructure_logger,
    get_ingestion_logger,
    get_logger,
    get_service_logger,
    get_storage_logger,
    setup_logging,
)

__all__ = [
    # Setup
    "setup_logging",
    # Base
    "get_logger",
    # Layer-specific
    "get_infrastructure_logger",
    "get_ingestion_logger",
    "get_storage_logger",
    "get_analytics_logger",
    "get_service_logger",
]
