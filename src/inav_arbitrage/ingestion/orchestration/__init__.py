from inav_arbitrage.ingestion.orchestration.batch_fetcher import (
    BatchOrchestrator,
    BatchResult,
    SingleQuoteResult,
    SymbolError,
)

__all__ = ["BatchOrchestrator", "BatchResult", "SingleQuoteResult", "SymbolError"]
