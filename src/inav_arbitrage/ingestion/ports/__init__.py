from inav_arbitrage.ingestion.ports.http import (
    HttpResponse,
    IHttpClient,
    ISessionProvider,
)

__all__ = ["HttpResponse", "IHttpClient", "ISessionProvider"]
