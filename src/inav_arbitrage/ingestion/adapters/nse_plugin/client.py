import asyncio
from collections.abc import Callable
from typing import Any, TypeVar

import aiohttp

from inav_arbitrage.infrastructure.observability import get_ingestion_logger
from inav_arbitrage.ingestion.config.value_objects import NseConfig
from inav_arbitrage.ingestion.ports.http import (
    HttpResponse,
    IHttpClient,
    ISessionProvider,
)
from inav_arbitrage.shared.models.enums import Upstream
from inav_arbitrage.shared.models.quotes import IndexQuote, InstrumentConfig, Quote

from .error_mapper import NseErrorMapper
from .exceptions import NetworkError, UnsupportedIndexError
from .mappers import parse_index, parse_quote
from .retry_handler import NseRetryHandler
from .symbol_registry import IndexRegistry

log = get_ingestion_logger("nse-client", upstream="nse")

T = TypeVar("T")


class NseClient:
    """Async client for the NSE quote portal.

    Single Responsibility: Coordinate one authenticated request per resource
    with bounded retries, then hand the body to the mapper.

    Dependencies injected (not instantiated):
    - http_client: Executes HTTP requests, never raises on status
    - session_provider: Provides headers carrying the session cookie
    - retry_handler: Decides which failures earn another attempt
    """

    def __init__(
        self,
        config: NseConfig,
        http_client: IHttpClient,
        session_provider: ISessionProvider,
        retry_handler: NseRetryHandler | None = None,
        index_registry: IndexRegistry | None = None,
    ):
        self.config = config
        self.http_client = http_client
        self.session_provider = session_provider
        self.retry_handler = retry_handler or NseRetryHandler(config.retry_config)
        self.index_registry = index_registry or IndexRegistry()

    async def fetch_quote(
        self, symbol: str, instrument: InstrumentConfig | None = None
    ) -> Quote:
        """Fetch and normalize one instrument's quote.

        Raises:
            AuthError: Session still rejected after the retry budget
            UpstreamStatusError: Any other non-200 status
            NetworkError: Transport failure after the retry budget
            ParseError: 200 body without a priceInfo block
        """
        return await self._fetch(
            resource=symbol,
            url=self.config.quote_url,
            params={"symbol": symbol},
            parse=lambda body: parse_quote(symbol, body, instrument),
        )

    async def fetch_index(self, key: str) -> IndexQuote:
        """Fetch one market index.

        Raises:
            UnsupportedIndexError: Index unknown or served by another upstream
            AuthError, UpstreamStatusError, NetworkError, ParseError: as fetch_quote
        """
        index = self.index_registry.get(key)
        if index is None:
            raise UnsupportedIndexError(f"Unknown index {key}", symbol=key)
        if index.upstream != Upstream.NSE:
            raise UnsupportedIndexError(
                f"{key} requires the {index.upstream.value.upper()} API, which is not supported",
                symbol=key,
            )

        return await self._fetch(
            resource=key,
            url=self.config.index_url,
            params={"index": index.upstream_code},
            parse=lambda body: parse_index(index, body),
        )

    async def _fetch(
        self,
        resource: str,
        url: str,
        params: dict[str, Any],
        parse: Callable[[Any], T],
    ) -> T:
        max_attempts = self.retry_handler.max_attempts

        for attempt in range(max_attempts):
            # Every retry, auth or transport, starts from a fresh cookie.
            headers = await self.session_provider.get_headers(force_refresh=attempt > 0)
            log.debug("request_started", resource=resource, attempt=attempt + 1)

            try:
                response = await self.http_client.get(
                    url,
                    params=params,
                    headers=headers,
                    timeout=self.config.fetch_timeout,
                )
            except (asyncio.TimeoutError, aiohttp.ClientError) as e:
                if self.retry_handler.is_transient(e) and self.retry_handler.has_attempts_left(attempt):
                    log.warning(
                        "network_error_retrying",
                        resource=resource,
                        attempt=attempt + 1,
                        max_attempts=max_attempts,
                        error=repr(e),
                    )
                    continue
                log.error(
                    "network_error", resource=resource, attempt=attempt + 1, error=repr(e)
                )
                raise NetworkError(
                    f"Network error fetching {resource} after {attempt + 1} attempts: {e!r}",
                    symbol=resource,
                ) from e

            if self.retry_handler.is_auth_failure(response.status_code):
                if self.retry_handler.has_attempts_left(attempt):
                    log.warning(
                        "auth_rejected_retrying",
                        resource=resource,
                        status=response.status_code,
                        attempt=attempt + 1,
                    )
                    await self.session_provider.invalidate()
                    continue
                raise self._map_error(response, resource, attempt + 1)

            if response.status_code != 200:
                raise self._map_error(response, resource, attempt + 1)

            result = parse(response.body)
            log.info("fetched", resource=resource, attempt=attempt + 1)
            return result

        # Unreachable: the final attempt either returns or raises.
        raise NetworkError(f"Failed to fetch {resource} after {max_attempts} attempts")

    @staticmethod
    def _map_error(response: HttpResponse, resource: str, attempts: int) -> Exception:
        error = NseErrorMapper.map_error(
            response.status_code, response.body, resource, attempts=attempts
        )
        log.error(
            "upstream_error",
            resource=resource,
            status=response.status_code,
            error_type=type(error).__name__,
        )
        return error
