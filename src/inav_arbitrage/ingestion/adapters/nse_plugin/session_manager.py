import asyncio
import time
from collections.abc import Callable

import aiohttp

from inav_arbitrage.infrastructure.observability import get_ingestion_logger
from inav_arbitrage.ingestion.config.value_objects import NseConfig
from inav_arbitrage.ingestion.ports.http import IHttpClient

log = get_ingestion_logger("session-manager", upstream="nse")

LANDING_ACCEPT = (
    "text/html,application/xhtml+xml,application/xml;q=0.9,"
    "image/avif,image/webp,image/apng,*/*;q=0.8"
)


class SessionManager:
    """
    Owns the portal session cookie used for every quote/index request.

    The portal hands out its session cookies on the landing page; those are
    replayed on API calls until they age out or the API rejects them.
    Usage:
        sessions = SessionManager(config, http_client)
        headers = await sessions.get_headers()          # refreshes if needed
        headers = await sessions.get_headers(True)      # forced refresh

    Refreshes are not single-flight: concurrent callers may each hit the
    landing page, and the last completed refresh wins.
    """

    def __init__(
        self,
        config: NseConfig,
        http_client: IHttpClient,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config
        self.http_client = http_client
        self._clock = clock
        self._lock = asyncio.Lock()
        self._token = ""
        self._issued_at: float | None = None

    # ---------- public ----------

    async def get_headers(self, force_refresh: bool = False) -> dict[str, str]:
        """Return the API header bundle, refreshing the cookie first if needed."""
        if force_refresh or await self._needs_refresh():
            await self.refresh()
        async with self._lock:
            token = self._token
        return self._api_headers(token)

    async def refresh(self) -> bool:
        """
        Fetch the landing page and keep its cookies as the new session token.

        Returns False (keeping the previous token) on timeout, transport error,
        non-success status or a response without cookies.
        """
        log.info("session_refresh_started")
        try:
            response = await self.http_client.get(
                self.config.landing_url,
                headers=self._landing_headers(),
                timeout=self.config.session_config.timeout,
            )
        except (asyncio.TimeoutError, aiohttp.ClientError) as e:
            log.warning("session_refresh_failed", reason=type(e).__name__, error=str(e))
            return False

        if not 200 <= response.status_code < 300:
            log.warning("session_refresh_failed", status=response.status_code)
            return False

        token = self.build_token(response.set_cookies)
        if not token:
            log.warning("session_refresh_failed", reason="no_cookies")
            return False

        async with self._lock:
            self._token = token
            self._issued_at = self._clock()
        log.info("session_refreshed", cookies=token.count("; ") + 1)
        return True

    async def invalidate(self) -> None:
        """Drop the token; the next get_headers() call will refresh."""
        async with self._lock:
            self._token = ""
        log.debug("session_invalidated")

    @property
    def is_connected(self) -> bool:
        return bool(self._token)

    @property
    def age_seconds(self) -> float | None:
        """Seconds since the last successful refresh, None if never refreshed."""
        issued_at = self._issued_at
        if issued_at is None:
            return None
        return max(0.0, self._clock() - issued_at)

    @staticmethod
    def build_token(set_cookies: list[str]) -> str:
        """Join the leading name=value pair of every Set-Cookie header with '; '."""
        pairs = []
        for raw in set_cookies:
            pair = raw.split(";", 1)[0].strip()
            if pair:
                pairs.append(pair)
        return "; ".join(pairs)

    # ---------- internal ----------

    async def _needs_refresh(self) -> bool:
        async with self._lock:
            if not self._token or self._issued_at is None:
                return True
            age = self._clock() - self._issued_at
        return age > self.config.session_config.refresh_interval

    def _landing_headers(self) -> dict[str, str]:
        return {
            "User-Agent": self.config.user_agent,
            "Accept": LANDING_ACCEPT,
            "Accept-Language": "en-US,en;q=0.9",
            "Connection": "keep-alive",
            "Upgrade-Insecure-Requests": "1",
            "Cache-Control": "max-age=0",
        }

    def _api_headers(self, token: str) -> dict[str, str]:
        return {
            "User-Agent": self.config.user_agent,
            "Accept": "application/json, text/plain, */*",
            "Accept-Language": "en-US,en;q=0.9",
            "Connection": "keep-alive",
            "Referer": self.config.referer,
            "Cookie": token,
            "Sec-Fetch-Dest": "empty",
            "Sec-Fetch-Mode": "cors",
            "Sec-Fetch-Site": "same-origin",
        }
