"""aiohttp transport for the NSE portal.

Reads every response as text, decodes JSON when it can, and hands back the
raw Set-Cookie values so the session manager can build its own cookie string.
"""

import json
from typing import Any

import aiohttp

from inav_arbitrage.ingestion.config.value_objects import HttpClientConfig
from inav_arbitrage.ingestion.ports.http import HttpResponse, IHttpClient


def decode_body(text: str) -> Any:
    """JSON document when the text parses, else the text itself (None if empty)."""
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return text


class AiohttpClient(IHttpClient):
    """IHttpClient over one lazily opened aiohttp.ClientSession."""

    def __init__(self, config: HttpClientConfig | None = None):
        self.config = config or HttpClientConfig()
        self._session: aiohttp.ClientSession | None = None

    @property
    def is_open(self) -> bool:
        return self._session is not None and not self._session.closed

    def _open(self) -> aiohttp.ClientSession:
        if not self.is_open:
            # The session manager replays cookies by hand; the jar stays empty.
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.config.timeout),
                cookie_jar=aiohttp.DummyCookieJar(),
            )
        return self._session

    async def get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        """
        GET `url` and return whatever status came back.

        Raises:
            asyncio.TimeoutError: When `timeout` (or the configured default) elapses
            aiohttp.ClientError: On connection or protocol failures
        """
        deadline = aiohttp.ClientTimeout(total=timeout or self.config.timeout)
        request = self._open().get(
            url,
            params=params,
            headers=headers,
            timeout=deadline,
            max_redirects=self.config.max_redirects,
            ssl=None if self.config.verify_ssl else False,
        )
        async with request as resp:
            return HttpResponse(
                status_code=resp.status,
                body=decode_body(await resp.text()),
                headers=dict(resp.headers),
                url=str(resp.url),
                set_cookies=resp.headers.getall("Set-Cookie", []),
            )

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None
