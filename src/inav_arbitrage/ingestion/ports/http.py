"""HTTP communication abstractions for upstream plugins.

Separates HTTP transport layer from business logic (status mapping, retries,
parsing). Allows easy mocking and swapping of HTTP implementations in tests.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass
class HttpResponse:
    """HTTP response data container."""

    status_code: int
    body: Any  # JSON-decoded response body, or raw text when not JSON
    headers: dict[str, str]
    url: str
    set_cookies: list[str] = field(default_factory=list)  # Every Set-Cookie value


class IHttpClient(Protocol):
    """Abstraction for HTTP client.

    Single Responsibility: Execute HTTP requests and return responses.
    Non-2xx statuses are returned, never raised.
    Does NOT handle:
    - Status mapping
    - Retry logic
    - Session cookie injection
    """

    async def get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        """Execute GET request.

        Args:
            url: Full URL to request
            params: Query parameters
            headers: HTTP headers
            timeout: Request deadline in seconds

        Raises:
            asyncio.TimeoutError: When the deadline elapses
            aiohttp.ClientError: On network or connection errors
        """
        ...

    async def close(self) -> None: ...


class ISessionProvider(Protocol):
    """Abstraction for session cookie management.

    Single Responsibility: Provide request headers carrying a session token.
    Handles expiry and refresh transparently.
    """

    async def get_headers(self, force_refresh: bool = False) -> dict[str, str]:
        """Get HTTP headers with the current session cookie.

        Never raises for upstream failures; the returned cookie may be empty.
        """
        ...

    async def invalidate(self) -> None:
        """Drop the current token after the upstream rejected it."""
        ...
