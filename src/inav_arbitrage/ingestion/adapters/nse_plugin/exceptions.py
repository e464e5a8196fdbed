"""
NSE API Exception Hierarchy

Provides specific exception types for the failure modes of a quote or index
fetch, so callers can tell an expired session from an outage or a schema change.
"""


class NseAPIError(Exception):
    """Base exception for all NSE portal errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        symbol: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.symbol = symbol


class AuthError(NseAPIError):
    """401/403 - Session cookie rejected after the retry budget was exhausted."""

    pass


class UpstreamStatusError(NseAPIError):
    """Any other non-200 status. Not retried."""

    def __init__(self, message: str, status_code: int, symbol: str | None = None):
        super().__init__(message, status_code=status_code, symbol=symbol)


class NetworkError(NseAPIError):
    """Timeout or transport failure after the retry budget was exhausted."""

    pass


class ParseError(NseAPIError):
    """200 response missing the structural fields a quote needs."""

    pass


class UnsupportedIndexError(NseAPIError):
    """Index served by an upstream this client does not implement."""

    pass
