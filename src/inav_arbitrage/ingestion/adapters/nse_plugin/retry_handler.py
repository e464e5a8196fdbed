"""
NSE Retry Handler

Retry policy for portal fetches. Only two failure shapes are worth another
attempt: a rejected session cookie (retried with a forced refresh) and a
transient transport failure (retried as-is). Every other status fails fast.
"""

import asyncio

import aiohttp

from inav_arbitrage.ingestion.config.value_objects import RetryConfig


class NseRetryHandler:
    """Determines retry behavior for portal fetches."""

    def __init__(self, config: RetryConfig | None = None):
        self.config = config or RetryConfig()

    @property
    def max_attempts(self) -> int:
        """Total attempts including the first one."""
        return self.config.max_retries + 1

    def is_auth_failure(self, status_code: int) -> bool:
        return status_code in self.config.auth_status_codes

    def has_attempts_left(self, attempt: int) -> bool:
        """
        Args:
            attempt: Current attempt (0-indexed)
        """
        return attempt < self.config.max_retries

    @staticmethod
    def is_transient(error: BaseException) -> bool:
        """Timeouts and dropped/reset connections are retried; other client errors are not."""
        return isinstance(error, (asyncio.TimeoutError, aiohttp.ClientConnectionError))

