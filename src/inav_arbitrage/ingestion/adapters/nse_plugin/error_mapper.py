"""
NSE Error Mapper

Maps HTTP status codes and response bodies to specific exception types,
providing context-rich error messages for debugging.
"""

from typing import Any

from .exceptions import AuthError, NseAPIError, UpstreamStatusError


class NseErrorMapper:
    """Maps HTTP status codes to appropriate exception types."""

    AUTH_STATUS_CODES = (401, 403)

    @staticmethod
    def extract_error_message(response_body: Any) -> str:
        """Extract error message from response body."""
        if response_body is None:
            return "empty response"
        if isinstance(response_body, str):
            # Portal error pages are HTML; keep the log line short.
            return response_body[:200]
        elif isinstance(response_body, dict):
            return (
                response_body.get("error")
                or response_body.get("message")
                or str(response_body)[:200]
            )
        else:
            return str(response_body)[:200]

    @classmethod
    def map_error(
        cls,
        status_code: int,
        response_body: Any,
        resource: str,
        attempts: int = 1,
    ) -> NseAPIError:
        """
        Map HTTP status code to specific exception with context.

        Args:
            status_code: HTTP status code
            response_body: Response body (dict, str, or other)
            resource: Symbol or index the request was for
            attempts: Number of attempts made so far

        Returns:
            Appropriate NseAPIError subclass instance
        """
        error_msg = cls.extract_error_message(response_body)

        if status_code in cls.AUTH_STATUS_CODES:
            return AuthError(
                f"Authentication failed for {resource} after {attempts} attempts "
                f"(status {status_code}): {error_msg}",
                status_code=status_code,
                symbol=resource,
            )
        return UpstreamStatusError(
            f"NSE API returned status {status_code} for {resource}: {error_msg}",
            status_code=status_code,
            symbol=resource,
        )
