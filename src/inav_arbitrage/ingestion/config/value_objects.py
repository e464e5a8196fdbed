"""Configuration value objects for dependency injection.

Instead of injecting the global ConfigState, inject specific configuration
dataclasses into each component. Enables:
- Easy testing with different configurations
- Clear constructor contracts
- Validation at composition root
"""

from dataclasses import dataclass

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


@dataclass(frozen=True)
class HttpClientConfig:
    """Configuration for HTTP client."""

    timeout: float = 20.0
    max_redirects: int = 5
    verify_ssl: bool = True


@dataclass(frozen=True)
class SessionConfig:
    """Configuration for the cookie session against the portal landing page."""

    refresh_interval: float = 120.0  # Seconds before a token is considered old
    timeout: float = 15.0


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for fetch retry behavior."""

    max_retries: int = 2  # Retries after the first attempt
    auth_status_codes: tuple[int, ...] = (401, 403)


@dataclass(frozen=True)
class CacheConfig:
    """Configuration for the quote cache."""

    ttl_seconds: float = 5.0


@dataclass(frozen=True)
class BatchConfig:
    """Configuration for windowed batch fetching."""

    window_size: int = 5
    pacing_delay: float = 0.1  # Seconds between windows

    def __post_init__(self):
        if self.window_size < 1:
            raise ValueError("window_size must be at least 1")
        if self.pacing_delay < 0:
            raise ValueError("pacing_delay must not be negative")


@dataclass(frozen=True)
class NseConfig:
    """Configuration for the NSE quote portal."""

    base_url: str = "https://www.nseindia.com"
    landing_path: str = "/"
    quote_path: str = "/api/quote-equity"
    index_path: str = "/api/equity-stockIndices"
    user_agent: str = DEFAULT_USER_AGENT
    fetch_timeout: float = 20.0
    session_config: SessionConfig = None
    retry_config: RetryConfig = None
    http_config: HttpClientConfig = None

    def __post_init__(self):
        """Set defaults for nested configs."""
        if self.session_config is None:
            object.__setattr__(self, "session_config", SessionConfig())
        if self.retry_config is None:
            object.__setattr__(self, "retry_config", RetryConfig())
        if self.http_config is None:
            object.__setattr__(
                self, "http_config", HttpClientConfig(timeout=self.fetch_timeout)
            )

    @property
    def landing_url(self) -> str:
        return f"{self.base_url.rstrip('/')}{self.landing_path}"

    @property
    def quote_url(self) -> str:
        return f"{self.base_url.rstrip('/')}{self.quote_path}"

    @property
    def index_url(self) -> str:
        return f"{self.base_url.rstrip('/')}{self.index_path}"

    @property
    def referer(self) -> str:
        return f"{self.base_url.rstrip('/')}/"
