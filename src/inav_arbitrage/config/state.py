"""
Unified configuration state for the quote core.

Single source of truth for portal endpoints, session/fetch deadlines, cache
TTL, batch pacing, logging and the instrument universe. Combines YAML files
with environment overrides, type validation and sensible defaults.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from inav_arbitrage.infrastructure.observability import get_infrastructure_logger
from inav_arbitrage.ingestion.config.value_objects import (
    DEFAULT_USER_AGENT,
    BatchConfig,
    CacheConfig,
    HttpClientConfig,
    NseConfig,
    RetryConfig,
    SessionConfig,
)
from inav_arbitrage.shared.models.quotes import InstrumentConfig

log = get_infrastructure_logger("config-loader")


# =============================================================================
# PYDANTIC MODELS - Type-Safe Configuration
# =============================================================================


class NsePortalConfig(BaseModel):
    """NSE portal endpoints and request identity."""

    model_config = ConfigDict(extra="allow")

    base_url: str = Field(default="https://www.nseindia.com")
    landing_path: str = Field(default="/")
    quote_path: str = Field(default="/api/quote-equity")
    index_path: str = Field(default="/api/equity-stockIndices")
    user_agent: str = Field(default=DEFAULT_USER_AGENT)
    verify_ssl: bool = Field(default=True)

    @field_validator("base_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("NSE base_url must start with http:// or https://")
        return v.rstrip("/")


class SessionSettings(BaseModel):
    """Cookie session lifecycle."""

    model_config = ConfigDict(extra="allow")

    refresh_interval: float = Field(default=120.0, gt=0)
    timeout: float = Field(default=15.0, gt=0)


class FetchSettings(BaseModel):
    """Per-request deadline and retry budget for quote/index fetches."""

    model_config = ConfigDict(extra="allow")

    timeout: float = Field(default=20.0, gt=0)
    max_retries: int = Field(default=2, ge=0, le=10)


class CacheSettings(BaseModel):
    model_config = ConfigDict(extra="allow")

    ttl_seconds: float = Field(default=5.0, ge=0)


class BatchSettings(BaseModel):
    """Window size and pacing for universe fetches."""

    model_config = ConfigDict(extra="allow")

    window_size: int = Field(default=5, ge=1, le=50)
    pacing_delay: float = Field(default=0.1, ge=0)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(extra="allow")

    level: str = Field(default="INFO")
    json_logs: bool = Field(default=True)


class ConfigState(BaseModel):
    """
    Root configuration state - single source of truth for all app config.

    An empty `instruments` list means the built-in default universe is used.
    """

    model_config = ConfigDict(extra="allow")

    nse: NsePortalConfig = Field(default_factory=NsePortalConfig)
    session: SessionSettings = Field(default_factory=SessionSettings)
    fetch: FetchSettings = Field(default_factory=FetchSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    batch: BatchSettings = Field(default_factory=BatchSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    instruments: list[InstrumentConfig] = Field(default_factory=list)

    env: str = Field(default="dev")
    config_dir: str = Field(default="./config")

    # ------------------------------------------------------------------
    # Value objects handed to components at the composition root
    # ------------------------------------------------------------------

    def to_nse_config(self) -> NseConfig:
        return NseConfig(
            base_url=self.nse.base_url,
            landing_path=self.nse.landing_path,
            quote_path=self.nse.quote_path,
            index_path=self.nse.index_path,
            user_agent=self.nse.user_agent,
            fetch_timeout=self.fetch.timeout,
            session_config=SessionConfig(
                refresh_interval=self.session.refresh_interval,
                timeout=self.session.timeout,
            ),
            retry_config=RetryConfig(max_retries=self.fetch.max_retries),
            http_config=HttpClientConfig(
                timeout=self.fetch.timeout, verify_ssl=self.nse.verify_ssl
            ),
        )

    def to_cache_config(self) -> CacheConfig:
        return CacheConfig(ttl_seconds=self.cache.ttl_seconds)

    def to_batch_config(self) -> BatchConfig:
        return BatchConfig(
            window_size=self.batch.window_size,
            pacing_delay=self.batch.pacing_delay,
        )


# =============================================================================
# CONFIG LOADER - Clean, Validated Loading
# =============================================================================


class ConfigLoader:
    """
    Load and validate configuration from YAML files.

    Merges:
      1. Defaults (ConfigState field defaults)
      2. settings.yaml and instruments.yaml from config_dir
      3. env/<INAV_ENV>.yaml
      4. Environment variable overrides
    """

    CONFIG_FILES = ("settings.yaml", "instruments.yaml")

    def __init__(self, config_dir: str | Path = "./config", env: str | None = None):
        self.config_dir = Path(config_dir)
        self._yaml_cache: dict[Path, Any] = {}
        self.env = env or os.getenv("INAV_ENV", "dev")

    def _load_yaml(self, path: Path) -> dict[str, Any]:
        """Load YAML file with caching. A missing file yields {}."""
        if path in self._yaml_cache:
            return self._yaml_cache[path]

        if not path.exists():
            log.debug("config_file_missing", path=str(path))
            return {}

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        self._yaml_cache[path] = data
        log.debug("config_file_loaded", path=str(path))
        return data

    def _apply_env_overrides(self, config: dict[str, Any]) -> dict[str, Any]:
        """Apply environment variable overrides to config."""
        if base_url := os.getenv("INAV_NSE_BASE_URL"):
            config.setdefault("nse", {})["base_url"] = base_url

        if ttl := os.getenv("INAV_CACHE_TTL"):
            config.setdefault("cache", {})["ttl_seconds"] = float(ttl)

        if log_level := os.getenv("INAV_LOG_LEVEL"):
            config.setdefault("logging", {})["level"] = log_level

        if json_logs := os.getenv("INAV_JSON_LOGS"):
            config.setdefault("logging", {})["json_logs"] = json_logs.lower() in (
                "1",
                "true",
                "yes",
            )

        return config

    def _merge_dicts(self, base: dict, override: dict) -> dict:
        """Deep merge override into base dict."""
        result = base.copy()
        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._merge_dicts(result[key], value)
            else:
                result[key] = value
        return result

    def load(self) -> ConfigState:
        """
        Load complete configuration state.

        Raises:
            pydantic.ValidationError: If configuration is invalid
        """
        config: dict[str, Any] = {}

        for config_file in self.CONFIG_FILES:
            config = self._merge_dicts(config, self._load_yaml(self.config_dir / config_file))

        env_config = self._load_yaml(self.config_dir / "env" / f"{self.env}.yaml")
        config = self._merge_dicts(config, env_config)

        config = self._apply_env_overrides(config)

        state = ConfigState(env=self.env, config_dir=str(self.config_dir), **config)
        log.info(
            "config_loaded",
            config_dir=str(self.config_dir),
            env=self.env,
            instruments=len(state.instruments),
            cache_ttl=state.cache.ttl_seconds,
        )
        return state


def get_config(config_dir: str | None = None) -> ConfigState:
    """
    Load and return the configuration state.

    Args:
        config_dir: Override config directory. Defaults to $INAV_CONFIG_DIR or ./config

    Returns:
        ConfigState: Validated configuration object
    """
    if config_dir is None:
        config_dir = os.getenv("INAV_CONFIG_DIR", "./config")
        if not Path(config_dir).exists():
            log.warning("config_dir_missing", config_dir=config_dir)

    return ConfigLoader(config_dir=config_dir).load()


__all__ = [
    "BatchSettings",
    "CacheSettings",
    "ConfigLoader",
    "ConfigState",
    "FetchSettings",
    "LoggingConfig",
    "NsePortalConfig",
    "SessionSettings",
    "get_config",
]
