# inav_arbitrage/shared/models/quotes.py

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from inav_arbitrage.shared.models.enums import AssetClass, Upstream


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InstrumentConfig(BaseModel):
    """A tradable instrument in the tracked universe, keyed by symbol."""

    model_config = ConfigDict(frozen=True)

    symbol: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    asset_class: AssetClass = Field(default=AssetClass.OTHER)

    @field_validator("symbol", mode="before")
    @classmethod
    def normalize_symbol(cls, v):
        """Symbols are stored upper-cased and trimmed."""
        if isinstance(v, str):
            return v.strip().upper()
        return v


class IndexConfig(BaseModel):
    """A market index shown alongside the instruments."""

    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    upstream_code: str
    upstream: Upstream = Field(default=Upstream.NSE)


class Quote(BaseModel):
    """
    Canonical quote for one instrument, built from a single successful upstream
    response. Instances are immutable; a new fetch yields a new Quote.

    ``premium_discount_abs`` and ``premium_discount_percent`` are defined if and
    only if ``indicative_nav`` is defined and non-zero.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    name: str
    asset_class: AssetClass = AssetClass.OTHER
    isin: str = ""

    current_price: float = 0.0
    prev_close: float = 0.0
    open: float = 0.0
    high: float = 0.0
    low: float = 0.0
    change_abs: float = 0.0
    change_percent: float = 0.0
    volume_lakhs: float = 0.0
    vwap: float = 0.0

    indicative_nav: float | None = None
    premium_discount_abs: float | None = None
    premium_discount_percent: float | None = None

    fetched_at: datetime = Field(default_factory=utc_now)
    last_update_time: str | None = None
    stale: bool = False

    @model_validator(mode="after")
    def check_premium_invariant(self):
        has_nav = self.indicative_nav is not None and self.indicative_nav != 0
        has_premium = self.premium_discount_percent is not None
        if has_nav != has_premium:
            raise ValueError(
                "premium_discount_percent must be set exactly when indicative_nav is non-zero"
            )
        return self

    def as_stale(self) -> "Quote":
        """Copy of this quote flagged as stale."""
        return self.model_copy(update={"stale": True})


class IndexQuote(BaseModel):
    """Last value and day change for a market index."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    name: str
    price: float = 0.0
    change: float = 0.0
    change_percent: float = 0.0
    fetched_at: datetime = Field(default_factory=utc_now)


class HealthSnapshot(BaseModel):
    """Point-in-time view of cache coverage and session state."""

    model_config = ConfigDict(frozen=True)

    cached_symbols: list[str] = Field(default_factory=list)
    total_symbols: int = 0
    session_connected: bool = False
    session_age_seconds: float | None = None
    timestamp: datetime = Field(default_factory=utc_now)
