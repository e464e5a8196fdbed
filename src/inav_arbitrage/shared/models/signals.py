# inav_arbitrage/shared/models/signals.py

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from inav_arbitrage.shared.models.enums import RecommendationBand, SignalKind
from inav_arbitrage.shared.models.quotes import utc_now

_BAND_LABELS = {
    RecommendationBand.STRONG: "STRONG",
    RecommendationBand.MODERATE: "MODERATE",
    RecommendationBand.MILD: "MILD",
}


class ArbitrageSignal(BaseModel):
    """
    Informational premium/discount signal for one instrument.

    ``abs_diff`` and ``percent_diff`` are magnitudes; the side is carried by
    ``kind``.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    name: str
    kind: SignalKind
    abs_diff: float
    percent_diff: float
    market_price: float
    indicative_nav: float
    band: RecommendationBand

    @property
    def action(self) -> str:
        """BUY below iNAV, SELL above it."""
        return "BUY" if self.kind == SignalKind.DISCOUNT else "SELL"

    @property
    def recommendation(self) -> str:
        if self.band == RecommendationBand.HOLD:
            return "HOLD - Near fair value"
        side = "discount to" if self.kind == SignalKind.DISCOUNT else "premium to"
        return f"{_BAND_LABELS[self.band]} {self.action} - Trading at {side} iNAV"


class DashboardStats(BaseModel):
    """Aggregate counts over a quote set plus its ranked signals."""

    model_config = ConfigDict(frozen=True)

    total_assets: int
    premium_count: int
    discount_count: int
    signals: list[ArbitrageSignal] = Field(default_factory=list)
    last_updated: datetime = Field(default_factory=utc_now)
