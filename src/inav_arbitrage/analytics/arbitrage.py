"""
Premium/discount arbitrage signals.

Pure functions of a quote set: no network access and no caching. Calling derive() twice on
the same quotes yields the same ordered list.
"""

from collections.abc import Iterable

from inav_arbitrage.infrastructure.observability import get_analytics_logger
from inav_arbitrage.shared.models.enums import RecommendationBand, SignalKind
from inav_arbitrage.shared.models.quotes import Quote
from inav_arbitrage.shared.models.signals import ArbitrageSignal, DashboardStats

log = get_analytics_logger("arbitrage-calculator")

# (exclusive lower bound on |percent|, band), checked in order.
BAND_THRESHOLDS: tuple[tuple[float, RecommendationBand], ...] = (
    (2.0, RecommendationBand.STRONG),
    (1.0, RecommendationBand.MODERATE),
    (0.5, RecommendationBand.MILD),
)


def classify(percent_diff: float, thresholds=BAND_THRESHOLDS) -> RecommendationBand:
    """Band for an absolute percent gap."""
    magnitude = abs(percent_diff)
    for threshold, band in thresholds:
        if magnitude > threshold:
            return band
    return RecommendationBand.HOLD


class ArbitrageCalculator:
    """Derives ranked premium/discount signals from quotes carrying an iNAV."""

    def __init__(self, thresholds=BAND_THRESHOLDS):
        self.thresholds = thresholds

    def derive(self, quotes: Iterable[Quote]) -> list[ArbitrageSignal]:
        """
        Signals for every quote with a price and a positive iNAV, sorted by
        absolute percent gap descending. Ties keep input order.
        """
        quotes = list(quotes)
        signals = [
            self._signal(quote)
            for quote in quotes
            if quote.current_price and quote.indicative_nav and quote.indicative_nav > 0
        ]
        # list.sort is stable
        signals.sort(key=lambda s: s.percent_diff, reverse=True)
        log.debug("signals_derived", quotes=len(quotes), signals=len(signals))
        return signals

    def summarize(self, quotes: Iterable[Quote]) -> DashboardStats:
        """Premium/discount counts over the quote set plus its ranked signals."""
        quotes = list(quotes)
        return DashboardStats(
            total_assets=len(quotes),
            premium_count=sum(
                1 for q in quotes if (q.premium_discount_percent or 0) > 0
            ),
            discount_count=sum(
                1 for q in quotes if (q.premium_discount_percent or 0) < 0
            ),
            signals=self.derive(quotes),
        )

    def _signal(self, quote: Quote) -> ArbitrageSignal:
        diff = quote.current_price - quote.indicative_nav
        percent = diff / quote.indicative_nav * 100
        return ArbitrageSignal(
            symbol=quote.symbol,
            name=quote.name,
            kind=SignalKind.PREMIUM if diff > 0 else SignalKind.DISCOUNT,
            abs_diff=abs(diff),
            percent_diff=abs(percent),
            market_price=quote.current_price,
            indicative_nav=quote.indicative_nav,
            band=classify(percent, self.thresholds),
        )
