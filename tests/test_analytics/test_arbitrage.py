"""
Tests for premium/discount signal derivation.
"""

import pytest

from inav_arbitrage.analytics import ArbitrageCalculator, classify
from inav_arbitrage.shared.models.enums import RecommendationBand, SignalKind


@pytest.fixture
def calculator():
    return ArbitrageCalculator()


class TestClassify:
    @pytest.mark.parametrize(
        "percent, band",
        [
            (0.0, RecommendationBand.HOLD),
            (0.5, RecommendationBand.HOLD),
            (0.51, RecommendationBand.MILD),
            (1.0, RecommendationBand.MILD),
            (1.01, RecommendationBand.MODERATE),
            (2.0, RecommendationBand.MODERATE),
            (2.01, RecommendationBand.STRONG),
            (-2.5, RecommendationBand.STRONG),
            (-0.7, RecommendationBand.MILD),
        ],
    )
    def test_band_boundaries(self, percent, band):
        assert classify(percent) == band


class TestDerive:
    def test_premium(self, calculator, make_quote):
        [signal] = calculator.derive([make_quote("A", 101.0, 100.0)])

        assert signal.kind == SignalKind.PREMIUM
        assert signal.abs_diff == pytest.approx(1.0)
        assert signal.percent_diff == pytest.approx(1.0)
        assert signal.action == "SELL"
        assert signal.market_price == 101.0
        assert signal.indicative_nav == 100.0

    def test_discount(self, calculator, make_quote):
        [signal] = calculator.derive([make_quote("A", 99.0, 100.0)])

        assert signal.kind == SignalKind.DISCOUNT
        assert signal.abs_diff == pytest.approx(1.0)
        assert signal.percent_diff == pytest.approx(1.0)
        assert signal.action == "BUY"

    def test_sorted_by_gap_descending(self, calculator, make_quote):
        quotes = [
            make_quote("SMALL", 100.3, 100.0),
            make_quote("BIG", 97.0, 100.0),
            make_quote("MID", 101.5, 100.0),
        ]

        signals = calculator.derive(quotes)

        assert [s.symbol for s in signals] == ["BIG", "MID", "SMALL"]
        assert [s.band for s in signals] == [
            RecommendationBand.STRONG,
            RecommendationBand.MODERATE,
            RecommendationBand.HOLD,
        ]

    def test_ties_keep_input_order(self, calculator, make_quote):
        quotes = [
            make_quote("FIRST", 102.0, 100.0),
            make_quote("SECOND", 98.0, 100.0),
            make_quote("THIRD", 102.0, 100.0),
        ]

        signals = calculator.derive(quotes)

        assert [s.symbol for s in signals] == ["FIRST", "SECOND", "THIRD"]

    def test_skips_quotes_without_price_or_nav(self, calculator, make_quote):
        quotes = [
            make_quote("NONAV", 100.0),
            make_quote("ZERONAV", 100.0, 0.0),
            make_quote("NOPRICE", 0.0, 100.0),
            make_quote("OK", 105.0, 100.0),
        ]

        signals = calculator.derive(quotes)

        assert [s.symbol for s in signals] == ["OK"]

    def test_idempotent(self, calculator, make_quote):
        quotes = [make_quote("A", 101.0, 100.0), make_quote("B", 95.0, 100.0)]

        assert calculator.derive(quotes) == calculator.derive(quotes)

    def test_empty(self, calculator):
        assert calculator.derive([]) == []

    def test_custom_thresholds(self, make_quote):
        calculator = ArbitrageCalculator(
            thresholds=((5.0, RecommendationBand.STRONG),)
        )

        [signal] = calculator.derive([make_quote("A", 103.0, 100.0)])

        assert signal.band == RecommendationBand.HOLD


class TestRecommendation:
    def test_strong_discount(self, calculator, make_quote):
        [signal] = calculator.derive([make_quote("A", 97.0, 100.0)])
        assert signal.recommendation == "STRONG BUY - Trading at discount to iNAV"

    def test_mild_premium(self, calculator, make_quote):
        [signal] = calculator.derive([make_quote("A", 100.8, 100.0)])
        assert signal.recommendation == "MILD SELL - Trading at premium to iNAV"

    def test_hold(self, calculator, make_quote):
        [signal] = calculator.derive([make_quote("A", 100.2, 100.0)])
        assert signal.recommendation == "HOLD - Near fair value"


class TestSummarize:
    def test_counts(self, calculator, make_quote):
        quotes = [
            make_quote("P1", 101.0, 100.0),
            make_quote("P2", 102.0, 100.0),
            make_quote("D1", 99.0, 100.0),
            make_quote("NONAV", 50.0),
        ]

        stats = calculator.summarize(quotes)

        assert stats.total_assets == 4
        assert stats.premium_count == 2
        assert stats.discount_count == 1
        assert len(stats.signals) == 3
        assert stats.signals[0].symbol == "P2"

    def test_accepts_generator(self, calculator, make_quote):
        stats = calculator.summarize(make_quote(s, 101.0, 100.0) for s in "AB")

        assert stats.total_assets == 2
        assert len(stats.signals) == 2
