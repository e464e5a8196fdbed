from inav_arbitrage.analytics.arbitrage import ArbitrageCalculator, classify

__all__ = ["ArbitrageCalculator", "classify"]
