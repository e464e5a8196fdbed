"""
Shared enumerations for the iNAV arbitrage core.
"""

import enum


class AssetClass(str, enum.Enum):
    """Coarse grouping of listed ETFs by what they track."""

    GOLD = "Gold"
    SILVER = "Silver"
    INDEX = "Index"
    EQUITY = "Equity"
    INTERNATIONAL = "International"
    OTHER = "Other"

    @classmethod
    def _missing_(cls, value):
        # Accept case-insensitive names coming from YAML or API payloads.
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        return None


class SignalKind(str, enum.Enum):
    """Side of the price/iNAV gap."""

    PREMIUM = "premium"
    DISCOUNT = "discount"


class RecommendationBand(str, enum.Enum):
    """Strength of an arbitrage signal, bucketed by absolute percent gap."""

    STRONG = "strong"
    MODERATE = "moderate"
    MILD = "mild"
    HOLD = "hold"


class Upstream(str, enum.Enum):
    """Portal that serves a given resource."""

    NSE = "nse"
    BSE = "bse"
