# inav_arbitrage/ingestion/adapters/nse_plugin/mappers.py
"""
NSE response → canonical model mapping.

Each target field is resolved from an ordered list of candidate paths in the
upstream document; the first candidate that is present (not missing, not null)
wins, otherwise the field default applies:

    current_price   priceInfo.lastPrice, priceInfo.close                 (0)
    high            priceInfo.intraDayHighLow.max, priceInfo.weekHighLow.max (0)
    low             priceInfo.intraDayHighLow.min, priceInfo.weekHighLow.min (0)
    volume_lakhs    preOpenMarket.totalTradedVolume,
                    marketDeptOrderBook.tradeInfo.totalTradedVolume       (0) / 100,000
    indicative_nav  priceInfo.iNavValue                                   (absent)

Premium/discount is derived from current_price and indicative_nav only when
the iNAV is present and non-zero.
"""

from typing import Any

from pydantic import ValidationError

from inav_arbitrage.shared.models.enums import AssetClass
from inav_arbitrage.shared.models.quotes import (
    IndexConfig,
    IndexQuote,
    InstrumentConfig,
    Quote,
)

from .exceptions import ParseError

LAKH = 100_000

_MISSING = object()


def lookup(document: Any, path: str) -> Any:
    """Resolve a dotted path, returning None when any segment is absent."""
    node = document
    for part in path.split("."):
        if not isinstance(node, dict):
            return None
        node = node.get(part)
        if node is None:
            return None
    return node


def first_defined(document: Any, *paths: str, default: Any = None) -> Any:
    """Value of the first path that resolves to something other than None."""
    for path in paths:
        value = lookup(document, path)
        if value is not None:
            return value
    return default


def to_float(value: Any, default: float | None = 0.0) -> float | None:
    """Coerce numbers and numeric strings ("1,234.50") to float."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        cleaned = value.replace(",", "").strip()
        if not cleaned:
            return default
        try:
            return float(cleaned)
        except ValueError:
            return default
    return default


def parse_quote(
    symbol: str,
    data: Any,
    instrument: InstrumentConfig | None = None,
) -> Quote:
    """Build a Quote from a quote-equity document.

    Raises:
        ParseError: If the document has no priceInfo block, or a field has
            a type the model cannot accept
    """
    if not isinstance(data, dict) or not isinstance(data.get("priceInfo"), dict):
        raise ParseError(
            f"Invalid data structure from NSE for {symbol}: missing priceInfo",
            status_code=200,
            symbol=symbol,
        )

    current_price = to_float(
        first_defined(data, "priceInfo.lastPrice", "priceInfo.close", default=0)
    )
    volume = to_float(
        first_defined(
            data,
            "preOpenMarket.totalTradedVolume",
            "marketDeptOrderBook.tradeInfo.totalTradedVolume",
            default=0,
        )
    )

    indicative_nav = to_float(lookup(data, "priceInfo.iNavValue"), default=None)
    premium_abs = premium_pct = None
    if indicative_nav:
        premium_abs = current_price - indicative_nav
        premium_pct = premium_abs / indicative_nav * 100

    name = first_defined(data, "info.companyName", "securityInfo.companyName")
    if not name:
        name = instrument.name if instrument else symbol

    try:
        return Quote(
            symbol=symbol,
            name=name,
            asset_class=instrument.asset_class if instrument else AssetClass.OTHER,
            isin=first_defined(data, "info.isin", "isinCode", default="") or "",
            current_price=current_price,
            prev_close=to_float(lookup(data, "priceInfo.previousClose")),
            open=to_float(lookup(data, "priceInfo.open")),
            high=to_float(
                first_defined(
                    data,
                    "priceInfo.intraDayHighLow.max",
                    "priceInfo.weekHighLow.max",
                    default=0,
                )
            ),
            low=to_float(
                first_defined(
                    data,
                    "priceInfo.intraDayHighLow.min",
                    "priceInfo.weekHighLow.min",
                    default=0,
                )
            ),
            change_abs=to_float(lookup(data, "priceInfo.change")),
            change_percent=to_float(lookup(data, "priceInfo.pChange")),
            volume_lakhs=volume / LAKH,
            vwap=to_float(lookup(data, "priceInfo.vwap")),
            indicative_nav=indicative_nav,
            premium_discount_abs=premium_abs,
            premium_discount_percent=premium_pct,
            last_update_time=lookup(data, "metadata.lastUpdateTime"),
        )
    except ValidationError as e:
        raise ParseError(
            f"Unexpected field types from NSE for {symbol}: {e.error_count()} invalid",
            status_code=200,
            symbol=symbol,
        ) from e


def parse_index(index: IndexConfig, data: Any) -> IndexQuote:
    """Build an IndexQuote from an equity-stockIndices document.

    Raises:
        ParseError: If the document has no metadata block
    """
    if not isinstance(data, dict) or not isinstance(data.get("metadata"), dict):
        raise ParseError(
            f"Invalid data structure from NSE for index {index.key}: missing metadata",
            status_code=200,
            symbol=index.key,
        )

    return IndexQuote(
        symbol=index.key,
        name=index.name,
        price=to_float(first_defined(data, "metadata.last", "metadata.close", default=0)),
        change=to_float(lookup(data, "metadata.change")),
        change_percent=to_float(lookup(data, "metadata.percChange")),
    )
