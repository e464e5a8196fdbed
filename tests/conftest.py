"""
Shared fixtures: scripted HTTP transport, controllable clock, NSE payloads and quotes.
"""

from dataclasses import dataclass, field
from typing import Any

import pytest

from inav_arbitrage.ingestion.config.value_objects import NseConfig
from inav_arbitrage.ingestion.ports.http import HttpResponse
from inav_arbitrage.shared.models.quotes import Quote


@dataclass
class RecordedCall:
    url: str
    params: dict | None
    headers: dict | None
    timeout: float | None


@dataclass
class FakeHttpClient:
    """IHttpClient stand-in.

    `routes` maps a URL to a list of responses/exceptions consumed in order;
    the last one repeats once the list is exhausted.
    """

    routes: dict[str, list[Any]] = field(default_factory=dict)
    calls: list[RecordedCall] = field(default_factory=list)
    closed: bool = False

    def script(self, url: str, *outcomes: Any) -> None:
        self.routes[url] = list(outcomes)

    def calls_to(self, url: str) -> list[RecordedCall]:
        return [c for c in self.calls if c.url == url]

    async def get(self, url, params=None, headers=None, timeout=None) -> HttpResponse:
        self.calls.append(RecordedCall(url, params, headers, timeout))
        outcomes = self.routes.get(url)
        if not outcomes:
            raise AssertionError(f"Unexpected request to {url}")
        outcome = outcomes.pop(0) if len(outcomes) > 1 else outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def close(self) -> None:
        self.closed = True


class FakeClock:
    """Monotonic clock the test advances by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def response(status: int = 200, body: Any = None, set_cookies=None) -> HttpResponse:
    return HttpResponse(
        status_code=status,
        body=body,
        headers={},
        url="https://www.nseindia.com",
        set_cookies=list(set_cookies or []),
    )


def quote_payload(
    last_price: float | None = 101.0,
    inav: Any = None,
    **price_overrides: Any,
) -> dict:
    price_info: dict[str, Any] = {
        "lastPrice": last_price,
        "close": 100.5,
        "previousClose": 99.0,
        "open": 99.5,
        "change": 2.0,
        "pChange": 2.02,
        "vwap": 100.2,
        "intraDayHighLow": {"min": 98.0, "max": 102.0},
        "weekHighLow": {"min": 90.0, "max": 110.0},
    }
    if inav is not None:
        price_info["iNavValue"] = inav
    price_info.update(price_overrides)
    return {
        "info": {"companyName": "Nippon India ETF Gold Bees", "isin": "INF204KB17I5"},
        "metadata": {"lastUpdateTime": "19-Oct-2026 15:30:00"},
        "priceInfo": price_info,
        "marketDeptOrderBook": {"tradeInfo": {"totalTradedVolume": 2_500_000}},
    }


@pytest.fixture
def nse_config() -> NseConfig:
    return NseConfig()


@pytest.fixture
def http_client() -> FakeHttpClient:
    return FakeHttpClient()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_response():
    return response


@pytest.fixture
def make_payload():
    return quote_payload


@pytest.fixture
def make_quote():
    """Factory for quotes; pass indicative_nav to get consistent premium fields."""

    def _make(
        symbol: str = "GOLDBEES",
        current_price: float = 101.0,
        indicative_nav: float | None = None,
        **kwargs: Any,
    ) -> Quote:
        premium_abs = premium_pct = None
        if indicative_nav:
            premium_abs = current_price - indicative_nav
            premium_pct = premium_abs / indicative_nav * 100
        return Quote(
            symbol=symbol,
            name=kwargs.pop("name", f"{symbol} ETF"),
            current_price=current_price,
            indicative_nav=indicative_nav,
            premium_discount_abs=premium_abs,
            premium_discount_percent=premium_pct,
            **kwargs,
        )

    return _make
