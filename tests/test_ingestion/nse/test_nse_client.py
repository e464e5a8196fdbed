"""
Tests for NseClient: retry bounds, status mapping, network retries, index support.
"""

import asyncio

import aiohttp
import pytest

from inav_arbitrage.ingestion.adapters.nse_plugin.client import NseClient
from inav_arbitrage.ingestion.adapters.nse_plugin.exceptions import (
    AuthError,
    NetworkError,
    ParseError,
    UnsupportedIndexError,
    UpstreamStatusError,
)
from inav_arbitrage.ingestion.config.value_objects import NseConfig, RetryConfig
from inav_arbitrage.shared.models.enums import AssetClass
from inav_arbitrage.shared.models.quotes import InstrumentConfig


class FakeSessionProvider:
    def __init__(self):
        self.force_flags: list[bool] = []
        self.invalidations = 0

    async def get_headers(self, force_refresh: bool = False) -> dict[str, str]:
        self.force_flags.append(force_refresh)
        return {"Cookie": f"token-{len(self.force_flags)}"}

    async def invalidate(self) -> None:
        self.invalidations += 1


@pytest.fixture
def session_provider():
    return FakeSessionProvider()


@pytest.fixture
def client(nse_config, http_client, session_provider):
    return NseClient(nse_config, http_client, session_provider)


class TestFetchQuoteSuccess:
    @pytest.mark.asyncio
    async def test_parses_quote(self, client, http_client, nse_config, make_response, make_payload):
        http_client.script(nse_config.quote_url, make_response(200, make_payload(inav="100.00")))

        quote = await client.fetch_quote("GOLDBEES")

        assert quote.symbol == "GOLDBEES"
        assert quote.current_price == 101.0
        assert quote.indicative_nav == 100.0
        assert quote.premium_discount_percent == pytest.approx(1.0)
        assert quote.stale is False

    @pytest.mark.asyncio
    async def test_request_shape(
        self, client, http_client, nse_config, session_provider, make_response, make_payload
    ):
        http_client.script(nse_config.quote_url, make_response(200, make_payload()))

        await client.fetch_quote("GOLDBEES")

        call = http_client.calls_to(nse_config.quote_url)[0]
        assert call.params == {"symbol": "GOLDBEES"}
        assert call.timeout == 20.0
        assert call.headers == {"Cookie": "token-1"}
        assert session_provider.force_flags == [False]

    @pytest.mark.asyncio
    async def test_uses_registered_instrument(
        self, client, http_client, nse_config, make_response, make_payload
    ):
        payload = make_payload()
        payload.pop("info")
        http_client.script(nse_config.quote_url, make_response(200, payload))
        instrument = InstrumentConfig(
            symbol="TATAGOLD", name="Tata Gold ETF", asset_class=AssetClass.GOLD
        )

        quote = await client.fetch_quote("TATAGOLD", instrument)

        assert quote.name == "Tata Gold ETF"
        assert quote.asset_class == AssetClass.GOLD


class TestAuthRetries:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [401, 403])
    async def test_always_rejected_makes_exactly_three_attempts(
        self, client, http_client, nse_config, session_provider, make_response, status
    ):
        http_client.script(nse_config.quote_url, make_response(status, "Forbidden"))

        with pytest.raises(AuthError) as exc_info:
            await client.fetch_quote("GOLDBEES")

        assert len(http_client.calls_to(nse_config.quote_url)) == 3
        assert session_provider.force_flags == [False, True, True]
        assert session_provider.invalidations == 2
        assert exc_info.value.status_code == status
        assert exc_info.value.symbol == "GOLDBEES"

    @pytest.mark.asyncio
    async def test_recovers_after_refresh(
        self, client, http_client, nse_config, session_provider, make_response, make_payload
    ):
        http_client.script(
            nse_config.quote_url,
            make_response(401, "expired"),
            make_response(200, make_payload()),
        )

        quote = await client.fetch_quote("GOLDBEES")

        assert quote.current_price == 101.0
        assert session_provider.force_flags == [False, True]
        assert session_provider.invalidations == 1

    @pytest.mark.asyncio
    async def test_retry_budget_is_configurable(
        self, http_client, session_provider, make_response
    ):
        config = NseConfig(retry_config=RetryConfig(max_retries=0))
        client = NseClient(config, http_client, session_provider)
        http_client.script(config.quote_url, make_response(401, ""))

        with pytest.raises(AuthError):
            await client.fetch_quote("GOLDBEES")

        assert len(http_client.calls_to(config.quote_url)) == 1


class TestStatusErrors:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [404, 429, 500, 503])
    async def test_other_status_fails_without_retry(
        self, client, http_client, nse_config, make_response, status
    ):
        http_client.script(nse_config.quote_url, make_response(status, {"message": "nope"}))

        with pytest.raises(UpstreamStatusError) as exc_info:
            await client.fetch_quote("GOLDBEES")

        assert exc_info.value.status_code == status
        assert len(http_client.calls_to(nse_config.quote_url)) == 1

    @pytest.mark.asyncio
    async def test_missing_price_block_is_parse_error(
        self, client, http_client, nse_config, make_response
    ):
        http_client.script(nse_config.quote_url, make_response(200, {"info": {}}))

        with pytest.raises(ParseError):
            await client.fetch_quote("GOLDBEES")

        assert len(http_client.calls_to(nse_config.quote_url)) == 1

    @pytest.mark.asyncio
    async def test_html_body_is_parse_error(self, client, http_client, nse_config, make_response):
        http_client.script(nse_config.quote_url, make_response(200, "<html>blocked</html>"))

        with pytest.raises(ParseError):
            await client.fetch_quote("GOLDBEES")


class TestNetworkRetries:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "failure",
        [asyncio.TimeoutError(), aiohttp.ServerDisconnectedError()],
    )
    async def test_transient_failure_retried_then_network_error(
        self, client, http_client, nse_config, session_provider, failure
    ):
        http_client.script(nse_config.quote_url, failure)

        with pytest.raises(NetworkError):
            await client.fetch_quote("GOLDBEES")

        assert len(http_client.calls_to(nse_config.quote_url)) == 3
        # Retries refresh the cookie, but only auth rejections invalidate it.
        assert session_provider.invalidations == 0
        assert session_provider.force_flags == [False, True, True]

    @pytest.mark.asyncio
    async def test_transient_failure_then_success(
        self, client, http_client, nse_config, session_provider, make_response, make_payload
    ):
        http_client.script(
            nse_config.quote_url,
            asyncio.TimeoutError(),
            make_response(200, make_payload()),
        )

        quote = await client.fetch_quote("GOLDBEES")

        assert quote.symbol == "GOLDBEES"
        assert len(http_client.calls_to(nse_config.quote_url)) == 2
        assert session_provider.force_flags == [False, True]

    @pytest.mark.asyncio
    async def test_non_transient_client_error_not_retried(
        self, client, http_client, nse_config
    ):
        http_client.script(nse_config.quote_url, aiohttp.ClientPayloadError("bad gzip"))

        with pytest.raises(NetworkError):
            await client.fetch_quote("GOLDBEES")

        assert len(http_client.calls_to(nse_config.quote_url)) == 1


class TestFetchIndex:
    @pytest.mark.asyncio
    async def test_parses_index(self, client, http_client, nse_config, make_response):
        http_client.script(
            nse_config.index_url,
            make_response(
                200,
                {"metadata": {"last": 24500.5, "change": -120.25, "percChange": -0.49}},
            ),
        )

        index = await client.fetch_index("NIFTY 50")

        assert index.symbol == "NIFTY 50"
        assert index.name == "Nifty 50"
        assert index.price == 24500.5
        assert index.change_percent == -0.49
        assert http_client.calls_to(nse_config.index_url)[0].params == {"index": "NIFTY 50"}

    @pytest.mark.asyncio
    async def test_banknifty_uses_upstream_code(
        self, client, http_client, nse_config, make_response
    ):
        http_client.script(
            nse_config.index_url, make_response(200, {"metadata": {"close": 51000}})
        )

        index = await client.fetch_index("BANKNIFTY")

        assert index.price == 51000.0
        assert http_client.calls_to(nse_config.index_url)[0].params == {"index": "NIFTY BANK"}

    @pytest.mark.asyncio
    async def test_sensex_is_unsupported(self, client, http_client):
        with pytest.raises(UnsupportedIndexError, match="BSE"):
            await client.fetch_index("SENSEX")

        assert http_client.calls == []

    @pytest.mark.asyncio
    async def test_unknown_index_is_unsupported(self, client):
        with pytest.raises(UnsupportedIndexError):
            await client.fetch_index("NASDAQ")

    @pytest.mark.asyncio
    async def test_index_auth_retries(
        self, client, http_client, nse_config, session_provider, make_response
    ):
        http_client.script(nse_config.index_url, make_response(403, ""))

        with pytest.raises(AuthError):
            await client.fetch_index("NIFTY 50")

        assert len(http_client.calls_to(nse_config.index_url)) == 3

    @pytest.mark.asyncio
    async def test_index_without_metadata_is_parse_error(
        self, client, http_client, nse_config, make_response
    ):
        http_client.script(nse_config.index_url, make_response(200, {"data": []}))

        with pytest.raises(ParseError):
            await client.fetch_index("NIFTY 50")
