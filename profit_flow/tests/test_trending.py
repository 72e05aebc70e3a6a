"""
Tests for the NSE and CoinGecko trending feeds (no network: httpx.MockTransport).
"""

import httpx
import pytest

from market_core.data.trending import CoinGeckoTrendingFeed, NSETrendingFeed
from market_core.utils.error_handling import SourceUnavailable

NSE = "https://nse.test"
COINGECKO = "https://coingecko.test/api/v3"


def _nse_handler(landing_cookies=True, rows=None, api_status=200, seen=None):
    rows = rows if rows is not None else [{"symbol": "TCS"}, {"symbol": "INFY"}, {"symbol": "HDFCBANK"}]

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        if request.url.path in ("", "/"):
            headers = [("set-cookie", "nsit=abc; Path=/; HttpOnly"), ("set-cookie", "nseappid=xyz; Path=/")]
            return httpx.Response(200, headers=headers if landing_cookies else [], text="<html></html>")
        if request.url.path == "/api/live-analysis-variations":
            return httpx.Response(api_status, json={"NIFTY": {"data": rows}})
        return httpx.Response(404)

    return handler


@pytest.mark.asyncio
async def test_nse_handshake_presents_session_cookie():
    seen = []
    feed = NSETrendingFeed(base_url=NSE, transport=httpx.MockTransport(_nse_handler(seen=seen)))

    symbols = await feed.fetch(2)

    assert symbols == ["TCS", "INFY"]
    assert len(seen) == 2
    api_request = seen[1]
    assert api_request.url.params["index"] == "gainers"
    assert api_request.headers["cookie"] == "nsit=abc; nseappid=xyz"
    assert api_request.headers["referer"] == f"{NSE}/"


@pytest.mark.asyncio
async def test_nse_without_session_cookie_fails_whole_batch():
    seen = []
    feed = NSETrendingFeed(
        base_url=NSE, transport=httpx.MockTransport(_nse_handler(landing_cookies=False, seen=seen))
    )

    with pytest.raises(SourceUnavailable):
        await feed.fetch(5)
    # the data endpoint is never called without a session
    assert len(seen) == 1


@pytest.mark.asyncio
async def test_nse_without_rows_fails_whole_batch():
    feed = NSETrendingFeed(base_url=NSE, transport=httpx.MockTransport(_nse_handler(rows=[])))

    with pytest.raises(SourceUnavailable):
        await feed.fetch(5)


@pytest.mark.asyncio
async def test_nse_http_error_is_source_unavailable():
    feed = NSETrendingFeed(base_url=NSE, transport=httpx.MockTransport(_nse_handler(api_status=403)))

    with pytest.raises(SourceUnavailable):
        await feed.fetch(5)


@pytest.mark.asyncio
async def test_coingecko_returns_upper_case_symbols():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"symbol": "btc", "name": "Bitcoin"}, {"symbol": "eth", "name": "Ethereum"}])

    feed = CoinGeckoTrendingFeed(base_url=COINGECKO, transport=httpx.MockTransport(handler))

    assert await feed.fetch(2) == ["BTC", "ETH"]
    params = seen[0].url.params
    assert seen[0].url.path == "/api/v3/coins/markets"
    assert params["vs_currency"] == "usd"
    assert params["order"] == "market_cap_desc"
    assert params["per_page"] == "2"


@pytest.mark.asyncio
async def test_coingecko_empty_list_is_source_unavailable():
    feed = CoinGeckoTrendingFeed(
        base_url=COINGECKO, transport=httpx.MockTransport(lambda request: httpx.Response(200, json=[]))
    )

    with pytest.raises(SourceUnavailable):
        await feed.fetch(3)


@pytest.mark.asyncio
async def test_coingecko_rate_limit_is_source_unavailable():
    feed = CoinGeckoTrendingFeed(
        base_url=COINGECKO,
        transport=httpx.MockTransport(lambda request: httpx.Response(429, json={"status": "rate limited"})),
    )

    with pytest.raises(SourceUnavailable):
        await feed.fetch(3)
