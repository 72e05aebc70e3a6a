"""
Trending-symbol feeds.

NSETrendingFeed scrapes the NSE "gainers" analysis endpoint. NSE rejects
requests without a browser session, so every fetch is a two-step handshake:
load the landing page to obtain session cookies, then present them on the
data endpoint. Either step coming back empty fails the whole fetch.

CoinGeckoTrendingFeed reads the public market-cap ranking.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional
import logging

import httpx

from market_core.data.base import TrendingFeed
from market_core.utils.error_handling import SourceUnavailable, format_api_error_message

logger = logging.getLogger(__name__)

BROWSER_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64)",
    "Accept-Language": "en-US,en;q=0.9",
}


def _cookie_header(response: httpx.Response) -> str:
    """Collapse Set-Cookie headers into a single Cookie request header."""
    pairs = []
    for raw in response.headers.get_list("set-cookie"):
        pair = raw.split(";", 1)[0].strip()
        if pair and "=" in pair:
            pairs.append(pair)
    return "; ".join(pairs)


class NSETrendingFeed(TrendingFeed):
    source_name = "NSE"

    def __init__(
        self,
        base_url: str = "https://www.nseindia.com",
        index: str = "gainers",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._index = index
        self._timeout = timeout
        self._transport = transport

    async def fetch(self, limit: int) -> List[str]:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                landing = await client.get(self._base_url, headers=BROWSER_HEADERS)
                landing.raise_for_status()
                cookie_header = _cookie_header(landing)
                if not cookie_header:
                    raise SourceUnavailable(self.source_name, "No session cookie from landing page")

                resp = await client.get(
                    f"{self._base_url}/api/live-analysis-variations",
                    params={"index": self._index},
                    headers={
                        **BROWSER_HEADERS,
                        "Accept": "application/json",
                        "Referer": f"{self._base_url}/",
                        "Cookie": cookie_header,
                    },
                )
                resp.raise_for_status()
                payload = resp.json()
        except SourceUnavailable:
            raise
        except (httpx.HTTPError, ValueError) as e:
            logger.error(format_api_error_message(self.source_name, error=e))
            raise SourceUnavailable(self.source_name, str(e)) from e

        rows = self._rows(payload)
        symbols = [row["symbol"] for row in rows if isinstance(row, dict) and row.get("symbol")]
        if not symbols:
            raise SourceUnavailable(self.source_name, "No trending data available from NSE API")

        logger.info(f"NSE returned {len(symbols)} trending symbols (using {min(limit, len(symbols))})")
        return symbols[:limit]

    @staticmethod
    def _rows(payload: Any) -> List[Dict[str, Any]]:
        if not isinstance(payload, dict):
            return []
        nifty = payload.get("NIFTY")
        if not isinstance(nifty, dict):
            return []
        rows = nifty.get("data")
        return rows if isinstance(rows, list) else []


class CoinGeckoTrendingFeed(TrendingFeed):
    source_name = "CoinGecko"

    def __init__(
        self,
        base_url: str = "https://api.coingecko.com/api/v3",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def fetch(self, limit: int) -> List[str]:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.get(
                    f"{self._base_url}/coins/markets",
                    params={
                        "vs_currency": "usd",
                        "order": "market_cap_desc",
                        "per_page": limit,
                        "page": 1,
                    },
                )
                resp.raise_for_status()
                coins = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(format_api_error_message(self.source_name, error=e))
            raise SourceUnavailable(self.source_name, str(e)) from e

        if not isinstance(coins, list):
            coins = []
        symbols = [
            str(coin["symbol"]).upper()
            for coin in coins
            if isinstance(coin, dict) and coin.get("symbol")
        ]
        if not symbols:
            raise SourceUnavailable(self.source_name, "Failed to fetch top cryptocurrencies")
        return symbols[:limit]
