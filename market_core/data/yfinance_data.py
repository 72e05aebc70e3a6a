from __future__ import annotations
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar
import asyncio
import logging
import time

import pandas as pd
import yfinance as yf

from market_core.data.base import MarketDataGateway, TrendingFeed
from market_core.data.symbols import currency_pair_symbol
from market_core.models.quote import NewsItem, PricePoint, Quote
from market_core.utils.error_handling import DataUnavailable, format_api_error_message

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Subset of Ticker.info surfaced as "detailedInfo" (summary detail + profile)
DETAIL_FIELDS = [
    "longBusinessSummary",
    "sector",
    "industry",
    "website",
    "country",
    "fullTimeEmployees",
    "previousClose",
    "open",
    "dayLow",
    "dayHigh",
    "fiftyTwoWeekLow",
    "fiftyTwoWeekHigh",
    "volume",
    "averageVolume",
    "trailingPE",
    "forwardPE",
    "dividendYield",
    "beta",
    "circulatingSupply",
]


class YFinanceMarketGateway(MarketDataGateway):
    """
    Market-data gateway backed by Yahoo Finance (yfinance library).

    yfinance is synchronous, so every call runs in the default executor and is
    bounded by ``timeout``; an expired call counts as DataUnavailable.
    Ticker.info is kept for ``info_ttl`` seconds so a quote and its detailed
    info cost one upstream request.
    Trending lists come from separate feeds (NSE, CoinGecko) that can be
    swapped without touching callers.
    """

    def __init__(
        self,
        equity_feed: TrendingFeed,
        crypto_feed: TrendingFeed,
        timeout: float = 10.0,
        info_ttl: float = 30.0,
    ):
        self._equity_feed = equity_feed
        self._crypto_feed = crypto_feed
        self._timeout = timeout
        self._info_ttl = info_ttl
        self._info_cache: Dict[str, Tuple[float, Dict[str, Any]]] = {}

    async def _run(self, symbol: str, fn: Callable[[], T]) -> T:
        loop = asyncio.get_running_loop()
        try:
            return await asyncio.wait_for(loop.run_in_executor(None, fn), timeout=self._timeout)
        except asyncio.TimeoutError as e:
            raise DataUnavailable(symbol, f"Upstream timed out after {self._timeout:g}s") from e

    async def _info(self, symbol: str) -> Dict[str, Any]:
        cached = self._info_cache.get(symbol)
        if cached is not None and time.monotonic() - cached[0] < self._info_ttl:
            return cached[1]

        try:
            info = await self._run(symbol, lambda: yf.Ticker(symbol).info)
        except DataUnavailable:
            raise
        except Exception as e:
            logger.warning(format_api_error_message("YFinance", symbol=symbol, error=e))
            raise DataUnavailable(symbol, "Unable to fetch data") from e
        if not info:
            raise DataUnavailable(symbol)
        self._info_cache[symbol] = (time.monotonic(), info)
        return info

    async def quote(self, symbol: str) -> Quote:
        info = await self._info(symbol)
        price = info.get("regularMarketPrice")
        if price is None:
            price = info.get("currentPrice")
        if price is None:
            raise DataUnavailable(symbol)

        return Quote(
            symbol=symbol,
            price=float(price),
            change=info.get("regularMarketChange"),
            change_percent=info.get("regularMarketChangePercent"),
            market_cap=info.get("marketCap"),
            display_name=info.get("longName") or info.get("shortName") or symbol,
            currency=info.get("currency"),
        )

    async def history_series(
        self,
        symbol: str,
        start: datetime,
        end: datetime,
        interval: str = "1d",
    ) -> List[PricePoint]:
        start_date = start.date()
        # yfinance treats end as exclusive
        end_date = end.date() + timedelta(days=1)

        try:
            df = await self._run(
                symbol,
                lambda: yf.Ticker(symbol).history(
                    start=start_date,
                    end=end_date,
                    interval=interval,
                    auto_adjust=False,
                ),
            )
        except Exception as e:
            logger.warning(format_api_error_message("YFinance", symbol=symbol, error=e, additional_info="history"))
            return []

        if df is None or df.empty or "Close" not in df.columns:
            logger.info(f"No history returned from YFinance for {symbol} from {start_date} to {end_date}")
            return []

        points: List[PricePoint] = []
        for idx, row in df.iterrows():
            close = row["Close"]
            if pd.isna(close):
                continue
            ts = idx.to_pydatetime() if hasattr(idx, "to_pydatetime") else pd.to_datetime(idx).to_pydatetime()
            points.append(PricePoint(timestamp=ts, price=float(close)))
        return points

    async def detailed_info(self, symbol: str) -> Optional[Dict[str, Any]]:
        try:
            info = await self._info(symbol)
        except DataUnavailable as e:
            logger.debug(f"No detailed info for {symbol}: {e.reason}")
            return None
        details = {k: info[k] for k in DETAIL_FIELDS if info.get(k) is not None}
        return details or None

    async def search(self, query: str, limit: int = 10) -> List[NewsItem]:
        try:
            raw_news = await self._run(query, lambda: yf.Search(query, news_count=limit).news)
        except Exception as e:
            logger.warning(format_api_error_message("YFinance", error=e, additional_info=f"search query={query!r}"))
            return []

        items: List[NewsItem] = []
        for article in raw_news or []:
            if not isinstance(article, dict):
                continue
            headline = (article.get("title") or "").strip()
            url = (article.get("link") or "").strip()
            if not headline and not url:
                continue
            published = article.get("providerPublishTime")
            items.append(
                NewsItem(
                    headline=headline,
                    url=url,
                    publisher=article.get("publisher"),
                    published_at=datetime.fromtimestamp(published, tz=timezone.utc) if isinstance(published, (int, float)) else None,
                )
            )
        return items[:limit]

    async def currency_rate(self, base: str, quote: str) -> float:
        pair = currency_pair_symbol(base, quote)
        return (await self.quote(pair)).price

    async def trending_equities(self, limit: int) -> List[str]:
        return await self._equity_feed.fetch(limit)

    async def trending_cryptos(self, limit: int) -> List[str]:
        return await self._crypto_feed.fetch(limit)
