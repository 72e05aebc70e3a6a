from __future__ import annotations
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from market_core.models.quote import NewsItem, PricePoint, Quote


class TrendingFeed(ABC):
    """A ranked list of raw symbols from one upstream (exchange feed, ranking API)."""

    source_name: str = "trending"

    @abstractmethod
    async def fetch(self, limit: int) -> List[str]:
        """Raise SourceUnavailable when the feed yields nothing usable."""
        ...


class MarketDataGateway(ABC):
    @abstractmethod
    async def quote(self, symbol: str) -> Quote:
        ...

    @abstractmethod
    async def history_series(
        self,
        symbol: str,
        start: datetime,
        end: datetime,
        interval: str = "1d",
    ) -> List[PricePoint]:
        ...

    @abstractmethod
    async def detailed_info(self, symbol: str) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    async def search(self, query: str, limit: int = 10) -> List[NewsItem]:
        ...

    @abstractmethod
    async def currency_rate(self, base: str, quote: str) -> float:
        ...

    @abstractmethod
    async def trending_equities(self, limit: int) -> List[str]:
        ...

    @abstractmethod
    async def trending_cryptos(self, limit: int) -> List[str]:
        ...

    async def aclose(self) -> None:
        """Release network clients. Default: nothing to release."""
        return None
