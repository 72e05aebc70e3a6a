"""
Market data tools for Profit Flow.

Quotes, trending lists and market digests for Indian equities (NSE) and
cryptocurrencies. Every quote batch keeps one entry per symbol: a symbol the
upstream cannot price becomes a {symbol, error} entry instead of failing the
call. Trending-feed outages fail the whole call with an {error} result.
"""

from dataclasses import dataclass
from functools import partial
from typing import Any, Dict, List, Literal, Optional
import logging

from pydantic import BaseModel, ConfigDict, Field, field_validator

from market_core.data.base import MarketDataGateway
from market_core.data.quotes import (
    apply_price_ceiling,
    entries_to_dicts,
    fetch_quote_batch,
    resolve_conversion_rate,
)
from market_core.data.symbols import normalize_crypto, normalize_equity, normalize_exchange_symbol
from market_core.utils.error_handling import SourceUnavailable
from profit_flow.backend.backend_core.tools.registry import Tool

logger = logging.getLogger(__name__)

CURRENCY_SCHEMA = {
    "type": "string",
    "enum": ["USD", "INR"],
    "description": 'Currency for the price. Default is USD. For INR conversion, use "INR".',
}

STOCK_UNDER_PRICE_SCHEMA = {
    "type": "number",
    "description": "Optional: filter stocks with price under this value (in INR).",
}

CRYPTO_UNDER_PRICE_SCHEMA = {
    "type": "number",
    "description": "Optional: filter cryptos with current price under this value (in the specified currency).",
}


@dataclass
class MarketToolConfig:
    equity_suffix: str = ".NS"
    crypto_quote_currency: str = "USD"
    default_limit: int = 2
    lookback_days: int = 7
    news_highlights_limit: int = 5
    news_per_symbol: int = 10


# Argument models

class _Args(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class _CurrencyMixin(BaseModel):
    currency: Literal["USD", "INR"] = "USD"

    @field_validator("currency", mode="before")
    @classmethod
    def _upper(cls, v):
        if v is None:
            return "USD"
        return v.upper() if isinstance(v, str) else v


class StockPriceArgs(_Args):
    symbols: List[str] = Field(..., min_length=1)
    under_price: Optional[float] = Field(None, alias="underPrice")

    @field_validator("symbols")
    @classmethod
    def _strip(cls, v: List[str]) -> List[str]:
        symbols = [s.strip() for s in v if s and s.strip()]
        if not symbols:
            raise ValueError("at least one non-empty symbol is required")
        return symbols


class CryptoPriceArgs(StockPriceArgs, _CurrencyMixin):
    pass


MAX_TOP_LIMIT = 50


class TopListArgs(_Args):
    limit: Optional[int] = None
    under_price: Optional[float] = Field(None, alias="underPrice")

    @field_validator("limit", mode="before")
    @classmethod
    def _coerce_limit(cls, v):
        # zero or negative means "use the default"
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            if v <= 0:
                return None
            return min(int(v), MAX_TOP_LIMIT)
        return v


class TopCryptoArgs(TopListArgs, _CurrencyMixin):
    pass


# Tools

class _MarketTool(Tool):
    def __init__(self, gateway: MarketDataGateway, config: MarketToolConfig):
        self.gateway = gateway
        self.config = config

    def _limit(self, limit: Optional[int]) -> int:
        return limit if limit is not None else self.config.default_limit

    def _normalize_equity(self):
        return partial(normalize_equity, suffix=self.config.equity_suffix)

    def _normalize_feed_equity(self):
        return partial(normalize_exchange_symbol, suffix=self.config.equity_suffix)

    def _normalize_crypto(self):
        return partial(normalize_crypto, quote_currency=self.config.crypto_quote_currency)

    async def _news_highlights(self, query: str) -> List[Dict[str, Any]]:
        limit = self.config.news_highlights_limit
        items = await self.gateway.search(query, limit)
        return [item.to_dict() for item in items[:limit]]


class GetStockPriceTool(_MarketTool):
    """Quotes, 7-day history, profile and news for named NSE stocks."""

    args_model = StockPriceArgs

    @property
    def name(self) -> str:
        return "get_stock_price"

    @property
    def description(self) -> str:
        return (
            "Get real-time stock price (current quote), historical price data, and basic "
            "information for one or more stock symbols. This function always returns data "
            "for Indian stocks only."
        )

    @property
    def parameters(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "symbols": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": 'Array of stock symbols like ["RELIANCE", "TCS"] for Reliance and TCS.',
                },
                "underPrice": STOCK_UNDER_PRICE_SCHEMA,
            },
            "required": ["symbols"],
        }

    async def execute(self, symbols: List[str], under_price: Optional[float] = None) -> List[Dict[str, Any]]:
        batch = await fetch_quote_batch(
            self.gateway,
            symbols,
            self._normalize_equity(),
            include_details=True,
            include_news=True,
            lookback_days=self.config.lookback_days,
            news_limit=self.config.news_per_symbol,
        )
        return entries_to_dicts(apply_price_ceiling(batch, under_price, "stocks"))


class GetTopStocksTool(_MarketTool):
    """Top NSE gainers, quoted like get_stock_price."""

    args_model = TopListArgs

    @property
    def name(self) -> str:
        return "get_top_stocks"

    @property
    def description(self) -> str:
        return (
            "Get the trending Indian stocks in real time using NSE data. Optionally, "
            "specify a price filter (underPrice)."
        )

    @property
    def parameters(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "limit": {
                    "type": "number",
                    "description": f"Number of top stocks to fetch (default is {self.config.default_limit}).",
                },
                "underPrice": STOCK_UNDER_PRICE_SCHEMA,
            },
        }

    async def execute(self, limit: Optional[int] = None, under_price: Optional[float] = None) -> Any:
        try:
            symbols = await self.gateway.trending_equities(self._limit(limit))
        except SourceUnavailable as e:
            logger.error(f"Error fetching top stocks from NSE: {e}")
            return {"error": "Unable to fetch trending Indian stocks from NSE."}

        batch = await fetch_quote_batch(
            self.gateway,
            symbols,
            self._normalize_feed_equity(),
            include_details=True,
            include_news=True,
            lookback_days=self.config.lookback_days,
            news_limit=self.config.news_per_symbol,
        )
        return entries_to_dicts(apply_price_ceiling(batch, under_price, "stocks"))


class GetCryptoPriceTool(_MarketTool):
    """Crypto quotes in USD or INR. INR uses the USD/INR rate, falling back to 1.0."""

    args_model = CryptoPriceArgs

    @property
    def name(self) -> str:
        return "get_crypto_price"

    @property
    def description(self) -> str:
        return (
            "Get real-time cryptocurrency price (current quote), historical price data, and "
            "basic information for one or more crypto symbols. Optionally, specify the currency "
            '("USD" or "INR") and a maximum price (underPrice).'
        )

    @property
    def parameters(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "symbols": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": 'Array of cryptocurrency symbols like ["BTC", "ETH"] for Bitcoin and Ethereum.',
                },
                "currency": CURRENCY_SCHEMA,
                "underPrice": CRYPTO_UNDER_PRICE_SCHEMA,
            },
            "required": ["symbols"],
        }

    async def execute(
        self,
        symbols: List[str],
        currency: str = "USD",
        under_price: Optional[float] = None,
    ) -> List[Dict[str, Any]]:
        rate = await resolve_conversion_rate(self.gateway, currency, self.config.crypto_quote_currency)
        batch = await fetch_quote_batch(
            self.gateway,
            symbols,
            self._normalize_crypto(),
            include_details=True,
            include_news=True,
            conversion_rate=rate,
            lookback_days=self.config.lookback_days,
            currency=currency if rate != 1.0 else self.config.crypto_quote_currency,
            news_limit=self.config.news_per_symbol,
        )
        return entries_to_dicts(apply_price_ceiling(batch, under_price, "cryptocurrencies"))


class GetTopCryptosTool(_MarketTool):
    """Largest cryptos by market cap (CoinGecko), quoted without details or news."""

    args_model = TopCryptoArgs

    @property
    def name(self) -> str:
        return "get_top_cryptos"

    @property
    def description(self) -> str:
        return (
            "Get the trending cryptocurrencies in real time. Optionally, specify the currency "
            '("USD" or "INR") and a price filter (underPrice).'
        )

    @property
    def parameters(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "limit": {
                    "type": "number",
                    "description": f"Number of top cryptos to fetch (default is {self.config.default_limit}).",
                },
                "currency": CURRENCY_SCHEMA,
                "underPrice": CRYPTO_UNDER_PRICE_SCHEMA,
            },
        }

    async def execute(
        self,
        limit: Optional[int] = None,
        currency: str = "USD",
        under_price: Optional[float] = None,
    ) -> Any:
        rate = await resolve_conversion_rate(self.gateway, currency, self.config.crypto_quote_currency)
        try:
            symbols = await self.gateway.trending_cryptos(self._limit(limit))
        except SourceUnavailable as e:
            logger.error(f"Error fetching top cryptos: {e}")
            return {"error": "Unable to fetch top cryptos"}

        batch = await fetch_quote_batch(
            self.gateway,
            symbols,
            self._normalize_crypto(),
            include_details=False,
            include_news=False,
            conversion_rate=rate,
            lookback_days=self.config.lookback_days,
            currency=currency if rate != 1.0 else self.config.crypto_quote_currency,
        )
        return entries_to_dicts(apply_price_ceiling(batch, under_price, "cryptocurrencies"))


class GetMarketUpdateTool(_MarketTool):
    """Trending NSE stocks plus Indian market news highlights."""

    args_model = TopListArgs

    def __init__(self, gateway: MarketDataGateway, config: MarketToolConfig, top_stocks: GetTopStocksTool):
        super().__init__(gateway, config)
        self.top_stocks = top_stocks

    @property
    def name(self) -> str:
        return "get_market_update"

    @property
    def description(self) -> str:
        return (
            "Get a comprehensive update of the Indian stock market that includes trending NSE "
            "stocks and current market news."
        )

    @property
    def parameters(self) -> Dict[str, Any]:
        return self.top_stocks.parameters

    async def execute(self, limit: Optional[int] = None, under_price: Optional[float] = None) -> Dict[str, Any]:
        return {
            "topStocks": await self.top_stocks.execute(limit=limit, under_price=under_price),
            "newsHighlights": await self._news_highlights("Indian stock market"),
        }


class GetCryptoMarketUpdateTool(_MarketTool):
    """Top cryptos plus crypto market news highlights."""

    args_model = TopCryptoArgs

    def __init__(self, gateway: MarketDataGateway, config: MarketToolConfig, top_cryptos: GetTopCryptosTool):
        super().__init__(gateway, config)
        self.top_cryptos = top_cryptos

    @property
    def name(self) -> str:
        return "get_crypto_market_update"

    @property
    def description(self) -> str:
        return (
            "Get a comprehensive update of the cryptocurrency market that includes trending "
            "cryptocurrencies and current crypto market news."
        )

    @property
    def parameters(self) -> Dict[str, Any]:
        return self.top_cryptos.parameters

    async def execute(
        self,
        limit: Optional[int] = None,
        currency: str = "USD",
        under_price: Optional[float] = None,
    ) -> Dict[str, Any]:
        return {
            "topCryptos": await self.top_cryptos.execute(limit=limit, currency=currency, under_price=under_price),
            "newsHighlights": await self._news_highlights("cryptocurrency market news"),
        }


def register_market_tools(registry, gateway: MarketDataGateway, config: Optional[MarketToolConfig] = None):
    """Register all market data tools."""
    config = config or MarketToolConfig()
    top_stocks = GetTopStocksTool(gateway, config)
    top_cryptos = GetTopCryptosTool(gateway, config)

    registry.register(GetStockPriceTool(gateway, config))
    registry.register(GetCryptoPriceTool(gateway, config))
    registry.register(top_stocks)
    registry.register(top_cryptos)
    registry.register(GetMarketUpdateTool(gateway, config, top_stocks))
    registry.register(GetCryptoMarketUpdateTool(gateway, config, top_cryptos))
