"""
Data module - provides the market-data gateway and trending feeds.

This module exports:
- MarketDataGateway: Base class for market-data sources
- TrendingFeed: Base class for trending-symbol feeds
- YFinanceMarketGateway: Yahoo Finance gateway (yfinance library)
- NSETrendingFeed / CoinGeckoTrendingFeed: trending equities / cryptos
- create_market_gateway: Factory function to create a gateway from config
- fetch_quote_batch, apply_price_ceiling, resolve_conversion_rate: batch helpers
"""

from market_core.data.base import MarketDataGateway, TrendingFeed
from market_core.data.factory import create_market_gateway
from market_core.data.quotes import apply_price_ceiling, fetch_quote_batch, resolve_conversion_rate
from market_core.data.symbols import normalize_crypto, normalize_equity, normalize_exchange_symbol
from market_core.data.trending import CoinGeckoTrendingFeed, NSETrendingFeed
from market_core.data.yfinance_data import YFinanceMarketGateway

__all__ = [
    "MarketDataGateway",
    "TrendingFeed",
    "YFinanceMarketGateway",
    "NSETrendingFeed",
    "CoinGeckoTrendingFeed",
    "create_market_gateway",
    "fetch_quote_batch",
    "apply_price_ceiling",
    "resolve_conversion_rate",
    "normalize_equity",
    "normalize_exchange_symbol",
    "normalize_crypto",
]
