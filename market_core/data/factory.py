"""
Market Gateway Factory - Creates the market-data gateway from configuration.

The gateway pairs a quote source with the two trending feeds. Only Yahoo
Finance is wired today; the trending feeds are configured independently so
the NSE scraper can be replaced without touching quote lookups.
"""

from __future__ import annotations
from typing import Any, Dict, Optional
import logging

import httpx

from market_core.data.base import MarketDataGateway
from market_core.data.trending import CoinGeckoTrendingFeed, NSETrendingFeed
from market_core.data.yfinance_data import YFinanceMarketGateway

logger = logging.getLogger(__name__)


def create_market_gateway(
    source_name: str,
    config: Dict[str, Any],
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> MarketDataGateway:
    """
    Create a market-data gateway based on source name and configuration.

    Expected config keys (all optional):
        timeout: Upstream call timeout in seconds (default 10.0)
        nse_base_url: NSE site root
        coingecko_base_url: CoinGecko API root

    Args:
        source_name: Name of the quote source ("yfinance")
        config: Configuration dictionary for the gateway
        transport: Optional httpx transport shared by the trending feeds

    Returns:
        MarketDataGateway instance

    Raises:
        ValueError: If source_name is not supported
    """
    source_name_lower = source_name.lower()
    timeout = float(config.get("timeout", 10.0))

    equity_feed = NSETrendingFeed(
        base_url=config.get("nse_base_url", "https://www.nseindia.com"),
        timeout=timeout,
        transport=transport,
    )
    crypto_feed = CoinGeckoTrendingFeed(
        base_url=config.get("coingecko_base_url", "https://api.coingecko.com/api/v3"),
        timeout=timeout,
        transport=transport,
    )

    if source_name_lower == "yfinance":
        gateway = YFinanceMarketGateway(equity_feed=equity_feed, crypto_feed=crypto_feed, timeout=timeout)
        logger.info(f"Created YFinanceMarketGateway (timeout: {timeout:g}s)")
        return gateway

    raise ValueError(
        f"Unsupported data source: '{source_name}'. "
        f"Supported sources: 'yfinance'"
    )
