"""
Batch quote assembly.

A batch fans out one task per symbol and gathers them in input order. Each
symbol is isolated: its quote failing yields a QuoteError entry for that
symbol only, and a failing enrichment (history, details, news) degrades to an
empty value instead of failing the entry.
"""

from __future__ import annotations
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Sequence, Union
import asyncio
import logging

from market_core.data.base import MarketDataGateway
from market_core.models.quote import MarketQuoteResult, PlaceholderEntry, PricePoint, QuoteError
from market_core.utils.error_handling import DataUnavailable, format_api_error_message

logger = logging.getLogger(__name__)

BatchEntry = Union[MarketQuoteResult, QuoteError, PlaceholderEntry]


async def resolve_conversion_rate(
    gateway: MarketDataGateway,
    currency: str,
    base_currency: str = "USD",
) -> float:
    """
    Rate that converts ``base_currency`` prices into ``currency``.

    Fails open: when the lookup fails or returns a non-positive rate the
    identity rate 1.0 is returned and prices stay in ``base_currency``.
    """
    if currency.upper() == base_currency.upper():
        return 1.0
    try:
        rate = await gateway.currency_rate(base_currency, currency)
    except Exception as e:
        logger.warning(
            format_api_error_message("FX", symbol=f"{base_currency}/{currency}", error=e, additional_info="using rate 1.0")
        )
        return 1.0
    if not rate or rate <= 0:
        logger.warning(f"Non-positive {base_currency}/{currency} rate {rate!r}; using rate 1.0")
        return 1.0
    return float(rate)


async def _fetch_one(
    gateway: MarketDataGateway,
    raw_symbol: str,
    normalize: Callable[[str], str],
    include_details: bool,
    include_news: bool,
    conversion_rate: float,
    currency: Optional[str],
    start: datetime,
    end: datetime,
    news_limit: int,
) -> Union[MarketQuoteResult, QuoteError]:
    symbol = normalize(raw_symbol)
    try:
        quote = await gateway.quote(symbol)
    except DataUnavailable as e:
        logger.info(f"No quote for {symbol}: {e.reason}")
        return QuoteError(symbol=raw_symbol, error=e.reason)
    except Exception as e:
        logger.error(format_api_error_message("quote", symbol=symbol, error=e))
        return QuoteError(symbol=raw_symbol, error="Unable to fetch data")

    async def _nothing():
        return None

    history, details, news = await asyncio.gather(
        gateway.history_series(symbol, start, end, "1d"),
        gateway.detailed_info(symbol) if include_details else _nothing(),
        gateway.search(symbol, news_limit) if include_news else _nothing(),
        return_exceptions=True,
    )
    if isinstance(history, BaseException):
        logger.warning(format_api_error_message("history", symbol=symbol, error=history))
        history = []
    if isinstance(details, BaseException):
        logger.warning(format_api_error_message("details", symbol=symbol, error=details))
        details = None
    if isinstance(news, BaseException):
        logger.warning(format_api_error_message("news", symbol=symbol, error=news))
        news = []

    if conversion_rate != 1.0:
        history = [PricePoint(timestamp=p.timestamp, price=p.price * conversion_rate) for p in history]

    def _convert(value: Optional[float]) -> Optional[float]:
        return value * conversion_rate if value is not None else None

    return MarketQuoteResult(
        symbol=raw_symbol,
        canonical_symbol=symbol,
        display_name=quote.display_name,
        current_price=quote.price * conversion_rate,
        change=_convert(quote.change),
        change_percent=quote.change_percent,
        market_cap=quote.market_cap,
        currency=currency or quote.currency or "USD",
        as_of=end,
        history=history,
        detailed_info=details if include_details else None,
        news=(news or []) if include_news else None,
    )


async def fetch_quote_batch(
    gateway: MarketDataGateway,
    symbols: Sequence[str],
    normalize: Callable[[str], str],
    include_details: bool = True,
    include_news: bool = True,
    conversion_rate: float = 1.0,
    lookback_days: int = 7,
    currency: Optional[str] = None,
    news_limit: int = 10,
    now: Optional[datetime] = None,
) -> List[Union[MarketQuoteResult, QuoteError]]:
    """
    Quote every symbol concurrently; entries come back in input order.

    Args:
        gateway: Market-data gateway
        symbols: Raw symbols as supplied by the user or a trending feed
        normalize: Maps a raw symbol to its canonical form
        include_details: Attach detailed_info to each entry
        include_news: Attach per-symbol news to each entry
        conversion_rate: Multiplier for price, change and history
        lookback_days: Length of the daily history window
        currency: Currency label for entries (defaults to the quote's own)
        news_limit: Max news items per symbol
        now: End of the history window (defaults to current UTC time)

    Returns:
        One MarketQuoteResult or QuoteError per input symbol
    """
    end = now or datetime.now(timezone.utc)
    start = end - timedelta(days=lookback_days)
    tasks = [
        _fetch_one(
            gateway,
            raw,
            normalize,
            include_details,
            include_news,
            conversion_rate,
            currency,
            start,
            end,
            news_limit,
        )
        for raw in symbols
    ]
    return list(await asyncio.gather(*tasks))


def _format_price(value: float) -> str:
    """1000000.0 -> "1,000,000"; 99.5 -> "99.50"."""
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


def apply_price_ceiling(
    entries: Sequence[Union[MarketQuoteResult, QuoteError]],
    under_price: Optional[float],
    asset_label: str,
) -> List[BatchEntry]:
    """
    Keep successful entries priced strictly below ``under_price``.

    Error entries are kept as-is. When no successful entry passes, the
    successful part is replaced by one PlaceholderEntry, so the result is
    never empty.
    """
    if under_price is None:
        return list(entries)

    def _passes(entry) -> bool:
        return isinstance(entry, MarketQuoteResult) and entry.current_price < under_price

    if any(_passes(e) for e in entries):
        return [e for e in entries if isinstance(e, QuoteError) or _passes(e)]

    errors = [e for e in entries if isinstance(e, QuoteError)]
    placeholder = PlaceholderEntry(message=f"No {asset_label} found with a price under {_format_price(under_price)}.")
    return [placeholder, *errors]


def entries_to_dicts(entries: Sequence[BatchEntry]) -> List[dict]:
    return [e.to_dict() for e in entries]
