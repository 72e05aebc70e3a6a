from market_core.models.quote import (
    MarketQuoteResult,
    NewsItem,
    PlaceholderEntry,
    PricePoint,
    Quote,
    QuoteError,
)

__all__ = [
    "Quote",
    "PricePoint",
    "NewsItem",
    "MarketQuoteResult",
    "QuoteError",
    "PlaceholderEntry",
]
