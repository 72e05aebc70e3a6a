from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class Quote:
    symbol: str
    price: float
    change: Optional[float]
    change_percent: Optional[float]
    market_cap: Optional[float]
    display_name: str
    currency: Optional[str] = None


@dataclass
class PricePoint:
    timestamp: datetime
    price: float

    def to_dict(self) -> Dict[str, Any]:
        return {"timestamp": self.timestamp.date().isoformat(), "price": self.price}


@dataclass
class NewsItem:
    headline: str
    url: str
    publisher: Optional[str] = None
    published_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "headline": self.headline,
            "url": self.url,
            "publisher": self.publisher,
            "publishedAt": self.published_at.isoformat() if self.published_at else None,
        }


@dataclass
class MarketQuoteResult:
    """One successful entry of a quote batch."""
    symbol: str
    canonical_symbol: str
    display_name: str
    current_price: float
    change: Optional[float]
    change_percent: Optional[float]
    market_cap: Optional[float]
    currency: str
    as_of: datetime
    history: List[PricePoint] = field(default_factory=list)
    detailed_info: Optional[Dict[str, Any]] = None
    news: Optional[List[NewsItem]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "symbol": self.symbol,
            "canonicalSymbol": self.canonical_symbol,
            "name": self.display_name,
            "displayName": self.display_name,
            "currentPrice": self.current_price,
            "change": self.change,
            "changePercent": self.change_percent,
            "marketCap": self.market_cap,
            "currency": self.currency,
            # realtime snapshot in the dates/prices shape the chat UI reads
            "dates": [self.as_of.isoformat()],
            "prices": [self.current_price],
            "history": [p.to_dict() for p in self.history],
        }
        if self.detailed_info is not None:
            data["detailedInfo"] = self.detailed_info
        if self.news is not None:
            data["news"] = [n.to_dict() for n in self.news]
        return data


@dataclass
class QuoteError:
    """Per-symbol failure marker inside a batch."""
    symbol: str
    error: str

    def to_dict(self) -> Dict[str, Any]:
        return {"symbol": self.symbol, "error": self.error}


@dataclass
class PlaceholderEntry:
    """Stands in for an empty batch after price filtering."""
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message}
