"""
Shared fixtures: in-memory database, fake market-data gateway, scripted LLM.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from market_core.data.base import MarketDataGateway
from market_core.models.quote import NewsItem, PricePoint, Quote
from market_core.utils.error_handling import DataUnavailable, SourceUnavailable
from profit_flow.backend.backend_core.chat_log import ChatLogStore
from profit_flow.backend.backend_core.company import CompanyKnowledgeBase
from profit_flow.backend.backend_core.config import Settings
from profit_flow.backend.backend_core.database import Database
from profit_flow.backend.backend_core.llm import DirectAnswer, ToolCall

COMPANY_DOCUMENT = {
    "features": ["Real-time quotes", "Price history charts"],
    "pricing": {"pro": {"price": "INR 499 / month"}},
    "benefits": ["Live data"],
    "support": {"email": "support@profitflow.example"},
    "faq": [{"question": "Is this advice?", "answer": "No."}],
}


class FakeGateway(MarketDataGateway):
    """
    In-memory gateway.

    quotes maps canonical symbol -> price; symbols missing from it raise
    DataUnavailable. Trending feeds raise SourceUnavailable when set to None.
    """

    def __init__(
        self,
        quotes: Optional[Dict[str, float]] = None,
        trending_equities: Optional[List[str]] = None,
        trending_cryptos: Optional[List[str]] = None,
        fx_rate: Any = 80.0,
        history_days: int = 3,
    ):
        self.quotes = quotes if quotes is not None else {
            "TCS.NS": 3500.0,
            "INFY.NS": 1500.0,
            "RELIANCE.NS": 2500.0,
            "BTC-USD": 60000.0,
            "ETH-USD": 3000.0,
        }
        self._trending_equities = trending_equities
        self._trending_cryptos = trending_cryptos
        self.fx_rate = fx_rate
        self.history_days = history_days
        self.calls: List[tuple] = []

    async def quote(self, symbol: str) -> Quote:
        self.calls.append(("quote", symbol))
        if symbol == "USDINR=X":
            if isinstance(self.fx_rate, Exception):
                raise self.fx_rate
            return Quote(symbol, float(self.fx_rate), None, None, None, "USD/INR", "INR")
        if symbol not in self.quotes:
            raise DataUnavailable(symbol)
        price = self.quotes[symbol]
        currency = "INR" if symbol.endswith(".NS") else "USD"
        return Quote(symbol, price, 10.0, 0.5, 1e9, f"{symbol.split('.')[0].split('-')[0]} Ltd", currency)

    async def history_series(self, symbol, start, end, interval="1d") -> List[PricePoint]:
        self.calls.append(("history", symbol))
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        price = self.quotes.get(symbol, 0.0)
        return [PricePoint(base + timedelta(days=i), price + i) for i in range(self.history_days)]

    async def detailed_info(self, symbol):
        self.calls.append(("details", symbol))
        return {"sector": "Technology"}

    async def search(self, query, limit=10) -> List[NewsItem]:
        self.calls.append(("search", query))
        items = [NewsItem(headline=f"{query} headline {i}", url=f"https://news.example/{i}") for i in range(8)]
        return items[:limit]

    async def currency_rate(self, base: str, quote: str) -> float:
        return (await self.quote(f"{base}{quote}=X")).price

    async def trending_equities(self, limit: int) -> List[str]:
        if self._trending_equities is None:
            raise SourceUnavailable("NSE", "No trending data available from NSE API")
        return self._trending_equities[:limit]

    async def trending_cryptos(self, limit: int) -> List[str]:
        if self._trending_cryptos is None:
            raise SourceUnavailable("CoinGecko", "Failed to fetch top cryptocurrencies")
        return self._trending_cryptos[:limit]


class ScriptedLLM:
    """LLM stand-in returning a fixed decision and recording every call."""

    def __init__(self, decision=None, narration: str = "Narrated answer", error: Optional[Exception] = None):
        self.decision = decision if decision is not None else DirectAnswer("Hello!")
        self.narration = narration
        self.error = error
        self.decide_calls: List[Dict[str, Any]] = []
        self.narrate_calls: List[Dict[str, Any]] = []

    async def decide(self, messages, functions):
        self.decide_calls.append({"messages": messages, "functions": functions})
        if self.error:
            raise self.error
        return self.decision

    async def narrate(self, messages, temperature, max_tokens):
        self.narrate_calls.append({"messages": messages, "temperature": temperature, "max_tokens": max_tokens})
        return self.narration


def tool_call(name: str, arguments: str = "{}") -> ToolCall:
    return ToolCall(name=name, arguments_json=arguments)


@pytest.fixture
def database():
    db = Database("sqlite:///:memory:")
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def chat_log(database):
    return ChatLogStore(database)


@pytest.fixture
def knowledge_base(database):
    kb = CompanyKnowledgeBase(database, "Profit Flow")
    kb.upsert(COMPANY_DOCUMENT)
    return kb


@pytest.fixture
def gateway():
    return FakeGateway(trending_equities=["TCS", "INFY", "RELIANCE"], trending_cryptos=["BTC", "ETH"])


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        ENVIRONMENT="development",
        DATABASE_URL="sqlite:///:memory:",
        OPENAI_API_KEY="test-key",
        COMPANY_INFO_PATH=None,
    )


@pytest.fixture
def make_client(database, gateway, test_settings):
    """Build a TestClient around create_app with a scripted LLM."""
    from profit_flow.backend.main import create_app

    clients = []

    def _make(llm, settings=None):
        app = create_app(settings=settings or test_settings, database=database, gateway=gateway, llm=llm)
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        CompanyKnowledgeBase(database, "Profit Flow").upsert(COMPANY_DOCUMENT)
        return client

    yield _make
    for client in clients:
        client.__exit__(None, None, None)
