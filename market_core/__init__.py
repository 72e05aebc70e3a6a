"""
market_core - framework-free market-data library.

Quotes, history, news and trending symbols behind the MarketDataGateway
interface, plus the batch assembly and chart projection used by the chat
backend.
"""
