"""
Symbol normalization.

Maps the tickers users (or the LLM) type into the canonical symbols Yahoo
Finance expects. The default exchange suffix and quote currency are a
deployment policy, so both are parameters.
"""

from __future__ import annotations
import re

_PLAIN_TICKER = re.compile(r"[A-Z]+")

DEFAULT_EQUITY_SUFFIX = ".NS"
DEFAULT_CRYPTO_QUOTE = "USD"


def normalize_equity(raw_symbol: str, suffix: str = DEFAULT_EQUITY_SUFFIX) -> str:
    """
    Qualify a bare equity ticker with the regional exchange suffix.

    "TCS" -> "TCS.NS"; symbols that already carry an exchange marker
    ("AAPL.O") or are not plain upper-case letters pass through unchanged.
    """
    if "." not in raw_symbol and _PLAIN_TICKER.fullmatch(raw_symbol):
        return f"{raw_symbol}{suffix}"
    return raw_symbol


def normalize_exchange_symbol(raw_symbol: str, suffix: str = DEFAULT_EQUITY_SUFFIX) -> str:
    """
    Qualify a symbol taken from an exchange feed.

    Feed symbols are already exchange tickers, including ones like
    "BAJAJ-AUTO" and "M&M", so any symbol without a "." gets the suffix.
    """
    if "." not in raw_symbol:
        return f"{raw_symbol}{suffix}"
    return raw_symbol


def normalize_crypto(raw_symbol: str, quote_currency: str = DEFAULT_CRYPTO_QUOTE) -> str:
    """"BTC" -> "BTC-USD"; pairs that already contain "-" are unchanged."""
    if "-" not in raw_symbol:
        return f"{raw_symbol}-{quote_currency}"
    return raw_symbol


def currency_pair_symbol(base: str, quote: str) -> str:
    """Yahoo's synthetic FX quote symbol, e.g. ("USD", "INR") -> "USDINR=X"."""
    return f"{base.upper()}{quote.upper()}=X"
