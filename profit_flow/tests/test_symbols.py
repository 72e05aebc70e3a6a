"""
Tests for symbol normalization.
"""

from market_core.data.symbols import (
    currency_pair_symbol,
    normalize_crypto,
    normalize_equity,
    normalize_exchange_symbol,
)


def test_bare_equity_gets_exchange_suffix():
    assert normalize_equity("TCS") == "TCS.NS"


def test_qualified_equity_is_unchanged():
    assert normalize_equity("AAPL.O") == "AAPL.O"
    assert normalize_equity("TCS.BO") == "TCS.BO"


def test_non_plain_equity_is_unchanged():
    # lower-case, digits or punctuation are not plain tickers
    assert normalize_equity("tcs") == "tcs"
    assert normalize_equity("M&M") == "M&M"
    assert normalize_equity("NIFTY50") == "NIFTY50"


def test_trailing_newline_is_not_a_plain_ticker():
    assert normalize_equity("TCS\n") == "TCS\n"


def test_equity_suffix_is_configurable():
    assert normalize_equity("TCS", suffix=".BO") == "TCS.BO"


def test_exchange_feed_symbols_always_get_suffix():
    assert normalize_exchange_symbol("BAJAJ-AUTO") == "BAJAJ-AUTO.NS"
    assert normalize_exchange_symbol("M&M") == "M&M.NS"
    assert normalize_exchange_symbol("TCS", suffix=".BO") == "TCS.BO"
    assert normalize_exchange_symbol("TCS.NS") == "TCS.NS"


def test_crypto_gets_quote_currency():
    assert normalize_crypto("BTC") == "BTC-USD"
    assert normalize_crypto("ETH", quote_currency="EUR") == "ETH-EUR"


def test_crypto_pair_is_unchanged():
    assert normalize_crypto("BTC-INR") == "BTC-INR"


def test_currency_pair_symbol():
    assert currency_pair_symbol("usd", "inr") == "USDINR=X"
