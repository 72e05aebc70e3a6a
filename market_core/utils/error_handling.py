"""
Error types and helpers for market-data operations.

Two failure scopes exist:
- DataUnavailable: a single symbol has no usable data. Callers record an
  error entry for that symbol and keep going.
- SourceUnavailable: a whole upstream feed is unreachable or returned nothing
  usable. The batch that depends on it fails as a unit.
"""

from __future__ import annotations
from typing import Optional


class MarketDataError(Exception):
    """Base class for market-data failures."""


class DataUnavailable(MarketDataError):
    """Upstream has no record for a symbol (or the call timed out)."""

    def __init__(self, symbol: str, reason: str = "No real-time data available"):
        super().__init__(f"{symbol}: {reason}")
        self.symbol = symbol
        self.reason = reason


class SourceUnavailable(MarketDataError):
    """An entire upstream feed could not be used."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason


# Keywords that point at throttling or credential problems rather than missing data
API_ERROR_KEYWORDS = [
    'rate limit',
    '429',
    'too many requests',
    'limit exceeded',
    'quota',
    '403',
    '401',
    'timeout',
    'unauthorized',
    'forbidden',
]


def is_api_error(exception: Exception) -> bool:
    """
    Check if an exception looks like a rate-limit or authentication problem.

    Args:
        exception: Exception to check

    Returns:
        True if the message matches one of API_ERROR_KEYWORDS
    """
    error_str = str(exception).lower()
    return any(keyword in error_str for keyword in API_ERROR_KEYWORDS)


def format_api_error_message(
    source: str,
    symbol: Optional[str] = None,
    error: Optional[Exception] = None,
    additional_info: Optional[str] = None,
) -> str:
    """
    Format a standardized upstream error message for logging.

    Examples:
        >>> logger.warning(format_api_error_message("YFinance", symbol="TCS.NS", error=e))
    """
    parts = [f"[{source}]"]

    if symbol:
        parts.append(f"symbol={symbol}")

    if error:
        kind = "api error" if is_api_error(error) else "error"
        parts.append(f"{kind}: {error}")

    if additional_info:
        parts.append(additional_info)

    return " ".join(parts)
