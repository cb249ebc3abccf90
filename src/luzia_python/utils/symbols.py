"""
Symbol format conversion.

Trading pairs are normalized as ``BASE/QUOTE`` (``BTC/USDT``). URL paths
and channel names use a dash instead (``BTC-USDT``).
"""

from __future__ import annotations


def symbol_to_url(symbol: str) -> str:
    """Convert a normalized symbol to URL format.

    Example:
        >>> symbol_to_url("BTC/USDT")
        'BTC-USDT'
    """
    return symbol.replace("/", "-")


def symbol_from_url(symbol: str) -> str:
    """Convert a URL-format symbol back to normalized format.

    Example:
        >>> symbol_from_url("BTC-USDT")
        'BTC/USDT'
    """
    return symbol.replace("-", "/")
