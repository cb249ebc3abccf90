"""
Utility helpers for luzia-python.
"""

from luzia_python.utils.symbols import symbol_from_url, symbol_to_url

__all__ = [
    "symbol_from_url",
    "symbol_to_url",
]
