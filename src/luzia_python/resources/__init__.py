"""
Resource facades - typed operations over the REST endpoints.
"""

from luzia_python.resources.exchanges import ExchangesResource
from luzia_python.resources.history import HistoryResource
from luzia_python.resources.markets import MarketsResource
from luzia_python.resources.tickers import TickersResource

__all__ = [
    "ExchangesResource",
    "HistoryResource",
    "MarketsResource",
    "TickersResource",
]
