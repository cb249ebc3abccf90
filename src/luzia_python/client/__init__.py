"""
Client layer - User-facing API.

This module provides:
- Luzia: Main entry point, owns the request pipeline and resource facades
- LuziaBuilder: Fluent API for building a client
"""

from luzia_python.client.builder import LuziaBuilder
from luzia_python.client.core import Luzia

__all__ = [
    "Luzia",
    "LuziaBuilder",
]
