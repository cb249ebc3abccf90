"""
Telemetry module for luzia-python.

Provides structured logging with request-scoped context and API key masking.
"""

from luzia_python.telemetry.logger import (
    JsonFormatter,
    LogContext,
    LuziaLogger,
    SensitiveDataMasker,
    TextFormatter,
    get_log_context,
    get_logger,
    log_context,
)

__all__ = [
    "JsonFormatter",
    "LogContext",
    "LuziaLogger",
    "SensitiveDataMasker",
    "TextFormatter",
    "get_log_context",
    "get_logger",
    "log_context",
]
