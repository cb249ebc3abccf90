"""
Structured logging for luzia-python.

Library loggers are silent below WARNING until :meth:`LuziaLogger.configure`
is called. Keyword fields passed to the logger methods are rendered after
the message; API keys and bearer credentials are masked in both.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from functools import partialmethod
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from collections.abc import Iterator

REDACTED = "***REDACTED***"


@dataclass(frozen=True)
class LogContext:
    """Fields attached to every record logged inside :func:`log_context`.

    Attributes:
        request_id: Client-side request identifier
        path: API path being requested
        extra: Additional context fields
    """

    request_id: str | None = None
    path: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        result = {
            k: v for k, v in (("request_id", self.request_id), ("path", self.path)) if v
        }
        return {**result, **self.extra}

    def with_extra(self, **kwargs: Any) -> LogContext:
        return replace(self, extra={**self.extra, **kwargs})


_current_context: ContextVar[LogContext | None] = ContextVar(
    "luzia_log_context", default=None
)


def get_log_context() -> LogContext:
    """Context bound by the innermost :func:`log_context` block."""
    return _current_context.get() or LogContext()


@contextmanager
def log_context(context: LogContext) -> Iterator[LogContext]:
    """Bind a logging context for the duration of a block.

    Example:
        >>> with log_context(LogContext(request_id="abc", path="/v1/exchanges")):
        ...     logger.debug("Request issued")
    """
    token = _current_context.set(context)
    try:
        yield context
    finally:
        _current_context.reset(token)


class SensitiveDataMasker:
    """Masks API keys and bearer credentials in log output."""

    DEFAULT_PATTERNS: ClassVar[list[tuple[str, str]]] = [
        (r"\blz_[A-Za-z0-9_\-]{4,}", "lz_" + REDACTED),
        (r"(api[_-]?key[\"']?\s*[:=]\s*[\"']?)([^\"'\s]+)", r"\1" + REDACTED),
        (r"(Bearer\s+)([^\s\"']+)", r"\1" + REDACTED),
        (r"(Authorization[\"']?\s*[:=]\s*[\"']?)(?!Bearer\b)([^\"'\s]+)", r"\1" + REDACTED),
        (r"(LUZIA_API_KEY=)(\S+)", r"\1" + REDACTED),
    ]

    # Field names containing any of these are redacted wholesale
    SENSITIVE_FIELDS: ClassVar[tuple[str, ...]] = ("key", "token", "secret", "password", "auth")

    def __init__(self, patterns: list[tuple[str, str]] | None = None) -> None:
        self._patterns = [
            (re.compile(p, re.IGNORECASE), r)
            for p, r in (patterns or self.DEFAULT_PATTERNS)
        ]

    def mask(self, text: str) -> str:
        for pattern, replacement in self._patterns:
            text = pattern.sub(replacement, text)
        return text

    def mask_dict(self, data: dict[str, Any]) -> dict[str, Any]:
        """Mask a mapping of log fields, recursing into nested values."""
        return {
            key: REDACTED
            if any(s in key.lower() for s in self.SENSITIVE_FIELDS)
            else self._mask_value(value)
            for key, value in data.items()
        }

    def _mask_value(self, value: Any) -> Any:
        if isinstance(value, str):
            return self.mask(value)
        if isinstance(value, dict):
            return self.mask_dict(value)
        if isinstance(value, (list, tuple)):
            return [self._mask_value(v) for v in value]
        return value


def _record_fields(record: logging.LogRecord) -> dict[str, Any]:
    return getattr(record, "extra_fields", None) or {}


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def __init__(
        self,
        masker: SensitiveDataMasker | None = None,
        include_timestamp: bool = True,
    ) -> None:
        super().__init__()
        self._masker = masker or SensitiveDataMasker()
        self._include_timestamp = include_timestamp

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "message": self._masker.mask(record.getMessage()),
        }
        if self._include_timestamp:
            created = datetime.fromtimestamp(record.created, tz=timezone.utc)
            payload["timestamp"] = created.isoformat(timespec="milliseconds")
        if context := get_log_context().to_dict():
            payload["context"] = context
        payload.update(self._masker.mask_dict(_record_fields(record)))
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class TextFormatter(logging.Formatter):
    """``time | LEVEL | logger | message | key=value ...``"""

    def __init__(
        self,
        masker: SensitiveDataMasker | None = None,
        include_context: bool = True,
    ) -> None:
        super().__init__(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        self._masker = masker or SensitiveDataMasker()
        self._include_context = include_context

    def format(self, record: logging.LogRecord) -> str:
        line = self._masker.mask(super().format(record))
        fields = get_log_context().to_dict() if self._include_context else {}
        fields.update(self._masker.mask_dict(_record_fields(record)))
        if not fields:
            return line
        return line + " | " + " ".join(f"{k}={v}" for k, v in fields.items())


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


class LuziaLogger:
    """Logger wrapper accepting structured keyword fields.

    Example:
        >>> LuziaLogger.configure(level="DEBUG", format="json")
        >>> logger = LuziaLogger.get_logger("luzia_python.client")
        >>> logger.info("Retrying request", attempt=1, delay_ms=1000)
    """

    _loggers: ClassVar[dict[str, logging.Logger]] = {}
    _level: ClassVar[int] = logging.WARNING
    _handler: ClassVar[logging.Handler | None] = None

    @classmethod
    def configure(
        cls,
        level: int | str = logging.INFO,
        format: str = "text",
        stream: Any = None,
        masker: SensitiveDataMasker | None = None,
    ) -> None:
        """Set the level and output of every luzia-python logger.

        Args:
            level: ``logging`` level number or name (``"DEBUG"``, ``"info"``)
            format: ``"json"`` or ``"text"``
            stream: Output stream (default: stderr)
            masker: Masker used by the formatter
        """
        cls._level = _resolve_level(level)
        formatter: logging.Formatter = (
            JsonFormatter(masker=masker) if format == "json" else TextFormatter(masker=masker)
        )
        cls._handler = logging.StreamHandler(stream or sys.stderr)
        cls._handler.setFormatter(formatter)

        for logger in cls._loggers.values():
            cls._attach(logger)

    @classmethod
    def _attach(cls, logger: logging.Logger) -> None:
        logger.handlers.clear()
        if cls._handler is not None:
            logger.addHandler(cls._handler)
        else:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(TextFormatter())
            logger.addHandler(handler)
        logger.setLevel(cls._level)
        logger.propagate = False

    @classmethod
    def get_logger(cls, name: str) -> LuziaLogger:
        if name not in cls._loggers:
            logger = logging.getLogger(name)
            cls._attach(logger)
            cls._loggers[name] = logger
        return cls(cls._loggers[name])

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    @property
    def name(self) -> str:
        return self._logger.name

    def _log(self, level: int, msg: str, exc_info: bool = False, **fields: Any) -> None:
        extra = {"extra_fields": fields} if fields else None
        self._logger.log(level, msg, exc_info=exc_info, extra=extra)

    debug = partialmethod(_log, logging.DEBUG)
    info = partialmethod(_log, logging.INFO)
    warning = partialmethod(_log, logging.WARNING)
    error = partialmethod(_log, logging.ERROR)
    exception = partialmethod(_log, logging.ERROR, exc_info=True)


def get_logger(name: str) -> LuziaLogger:
    """Get a logger instance."""
    return LuziaLogger.get_logger(name)
