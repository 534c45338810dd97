"""Contextual logging.

Every logger carries a ``dimensions`` dict (user_id, resource_id, ...) that is
attached to each record. ``with_context`` returns a child logger with merged
dimensions, so services can hand request-scoped loggers down the call chain.

Usage:
    from formgate.core.logging import logger

    log = logger.with_context(resource_id=12)
    log.info("[Gate] evaluating form")
"""

import json
import logging
import sys
from typing import Any, MutableMapping, Optional

from formgate.core.config import settings

_RESERVED_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {
    "message",
    "asctime",
}


class _JsonFormatter(logging.Formatter):
    """One JSON object per line, dimensions inlined as top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and key != "dimensions" and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class _TextFormatter(logging.Formatter):
    """Plain text with dimensions appended as key=value pairs."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        dims = getattr(record, "dimensions", None)
        if dims:
            rendered = " ".join(f"{k}={v}" for k, v in dims.items())
            return f"{base} [{rendered}]"
        return base


class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter that attaches a dimensions dict to every record."""

    def __init__(self, logger: logging.Logger, dimensions: Optional[dict[str, Any]] = None):
        """Wrap a stdlib logger with the given dimensions."""
        self.dimensions: dict[str, Any] = dict(dimensions or {})
        super().__init__(logger, self.dimensions)

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping]:
        extra = dict(kwargs.get("extra") or {})
        extra.update({k: v for k, v in self.dimensions.items() if k not in _RESERVED_ATTRS})
        extra["dimensions"] = self.dimensions
        kwargs["extra"] = extra
        return msg, kwargs

    def with_context(self, **dimensions: Any) -> "ContextualLogger":
        """Return a new logger with the given dimensions merged in."""
        merged = {**self.dimensions, **{k: v for k, v in dimensions.items() if v is not None}}
        return ContextualLogger(self.logger, merged)


class LoggerConfigurator:
    """Builds configured contextual loggers."""

    _configured: set[str] = set()

    @classmethod
    def configure_logger(
        cls, name: str, dimensions: Optional[dict[str, Any]] = None
    ) -> ContextualLogger:
        """Return a ContextualLogger for ``name``, attaching a handler once."""
        base = logging.getLogger(name)
        if name not in cls._configured:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(_JsonFormatter() if settings.LOG_JSON else _TextFormatter())
            base.addHandler(handler)
            base.setLevel(settings.LOG_LEVEL.value)
            base.propagate = False
            cls._configured.add(name)
        return ContextualLogger(base, dimensions)


logger = LoggerConfigurator.configure_logger("formgate")
