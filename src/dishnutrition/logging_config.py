"""Structured logging configuration for the dish nutrition estimator."""

import json
import logging
import os
import sys
from contextvars import ContextVar, Token
from datetime import UTC, datetime
from typing import Any

# Per-request context, attached to every record logged while it is set
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
dish_ctx: ContextVar[str | None] = ContextVar("dish", default=None)

CONTEXT_VARS: dict[str, ContextVar[str | None]] = {
    "request_id": request_id_ctx,
    "dish": dish_ctx,
}


def current_context() -> dict[str, str]:
    """Context values that are currently set."""
    return {name: value for name, var in CONTEXT_VARS.items() if (value := var.get())}


class StructuredJsonFormatter(logging.Formatter):
    """One JSON object per line, for log shipping in production."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **current_context(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        entry["location"] = f"{record.filename}:{record.lineno} ({record.funcName})"
        return json.dumps(entry, ensure_ascii=False)


class ContextualFormatter(logging.Formatter):
    """Readable single-line format for terminals and the CLI."""

    def format(self, record: logging.LogRecord) -> str:
        context = current_context()
        if "request_id" in context:
            context["request_id"] = context["request_id"][:8]
        tags = ", ".join(f"{k}={v}" for k, v in context.items())

        line = (
            f"{datetime.now(UTC):%Y-%m-%d %H:%M:%S} | {record.levelname:<8} | "
            f"{record.name}{f' [{tags}]' if tags else ''} | {record.getMessage()}"
        )
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class ContextLogger(logging.LoggerAdapter):
    """Logger adapter that copies the current context into `extra`."""

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        kwargs["extra"] = {**kwargs.get("extra", {}), **current_context()}
        return msg, kwargs


def get_logger(name: str) -> ContextLogger:
    """Get a context-aware logger for the given module name."""
    return ContextLogger(logging.getLogger(name), {})


def configure_logging(log_level: str = "INFO", json_format: bool | None = None) -> None:
    """
    Configure the root logger.

    Args:
        log_level: Minimum level; the LOG_LEVEL environment variable wins if set.
        json_format: Emit JSON lines. If None, JSON is used when LOG_FORMAT=json
            or when running non-interactively with ENVIRONMENT=production.
    """
    if json_format is None:
        json_format = os.getenv("LOG_FORMAT", "").lower() == "json" or (
            not sys.stderr.isatty() and os.getenv("ENVIRONMENT", "development") == "production"
        )

    level_name = os.getenv("LOG_LEVEL", log_level).upper()
    level = getattr(logging, level_name, logging.INFO)

    # stderr keeps stdout free for CLI JSON output
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredJsonFormatter() if json_format else ContextualFormatter())
    handler.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    # Chatty third-party loggers
    for noisy in ("httpx", "httpcore", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
    logging.getLogger("dishnutrition").setLevel(level)

    get_logger(__name__).info(
        f"Logging configured: level={level_name}, format={'json' if json_format else 'text'}"
    )


class LoggingContext:
    """
    Context manager that sets logging context for the enclosed block.

    Example:
        with LoggingContext(request_id=str(uuid4()), dish="Dal Makhani"):
            ...
    """

    def __init__(self, request_id: str | None = None, dish: str | None = None):
        self.values = {"request_id": request_id, "dish": dish}
        self._tokens: dict[str, Token] = {}

    def __enter__(self) -> "LoggingContext":
        for name, value in self.values.items():
            if value is not None:
                self._tokens[name] = CONTEXT_VARS[name].set(value)
        return self

    def __exit__(self, *args: Any) -> None:
        for name, token in self._tokens.items():
            CONTEXT_VARS[name].reset(token)
        self._tokens.clear()
