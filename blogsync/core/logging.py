import json
import logging
import os
import re
import sys
import traceback
from datetime import UTC, datetime
from functools import lru_cache
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any

from blogsync.core.settings import get_settings

_STANDARD_LOG_RECORD_KEYS = set(logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys())
_STANDARD_LOG_RECORD_KEYS.update({"message", "asctime"})
_STRUCTURED_LOG_KEYS = {"component", "operation", "item_id", "context_data"}

_SENSITIVE_KEY_PARTS = (
    "authorization",
    "access_token",
    "client_secret",
    "token",
    "secret",
    "password",
    "cookie",
)
_BEARER_RE = re.compile(r"(?i)\bbearer\s+[a-z0-9\-._~+/]+=*")


def redact(value: Any) -> Any:
    """Mask credentials in log payloads.

    Dict keys that look like secrets are replaced wholesale, and bearer tokens
    embedded in free text are masked.
    """
    if isinstance(value, dict):
        out: dict[str, Any] = {}
        for key, item in value.items():
            name = str(key)
            if any(part in name.lower() for part in _SENSITIVE_KEY_PARTS):
                out[name] = "<redacted>"
            else:
                out[name] = redact(item)
        return out
    if isinstance(value, (list, tuple)):
        return type(value)(redact(item) for item in value)
    if isinstance(value, str):
        return _BEARER_RE.sub("Bearer <redacted>", value)
    return value


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_LOG_RECORD_KEYS and key not in _STRUCTURED_LOG_KEYS
    }


def _context_for(record: logging.LogRecord) -> Any:
    context_data = getattr(record, "context_data", None)
    extra = _extra_fields(record)
    if not extra:
        return context_data
    if context_data is None:
        return extra
    if isinstance(context_data, dict):
        return {**extra, **context_data}
    return {"context_data": context_data, **extra}


def build_structured_payload(record: logging.LogRecord) -> dict[str, Any]:
    """Serialize a log record into the JSONL payload written to disk."""
    component = getattr(record, "component", None) or record.name
    context_data = _context_for(record)

    payload: dict[str, Any] = {
        "timestamp": datetime.now(UTC).isoformat(),
        "level": record.levelname,
        "logger": record.name,
        "component": component,
        "operation": getattr(record, "operation", None),
        "item_id": getattr(record, "item_id", None),
        "message": redact(record.getMessage()),
        "context_data": redact(context_data) if context_data is not None else None,
        "source_file": record.filename,
        "source_line": record.lineno,
        "process": record.process,
    }
    if record.exc_info and record.exc_info[0] is not None:
        exc_type, exc_value, exc_tb = record.exc_info
        payload["error_type"] = exc_type.__name__
        payload["error_message"] = str(exc_value)
        payload["stack_trace"] = "".join(traceback.format_exception(exc_type, exc_value, exc_tb))

    return {k: v for k, v in payload.items() if v is not None}


class _JsonLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return json.dumps(build_structured_payload(record), ensure_ascii=False, default=str)


class _StructuredLogFilter(logging.Filter):
    """Only records logged with structured extras go to the JSONL file."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno >= logging.ERROR:
            return True
        if any(getattr(record, key, None) is not None for key in _STRUCTURED_LOG_KEYS):
            return True
        return bool(_extra_fields(record))


def _create_structured_handler(*, structured_dir: Path, logger_name: str) -> logging.Handler:
    structured_dir.mkdir(parents=True, exist_ok=True)
    prefix = re.sub(r"[^a-zA-Z0-9._-]+", "_", logger_name.strip().lower()) or "app"
    base_file = structured_dir / f"{prefix}_structured_{os.getpid()}.jsonl"

    handler = TimedRotatingFileHandler(
        filename=str(base_file),
        when="D",
        interval=1,
        backupCount=7,
        encoding="utf-8",
        delay=True,
        utc=True,
    )
    handler.setFormatter(_JsonLineFormatter())
    handler.addFilter(_StructuredLogFilter())
    return handler


@lru_cache
def setup_logging(name: str | None = None, level: str | None = None) -> logging.Logger:
    """
    Set up logging configuration for the entire application.

    Args:
        name: Logger name (defaults to app name from settings)
        level: Log level (defaults to settings.log_level)

    Returns:
        Configured logger instance
    """
    settings = get_settings()
    logger_name = name or settings.app_name
    log_level = getattr(logging, (level or settings.log_level).upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root_logger.addHandler(console_handler)
    root_logger.addHandler(
        _create_structured_handler(
            structured_dir=settings.logs_dir / "structured",
            logger_name=logger_name,
        )
    )

    # httpx logs every request line at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    app_logger = logging.getLogger(logger_name)
    app_logger.setLevel(log_level)
    return app_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the given name."""
    return logging.getLogger(name)
