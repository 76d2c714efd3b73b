"""
Structured logging and request correlation.

- structlog configuration with JSON/console rendering
- request_id binding via contextvars
- sensitive data redaction (tokens and credentials never reach the log)
"""
from __future__ import annotations

import logging
import os
import uuid
from typing import Any, Dict

import structlog

SCHEMA_VERSION = "1.0"

_SENSITIVE_KEYS = {"token", "password", "secret", "authorization", "cookie", "credential"}


def _redact_sensitive(logger, method, event_dict: Dict[str, Any]):
    for key in list(event_dict.keys()):
        if any(s in key.lower() for s in _SENSITIVE_KEYS):
            event_dict[key] = "[REDACTED]"
    return event_dict


def _add_schema_version(logger, method, event_dict: Dict[str, Any]):
    event_dict.setdefault("schema_version", SCHEMA_VERSION)
    return event_dict


def _choose_renderer():
    debug = str(os.getenv("DEBUG", "")).lower() in {"1", "true", "yes"}
    fmt = (os.getenv("LOG_FORMAT") or "").lower().strip()
    if debug or fmt == "console":
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def setup_structlog_logging(min_level: str | int = "INFO") -> None:
    level = logging.getLevelName(min_level.upper()) if isinstance(min_level, str) else int(min_level)
    if not isinstance(level, int):
        level = logging.INFO

    if not logging.getLogger().handlers:
        logging.basicConfig(level=level, handlers=[logging.StreamHandler()])
    else:
        logging.getLogger().setLevel(level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            _redact_sensitive,
            _add_schema_version,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _choose_renderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def generate_request_id() -> str:
    return str(uuid.uuid4())[:8]


def bind_request_id(request_id: str) -> None:
    structlog.contextvars.bind_contextvars(request_id=request_id)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def emit_event(event: str, severity: str = "info", **fields: Any) -> None:
    """Single entry point for structured events."""
    logger = structlog.get_logger()
    fields.setdefault("event", event)
    if severity in {"error", "critical"}:
        logger.error(**fields)
    elif severity in {"warn", "warning"}:
        logger.warning(**fields)
    elif severity == "debug":
        logger.debug(**fields)
    else:
        logger.info(**fields)
