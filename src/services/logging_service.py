"""Structured logging configuration with credential redaction."""

import logging
import sys
from typing import Any, Dict

import structlog

SENSITIVE_KEYS = {
    "appid",
    "api_key",
    "authorization",
    "secret",
    "password",
}


def _is_sensitive(key: str) -> bool:
    key_lower = key.lower()
    return any(sensitive in key_lower for sensitive in SENSITIVE_KEYS)


def _redact(values: Dict[str, Any]) -> Dict[str, Any]:
    redacted = {}
    for key, value in values.items():
        if _is_sensitive(str(key)):
            redacted[key] = "REDACTED"
        elif isinstance(value, dict):
            redacted[key] = _redact(value)
        else:
            redacted[key] = value
    return redacted


def redact_sensitive(
    logger: Any, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Redact credentials from log entries.

    Redacts, at any nesting depth of dict values:
    - OpenWeatherMap ``appid`` query parameters
    - api_key fields and Authorization headers
    - Any field containing 'secret' or 'password'
    """
    for key in list(event_dict.keys()):
        if _is_sensitive(key):
            event_dict[key] = "REDACTED"
        elif isinstance(event_dict[key], dict):
            event_dict[key] = _redact(event_dict[key])

    return event_dict


def configure_logging(log_level: str = "INFO") -> None:
    """Configure structlog for JSON output with correlation ID support.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        redact_sensitive,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a configured logger instance.

    Args:
        name: Optional logger name for context

    Returns:
        Configured structlog logger
    """
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger_name=name)
    return logger
