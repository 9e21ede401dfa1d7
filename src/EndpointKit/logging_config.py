"""
Structured Logging Utilities

This module centralizes logging setup for EndpointKit. It provides helpers for
masking sensitive fields (authorization headers, tokens), emitting JSON log
records, and attaching a console handler to the package logger without
disturbing handlers installed by the host application.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Dict, Optional, TextIO

from .settings import LogFormat, NetworkingSettings, get_settings

LOGGER_NAME = "EndpointKit"

_SENSITIVE_KEYS = {"authorization", "api_key", "apikey", "token", "secret", "password", "cookie"}


def mask_sensitive_data(payload: Dict[str, object]) -> Dict[str, object]:
    """Remove secrets from structured payloads prior to logging.

    Args:
        payload: Arbitrary key-value pairs that may contain credentials or
            tokens gathered from request headers.

    Returns:
        Copy of the payload where common secret fields are replaced with
        `***masked***`. Nested mappings are masked recursively.

    Examples:
        >>> mask_sensitive_data({"token": "secret", "status": 200})
        {'token': '***masked***', 'status': 200}
    """
    masked: Dict[str, object] = {}
    for key, value in payload.items():
        lower = key.lower()
        if lower in _SENSITIVE_KEYS:
            masked[key] = "***masked***"
        elif isinstance(value, dict):
            masked[key] = mask_sensitive_data(value)
        elif isinstance(value, str) and "apikey" in value.lower():
            masked[key] = "***masked***"
        else:
            masked[key] = value
    return masked


class JSONFormatter(logging.Formatter):
    """Formatter emitting JSON structured logs.

    Structured context is read from the ``extra_fields`` attribute that
    EndpointKit modules attach through ``extra={"extra_fields": {...}}``.

    Examples:
        >>> formatter = JSONFormatter()
        >>> isinstance(formatter.format(logging.makeLogRecord({'msg': 'test'})), str)
        True
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        log_obj: Dict[str, object] = {
            "timestamp": timestamp.isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            log_obj.update(extra_fields)
        if record.exc_info:
            log_obj["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(mask_sensitive_data(log_obj), default=str)


def setup_logging(
    settings: Optional[NetworkingSettings] = None,
    *,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Configure the ``EndpointKit`` logger.

    Args:
        settings: Provides ``log_level`` and ``log_format``; the cached
            process settings are used when omitted.
        stream: Output stream for the handler (defaults to ``sys.stderr``).

    Returns:
        The configured package logger.

    Examples:
        >>> logger = setup_logging()
        >>> logger.name
        'EndpointKit'
    """
    settings = settings or get_settings()
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, settings.log_level, logging.INFO))

    for handler in list(logger.handlers):
        if getattr(handler, "_endpointkit_managed", False):
            logger.removeHandler(handler)
            handler.close()

    handler = logging.StreamHandler(stream or sys.stderr)
    if settings.log_format is LogFormat.JSON:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    handler._endpointkit_managed = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.propagate = True

    return logger


__all__ = ["LOGGER_NAME", "JSONFormatter", "setup_logging", "mask_sensitive_data"]
