"""Transport lifecycle observation and telemetry.

An observer is passed per call (``observer=`` on the manager operations) and
is never stored on long-lived objects.  It is notified when an attempt starts,
finishes with a status code, or fails at the transport level.  Observer errors
are logged and swallowed; telemetry never fails a request.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol
from urllib.parse import urlparse, urlunparse

import httpx

logger = logging.getLogger(__name__)


class TransportObserver(Protocol):
    """Receives transport lifecycle events for one call."""

    def request_started(self, request: httpx.Request) -> None: ...

    def request_finished(self, request: httpx.Request, status_code: int, elapsed: float) -> None: ...

    def request_failed(self, request: httpx.Request, error: BaseException, elapsed: float) -> None: ...


class LoggingObserver:
    """Observer emitting ``net.request`` log records with redacted URLs."""

    def __init__(self, log: Optional[logging.Logger] = None, level: int = logging.INFO) -> None:
        self._log = log or logger
        self._level = level

    def request_started(self, request: httpx.Request) -> None:
        self._log.debug(
            "net.request.start",
            extra={"extra_fields": _request_fields(request)},
        )

    def request_finished(self, request: httpx.Request, status_code: int, elapsed: float) -> None:
        fields = _request_fields(request)
        fields.update(status=status_code, elapsed_ms=round(elapsed * 1000, 3))
        self._log.log(self._level, "net.request", extra={"extra_fields": fields})

    def request_failed(self, request: httpx.Request, error: BaseException, elapsed: float) -> None:
        fields = _request_fields(request)
        fields.update(error=type(error).__name__, elapsed_ms=round(elapsed * 1000, 3))
        self._log.warning("net.request.failed", extra={"extra_fields": fields})


def notify(observer: Optional[Any], event: str, *args: Any) -> None:
    """Invoke ``observer.<event>(*args)`` if present, suppressing its errors."""
    if observer is None:
        return
    callback = getattr(observer, event, None)
    if callback is None:
        return
    try:
        callback(*args)
    except Exception:
        # Never fail telemetry
        logger.debug("Transport observer %s raised", event, exc_info=True)


def _request_fields(request: httpx.Request) -> dict[str, Any]:
    return {
        "method": request.method,
        "url_redacted": _redact_url(str(request.url)),
        "host": request.url.host or "unknown",
    }


def _redact_url(url: str) -> str:
    """Redact query parameters, keeping only scheme + host + path."""
    try:
        parsed = urlparse(url)
        return urlunparse((parsed.scheme, parsed.netloc, parsed.path, "", "", ""))
    except ValueError:
        return "[URL_REDACTION_FAILED]"


__all__ = ["TransportObserver", "LoggingObserver", "notify"]
