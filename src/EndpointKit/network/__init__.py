"""Network subsystem: transport, HTTP client, retry policy and instrumentation.

This package provides the pluggable I/O side of endpoint execution:
- HTTPX: asynchronous HTTP client behind the ``Transport`` protocol
- Tenacity: fixed-delay, bounded-attempt retry policy
- Observers: per-call transport lifecycle hooks for structured telemetry

Modules:
- transport: ``Transport`` protocol and the HTTPX-backed implementation
- client: ``httpx.AsyncClient`` factory
- policy: timeout / retry / TLS constants
- retry: Tenacity retry policy factory
- instrumentation: transport observers and URL redaction

Example:
    >>> from EndpointKit.network import HTTPXTransport, create_fixed_delay_retry_policy
    >>> transport = HTTPXTransport()
    >>> policy = create_fixed_delay_retry_policy(attempts=3, delay_seconds=1.0)
"""

from EndpointKit.network.client import create_async_client
from EndpointKit.network.instrumentation import LoggingObserver, TransportObserver
from EndpointKit.network.policy import (
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_RETRY_DELAY,
    HTTP_CONNECT_TIMEOUT,
)
from EndpointKit.network.retry import create_fixed_delay_retry_policy
from EndpointKit.network.transport import HTTPXTransport, Transport, TransportResponse

__all__ = [
    # Transport
    "Transport",
    "TransportResponse",
    "HTTPXTransport",
    "create_async_client",
    # Timeouts and retries
    "DEFAULT_REQUEST_TIMEOUT",
    "HTTP_CONNECT_TIMEOUT",
    "DEFAULT_RETRY_ATTEMPTS",
    "DEFAULT_RETRY_DELAY",
    "create_fixed_delay_retry_policy",
    # Instrumentation
    "TransportObserver",
    "LoggingObserver",
]
