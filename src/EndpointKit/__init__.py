"""Public API for EndpointKit.

EndpointKit describes HTTP endpoints as immutable values, executes them
against a deployment environment through a pluggable transport, classifies
the response status, optionally narrows the JSON body to a nested key path,
and decodes the result into a typed value.  Calls may be retried a bounded
number of times with a fixed delay, or degraded to a caller-supplied default.

Example:
    >>> from EndpointKit import Endpoint, Environment, NetworkManager
    >>> environment = Environment.from_settings()
    >>> manager = NetworkManager(environment)
    >>> resource = await manager.fetch_data(Endpoint(dict, "/api/unknown/2", key_path="data"))
"""

from __future__ import annotations

from .codec import (
    DEFAULT_CODEC,
    CodecConfig,
    DataStrategy,
    DateStrategy,
    KeyStrategy,
    decode_payload,
    encode_payload,
    extract_key_path,
)
from .endpoint import Endpoint, Environment, build_request, build_url
from .errors import (
    CorruptData,
    DataTaskError,
    DecodingError,
    EncodingError,
    InvalidHTTPMethod,
    InvalidResponse,
    InvalidResponseCode,
    InvalidURL,
    NetworkingError,
)
from .http import HTTPMethod, HTTPScheme
from .logging_config import setup_logging
from .manager import NetworkManager
from .network import HTTPXTransport, LoggingObserver, Transport, TransportObserver, TransportResponse
from .response import StatusCategory, classify_status, is_success
from .settings import NetworkingSettings, get_settings, reset_settings_cache

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Endpoints
    "Endpoint",
    "Environment",
    "HTTPMethod",
    "HTTPScheme",
    "build_url",
    "build_request",
    # Execution
    "NetworkManager",
    "Transport",
    "TransportResponse",
    "HTTPXTransport",
    "TransportObserver",
    "LoggingObserver",
    # Responses and payloads
    "StatusCategory",
    "classify_status",
    "is_success",
    "CodecConfig",
    "DEFAULT_CODEC",
    "KeyStrategy",
    "DateStrategy",
    "DataStrategy",
    "encode_payload",
    "decode_payload",
    "extract_key_path",
    # Errors
    "NetworkingError",
    "InvalidHTTPMethod",
    "InvalidURL",
    "InvalidResponse",
    "InvalidResponseCode",
    "EncodingError",
    "DecodingError",
    "CorruptData",
    "DataTaskError",
    # Configuration
    "NetworkingSettings",
    "get_settings",
    "reset_settings_cache",
    "setup_logging",
]
