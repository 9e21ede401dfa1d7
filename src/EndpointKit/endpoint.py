# === NAVMAP v1 ===
# {
#   "module": "EndpointKit.endpoint",
#   "purpose": "Endpoint descriptors, deployment environments and URL/request builders.",
#   "sections": [
#     {"id": "endpoint", "name": "Endpoint", "anchor": "class-endpoint", "kind": "class"},
#     {"id": "environment", "name": "Environment", "anchor": "class-environment", "kind": "class"},
#     {"id": "build-url", "name": "build_url", "anchor": "function-build-url", "kind": "function"},
#     {"id": "build-request", "name": "build_request", "anchor": "function-build-request", "kind": "function"}
#   ]
# }
# === /NAVMAP ===

"""Endpoint descriptors, deployment environments and request construction.

An :class:`Endpoint` describes one request/response contract: where to send
the request, which verb and headers to use, the optional pre-encoded body, and
how to decode the response.  An :class:`Environment` binds a host and scheme to
the transport that executes every request issued against it.  Both are frozen
dataclasses and are safe to share between concurrent calls.

Example:
    >>> from EndpointKit.endpoint import Endpoint, build_request, build_url
    >>> endpoint = Endpoint(dict, "/api/unknown/2")
    >>> endpoint.method.value, endpoint.timeout
    ('GET', 60.0)
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Generic, Mapping, Optional, TypeVar

import httpx

from .codec import DEFAULT_CODEC, CodecConfig, encode_payload
from .errors import InvalidURL
from .http import HTTPMethod, HTTPScheme
from .network.policy import DEFAULT_REQUEST_TIMEOUT

if TYPE_CHECKING:  # pragma: no cover - import cycle guard for type checkers only
    from .network.transport import Transport
    from .settings import NetworkingSettings

T = TypeVar("T")

logger = logging.getLogger(__name__)

__all__ = ["Endpoint", "Environment", "build_url", "build_request"]


@dataclass(frozen=True)
class Endpoint(Generic[T]):
    """Immutable description of one HTTP request/response contract.

    Attributes:
        decode_type: Shape the response payload is decoded into; any type
            accepted by ``pydantic.TypeAdapter``.
        path: URL path component, e.g. ``"/api/users/2"``.
        method: HTTP verb.
        headers: Header fields sent with the request.
        query_items: Query parameters; ``None`` means no query string.
        body: Pre-encoded request payload.  Not allowed for ``GET``.
        key_path: Dotted path selecting the sub-document to decode.
        timeout: Request timeout in seconds.
        codec: Key/date/binary strategies for request and response bodies.
    """

    decode_type: Any
    path: str
    method: HTTPMethod = HTTPMethod.GET
    headers: Mapping[str, str] = field(default_factory=dict)
    query_items: Optional[Mapping[str, str]] = None
    body: Optional[bytes] = None
    key_path: Optional[str] = None
    timeout: float = DEFAULT_REQUEST_TIMEOUT
    codec: CodecConfig = DEFAULT_CODEC

    def __post_init__(self) -> None:
        method = HTTPMethod(str(self.method).upper())
        object.__setattr__(self, "method", method)
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))
        if self.query_items is not None:
            object.__setattr__(self, "query_items", MappingProxyType(dict(self.query_items)))
        if self.body is not None:
            if method is HTTPMethod.GET:
                raise ValueError("GET endpoints cannot carry a request body")
            object.__setattr__(self, "body", bytes(self.body))
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    @classmethod
    def with_payload(
        cls,
        payload: Any,
        *,
        decode_type: Any,
        path: str,
        method: HTTPMethod = HTTPMethod.POST,
        headers: Optional[Mapping[str, str]] = None,
        codec: CodecConfig = DEFAULT_CODEC,
        **kwargs: Any,
    ) -> "Endpoint[Any]":
        """Build a write endpoint whose body is ``payload`` encoded with ``codec``.

        A ``Content-Type: application/json`` header is added unless the caller
        supplies one.

        Raises:
            EncodingError: If ``payload`` cannot be serialised.
        """
        merged = dict(headers or {})
        if not any(key.lower() == "content-type" for key in merged):
            merged["Content-Type"] = "application/json"
        return cls(
            decode_type,
            path,
            method=method,
            headers=merged,
            body=encode_payload(payload, codec),
            codec=codec,
            **kwargs,
        )

    def replace(self, **changes: Any) -> "Endpoint[T]":
        """Return a copy with ``changes`` applied (e.g. ``timeout`` or ``key_path``)."""
        return dataclasses.replace(self, **changes)


@dataclass(frozen=True)
class Environment:
    """Deployment target shared by all endpoints issued against it."""

    name: str
    host: str
    transport: "Transport"
    scheme: HTTPScheme = HTTPScheme.HTTPS

    def __post_init__(self) -> None:
        object.__setattr__(self, "scheme", HTTPScheme(str(self.scheme).lower()))

    @classmethod
    def from_settings(
        cls,
        settings: Optional["NetworkingSettings"] = None,
        transport: Optional["Transport"] = None,
    ) -> "Environment":
        """Create an environment from configuration.

        When ``transport`` is omitted an :class:`HTTPXTransport` bound to a
        client built from ``settings`` is created.
        """
        from .network.transport import HTTPXTransport
        from .settings import get_settings

        settings = settings or get_settings()
        if transport is None:
            transport = HTTPXTransport(settings=settings)
        return cls(
            name=settings.environment_name,
            host=settings.host,
            transport=transport,
            scheme=settings.scheme,
        )


def build_url(endpoint: Endpoint[Any], environment: Environment) -> httpx.URL:
    """Assemble the absolute URL for ``endpoint`` within ``environment``.

    Raises:
        InvalidURL: If the host is empty or the components do not form a
            valid URL.
    """
    if not environment.host:
        raise InvalidURL("The environment host is empty.")
    components: dict[str, Any] = {
        "scheme": environment.scheme.value,
        "host": environment.host,
        "path": endpoint.path,
    }
    if endpoint.query_items is not None:
        components["params"] = dict(endpoint.query_items)
    try:
        return httpx.URL(**components)
    except (httpx.InvalidURL, TypeError, ValueError) as exc:
        raise InvalidURL(f"The endpoint URL is invalid: {exc}") from exc


def build_request(endpoint: Endpoint[Any], url: httpx.URL) -> httpx.Request:
    """Create the request for ``endpoint`` addressed to ``url``."""
    return httpx.Request(
        endpoint.method.value,
        url,
        headers=dict(endpoint.headers),
        content=endpoint.body,
        extensions={"timeout": httpx.Timeout(endpoint.timeout).as_dict()},
    )
