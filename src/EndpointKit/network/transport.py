"""Transport abstraction used to execute endpoint requests.

The execution core only depends on the :class:`Transport` protocol: an object
exposing ``execute`` (read-style calls) and ``upload`` (write-style calls that
carry a body), both returning a status code plus the response bytes.
:class:`HTTPXTransport` is the production implementation built on
``httpx.AsyncClient``; tests plug in ``httpx.MockTransport`` or the fakes in
:mod:`EndpointKit.testing`.

Example:
    >>> import asyncio, httpx
    >>> transport = HTTPXTransport(
    ...     client=httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(204)))
    ... )
    >>> asyncio.run(transport.execute(httpx.Request("GET", "https://example.org/"))).status_code
    204
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NamedTuple, Optional, Protocol, runtime_checkable

import httpx

from EndpointKit.network.client import create_async_client

if TYPE_CHECKING:  # pragma: no cover - import cycle guard for type checkers only
    from EndpointKit.settings import NetworkingSettings

logger = logging.getLogger(__name__)

_BODY_FRAMING_HEADERS = frozenset({"content-length", "transfer-encoding"})


class TransportResponse(NamedTuple):
    """Status code and payload returned by a transport."""

    status_code: int
    content: bytes


@runtime_checkable
class Transport(Protocol):
    """Executes requests on behalf of the endpoint layer."""

    async def execute(self, request: httpx.Request) -> TransportResponse: ...

    async def upload(self, request: httpx.Request, body: bytes) -> TransportResponse: ...


class HTTPXTransport:
    """:class:`Transport` backed by an ``httpx.AsyncClient``.

    The client is created lazily from ``settings`` unless one is injected.
    Injected clients are owned by the caller and are not closed by
    :meth:`aclose`.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        *,
        settings: Optional["NetworkingSettings"] = None,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self._settings = settings

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = create_async_client(self._settings)
        return self._client

    async def execute(self, request: httpx.Request) -> TransportResponse:
        return await self._send(request, request.content or None)

    async def upload(self, request: httpx.Request, body: bytes) -> TransportResponse:
        return await self._send(request, body)

    async def _send(self, request: httpx.Request, content: Optional[bytes]) -> TransportResponse:
        # Rebuilt through the client so its default headers apply; the
        # request-scoped timeout extension is preserved.
        headers = [
            (name, value)
            for name, value in request.headers.multi_items()
            if name.lower() not in _BODY_FRAMING_HEADERS
        ]
        prepared = self.client.build_request(
            request.method,
            request.url,
            headers=headers,
            content=content,
            extensions=dict(request.extensions),
        )
        response = await self.client.send(prepared)
        return TransportResponse(response.status_code, response.content)

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            logger.debug("HTTPX transport closed")
            self._client = None

    async def __aenter__(self) -> "HTTPXTransport":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


__all__ = ["Transport", "TransportResponse", "HTTPXTransport"]
