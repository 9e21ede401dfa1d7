"""Testing utilities for EndpointKit.

Provides in-process transports and helpers so endpoint execution can be
exercised without network access:

- :class:`ResponseSpec` describes a canned HTTP response.
- :class:`ScriptedTransport` replays a scripted sequence of responses or
  exceptions and records every request it receives.
- :func:`route_handler` turns a ``{(method, path): ResponseSpec}`` table into
  an ``httpx.MockTransport`` handler (unknown routes answer 404).
- :func:`use_mock_environment` yields an :class:`Environment` whose
  :class:`HTTPXTransport` is backed by ``httpx.MockTransport``.
- :class:`RecordingSleep` replaces ``asyncio.sleep`` and records delays.
"""

from __future__ import annotations

import contextlib
import json
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Callable, Iterable, List, Mapping, Optional, Tuple, Union

import httpx

from ..endpoint import Environment
from ..http import HTTPScheme
from ..network.transport import HTTPXTransport, TransportResponse

__all__ = [
    "ResponseSpec",
    "RequestRecord",
    "ScriptedTransport",
    "RecordingSleep",
    "route_handler",
    "use_mock_environment",
]


@dataclass
class ResponseSpec:
    """HTTP response definition served by mock transports."""

    status: int = 200
    body: Union[bytes, str, Any] = b""
    headers: Mapping[str, str] = field(default_factory=dict)

    def serialise_body(self) -> bytes:
        if isinstance(self.body, bytes):
            return self.body
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return json.dumps(self.body).encode("utf-8")

    def to_transport_response(self) -> TransportResponse:
        return TransportResponse(self.status, self.serialise_body())

    def to_httpx_response(self) -> httpx.Response:
        return httpx.Response(self.status, headers=dict(self.headers), content=self.serialise_body())


@dataclass
class RequestRecord:
    """Request captured by :class:`ScriptedTransport`."""

    method: str
    url: str
    headers: Mapping[str, str]
    body: bytes
    via_upload: bool
    extensions: Mapping[str, Any] = field(default_factory=dict)


class ScriptedTransport:
    """Transport replaying ``script`` one entry per call.

    Entries may be :class:`ResponseSpec`, :class:`TransportResponse`, any
    object with ``status_code``/``content``, or an exception instance to
    raise.  The last entry is repeated once the script is exhausted.
    """

    def __init__(self, script: Iterable[Any]) -> None:
        self._script = list(script)
        if not self._script:
            raise ValueError("ScriptedTransport requires at least one scripted outcome")
        self.requests: List[RequestRecord] = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    async def execute(self, request: httpx.Request) -> Any:
        return self._respond(request, request.content, via_upload=False)

    async def upload(self, request: httpx.Request, body: bytes) -> Any:
        return self._respond(request, body, via_upload=True)

    def _respond(self, request: httpx.Request, body: bytes, *, via_upload: bool) -> Any:
        self.requests.append(
            RequestRecord(
                method=request.method,
                url=str(request.url),
                headers=dict(request.headers),
                body=body,
                via_upload=via_upload,
                extensions=dict(request.extensions),
            )
        )
        index = min(len(self.requests), len(self._script)) - 1
        outcome = self._script[index]
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, ResponseSpec):
            return outcome.to_transport_response()
        return outcome


class RecordingSleep:
    """Awaitable stand-in for ``asyncio.sleep`` that records requested delays."""

    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def route_handler(
    routes: Mapping[Tuple[str, str], ResponseSpec],
    *,
    recorder: Optional[List[httpx.Request]] = None,
) -> Callable[[httpx.Request], httpx.Response]:
    """Build an ``httpx.MockTransport`` handler serving ``routes``."""

    def handler(request: httpx.Request) -> httpx.Response:
        if recorder is not None:
            request.read()
            recorder.append(request)
        spec = routes.get((request.method, request.url.path))
        if spec is None:
            spec = ResponseSpec(status=404, body={})
        return spec.to_httpx_response()

    return handler


@contextlib.asynccontextmanager
async def use_mock_environment(
    handler: Callable[[httpx.Request], httpx.Response],
    *,
    host: str = "reqres.in",
    scheme: HTTPScheme = HTTPScheme.HTTPS,
    name: str = "testing",
) -> AsyncIterator[Environment]:
    """Yield an environment whose HTTPX client is backed by ``handler``."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    try:
        yield Environment(name=name, host=host, transport=HTTPXTransport(client=client), scheme=scheme)
    finally:
        await client.aclose()
