# === NAVMAP v1 ===
# {
#   "module": "EndpointKit.manager",
#   "purpose": "Execute endpoints against an environment with bounded, fixed-delay retries.",
#   "sections": [
#     {"id": "networkmanager", "name": "NetworkManager", "anchor": "class-networkmanager", "kind": "class"},
#     {"id": "fetch", "name": "fetch_data", "anchor": "method-fetch-data", "kind": "function"},
#     {"id": "send", "name": "send_data", "anchor": "method-send-data", "kind": "function"},
#     {"id": "check", "name": "check_response", "anchor": "method-check-response", "kind": "function"}
#   ]
# }
# === /NAVMAP ===

"""Endpoint execution with single-attempt, bounded-retry and default variants.

:class:`NetworkManager` exposes three base operations:

- ``fetch_data``: GET endpoints, issued through ``Transport.execute``.
- ``send_data``: POST/PUT/PATCH/DELETE endpoints, issued through
  ``Transport.upload`` with the endpoint body.
- ``check_response``: any verb; reduces the outcome to ``True`` for a 2xx
  status and ``False`` for every other status.

Each operation runs ``settings.retry_attempts`` times by default (once unless
configured), or up to ``attempts`` times with a fixed
``delay`` between attempts.  The ``*_or_default`` variants additionally
replace a terminal failure with a caller-supplied value.

Error policy:
- Verb mismatches raise :class:`InvalidHTTPMethod` before any I/O.
- Categorised failures (:class:`NetworkingError` subclasses) propagate as-is.
- Any other exception raised while building, sending or decoding is wrapped
  in :class:`DataTaskError`.

Example:
    >>> manager = NetworkManager(environment)
    >>> resource = await manager.fetch_data(endpoint, attempts=3, delay=1.0)
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Optional, Tuple, TypeVar

import httpx
from tenacity import AsyncRetrying

from .endpoint import Endpoint, Environment, build_request, build_url
from .errors import DataTaskError, InvalidHTTPMethod, InvalidResponse
from .http import WRITE_METHODS, HTTPMethod
from .network.instrumentation import TransportObserver, notify
from .network.retry import SleepFunction, create_fixed_delay_retry_policy
from .network.transport import TransportResponse
from .response import classify_and_decode, is_success
from .settings import NetworkingSettings, get_settings

T = TypeVar("T")
R = TypeVar("R")

logger = logging.getLogger(__name__)

__all__ = ["NetworkManager"]

_Operation = Callable[[Endpoint[Any], Optional[TransportObserver]], Awaitable[R]]


class NetworkManager:
    """Executes endpoints against one :class:`Environment`.

    The manager keeps no per-call state; one instance may serve any number
    of concurrent calls.

    Args:
        environment: Host, scheme and transport requests are issued against.
        settings: Source of the default retry delay; the cached process
            settings are used when omitted.
        sleep: Coroutine function used between retries (``asyncio.sleep``).
    """

    def __init__(
        self,
        environment: Environment,
        *,
        settings: Optional[NetworkingSettings] = None,
        sleep: Optional[SleepFunction] = None,
    ) -> None:
        self.environment = environment
        self._settings = settings or get_settings()
        self._sleep = sleep or asyncio.sleep

    # ------------------------------------------------------------------
    # Fetch (GET)
    # ------------------------------------------------------------------

    async def fetch_data(
        self,
        endpoint: Endpoint[T],
        *,
        attempts: Optional[int] = None,
        delay: Optional[float] = None,
        observer: Optional[TransportObserver] = None,
    ) -> T:
        """Fetch and decode the resource described by a GET ``endpoint``.

        Args:
            endpoint: GET endpoint to execute.
            attempts: Total attempts (>= 1); defaults to
                ``settings.retry_attempts`` (a single attempt unless configured).
            delay: Seconds to wait before each retry; defaults to
                ``settings.retry_delay_seconds``.
            observer: Optional transport observer for this call.

        Returns:
            The decoded payload.

        Raises:
            InvalidHTTPMethod: If the endpoint uses a write verb.
            NetworkingError: The last attempt's failure once attempts run out.
        """
        return await self._run(self._fetch_once, endpoint, attempts, delay, observer)

    async def fetch_data_or_default(
        self,
        endpoint: Endpoint[T],
        default: T,
        *,
        attempts: Optional[int] = None,
        delay: Optional[float] = None,
        observer: Optional[TransportObserver] = None,
    ) -> T:
        """Like :meth:`fetch_data`, but return ``default`` instead of raising.

        Failures are silently degraded to ``default`` after all attempts are
        spent; callers cannot tell a fallback from a real result.  Only
        ``Exception`` subclasses are absorbed: ``asyncio.CancelledError``
        still propagates, and invalid ``attempts``/``delay`` arguments raise
        ``ValueError`` before any attempt.
        """
        return await self._run_or_default(
            self._fetch_once, endpoint, default, attempts, delay, observer
        )

    async def _fetch_once(
        self, endpoint: Endpoint[T], observer: Optional[TransportObserver]
    ) -> T:
        if endpoint.method in WRITE_METHODS:
            raise InvalidHTTPMethod(
                f"fetch_data only supports GET endpoints, got {endpoint.method.value}."
            )
        return await self._attempt(
            endpoint,
            observer,
            upload=False,
            handle=lambda status, content: classify_and_decode(status, content, endpoint),
        )

    # ------------------------------------------------------------------
    # Send (POST / PUT / PATCH / DELETE)
    # ------------------------------------------------------------------

    async def send_data(
        self,
        endpoint: Endpoint[T],
        *,
        attempts: Optional[int] = None,
        delay: Optional[float] = None,
        observer: Optional[TransportObserver] = None,
    ) -> T:
        """Send the body of a write ``endpoint`` and decode the response.

        Args:
            endpoint: POST, PUT, PATCH or DELETE endpoint to execute.
            attempts: Total attempts (>= 1).
            delay: Seconds to wait before each retry.
            observer: Optional transport observer for this call.

        Raises:
            InvalidHTTPMethod: If the endpoint uses GET.
            NetworkingError: The last attempt's failure once attempts run out.
        """
        return await self._run(self._send_once, endpoint, attempts, delay, observer)

    async def send_data_or_default(
        self,
        endpoint: Endpoint[T],
        default: T,
        *,
        attempts: Optional[int] = None,
        delay: Optional[float] = None,
        observer: Optional[TransportObserver] = None,
    ) -> T:
        """Like :meth:`send_data`, but return ``default`` instead of raising.

        Failures are silently degraded to ``default``; cancellation and
        invalid retry arguments still raise, as in :meth:`fetch_data_or_default`.
        """
        return await self._run_or_default(
            self._send_once, endpoint, default, attempts, delay, observer
        )

    async def _send_once(
        self, endpoint: Endpoint[T], observer: Optional[TransportObserver]
    ) -> T:
        if endpoint.method is HTTPMethod.GET:
            raise InvalidHTTPMethod("send_data does not support GET endpoints.")
        return await self._attempt(
            endpoint,
            observer,
            upload=True,
            handle=lambda status, content: classify_and_decode(status, content, endpoint),
        )

    # ------------------------------------------------------------------
    # Check (any verb, boolean outcome)
    # ------------------------------------------------------------------

    async def check_response(
        self,
        endpoint: Endpoint[Any],
        *,
        attempts: Optional[int] = None,
        delay: Optional[float] = None,
        observer: Optional[TransportObserver] = None,
    ) -> bool:
        """Return whether ``endpoint`` answers with a 2xx status.

        Non-2xx statuses yield ``False`` without raising, so they are never
        retried; only transport-level failures raise (and are retried).
        """
        return await self._run(self._check_once, endpoint, attempts, delay, observer)

    async def check_response_or_default(
        self,
        endpoint: Endpoint[Any],
        default: bool = False,
        *,
        attempts: Optional[int] = None,
        delay: Optional[float] = None,
        observer: Optional[TransportObserver] = None,
    ) -> bool:
        """Like :meth:`check_response`, but return ``default`` instead of raising.

        ``asyncio.CancelledError`` is not absorbed; a cancelled call propagates
        the cancellation rather than returning ``default``.
        """
        return await self._run_or_default(
            self._check_once, endpoint, default, attempts, delay, observer
        )

    async def _check_once(
        self, endpoint: Endpoint[Any], observer: Optional[TransportObserver]
    ) -> bool:
        return await self._attempt(
            endpoint,
            observer,
            upload=False,
            handle=lambda status, _content: is_success(status),
        )

    # ------------------------------------------------------------------
    # Execution core
    # ------------------------------------------------------------------

    def _policy(self, attempts: Optional[int], delay: Optional[float]) -> Tuple[int, AsyncRetrying]:
        """Resolve settings defaults and build the policy; invalid arguments raise here."""
        if attempts is None:
            attempts = self._settings.retry_attempts
        if delay is None:
            delay = self._settings.retry_delay_seconds
        return attempts, create_fixed_delay_retry_policy(attempts, delay, sleep=self._sleep)

    async def _run(
        self,
        operation: _Operation[R],
        endpoint: Endpoint[Any],
        attempts: Optional[int],
        delay: Optional[float],
        observer: Optional[TransportObserver],
    ) -> R:
        _, policy = self._policy(attempts, delay)
        return await self._execute(policy, operation, endpoint, observer)

    async def _execute(
        self,
        policy: AsyncRetrying,
        operation: _Operation[R],
        endpoint: Endpoint[Any],
        observer: Optional[TransportObserver],
    ) -> R:
        async for attempt in policy:
            with attempt:
                result = await operation(endpoint, observer)
        return result

    async def _run_or_default(
        self,
        operation: _Operation[R],
        endpoint: Endpoint[Any],
        default: R,
        attempts: Optional[int],
        delay: Optional[float],
        observer: Optional[TransportObserver],
    ) -> R:
        attempts, policy = self._policy(attempts, delay)
        try:
            return await self._execute(policy, operation, endpoint, observer)
        except Exception as exc:
            logger.warning(
                "Endpoint call failed after %d attempt(s); returning default value",
                attempts,
                extra={
                    "extra_fields": {
                        "path": endpoint.path,
                        "method": endpoint.method.value,
                        "error": type(exc).__name__,
                    }
                },
            )
            return default

    async def _attempt(
        self,
        endpoint: Endpoint[Any],
        observer: Optional[TransportObserver],
        *,
        upload: bool,
        handle: Callable[[int, bytes], R],
    ) -> R:
        try:
            url = build_url(endpoint, self.environment)
            request = build_request(endpoint, url)
            response = await self._transmit(request, endpoint, observer, upload=upload)
            status_code, content = _interpret(response)
            return handle(status_code, content)
        except Exception as exc:
            error = DataTaskError.wrap(exc)
            if error is exc:
                raise
            raise error from exc

    async def _transmit(
        self,
        request: httpx.Request,
        endpoint: Endpoint[Any],
        observer: Optional[TransportObserver],
        *,
        upload: bool,
    ) -> Any:
        transport = self.environment.transport
        notify(observer, "request_started", request)
        started = time.perf_counter()
        try:
            if upload:
                response = await transport.upload(request, endpoint.body or b"")
            else:
                response = await transport.execute(request)
        except Exception as exc:
            notify(observer, "request_failed", request, exc, time.perf_counter() - started)
            raise
        notify(
            observer,
            "request_finished",
            request,
            getattr(response, "status_code", None),
            time.perf_counter() - started,
        )
        return response


def _interpret(response: Any) -> TransportResponse:
    """Validate a transport result as a status code plus payload."""
    status_code = getattr(response, "status_code", None)
    content = getattr(response, "content", None)
    if isinstance(status_code, bool) or not isinstance(status_code, int):
        raise InvalidResponse(f"Transport returned no usable status code: {status_code!r}.")
    if content is None:
        content = b""
    if not isinstance(content, (bytes, bytearray, memoryview)):
        raise InvalidResponse(f"Transport returned a non-binary payload: {type(content).__name__}.")
    return TransportResponse(status_code, bytes(content))
