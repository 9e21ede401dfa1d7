# === NAVMAP v1 ===
# {
#   "module": "EndpointKit.network.client",
#   "purpose": "HTTPX AsyncClient factory.",
#   "sections": [
#     {
#       "id": "create-async-client",
#       "name": "create_async_client",
#       "anchor": "function-create-async-client",
#       "kind": "function"
#     },
#     {
#       "id": "create-ssl-context",
#       "name": "_create_ssl_context",
#       "anchor": "function-create-ssl-context",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""HTTPX AsyncClient factory.

Builds the ``httpx.AsyncClient`` that :class:`~EndpointKit.network.transport.HTTPXTransport`
uses when no client is injected.

Key design:
- **No global state**: every call returns a new client owned by the caller;
  environments share one transport (and therefore one client) by reference.
- **Timeouts**: client-wide read/write/pool budget from settings, a shorter
  connect budget; each request still carries its own endpoint timeout.
- **Redirects**: disabled; a 3xx response is classified, not followed.
- **TLS**: verification through certifi's CA bundle unless disabled in settings.

Example:
    >>> from EndpointKit.network.client import create_async_client
    >>> client = create_async_client()
    >>> # ... await client.send(request) ...
    >>> # await client.aclose()  # at shutdown
"""

from __future__ import annotations

import logging
import ssl
from typing import TYPE_CHECKING, Optional

import certifi
import httpx

from EndpointKit.network.policy import FOLLOW_REDIRECTS

if TYPE_CHECKING:  # pragma: no cover - import cycle guard for type checkers only
    from EndpointKit.settings import NetworkingSettings

logger = logging.getLogger(__name__)


def create_async_client(
    settings: Optional["NetworkingSettings"] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Create an ``httpx.AsyncClient`` configured from ``settings``.

    Args:
        settings: Networking settings; the cached process settings are used
            when omitted.
        transport: Optional low-level HTTPX transport (e.g. ``httpx.MockTransport``
            in tests).

    Returns:
        Configured client.  The caller is responsible for ``aclose()``.
    """
    if settings is None:
        from EndpointKit.settings import get_settings

        settings = get_settings()

    client = httpx.AsyncClient(
        transport=transport,
        timeout=httpx.Timeout(
            settings.timeout_seconds,
            connect=settings.connect_timeout_seconds,
        ),
        headers={"User-Agent": settings.user_agent},
        follow_redirects=FOLLOW_REDIRECTS,
        verify=_create_ssl_context(settings.verify_tls),
    )

    logger.debug(
        "HTTPX async client created",
        extra={
            "extra_fields": {
                "timeout": settings.timeout_seconds,
                "connect_timeout": settings.connect_timeout_seconds,
                "verify_tls": settings.verify_tls,
            }
        },
    )
    return client


def _create_ssl_context(verify: bool) -> ssl.SSLContext:
    """Create an SSL context with secure defaults.

    Uses the certifi bundle and enforces hostname checks unless verification
    is explicitly disabled.
    """
    if not verify:
        ctx = ssl.create_default_context()
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
        logger.warning("TLS verification DISABLED (development only!)")
        return ctx

    ctx = ssl.create_default_context(cafile=certifi.where())
    ctx.check_hostname = True
    ctx.verify_mode = ssl.CERT_REQUIRED
    return ctx


__all__ = ["create_async_client"]
