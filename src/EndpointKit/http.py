"""HTTP verbs and URL schemes recognised by endpoint descriptors."""

from __future__ import annotations

from enum import Enum

__all__ = ["HTTPMethod", "HTTPScheme", "WRITE_METHODS"]


class HTTPMethod(str, Enum):
    """HTTP verbs an endpoint may declare."""

    GET = "GET"
    DELETE = "DELETE"
    POST = "POST"
    PATCH = "PATCH"
    PUT = "PUT"

    def __str__(self) -> str:
        return self.value


class HTTPScheme(str, Enum):
    """URL schemes an environment may target."""

    HTTP = "http"
    HTTPS = "https"

    def __str__(self) -> str:
        return self.value


#: Verbs that carry a request body and are issued through ``upload``.
WRITE_METHODS = frozenset({HTTPMethod.POST, HTTPMethod.PUT, HTTPMethod.PATCH, HTTPMethod.DELETE})
