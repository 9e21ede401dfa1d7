"""Status-code classification and the success-path decode pipeline."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, TypeVar

from .codec import decode_payload, extract_key_path
from .errors import InvalidResponseCode

if TYPE_CHECKING:  # pragma: no cover - import cycle guard for type checkers only
    from .endpoint import Endpoint

T = TypeVar("T")

logger = logging.getLogger(__name__)

__all__ = ["StatusCategory", "classify_status", "is_success", "classify_and_decode"]


class StatusCategory(str, Enum):
    """Status-code buckets; each covers a half-open range of codes."""

    INFORMATIONAL = "informational"
    SUCCESS = "success"
    REDIRECTION = "redirection"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    UNRECOGNIZED = "unrecognized"


_CATEGORY_RANGES = (
    (range(100, 200), StatusCategory.INFORMATIONAL),
    (range(200, 300), StatusCategory.SUCCESS),
    (range(300, 400), StatusCategory.REDIRECTION),
    (range(400, 500), StatusCategory.CLIENT_ERROR),
    (range(500, 600), StatusCategory.SERVER_ERROR),
)


def classify_status(status_code: int) -> StatusCategory:
    """Return the bucket ``status_code`` belongs to.

    Examples:
        >>> classify_status(204)
        <StatusCategory.SUCCESS: 'success'>
        >>> classify_status(600)
        <StatusCategory.UNRECOGNIZED: 'unrecognized'>
    """
    for codes, category in _CATEGORY_RANGES:
        if status_code in codes:
            return category
    return StatusCategory.UNRECOGNIZED


def is_success(status_code: int) -> bool:
    return classify_status(status_code) is StatusCategory.SUCCESS


def classify_and_decode(status_code: int, body: bytes, endpoint: "Endpoint[T]") -> T:
    """Classify ``status_code`` and decode ``body`` on success.

    Args:
        status_code: HTTP status code returned by the transport.
        body: Raw response payload.
        endpoint: Endpoint supplying the decode target, key path and codec.

    Returns:
        The decoded payload.

    Raises:
        InvalidResponseCode: For any status outside ``200..299``.
        CorruptData: If a key path is set and ``body`` is not JSON.
        DecodingError: If the selected bytes do not match the decode target.
    """
    category = classify_status(status_code)
    if category is not StatusCategory.SUCCESS:
        logger.debug(
            "Non-success status code",
            extra={"extra_fields": {"status": status_code, "category": category.value}},
        )
        raise InvalidResponseCode(status_code, category=category)

    payload = body
    if endpoint.key_path is not None:
        payload = extract_key_path(body, endpoint.key_path)
    return decode_payload(payload, endpoint.decode_type, endpoint.codec)
