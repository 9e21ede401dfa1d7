"""Exception hierarchy surfaced by endpoint execution.

Every failure produced while building, sending, classifying or decoding a
request is reported as a subclass of :class:`NetworkingError`.  Callers can
catch the base class to handle all failures uniformly, or react to a specific
category (for example :class:`InvalidResponseCode` vs. :class:`DecodingError`)
when finer-grained handling is required.  Transport-level failures that do not
belong to any specific category are wrapped in :class:`DataTaskError`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:  # pragma: no cover - import cycle guard for type checkers only
    from .response import StatusCategory

__all__ = [
    "NetworkingError",
    "InvalidHTTPMethod",
    "InvalidURL",
    "InvalidResponse",
    "InvalidResponseCode",
    "EncodingError",
    "DecodingError",
    "CorruptData",
    "DataTaskError",
]


class NetworkingError(RuntimeError):
    """Base exception for endpoint execution failures."""

    description = "A networking error occurred."
    failure_reason: Optional[str] = None
    recovery_suggestion: Optional[str] = None

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.description)


class InvalidHTTPMethod(NetworkingError):
    """Raised when an endpoint's verb is incompatible with the invoked operation."""

    description = "The provided HTTP method is invalid for this request."
    failure_reason = "The specified HTTP method is not supported for this request."
    recovery_suggestion = "Ensure the HTTP method is appropriate for the API endpoint."


class InvalidURL(NetworkingError):
    """Raised when a URL cannot be assembled from an environment and endpoint."""

    description = "The endpoint URL is invalid."
    failure_reason = "The constructed URL is malformed or incomplete."
    recovery_suggestion = "Verify the endpoint URL and ensure it is properly constructed."


class InvalidResponse(NetworkingError):
    """Raised when a transport result cannot be interpreted as an HTTP response."""

    description = "The API returned an invalid response."
    failure_reason = "The API response could not be interpreted."
    recovery_suggestion = "Check the API documentation and ensure the endpoint is valid."


class InvalidResponseCode(NetworkingError):
    """Raised when a status code falls outside the 2xx success range."""

    description = "The API returned an invalid response code."
    failure_reason = "The API returned an unexpected response code."
    recovery_suggestion = "Check the API documentation for the expected response codes."

    def __init__(
        self,
        status_code: int,
        *,
        category: Optional["StatusCategory"] = None,
    ) -> None:
        super().__init__(f"The API returned an invalid response code: {status_code}.")
        self.status_code = status_code
        self.category = category

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, InvalidResponseCode):
            return NotImplemented
        return self.status_code == other.status_code

    def __hash__(self) -> int:
        return hash((InvalidResponseCode, self.status_code))


class _UnderlyingError(NetworkingError):
    """Failure category that carries the exception that caused it."""

    def __init__(self, underlying: BaseException) -> None:
        super().__init__(f"{self.description} {underlying}")
        self.underlying = underlying


class EncodingError(_UnderlyingError):
    """Raised when a request payload cannot be serialised."""

    description = "An error occurred while encoding the data:"
    failure_reason = "The data could not be properly encoded for transmission."
    recovery_suggestion = "Ensure the data being sent conforms to the expected format."


class DecodingError(_UnderlyingError):
    """Raised when a response payload cannot be decoded into the target type."""

    description = "An error occurred while decoding the data:"
    failure_reason = "The received data could not be properly decoded into the expected format."
    recovery_suggestion = "Check the response format and update the decoding logic if necessary."


class CorruptData(NetworkingError):
    """Raised when a payload is structurally unreadable, independent of its target type."""

    description = "The data received from the API is corrupt or unreadable."
    failure_reason = "The received data is corrupt or does not match the expected format."
    recovery_suggestion = "Verify the API response format and ensure data integrity."


class DataTaskError(_UnderlyingError):
    """Catch-all for transport-level or unexpected failures."""

    description = "A data task error occurred:"
    failure_reason = "A network error occurred during the request."
    recovery_suggestion = "Ensure the network connection is stable and try again."

    @classmethod
    def wrap(cls, exc: Exception) -> NetworkingError:
        """Return ``exc`` unchanged when already categorised, else wrap it."""
        if isinstance(exc, NetworkingError):
            return exc
        return cls(exc)
