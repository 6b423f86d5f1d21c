"""Service error hierarchy for transport, polling and provider adapters.

This module defines the exception hierarchy for service-level errors:
- ServiceError: Base for all service errors
- TransientError: Errors that may succeed on a fresh submission (timeouts, rate limits)
- PermanentError: Errors that will not (bad status, malformed payloads, unmet preconditions)

Adapters never let these escape ``make_request``; each maps to an ErrorCode
on a FAILED GenerationResponse.
"""

from typing import Optional

from illustrate.models.enums import ErrorCode


class ServiceError(Exception):
    """Base exception for all service errors."""

    error_code: ErrorCode = ErrorCode.GENERATOR_ERROR


class TransientError(ServiceError):
    """Transient error that may succeed on a later submission.

    Examples:
    - Network timeouts
    - Rate limit exceeded (429)
    - Service unavailable (503)
    - Polling budget exhausted
    """

    pass


class PermanentError(ServiceError):
    """Permanent error that will not succeed on retry.

    Examples:
    - Forbidden or not found (403, 404)
    - Response body that is not a JSON object or array of objects
    - Missing required input asset or credential
    """

    pass


# Transport errors
class TransportError(ServiceError):
    """Base exception for transport failures."""

    error_code = ErrorCode.MODEL_ERROR


class TransportTimeoutError(TransportError, TransientError):
    """Request timed out or the connection dropped."""

    pass


class NetworkError(TransportError, TransientError):
    """Connection could not be established or was reset."""

    pass


class HTTPStatusError(TransportError):
    """Provider answered with a status code mapped to a failure."""

    def __init__(self, message: str, status_code: int, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class RequestRejectedError(HTTPStatusError, PermanentError):
    """Forbidden or not found (403, 404)."""

    pass


class RateLimitError(HTTPStatusError, TransientError):
    """Rate limit exceeded (429)."""

    pass


class ServiceUnavailableError(HTTPStatusError, TransientError):
    """Provider-side failure (500, 503, 504)."""

    pass


class InvalidPayloadError(TransportError, PermanentError):
    """Response body was not a JSON object or a JSON array of objects."""

    pass


# Polling errors
class PollingTimeoutError(TransientError):
    """Remote job did not reach a terminal state within the attempt budget."""

    error_code = ErrorCode.TIMEOUT_ERROR

    def __init__(self, message: str, attempts: int):
        super().__init__(message)
        self.attempts = attempts


# Adapter errors
class AdapterPreconditionError(PermanentError):
    """Required input asset, credential or parameter is missing."""

    error_code = ErrorCode.ADAPTER_ERROR


class ModelResponseError(PermanentError):
    """Provider reported a failure, or the reply matched no known shape."""

    error_code = ErrorCode.MODEL_ERROR


class TransformResponseError(PermanentError):
    """Success-shaped payload could not be decoded into usable data."""

    error_code = ErrorCode.TRANSFORM_RESPONSE_ERROR


class UnknownModelError(PermanentError):
    """No adapter is registered for the requested model code."""

    error_code = ErrorCode.ADAPTER_ERROR
