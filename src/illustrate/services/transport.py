"""HTTP transport shared by every provider adapter.

One ``perform`` call is one HTTP round trip. The request body is encoded as
JSON unless the ``Content-Type`` header asks for ``multipart/form-data``, in
which case every scalar body field and every attachment becomes its own
part under a fresh boundary. The reply is normalized into exactly one of:

- ``ObjectPayload``: the body is a JSON object
- ``ArrayPayload``: the body is a JSON array whose elements are all objects
- ``BinaryPayload``: the body is a PNG or JPEG image (inference endpoints
  that stream the image back directly)

Any other JSON shape, or a body that is not JSON at all, raises
``InvalidPayloadError``. There are no retries and no caching; a Transport
holds no per-request state and may be shared by any number of concurrent
adapter calls.
"""

import base64
import json
from dataclasses import dataclass, field
from typing import Any, Optional, Union

import httpx
import structlog

from illustrate.services.exceptions import (
    InvalidPayloadError,
    NetworkError,
    RateLimitError,
    RequestRejectedError,
    ServiceUnavailableError,
    TransportTimeoutError,
)

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 120.0
JSON_CONTENT_TYPE = "application/json"
MULTIPART_CONTENT_TYPE = "multipart/form-data"
IMAGE_CONTENT_TYPES = ("image/png", "image/jpeg")

# Status codes that end the call before the body is inspected
_STATUS_ERRORS = {
    403: (RequestRejectedError, "Forbidden request"),
    404: (RequestRejectedError, "Not found"),
    429: (RateLimitError, "Too many requests"),
    500: (ServiceUnavailableError, "Internal server error"),
    503: (ServiceUnavailableError, "Service unavailable"),
    504: (ServiceUnavailableError, "Gateway timeout"),
}


@dataclass(frozen=True)
class Attachment:
    """Binary multipart part (image, mask, video)."""

    name: str
    data: bytes = field(repr=False)
    mime_type: str = "image/png"
    filename: Optional[str] = None


@dataclass(frozen=True)
class ObjectPayload:
    data: dict[str, Any]


@dataclass(frozen=True)
class ArrayPayload:
    items: list[dict[str, Any]]

    @property
    def first(self) -> Optional[dict[str, Any]]:
        return self.items[0] if self.items else None


@dataclass(frozen=True)
class BinaryPayload:
    data: bytes = field(repr=False)
    mime_type: str = "image/png"

    @property
    def base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")


Payload = Union[ObjectPayload, ArrayPayload, BinaryPayload]


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    payload: Payload


def redact_url(url: str) -> str:
    """Drop the query string so API keys passed as ``?key=`` never reach the logs."""
    return str(httpx.URL(url).copy_with(query=None))


def form_value(value: Any) -> Optional[str]:
    """Text of a scalar multipart field, or None when the field is skipped.

    Fields whose value is not a str, int, float or bool (None, lists, dicts)
    are skipped. Booleans are sent as ``true``/``false``.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    return None


def multipart_fields(
    fields: dict[str, Any],
    attachments: list[Attachment],
) -> tuple[dict[str, str], list[tuple[str, tuple]]]:
    """Split a multipart body into httpx ``data=`` and ``files=`` arguments.

    httpx only switches to multipart/form-data when ``files`` is non-empty, so
    a body without attachments sends its scalar fields as filename-less parts.
    """
    data = {}
    for name, value in fields.items():
        text = form_value(value)
        if text is not None:
            data[name] = text

    files = []
    for attachment in attachments:
        filename = attachment.filename or attachment.name
        files.append((attachment.name, (filename, attachment.data, attachment.mime_type)))
    if not files:
        files = [(name, (None, text.encode("utf-8"))) for name, text in data.items()]
        data = {}
    return data, files


def parse_payload(content: bytes, content_type: str) -> Payload:
    """Discriminate a raw response body into one payload shape.

    Raises:
        InvalidPayloadError: If the body is not an image, a JSON object,
            or a JSON array of objects
    """
    media_type = content_type.split(";")[0].strip().lower()
    if media_type in IMAGE_CONTENT_TYPES:
        return BinaryPayload(data=content, mime_type=media_type)

    try:
        decoded = json.loads(content)
    except (ValueError, UnicodeDecodeError) as e:
        raise InvalidPayloadError(f"Invalid JSON: {e}") from e

    if isinstance(decoded, dict):
        return ObjectPayload(data=decoded)
    if isinstance(decoded, list) and all(isinstance(item, dict) for item in decoded):
        return ArrayPayload(items=decoded)
    raise InvalidPayloadError(f"Invalid JSON: unexpected top-level {type(decoded).__name__}")


class Transport:
    """Stateless HTTP executor used by all adapters."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize transport.

        Args:
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests pass ``httpx.MockTransport``)
        """
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def perform(
        self,
        url: str,
        method: str = "POST",
        body: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
        attachments: Optional[list[Attachment]] = None,
    ) -> TransportResponse:
        """Execute one HTTP call and normalize its reply.

        Args:
            url: Destination URL (may already carry a ``?key=`` query)
            method: HTTP method; GET requests never carry a body
            body: JSON body, or the scalar fields of a multipart body
            headers: Request headers; ``Content-Type`` selects the body encoding
                and defaults to application/json
            attachments: Binary parts, only sent for multipart requests

        Returns:
            TransportResponse with status code and discriminated payload

        Raises:
            TransportTimeoutError: Request timed out
            NetworkError: Connection failure
            RequestRejectedError: 403 or 404
            RateLimitError: 429
            ServiceUnavailableError: 500, 503 or 504
            InvalidPayloadError: Body is not a supported shape
        """
        request_headers = dict(headers or {})
        request_headers.setdefault("Content-Type", JSON_CONTENT_TYPE)
        body_kwargs: dict[str, Any] = {}

        if method.upper() != "GET":
            if request_headers["Content-Type"].startswith(MULTIPART_CONTENT_TYPE):
                # httpx writes the header itself, boundary included
                del request_headers["Content-Type"]
                data, files = multipart_fields(body or {}, attachments or [])
                body_kwargs = {"data": data, "files": files}
            elif body is not None:
                body_kwargs = {"content": json.dumps(body).encode("utf-8")}

        response = await self._send(method, url, request_headers, **body_kwargs)
        self._raise_for_status(response, url)

        payload = parse_payload(response.content, response.headers.get("Content-Type", ""))
        logger.debug(
            "transport.request.completed",
            method=method,
            url=redact_url(url),
            status_code=response.status_code,
            payload_type=type(payload).__name__,
        )
        return TransportResponse(status_code=response.status_code, payload=payload)

    async def download(self, url: str, headers: Optional[dict[str, str]] = None) -> bytes:
        """Fetch a binary result (image or video) by URL.

        Raises:
            Same transport errors as ``perform``.
        """
        response = await self._send("GET", url, dict(headers or {}))
        self._raise_for_status(response, url)
        if response.status_code >= 400:
            raise RequestRejectedError(
                f"Download failed ({response.status_code})",
                status_code=response.status_code,
                body=response.text,
            )
        return response.content

    async def _send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        **body_kwargs: Any,
    ) -> httpx.Response:
        try:
            async with self._client() as client:
                return await client.request(method, url, headers=headers, **body_kwargs)
        except httpx.TimeoutException as e:
            logger.warning("transport.request.timeout", method=method, url=redact_url(url))
            raise TransportTimeoutError(f"Request timeout after {self.timeout}s: {e}") from e
        except httpx.HTTPError as e:
            logger.warning(
                "transport.request.failed",
                method=method,
                url=redact_url(url),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise NetworkError(f"Network error: {e}") from e

    @staticmethod
    def _raise_for_status(response: httpx.Response, url: str) -> None:
        mapped = _STATUS_ERRORS.get(response.status_code)
        if mapped is None:
            return
        error_class, message = mapped
        logger.warning(
            "transport.request.rejected",
            url=redact_url(url),
            status_code=response.status_code,
        )
        raise error_class(message, status_code=response.status_code, body=response.text)
