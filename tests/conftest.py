"""pytest fixtures for illustrate tests.

Provides:
- provider: Scripted fake provider that replays queued HTTP replies and
  records every request it receives
- sleeps / no_sleep: Recording replacement for asyncio.sleep so polling
  tests never wait
- make_adapter: Factory building a catalog adapter wired to the fake provider
- png_bytes / png_b64: A tiny image payload in raw and base64 form
"""

import base64
import json
from typing import Any, Optional

import httpx
import pytest

from illustrate.models.catalog import get_model
from illustrate.models.enums import ModelCode
from illustrate.services.adapters.registry import ADAPTER_CLASSES
from illustrate.services.transport import Transport

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00\x00\x00\rIHDR" + b"\x00" * 16


class ScriptedProvider:
    """Replays queued replies in order and records every request."""

    def __init__(self) -> None:
        self.replies: list[Any] = []
        self.requests: list[httpx.Request] = []

    def reply(
        self,
        status_code: int = 200,
        json_body: Any = None,
        content: Optional[bytes] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> "ScriptedProvider":
        if json_body is not None:
            self.replies.append(httpx.Response(status_code, json=json_body, headers=headers))
        else:
            self.replies.append(
                httpx.Response(status_code, content=content or b"", headers=headers)
            )
        return self

    def fail_with(self, error: Exception) -> "ScriptedProvider":
        self.replies.append(error)
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.replies:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    def transport(self) -> Transport:
        return Transport(timeout=5.0, transport=httpx.MockTransport(self.handler))

    def json_body(self, index: int) -> Any:
        return json.loads(self.requests[index].content)


@pytest.fixture
def provider() -> ScriptedProvider:
    """Fresh scripted provider per test."""
    return ScriptedProvider()


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def no_sleep(sleeps):
    """Awaitable sleep that records the requested interval and returns at once."""

    async def sleep(seconds: float) -> None:
        sleeps.append(seconds)

    return sleep


@pytest.fixture
def make_adapter(provider, no_sleep):
    """Build the registered adapter for a model code on top of the fake provider."""

    def factory(code: ModelCode):
        adapter_class = ADAPTER_CLASSES[code]
        return adapter_class(get_model(code), provider.transport(), sleep=no_sleep)

    return factory


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES


@pytest.fixture
def png_b64() -> str:
    return base64.b64encode(PNG_BYTES).decode("ascii")
