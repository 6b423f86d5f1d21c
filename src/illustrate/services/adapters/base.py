"""Provider adapter interface and its composable strategies.

Every (provider, model) pair is served by one ``ProviderAdapter`` subclass
exposing four operations:

- ``transform_request``: generic request -> provider wire request
- ``make_request``: validate, dispatch, complete, transform; never raises
- ``transform_response``: provider reply -> GenerationResponse
- ``get_credits_used``: price of one call

Adapters vary along two independent axes, each expressed as a strategy
object rather than a subclass tree:

1. Body encoding (``BodyEncoding``): JSON, or multipart with attachments.
2. Completion (``CompletionStrategy``): ``Synchronous`` single round trip, or
   ``SubmitThenPoll`` which submits, extracts a job id and drives
   ``poll_until`` with the adapter's own ``PollingPolicy``.

What remains in each concrete adapter is the irreducible per-provider field
mapping and reply parsing.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

import structlog

from illustrate.models.catalog import CatalogModel
from illustrate.models.enums import ErrorCode
from illustrate.models.generation import (
    GenerationRequest,
    GenerationResponse,
    VideoGenerationRequest,
)
from illustrate.services.adapters.common import (
    ErrorResult,
    InlineResult,
    NoMatch,
    ResponseShape,
    UrlResult,
    decode_base64,
    encode_base64,
    extract_result,
)
from illustrate.services.exceptions import (
    AdapterPreconditionError,
    ModelResponseError,
    ServiceError,
)
from illustrate.services.polling import PollingPolicy, Sleep, poll_until
from illustrate.services.pricing import estimate_cost, legacy_cost
from illustrate.services.transport import Attachment, Transport, TransportResponse

logger = structlog.get_logger(__name__)


class BodyEncoding(str, Enum):
    JSON = "application/json"
    MULTIPART = "multipart/form-data"


@dataclass
class WireRequest:
    """Provider-native request ready for the transport."""

    url: str
    method: str = "POST"
    body: Optional[dict[str, Any]] = None
    headers: dict[str, str] = field(default_factory=dict)
    attachments: list[Attachment] = field(default_factory=list)


class CompletionStrategy(ABC):
    """How an adapter turns a wire request into a final provider reply."""

    @abstractmethod
    async def complete(
        self,
        adapter: "ProviderAdapter",
        request: GenerationRequest,
        wire: WireRequest,
    ) -> TransportResponse:
        """Return the reply ``transform_response`` should parse."""


class Synchronous(CompletionStrategy):
    """One round trip; the reply is the result."""

    async def complete(self, adapter, request, wire):
        return await adapter.send(wire)


class SubmitThenPoll(CompletionStrategy):
    """Submit a job, then poll its status endpoint until a terminal state."""

    def __init__(self, policy: PollingPolicy):
        self.policy = policy

    async def complete(self, adapter, request, wire):
        submitted = await adapter.send(wire)
        if adapter.completed_on_submit(submitted):
            return submitted

        job_id = adapter.extract_job_id(submitted)
        status_wire = adapter.status_request(request, job_id)
        logger.info(
            "adapter.job.submitted",
            model=adapter.model.code.value,
            job_id=job_id,
            interval_seconds=self.policy.interval_seconds,
            max_attempts=self.policy.max_attempts,
        )

        async def check() -> TransportResponse:
            return await adapter.send(status_wire)

        return await poll_until(
            check,
            adapter.is_terminal,
            self.policy,
            sleep=adapter.sleep,
            job_id=job_id,
        )


class ProviderAdapter(ABC):
    """Base adapter: validation, dispatch, error containment and fan-out."""

    encoding: BodyEncoding = BodyEncoding.JSON
    response_shape: ResponseShape = ResponseShape()
    # Charge the fixed per-call literal instead of the pricing table
    legacy_pricing: bool = False
    requires_prompt: bool = True
    # (request field, message shown when it is missing)
    required_assets: tuple[tuple[str, str], ...] = ()
    # Duration sent to the provider when a video request leaves it unset
    default_duration_seconds: Optional[int] = None

    def __init__(
        self,
        model: CatalogModel,
        transport: Transport,
        sleep: Sleep = asyncio.sleep,
    ):
        self.model = model
        self.transport = transport
        self.sleep = sleep
        self.completion: CompletionStrategy = self.build_completion()

    def build_completion(self) -> CompletionStrategy:
        return Synchronous()

    # Request side

    def validate(self, request: GenerationRequest) -> None:
        """Check preconditions before any network call.

        Raises:
            AdapterPreconditionError: If a credential, prompt or asset is missing
        """
        if request.is_video != self.model.is_video:
            kind = "video" if self.model.is_video else "image"
            raise AdapterPreconditionError(f"{self.model.name} only accepts {kind} requests")
        if not request.connection_secret:
            raise AdapterPreconditionError(
                f"Missing credential for {self.model.provider.value}"
            )
        prompt = request.prompt or ""
        if self.requires_prompt and not prompt.strip():
            raise AdapterPreconditionError("Enter a prompt")
        if len(prompt) > self.model.max_prompt_length:
            raise AdapterPreconditionError(
                f"Prompt exceeds maximum length of {self.model.max_prompt_length} characters "
                f"(got {len(prompt)})"
            )
        for field_name, message in self.required_assets:
            if not getattr(request, field_name, None):
                raise AdapterPreconditionError(message)

    @abstractmethod
    def transform_request(self, request: GenerationRequest) -> WireRequest:
        """Build the provider's wire request from a generic request."""

    async def build_wire(self, request: GenerationRequest) -> WireRequest:
        """Wire request for dispatch; adapters that must upload inputs first override this."""
        return self.transform_request(request)

    def headers(self, request: GenerationRequest) -> dict[str, str]:
        return {"Content-Type": self.encoding.value}

    async def send(self, wire: WireRequest) -> TransportResponse:
        return await self.transport.perform(
            wire.url,
            method=wire.method,
            body=wire.body,
            headers=wire.headers,
            attachments=wire.attachments,
        )

    # Polling hooks, used by SubmitThenPoll

    def completed_on_submit(self, response: TransportResponse) -> bool:
        """Whether the submission reply already holds the final result."""
        return False

    def is_terminal(self, response: TransportResponse) -> bool:
        return True

    def extract_job_id(self, response: TransportResponse) -> str:
        raise ModelResponseError("Provider did not return a job identifier")

    def status_request(self, request: GenerationRequest, job_id: str) -> WireRequest:
        raise NotImplementedError(f"{type(self).__name__} does not poll")

    # Response side

    async def transform_response(
        self,
        request: GenerationRequest,
        response: TransportResponse,
    ) -> GenerationResponse:
        """Parse a final reply using the adapter's ``response_shape``.

        Raises:
            TransformResponseError: If a success-shaped payload cannot be decoded
            TransportError: If fetching a referenced result fails
        """
        return await self.resolve(request, extract_result(response.payload, self.response_shape))

    async def resolve(self, request: GenerationRequest, extracted) -> GenerationResponse:
        match extracted:
            case InlineResult(base64=data, model_prompt=model_prompt):
                decode_base64(data)
                return GenerationResponse.generated(
                    payloads=[data],
                    cost=self.get_credits_used(request),
                    model_prompt=model_prompt or request.prompt,
                )
            case UrlResult(url=url, model_prompt=model_prompt):
                content = await self.download(request, url)
                return GenerationResponse.generated(
                    payloads=[encode_base64(content)],
                    cost=self.get_credits_used(request),
                    model_prompt=model_prompt or request.prompt,
                )
            case ErrorResult(message=message):
                return GenerationResponse.failed(ErrorCode.MODEL_ERROR, message)
            case NoMatch(reason=reason):
                return GenerationResponse.failed(ErrorCode.MODEL_ERROR, reason)
        return GenerationResponse.failed(ErrorCode.MODEL_ERROR, "Invalid response")

    async def download(self, request: GenerationRequest, url: str) -> bytes:
        """Fetch a result referenced by URL; some providers need auth here too."""
        return await self.transport.download(url)

    def get_credits_used(self, request: GenerationRequest) -> float:
        """Price of one call (one image or one video)."""
        if self.legacy_pricing:
            fixed = legacy_cost(self.model.code)
            if fixed is not None:
                return fixed
        if (
            self.default_duration_seconds
            and isinstance(request, VideoGenerationRequest)
            and request.duration_seconds is None
        ):
            request = request.model_copy(
                update={"duration_seconds": self.default_duration_seconds}
            )
        return estimate_cost(request, quantity=1)

    # Orchestration

    async def make_request(self, request: GenerationRequest) -> GenerationResponse:
        """Run one provider call to a terminal GenerationResponse.

        Every failure inside the call chain becomes a FAILED response;
        only cancellation propagates.
        """
        log = logger.bind(model=self.model.code.value, provider=self.model.provider.value)
        try:
            self.validate(request)
            wire = await self.build_wire(request)
            raw = await self.completion.complete(self, request, wire)
            response = await self.transform_response(request, raw)
        except ServiceError as e:
            log.warning(
                "adapter.request.failed",
                error=str(e),
                error_type=type(e).__name__,
                error_code=e.error_code.value,
            )
            return GenerationResponse.failed(e.error_code, str(e))
        except Exception as e:
            log.error(
                "adapter.request.crashed",
                error=str(e),
                error_type=type(e).__name__,
                exc_info=e,
            )
            return GenerationResponse.failed(ErrorCode.GENERATOR_ERROR, f"Failed with error: {e}")

        log.info(
            "adapter.request.completed",
            status=response.status.value,
            error_code=response.error_code.value if response.error_code else None,
        )
        return response

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        """Run ``request.count`` concurrent calls and combine them.

        Any FAILED call fails the whole generation with that call's error.
        """
        results = await asyncio.gather(*(self.make_request(request) for _ in range(request.count)))
        return combine_responses(list(results))


def combine_responses(responses: list[GenerationResponse]) -> GenerationResponse:
    if not responses:
        return GenerationResponse.failed(ErrorCode.GENERATOR_ERROR, "No generation was successful")
    for response in responses:
        if not response.is_generated:
            return response
    if len(responses) == 1:
        return responses[0]
    return GenerationResponse.generated(
        payloads=[payload for response in responses for payload in response.payloads],
        cost=sum(response.cost for response in responses),
        model_prompt=responses[0].model_prompt,
    )
