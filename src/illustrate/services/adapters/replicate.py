"""Replicate adapters.

Every Replicate model is asynchronous: ``POST {model}/predictions`` with
``{"input": {...}}`` returns a prediction ``id``; ``GET /predictions/{id}``
is polled until ``status`` is one of succeeded, failed or canceled. Output
is a URL (or a list of URLs) downloaded as the result.
"""

from typing import Any, Optional

import structlog

from illustrate.models.generation import GenerationRequest, VideoGenerationRequest
from illustrate.services.adapters.base import (
    CompletionStrategy,
    ProviderAdapter,
    SubmitThenPoll,
    WireRequest,
)
from illustrate.services.adapters.common import (
    ResponseShape,
    closest_aspect_ratio,
    first_string,
    lookup,
    parse_dimensions,
    reduced_aspect_ratio,
    require_asset,
    variant_prompt,
)
from illustrate.services.exceptions import ModelResponseError
from illustrate.services.polling import PollingPolicy
from illustrate.services.transport import Attachment, ObjectPayload, TransportResponse

logger = structlog.get_logger(__name__)

FILES_URL = "https://api.replicate.com/v1/files"
UPLOAD_METADATA = '{"agent":"illustrate"}'
TERMINAL_STATUSES = frozenset({"succeeded", "failed", "canceled"})

SEEDREAM_ASPECT_RATIOS = (
    ("1:1", 1.0),
    ("3:4", 3 / 4),
    ("4:3", 4 / 3),
    ("16:9", 16 / 9),
    ("9:16", 9 / 16),
    ("2:3", 2 / 3),
    ("3:2", 3 / 2),
    ("21:9", 21 / 9),
)
DREAMINA_ASPECT_RATIOS = (
    ("1:1", 1.0),
    ("4:3", 4 / 3),
    ("3:4", 3 / 4),
    ("3:2", 3 / 2),
    ("2:3", 2 / 3),
    ("16:9", 16 / 9),
    ("9:16", 9 / 16),
    ("21:9", 21 / 9),
    ("9:21", 9 / 21),
)
SEEDANCE_ASPECT_RATIOS = (
    ("16:9", 1.778),
    ("4:3", 1.333),
    ("1:1", 1.0),
    ("3:4", 0.75),
    ("9:16", 0.5625),
    ("21:9", 2.333),
    ("9:21", 0.429),
)

SEEDANCE_DEFAULT_DURATION = 5
SEEDANCE_DEFAULT_FPS = 24


def seedance_resolution(dimensions: str) -> str:
    """Pick the Seedance resolution tier from the longer side."""
    parsed = parse_dimensions(dimensions)
    if parsed is None:
        return "1080p"
    longest = max(parsed)
    if longest >= 1080:
        return "1080p"
    if longest >= 720:
        return "720p"
    return "480p"


class ReplicateAdapter(ProviderAdapter):
    """Prediction submission and polling shared by every Replicate model."""

    response_shape = ResponseShape(
        url=(("output",),),
        error=(("error",), ("detail",)),
    )
    polling = PollingPolicy(interval_seconds=4, max_attempts=10)

    def build_completion(self) -> CompletionStrategy:
        return SubmitThenPoll(self.polling)

    def headers(self, request: GenerationRequest) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {request.connection_secret}",
            "Content-Type": self.encoding.value,
        }

    def prediction_input(self, request: GenerationRequest) -> dict[str, Any]:
        return {"prompt": variant_prompt(request)}

    def transform_request(self, request: GenerationRequest) -> WireRequest:
        return WireRequest(
            url=self.model.generate_url,
            body={"input": self.prediction_input(request)},
            headers=self.headers(request),
        )

    def prediction_status(self, response: TransportResponse) -> Optional[str]:
        if isinstance(response.payload, ObjectPayload):
            status = response.payload.data.get("status")
            return status if isinstance(status, str) else None
        return None

    def completed_on_submit(self, response: TransportResponse) -> bool:
        return self.is_terminal(response)

    def is_terminal(self, response: TransportResponse) -> bool:
        return self.prediction_status(response) in TERMINAL_STATUSES

    def extract_job_id(self, response: TransportResponse) -> str:
        payload = response.payload
        if isinstance(payload, ObjectPayload):
            job_id = payload.data.get("id")
            if isinstance(job_id, str) and job_id:
                return job_id
            message = first_string(payload.data.get("error")) or first_string(
                payload.data.get("detail")
            )
            if message:
                raise ModelResponseError(message)
        raise ModelResponseError("Failed to initiate request")

    def status_request(self, request: GenerationRequest, job_id: str) -> WireRequest:
        return WireRequest(
            url=f"{self.model.status_url}/{job_id}",
            method="GET",
            headers=self.headers(request),
        )

    async def transform_response(self, request, response):
        if self.prediction_status(response) == "canceled":
            raise ModelResponseError("Prediction was canceled")
        return await super().transform_response(request, response)


class ReplicateFluxAdapter(ReplicateAdapter):
    """FLUX.1 schnell and dev."""

    legacy_pricing = True

    def prediction_input(self, request: GenerationRequest) -> dict[str, Any]:
        return {
            **super().prediction_input(request),
            "num_outputs": 1,
            "aspect_ratio": reduced_aspect_ratio(request.art_dimensions),
            "output_quality": 100,
            "output_format": "png",
        }


class ReplicateFluxProAdapter(ReplicateAdapter):
    legacy_pricing = True

    def prediction_input(self, request: GenerationRequest) -> dict[str, Any]:
        return {
            **super().prediction_input(request),
            "aspect_ratio": reduced_aspect_ratio(request.art_dimensions),
            "safety_tolerance": 5,
        }


class ReplicateSeedreamAdapter(ReplicateAdapter):
    """Seedream 3, 4 and 4.5 text-to-image."""

    polling = PollingPolicy(interval_seconds=4, max_attempts=15)

    def prediction_input(self, request: GenerationRequest) -> dict[str, Any]:
        return {
            **super().prediction_input(request),
            "aspect_ratio": closest_aspect_ratio(
                request.art_dimensions, SEEDREAM_ASPECT_RATIOS, "16:9"
            ),
            "size": "regular",
            "guidance_scale": 2.5,
        }


class ReplicateDreaminaAdapter(ReplicateAdapter):
    polling = PollingPolicy(interval_seconds=4, max_attempts=20)

    def prediction_input(self, request: GenerationRequest) -> dict[str, Any]:
        return {
            **super().prediction_input(request),
            "aspect_ratio": closest_aspect_ratio(
                request.art_dimensions, DREAMINA_ASPECT_RATIOS, "1:1"
            ),
            "resolution": "2K",
            "use_pre_llm": True,
        }


class ReplicateSeedanceAdapter(ReplicateAdapter):
    """Seedance text-to-video and image-to-video.

    Input frames are uploaded to Replicate's file store first; the
    prediction then references them by URL. A last frame is only sent
    together with a first frame.
    """

    polling = PollingPolicy(interval_seconds=5, max_attempts=60)
    default_duration_seconds = SEEDANCE_DEFAULT_DURATION

    def prediction_input(self, request: GenerationRequest) -> dict[str, Any]:
        duration = fps = resolution = None
        if isinstance(request, VideoGenerationRequest):
            duration, fps, resolution = request.duration_seconds, request.fps, request.resolution
        return {
            "prompt": request.prompt or "",
            "duration": duration or SEEDANCE_DEFAULT_DURATION,
            "resolution": resolution or seedance_resolution(request.art_dimensions),
            "aspect_ratio": closest_aspect_ratio(
                request.art_dimensions, SEEDANCE_ASPECT_RATIOS, "16:9"
            ),
            "fps": fps or SEEDANCE_DEFAULT_FPS,
            "camera_fixed": False,
        }

    async def build_wire(self, request: GenerationRequest) -> WireRequest:
        wire = self.transform_request(request)
        prediction = wire.body["input"]
        if request.client_image:
            prediction["image"] = await self.upload_image(request, request.client_image)
            last_frame = getattr(request, "client_last_frame", None)
            if last_frame:
                prediction["last_frame_image"] = await self.upload_image(request, last_frame)
        return wire

    async def upload_image(self, request: GenerationRequest, image: str) -> str:
        """Upload a base64 image and return its ``urls.get`` reference.

        Raises:
            AdapterPreconditionError: If the image is not valid base64
            ModelResponseError: If the upload reply carries no URL
        """
        data = require_asset(image, "Select an image")
        response = await self.transport.perform(
            FILES_URL,
            body={"metadata": UPLOAD_METADATA},
            headers={
                "Authorization": f"Token {request.connection_secret}",
                "Content-Type": "multipart/form-data",
            },
            attachments=[Attachment(name="content", data=data, filename="image.png")],
        )
        url = None
        if isinstance(response.payload, ObjectPayload):
            url = lookup(response.payload.data, ("urls", "get"))
        if not isinstance(url, str) or not url:
            raise ModelResponseError("Failed to parse upload response")
        logger.debug("replicate.file.uploaded", model=self.model.code.value)
        return url


class ReplicateSeedanceImageAdapter(ReplicateSeedanceAdapter):
    required_assets = (("client_image", "Select an image"),)
