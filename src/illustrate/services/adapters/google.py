"""Google Generative Language adapters: Imagen, Gemini image and Veo.

Google authenticates with the API key as a ``key`` query parameter, so
request URLs are built per call and only ever logged redacted.
"""

from typing import Any, Optional

import httpx

from illustrate.models.enums import ArtQuality, ModelCode
from illustrate.models.generation import (
    GenerationRequest,
    GenerationResponse,
    ImageGenerationRequest,
    VideoGenerationRequest,
)
from illustrate.services.adapters.base import (
    CompletionStrategy,
    ProviderAdapter,
    SubmitThenPoll,
    WireRequest,
)
from illustrate.services.adapters.common import (
    InlineResult,
    ResponseShape,
    lookup,
    parse_dimensions,
    strip_data_uri,
)
from illustrate.services.exceptions import ModelResponseError
from illustrate.services.polling import PollingPolicy
from illustrate.services.transport import ObjectPayload, TransportResponse

# (label, ratio) pairs; a ratio within 0.1 of the target selects the label
IMAGEN_ASPECT_RATIOS = (
    ("1:1", 1.0),
    ("3:4", 0.75),
    ("4:3", 1.333),
    ("9:16", 0.5625),
    ("16:9", 1.777),
)
IMAGEN_SIZED_MODELS = frozenset(
    {ModelCode.GOOGLE_IMAGEN_4_STANDARD, ModelCode.GOOGLE_IMAGEN_4_ULTRA}
)

VEO_DEFAULT_DURATION = 8
VEO_VIDEO_INPUT_MODELS = frozenset({ModelCode.GOOGLE_VEO_31, ModelCode.GOOGLE_VEO_31_FAST})

GOOGLE_ERROR = (("error", "message"),)


def with_key(url: str, secret: Optional[str]) -> str:
    return str(httpx.URL(url).copy_merge_params({"key": secret or ""}))


def imagen_aspect_ratio(dimensions: str) -> str:
    parsed = parse_dimensions(dimensions)
    if parsed is None:
        return "1:1"
    ratio = parsed[0] / parsed[1]
    for label, target in IMAGEN_ASPECT_RATIOS:
        if abs(ratio - target) < 0.1:
            return label
    return "1:1"


class GoogleAdapter(ProviderAdapter):
    response_shape = ResponseShape(error=GOOGLE_ERROR)

    def endpoint(self, request: GenerationRequest) -> str:
        return with_key(self.model.generate_url, request.connection_secret)


class GoogleImagenAdapter(GoogleAdapter):
    """Imagen 3 and 4 ``:predict`` endpoints."""

    response_shape = ResponseShape(
        inline=(("predictions", 0, "bytesBase64Encoded"),),
        error=GOOGLE_ERROR,
        missing="Invalid response - no image data found",
    )

    def transform_request(self, request: GenerationRequest) -> WireRequest:
        parameters: dict[str, Any] = {
            "aspectRatio": imagen_aspect_ratio(request.art_dimensions),
            "sampleCount": 1,
        }
        if self.model.code in IMAGEN_SIZED_MODELS and isinstance(request, ImageGenerationRequest):
            parameters["imageSize"] = "2048" if request.art_quality == ArtQuality.HD else "1024"
        return WireRequest(
            url=self.endpoint(request),
            body={"instances": [{"prompt": request.prompt or ""}], "parameters": parameters},
            headers=self.headers(request),
        )


class GoogleGeminiImageAdapter(GoogleAdapter):
    """Gemini image generation through ``:generateContent``.

    The reply is a list of content parts; the first part with ``inlineData``
    is the image. A reply holding only text means the model declined to
    draw, and its text is surfaced as the error.
    """

    def parts(self, request: GenerationRequest) -> list[dict[str, Any]]:
        return [{"text": request.prompt or ""}]

    def transform_request(self, request: GenerationRequest) -> WireRequest:
        image_config: dict[str, Any] = {}
        if ":" in request.art_dimensions:
            image_config["aspectRatio"] = request.art_dimensions
        generation_config: dict[str, Any] = {}
        if isinstance(request, ImageGenerationRequest):
            image_config["imageSize"] = "4K" if request.art_quality == ArtQuality.HD else "2K"
            if request.response_modalities:
                generation_config["responseModalities"] = list(request.response_modalities)
        generation_config["imageConfig"] = image_config
        return WireRequest(
            url=self.endpoint(request),
            body={
                "contents": [{"parts": self.parts(request)}],
                "generationConfig": generation_config,
            },
            headers=self.headers(request),
        )

    async def transform_response(
        self,
        request: GenerationRequest,
        response: TransportResponse,
    ) -> GenerationResponse:
        if not isinstance(response.payload, ObjectPayload):
            return await super().transform_response(request, response)
        data = response.payload.data

        parts = lookup(data, ("candidates", 0, "content", "parts"))
        if isinstance(parts, list):
            dict_parts = [part for part in parts if isinstance(part, dict)]
            for part in dict_parts:
                image = lookup(part, ("inlineData", "data"))
                if isinstance(image, str) and image:
                    return await self.resolve(request, InlineResult(base64=image))
            for part in dict_parts:
                text = part.get("text")
                if isinstance(text, str):
                    raise ModelResponseError(f"No image generated. Response: {text}")

        message = lookup(data, GOOGLE_ERROR[0])
        if isinstance(message, str):
            raise ModelResponseError(message)
        block_reason = lookup(data, ("promptFeedback", "blockReason"))
        if isinstance(block_reason, str):
            raise ModelResponseError(f"Prompt blocked: {block_reason}")
        return await super().transform_response(request, response)


class GoogleGeminiImageEditAdapter(GoogleGeminiImageAdapter):
    required_assets = (("client_image", "Select an image to edit"),)

    def parts(self, request: GenerationRequest) -> list[dict[str, Any]]:
        return [
            *super().parts(request),
            {
                "inlineData": {
                    "mimeType": "image/png",
                    "data": strip_data_uri(request.client_image or ""),
                }
            },
        ]


class GoogleVeoAdapter(GoogleAdapter):
    """Veo long-running video generation.

    ``:predictLongRunning`` returns an operation ``name`` that is polled at
    ``{base}/{name}`` until ``done``. The finished operation points at a
    video URI which itself needs the API key to download.
    """

    polling = PollingPolicy(interval_seconds=10, max_attempts=60)
    default_duration_seconds = VEO_DEFAULT_DURATION
    response_shape = ResponseShape(
        url=(("response", "generateVideoResponse", "generatedSamples", 0, "video", "uri"),),
        error=GOOGLE_ERROR,
        missing="Failed to extract video from response",
    )

    def build_completion(self) -> CompletionStrategy:
        return SubmitThenPoll(self.polling)

    def transform_request(self, request: GenerationRequest) -> WireRequest:
        instance: dict[str, Any] = {"prompt": request.prompt or ""}
        if request.client_image:
            instance["image"] = _media(request.client_image, "image/png")
        duration = VEO_DEFAULT_DURATION
        if isinstance(request, VideoGenerationRequest):
            if request.client_last_frame:
                instance["lastFrame"] = _media(request.client_last_frame, "image/png")
            if request.client_video and self.model.code in VEO_VIDEO_INPUT_MODELS:
                instance["video"] = _media(request.client_video, "video/mp4")
            duration = request.duration_seconds or VEO_DEFAULT_DURATION

        parameters: dict[str, Any] = {
            "aspectRatio": veo_aspect_ratio(request.art_dimensions),
            "durationSeconds": duration,
            "resolution": veo_resolution(request.art_dimensions),
        }
        if request.negative_prompt:
            parameters["negativePrompt"] = request.negative_prompt
        return WireRequest(
            url=self.endpoint(request),
            body={"instances": [instance], "parameters": parameters},
            headers=self.headers(request),
        )

    def extract_job_id(self, response: TransportResponse) -> str:
        if isinstance(response.payload, ObjectPayload):
            data = response.payload.data
            message = lookup(data, GOOGLE_ERROR[0])
            if isinstance(message, str):
                raise ModelResponseError(message)
            name = data.get("name")
            if isinstance(name, str) and name:
                return name
        raise ModelResponseError("No operation name in response")

    def status_request(self, request: GenerationRequest, job_id: str) -> WireRequest:
        return WireRequest(
            url=with_key(f"{self.model.status_url}/{job_id}", request.connection_secret),
            method="GET",
            headers=self.headers(request),
        )

    def is_terminal(self, response: TransportResponse) -> bool:
        if not isinstance(response.payload, ObjectPayload):
            return False
        data = response.payload.data
        return data.get("done") is True or isinstance(lookup(data, GOOGLE_ERROR[0]), str)

    async def download(self, request: GenerationRequest, url: str) -> bytes:
        return await self.transport.download(with_key(url, request.connection_secret))


def _media(value: str, mime_type: str) -> dict[str, str]:
    return {"bytesBase64Encoded": strip_data_uri(value), "mimeType": mime_type}


def veo_aspect_ratio(dimensions: str) -> str:
    parsed = parse_dimensions(dimensions)
    if parsed is None:
        return "16:9"
    return "16:9" if parsed[0] > parsed[1] else "9:16"


def veo_resolution(dimensions: str) -> str:
    parsed = parse_dimensions(dimensions)
    if parsed is None:
        return "720p"
    return "1080p" if max(parsed) >= 1080 else "720p"
