"""OpenAI adapters: DALL·E 3, GPT Image 1 (generate and edit) and Sora 2."""

from typing import Optional

from illustrate.models.enums import ArtQuality, ArtStyle, ModelCode
from illustrate.models.generation import (
    GenerationRequest,
    GenerationResponse,
    ImageGenerationRequest,
    VideoGenerationRequest,
)
from illustrate.services.adapters.base import (
    BodyEncoding,
    CompletionStrategy,
    ProviderAdapter,
    SubmitThenPoll,
    WireRequest,
)
from illustrate.services.adapters.common import (
    ResponseShape,
    UrlResult,
    lookup,
    require_asset,
    style_preset,
)
from illustrate.services.exceptions import ModelResponseError
from illustrate.services.polling import PollingPolicy
from illustrate.services.transport import Attachment, ObjectPayload, TransportResponse

OPENAI_USER = "illustrate_user"
OPENAI_ERROR = (("errors",), ("message",), ("error",))

DALLE3_SIZES = ("1024x1024", "1792x1024", "1024x1792")
GPT_IMAGE_SIZES = ("1024x1024", "1536x1024", "1024x1536")

SORA_MODELS = {
    ModelCode.OPENAI_SORA_2: "sora-2",
    ModelCode.OPENAI_SORA_2_PRO: "sora-2-pro",
}
SORA_DEFAULT_SECONDS = 4


def allowed_size(dimensions: str, allowed: tuple[str, ...]) -> str:
    """Keep a supported size, otherwise fall back to the square default."""
    return dimensions if dimensions in allowed else allowed[0]


class OpenAIAdapter(ProviderAdapter):
    response_shape = ResponseShape(
        inline=(("data", 0, "b64_json"),),
        error=OPENAI_ERROR,
    )

    def headers(self, request: GenerationRequest) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {request.connection_secret}",
            "Content-Type": self.encoding.value,
        }


class OpenAIDalle3Adapter(OpenAIAdapter):
    """DALL·E 3; the API may rewrite the prompt and report it back."""

    response_shape = ResponseShape(
        inline=(("data", 0, "b64_json"),),
        error=OPENAI_ERROR,
        model_prompt=("data", 0, "revised_prompt"),
    )

    def transform_request(self, request: GenerationRequest) -> WireRequest:
        quality, style = ArtQuality.HD, ArtStyle.VIVID
        preset = "photographic"
        if isinstance(request, ImageGenerationRequest):
            quality, style = request.art_quality, request.art_style
            preset = style_preset(request.art_variant)
        return WireRequest(
            url=self.model.generate_url,
            body={
                "model": "dall-e-3",
                "prompt": f"{preset} - {request.prompt or ''}",
                "n": 1,
                "size": allowed_size(request.art_dimensions, DALLE3_SIZES),
                "quality": quality.value.lower(),
                "style": style.value.lower(),
                "response_format": "b64_json",
                "user": OPENAI_USER,
            },
            headers=self.headers(request),
        )


def gpt_image_quality(request: GenerationRequest) -> str:
    if isinstance(request, ImageGenerationRequest) and request.art_quality == ArtQuality.STANDARD:
        return "medium"
    return "high"


class OpenAIGptImageAdapter(OpenAIAdapter):
    def transform_request(self, request: GenerationRequest) -> WireRequest:
        return WireRequest(
            url=self.model.generate_url,
            body={
                "model": "gpt-image-1",
                "prompt": request.prompt or "",
                "n": 1,
                "size": allowed_size(request.art_dimensions, GPT_IMAGE_SIZES),
                "quality": gpt_image_quality(request),
                "user": OPENAI_USER,
            },
            headers=self.headers(request),
        )


class OpenAIGptImageEditAdapter(OpenAIAdapter):
    """GPT Image 1 edits: source image required, mask optional."""

    encoding = BodyEncoding.MULTIPART
    required_assets = (("client_image", "Select an image"),)

    def headers(self, request: GenerationRequest) -> dict[str, str]:
        return {**super().headers(request), "Accept": "application/json"}

    def transform_request(self, request: GenerationRequest) -> WireRequest:
        attachments = [
            Attachment(name="image", data=require_asset(request.client_image, "Select an image"))
        ]
        if request.client_mask:
            attachments.append(
                Attachment(name="mask", data=require_asset(request.client_mask, "Invalid mask"))
            )
        return WireRequest(
            url=self.model.generate_url,
            body={
                "model": "gpt-image-1",
                "prompt": request.prompt or "",
                "size": allowed_size(request.art_dimensions, GPT_IMAGE_SIZES),
                "quality": gpt_image_quality(request),
            },
            headers=self.headers(request),
            attachments=attachments,
        )


class OpenAISoraAdapter(OpenAIAdapter):
    """Sora 2 video jobs.

    The multipart submission returns a video ``id`` and ``status``; the job
    is polled at ``/videos/{id}`` until completed or failed, then the file
    is fetched with the same bearer token.
    """

    encoding = BodyEncoding.MULTIPART
    polling = PollingPolicy(interval_seconds=5, max_attempts=120)
    default_duration_seconds = SORA_DEFAULT_SECONDS
    response_shape = ResponseShape(
        url=(("output_video",),),
        error=(("error", "message"),),
        missing="Failed to extract video from response",
    )

    def build_completion(self) -> CompletionStrategy:
        return SubmitThenPoll(self.polling)

    def headers(self, request: GenerationRequest) -> dict[str, str]:
        return {**super().headers(request), "Accept": "application/json"}

    def transform_request(self, request: GenerationRequest) -> WireRequest:
        seconds = self.default_duration_seconds
        if isinstance(request, VideoGenerationRequest) and request.duration_seconds:
            seconds = request.duration_seconds
        return WireRequest(
            url=self.model.generate_url,
            body={
                "model": SORA_MODELS[self.model.code],
                "prompt": request.prompt or "",
                "seconds": seconds,
                "size": request.art_dimensions,
            },
            headers=self.headers(request),
        )

    @staticmethod
    def video_status(response: TransportResponse) -> Optional[str]:
        if isinstance(response.payload, ObjectPayload):
            status = response.payload.data.get("status")
            return status if isinstance(status, str) else None
        return None

    @staticmethod
    def error_message(response: TransportResponse) -> Optional[str]:
        if isinstance(response.payload, ObjectPayload):
            message = lookup(response.payload.data, ("error", "message"))
            return message if isinstance(message, str) else None
        return None

    def completed_on_submit(self, response: TransportResponse) -> bool:
        if self.error_message(response) is not None:
            return True
        return self.video_status(response) == "completed"

    def is_terminal(self, response: TransportResponse) -> bool:
        return (
            self.video_status(response) in ("completed", "failed")
            or self.error_message(response) is not None
        )

    def extract_job_id(self, response: TransportResponse) -> str:
        if isinstance(response.payload, ObjectPayload):
            video_id = response.payload.data.get("id")
            if isinstance(video_id, str) and video_id:
                return video_id
        raise ModelResponseError("No video ID in response")

    def status_request(self, request: GenerationRequest, job_id: str) -> WireRequest:
        headers = super().headers(request)
        headers["Content-Type"] = BodyEncoding.JSON.value
        return WireRequest(url=f"{self.model.status_url}/{job_id}", method="GET", headers=headers)

    async def transform_response(
        self,
        request: GenerationRequest,
        response: TransportResponse,
    ) -> GenerationResponse:
        if self.video_status(response) == "failed":
            raise ModelResponseError(self.error_message(response) or "Video generation failed")
        if self.video_status(response) == "completed" and isinstance(
            response.payload, ObjectPayload
        ):
            data = response.payload.data
            url = data.get("output_video")
            if not isinstance(url, str) or not url:
                url = f"{self.model.status_url}/{data.get('id')}/content"
            return await self.resolve(request, UrlResult(url=url))
        return await super().transform_response(request, response)

    async def download(self, request: GenerationRequest, url: str) -> bytes:
        return await self.transport.download(
            url, headers={"Authorization": f"Bearer {request.connection_secret}"}
        )
