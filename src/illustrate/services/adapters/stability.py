"""Stability AI adapters.

All Stability endpoints take the raw API key in ``Authorization`` and ask
for JSON replies (``Accept: application/json``) so images come back as
base64 in ``image`` (or ``video``). Every endpoint except SDXL is multipart.
Creative upscale and image-to-video are asynchronous: the submission
returns an ``id`` and ``{url}/result/{id}`` answers HTTP 200 once done.
"""

from typing import Any

from illustrate.models.enums import ModelCode
from illustrate.models.generation import GenerationRequest, ImageGenerationRequest
from illustrate.services.adapters.base import (
    BodyEncoding,
    CompletionStrategy,
    ProviderAdapter,
    SubmitThenPoll,
    WireRequest,
)
from illustrate.services.adapters.common import (
    ResponseShape,
    closest_aspect_ratio,
    first_string,
    parse_dimensions,
    require_asset,
    style_preset,
)
from illustrate.services.exceptions import ModelResponseError
from illustrate.services.polling import PollingPolicy
from illustrate.services.transport import Attachment, ObjectPayload, TransportResponse

STABILITY_USER = "illustrate_user"
RESULT_POLLING = PollingPolicy(interval_seconds=8, max_attempts=10)

SD3_MODELS = {
    ModelCode.STABILITY_SD3: "sd3",
    ModelCode.STABILITY_SD3_TURBO: "sd3-turbo",
    ModelCode.STABILITY_SD35_LARGE: "sd3.5-large",
    ModelCode.STABILITY_SD35_LARGE_TURBO: "sd3.5-large-turbo",
    ModelCode.STABILITY_SD35_MEDIUM: "sd3.5-medium",
    ModelCode.STABILITY_SD35_FLASH: "sd3.5-flash",
}

SD3_ASPECT_RATIOS = {
    "576x1024": "9:16",
    "1024x576": "16:9",
    "768x1024": "3:4",
    "1024x768": "4:3",
}

ULTRA_ASPECT_RATIOS = (
    ("1:1", 1.0),
    ("16:9", 16 / 9),
    ("9:16", 9 / 16),
    ("21:9", 21 / 9),
    ("9:21", 9 / 21),
    ("3:2", 3 / 2),
    ("2:3", 2 / 3),
    ("5:4", 5 / 4),
    ("4:5", 4 / 5),
)

SDXL_SIZES = {"1152x896", "896x1152", "1216x832", "1344x768", "768x1344", "1536x640", "640x1536"}

SELECT_IMAGE = "Select an image"
DRAW_MASK = "Draw the mask area on the image"


class StabilityAdapter(ProviderAdapter):
    """Shared Stability wire conventions."""

    encoding = BodyEncoding.MULTIPART
    response_shape = ResponseShape(
        inline=(("image",),),
        error=(("errors",), ("message",), ("name",)),
    )
    sends_mask = False

    def headers(self, request: GenerationRequest) -> dict[str, str]:
        return {
            "Authorization": request.connection_secret or "",
            "Content-Type": self.encoding.value,
            "Accept": "application/json",
        }

    def fields(self, request: GenerationRequest) -> dict[str, Any]:
        return {
            "prompt": request.prompt,
            "negative_prompt": request.negative_prompt,
            "user": STABILITY_USER,
        }

    def attachments(self, request: GenerationRequest) -> list[Attachment]:
        attachments = []
        if request.client_image:
            attachments.append(
                Attachment(name="image", data=require_asset(request.client_image, SELECT_IMAGE))
            )
        if self.sends_mask and request.client_mask:
            attachments.append(
                Attachment(name="mask", data=require_asset(request.client_mask, DRAW_MASK))
            )
        return attachments

    def transform_request(self, request: GenerationRequest) -> WireRequest:
        return WireRequest(
            url=self.model.generate_url,
            body=self.fields(request),
            headers=self.headers(request),
            attachments=self.attachments(request),
        )


class StabilitySD3Adapter(StabilityAdapter):
    """SD3 and SD3.5 family; one endpoint, model chosen by a form field."""

    def fields(self, request: GenerationRequest) -> dict[str, Any]:
        return {
            **super().fields(request),
            "model": SD3_MODELS[self.model.code],
            "aspect_ratio": SD3_ASPECT_RATIOS.get(request.art_dimensions, "1:1"),
        }


class StabilityUltraAdapter(StabilityAdapter):
    """Stable Image Ultra and Core, with style presets."""

    legacy_pricing = True

    def fields(self, request: GenerationRequest) -> dict[str, Any]:
        aspect_ratio = closest_aspect_ratio(request.art_dimensions, ULTRA_ASPECT_RATIOS, "1:1")
        fields = {**super().fields(request), "aspect_ratio": aspect_ratio}
        if isinstance(request, ImageGenerationRequest):
            fields["style_preset"] = style_preset(request.art_variant)
        return fields


class StabilityCoreAdapter(StabilityUltraAdapter):
    legacy_pricing = False


class StabilitySDXLAdapter(StabilityAdapter):
    """SDXL 1.0 on the v1 JSON API."""

    encoding = BodyEncoding.JSON
    legacy_pricing = True
    response_shape = ResponseShape(
        inline=(("artifacts", 0, "base64"),),
        error=(("errors",), ("message",), ("name",)),
    )

    def transform_request(self, request: GenerationRequest) -> WireRequest:
        size = request.art_dimensions if request.art_dimensions in SDXL_SIZES else "1024x1024"
        width, height = parse_dimensions(size) or (1024, 1024)
        text_prompts = [{"text": request.prompt, "weight": 1}]
        if request.negative_prompt:
            text_prompts.append({"text": request.negative_prompt, "weight": -1})
        return WireRequest(
            url=self.model.generate_url,
            body={
                "text_prompts": text_prompts,
                "cfg_scale": 7.0,
                "width": width,
                "height": height,
                "steps": 30,
                "samples": 1,
            },
            headers=self.headers(request),
        )


class StabilityConservativeUpscaleAdapter(StabilityAdapter):
    legacy_pricing = True
    required_assets = (("client_image", SELECT_IMAGE),)


class StabilityRemoveBackgroundAdapter(StabilityAdapter):
    requires_prompt = False
    required_assets = (("client_image", SELECT_IMAGE),)

    def fields(self, request: GenerationRequest) -> dict[str, Any]:
        return {"output_format": "png", "user": STABILITY_USER}


class StabilityEraseAdapter(StabilityAdapter):
    legacy_pricing = True
    requires_prompt = False
    sends_mask = True
    required_assets = (("client_image", SELECT_IMAGE), ("client_mask", DRAW_MASK))

    def fields(self, request: GenerationRequest) -> dict[str, Any]:
        return {"user": STABILITY_USER}


class StabilityInpaintAdapter(StabilityAdapter):
    legacy_pricing = True
    sends_mask = True
    required_assets = (("client_image", SELECT_IMAGE), ("client_mask", DRAW_MASK))


class StabilityOutpaintAdapter(StabilityAdapter):
    legacy_pricing = True
    requires_prompt = False
    required_assets = (("client_image", SELECT_IMAGE),)

    def fields(self, request: GenerationRequest) -> dict[str, Any]:
        direction = getattr(request, "edit_direction", None)
        return {
            **super().fields(request),
            "left": direction.left if direction else 0,
            "right": direction.right if direction else 0,
            "up": direction.up if direction else 0,
            "down": direction.down if direction else 0,
        }


class StabilitySearchAndReplaceAdapter(StabilityAdapter):
    legacy_pricing = True
    required_assets = (
        ("client_image", SELECT_IMAGE),
        ("search_prompt", "Enter what to search for in the image"),
    )

    def fields(self, request: GenerationRequest) -> dict[str, Any]:
        return {**super().fields(request), "search_prompt": request.search_prompt}


class StabilityResultPollingAdapter(StabilityAdapter):
    """Asynchronous Stability endpoints polled at ``{url}/result/{id}``."""

    legacy_pricing = True
    required_assets = (("client_image", SELECT_IMAGE),)
    polling = RESULT_POLLING

    def build_completion(self) -> CompletionStrategy:
        return SubmitThenPoll(self.polling)

    def extract_job_id(self, response: TransportResponse) -> str:
        payload = response.payload
        if isinstance(payload, ObjectPayload):
            job_id = payload.data.get("id")
            if isinstance(job_id, str) and job_id:
                return job_id
            message = first_string(payload.data.get("errors")) or first_string(
                payload.data.get("message")
            )
            if message:
                raise ModelResponseError(message)
        raise ModelResponseError("Invalid response")

    def status_request(self, request: GenerationRequest, job_id: str) -> WireRequest:
        headers = self.headers(request)
        headers["Content-Type"] = BodyEncoding.JSON.value
        return WireRequest(
            url=f"{self.model.status_url}/result/{job_id}",
            method="GET",
            headers=headers,
        )

    def is_terminal(self, response: TransportResponse) -> bool:
        return response.status_code == 200


class StabilityCreativeUpscaleAdapter(StabilityResultPollingAdapter):
    pass


class StabilityImageToVideoAdapter(StabilityResultPollingAdapter):
    """Stable Video Diffusion: still image in, short clip out."""

    requires_prompt = False
    response_shape = ResponseShape(
        inline=(("video",),),
        error=(("errors",), ("message",), ("name",)),
    )

    def fields(self, request: GenerationRequest) -> dict[str, Any]:
        return {
            **super().fields(request),
            "cfg_scale": getattr(request, "stickyness", None),
            "motion_bucket_id": getattr(request, "motion", None),
        }
