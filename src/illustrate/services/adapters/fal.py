"""fal.ai FLUX adapters.

fal answers synchronously when ``sync_mode`` is set. ``images[0].url`` is
either a data URI holding the image or a plain URL to fetch it from.
"""

from illustrate.models.generation import GenerationRequest, GenerationResponse
from illustrate.services.adapters.base import ProviderAdapter, WireRequest
from illustrate.services.adapters.common import (
    InlineResult,
    ResponseShape,
    lookup,
    strip_data_uri,
    variant_prompt,
)
from illustrate.services.transport import ObjectPayload, TransportResponse

FAL_IMAGE_SIZES = {
    "1024x1024": "square_hd",
    "1920x1080": "landscape_16_9",
    "1440x1080": "landscape_4_3",
    "1080x1920": "portrait_16_9",
    "1080x1440": "portrait_4_3",
}

IMAGE_URL = ("images", 0, "url")


def fal_image_size(dimensions: str) -> str:
    return FAL_IMAGE_SIZES.get(dimensions, "square_hd")


class FalFluxAdapter(ProviderAdapter):
    response_shape = ResponseShape(url=(IMAGE_URL,), error=(("detail",), ("error",)))

    def headers(self, request: GenerationRequest) -> dict[str, str]:
        return {
            "Authorization": f"Key {request.connection_secret}",
            "Content-Type": self.encoding.value,
        }

    def transform_request(self, request: GenerationRequest) -> WireRequest:
        return WireRequest(
            url=self.model.generate_url,
            body={
                "prompt": variant_prompt(request),
                "num_images": 1,
                "image_size": fal_image_size(request.art_dimensions),
                "sync_mode": True,
                "enable_safety_checker": False,
                "safety_tolerance": "5",
            },
            headers=self.headers(request),
        )

    async def transform_response(
        self,
        request: GenerationRequest,
        response: TransportResponse,
    ) -> GenerationResponse:
        if isinstance(response.payload, ObjectPayload):
            value = lookup(response.payload.data, IMAGE_URL)
            if isinstance(value, str) and "base64" in value:
                return await self.resolve(request, InlineResult(base64=strip_data_uri(value)))
        return await super().transform_response(request, response)
