"""Hugging Face Inference API adapters.

The inference endpoint streams the PNG back directly; JSON replies only
carry an ``error``.
"""

from illustrate.models.generation import GenerationRequest
from illustrate.services.adapters.base import ProviderAdapter, WireRequest
from illustrate.services.adapters.common import ResponseShape, variant_prompt


class HuggingFaceAdapter(ProviderAdapter):
    legacy_pricing = True
    response_shape = ResponseShape(error=(("error",),))

    def headers(self, request: GenerationRequest) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {request.connection_secret}",
            "Content-Type": self.encoding.value,
        }

    def transform_request(self, request: GenerationRequest) -> WireRequest:
        return WireRequest(
            url=self.model.generate_url,
            body={"inputs": variant_prompt(request)},
            headers=self.headers(request),
        )
