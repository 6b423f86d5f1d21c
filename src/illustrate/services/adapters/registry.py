"""Model code to adapter table.

The registry is an ordinary object built once at startup and handed to the
job queue; nothing here is global or lazily shared.
"""

import asyncio
from typing import Iterator

from illustrate.models.catalog import CATALOG, get_model
from illustrate.models.enums import ModelCode
from illustrate.services.adapters.base import ProviderAdapter
from illustrate.services.adapters.fal import FalFluxAdapter
from illustrate.services.adapters.google import (
    GoogleGeminiImageAdapter,
    GoogleGeminiImageEditAdapter,
    GoogleImagenAdapter,
    GoogleVeoAdapter,
)
from illustrate.services.adapters.huggingface import HuggingFaceAdapter
from illustrate.services.adapters.openai import (
    OpenAIDalle3Adapter,
    OpenAIGptImageAdapter,
    OpenAIGptImageEditAdapter,
    OpenAISoraAdapter,
)
from illustrate.services.adapters.replicate import (
    ReplicateDreaminaAdapter,
    ReplicateFluxAdapter,
    ReplicateFluxProAdapter,
    ReplicateSeedanceAdapter,
    ReplicateSeedanceImageAdapter,
    ReplicateSeedreamAdapter,
)
from illustrate.services.adapters.stability import (
    StabilityConservativeUpscaleAdapter,
    StabilityCoreAdapter,
    StabilityCreativeUpscaleAdapter,
    StabilityEraseAdapter,
    StabilityImageToVideoAdapter,
    StabilityInpaintAdapter,
    StabilityOutpaintAdapter,
    StabilityRemoveBackgroundAdapter,
    StabilitySD3Adapter,
    StabilitySDXLAdapter,
    StabilitySearchAndReplaceAdapter,
    StabilityUltraAdapter,
)
from illustrate.services.exceptions import UnknownModelError
from illustrate.services.polling import Sleep
from illustrate.services.transport import Transport

ADAPTER_CLASSES: dict[ModelCode, type[ProviderAdapter]] = {
    ModelCode.OPENAI_DALLE3: OpenAIDalle3Adapter,
    ModelCode.OPENAI_GPT_IMAGE_1: OpenAIGptImageAdapter,
    ModelCode.OPENAI_GPT_IMAGE_1_EDIT: OpenAIGptImageEditAdapter,
    ModelCode.OPENAI_SORA_2: OpenAISoraAdapter,
    ModelCode.OPENAI_SORA_2_PRO: OpenAISoraAdapter,
    ModelCode.STABILITY_SDXL: StabilitySDXLAdapter,
    ModelCode.STABILITY_SD3: StabilitySD3Adapter,
    ModelCode.STABILITY_SD3_TURBO: StabilitySD3Adapter,
    ModelCode.STABILITY_SD35_LARGE: StabilitySD3Adapter,
    ModelCode.STABILITY_SD35_LARGE_TURBO: StabilitySD3Adapter,
    ModelCode.STABILITY_SD35_MEDIUM: StabilitySD3Adapter,
    ModelCode.STABILITY_SD35_FLASH: StabilitySD3Adapter,
    ModelCode.STABILITY_CORE: StabilityCoreAdapter,
    ModelCode.STABILITY_ULTRA: StabilityUltraAdapter,
    ModelCode.STABILITY_CONSERVATIVE_UPSCALE: StabilityConservativeUpscaleAdapter,
    ModelCode.STABILITY_CREATIVE_UPSCALE: StabilityCreativeUpscaleAdapter,
    ModelCode.STABILITY_ERASE: StabilityEraseAdapter,
    ModelCode.STABILITY_INPAINT: StabilityInpaintAdapter,
    ModelCode.STABILITY_OUTPAINT: StabilityOutpaintAdapter,
    ModelCode.STABILITY_SEARCH_AND_REPLACE: StabilitySearchAndReplaceAdapter,
    ModelCode.STABILITY_REMOVE_BACKGROUND: StabilityRemoveBackgroundAdapter,
    ModelCode.STABILITY_IMAGE_TO_VIDEO: StabilityImageToVideoAdapter,
    ModelCode.GOOGLE_IMAGEN_3: GoogleImagenAdapter,
    ModelCode.GOOGLE_IMAGEN_4_FAST: GoogleImagenAdapter,
    ModelCode.GOOGLE_IMAGEN_4_STANDARD: GoogleImagenAdapter,
    ModelCode.GOOGLE_IMAGEN_4_ULTRA: GoogleImagenAdapter,
    ModelCode.GOOGLE_GEMINI_FLASH_IMAGE: GoogleGeminiImageAdapter,
    ModelCode.GOOGLE_GEMINI_FLASH_IMAGE_EDIT: GoogleGeminiImageEditAdapter,
    ModelCode.GOOGLE_GEMINI_PRO_IMAGE: GoogleGeminiImageAdapter,
    ModelCode.GOOGLE_GEMINI_PRO_IMAGE_EDIT: GoogleGeminiImageEditAdapter,
    ModelCode.GOOGLE_VEO_2: GoogleVeoAdapter,
    ModelCode.GOOGLE_VEO_3: GoogleVeoAdapter,
    ModelCode.GOOGLE_VEO_3_FAST: GoogleVeoAdapter,
    ModelCode.GOOGLE_VEO_31: GoogleVeoAdapter,
    ModelCode.GOOGLE_VEO_31_FAST: GoogleVeoAdapter,
    ModelCode.REPLICATE_FLUX_SCHNELL: ReplicateFluxAdapter,
    ModelCode.REPLICATE_FLUX_DEV: ReplicateFluxAdapter,
    ModelCode.REPLICATE_FLUX_PRO: ReplicateFluxProAdapter,
    ModelCode.REPLICATE_SEEDREAM_3: ReplicateSeedreamAdapter,
    ModelCode.REPLICATE_SEEDREAM_4: ReplicateSeedreamAdapter,
    ModelCode.REPLICATE_SEEDREAM_4_5: ReplicateSeedreamAdapter,
    ModelCode.REPLICATE_DREAMINA_3_1: ReplicateDreaminaAdapter,
    ModelCode.REPLICATE_SEEDANCE_1_PRO: ReplicateSeedanceAdapter,
    ModelCode.REPLICATE_SEEDANCE_1_PRO_EDIT: ReplicateSeedanceImageAdapter,
    ModelCode.REPLICATE_SEEDANCE_1_PRO_FAST: ReplicateSeedanceAdapter,
    ModelCode.REPLICATE_SEEDANCE_1_PRO_FAST_EDIT: ReplicateSeedanceImageAdapter,
    ModelCode.REPLICATE_SEEDANCE_1_LITE: ReplicateSeedanceAdapter,
    ModelCode.REPLICATE_SEEDANCE_1_LITE_EDIT: ReplicateSeedanceImageAdapter,
    ModelCode.FAL_FLUX_SCHNELL: FalFluxAdapter,
    ModelCode.FAL_FLUX_DEV: FalFluxAdapter,
    ModelCode.FAL_FLUX_PRO: FalFluxAdapter,
    ModelCode.HUGGING_FACE_FLUX_SCHNELL: HuggingFaceAdapter,
    ModelCode.HUGGING_FACE_FLUX_DEV: HuggingFaceAdapter,
}


class AdapterRegistry:
    """Adapter instances keyed by model code."""

    def __init__(self) -> None:
        self._adapters: dict[ModelCode, ProviderAdapter] = {}

    def register(self, adapter: ProviderAdapter) -> None:
        self._adapters[adapter.model.code] = adapter

    def get(self, model_code: ModelCode) -> ProviderAdapter:
        """Return the adapter serving ``model_code``.

        Raises:
            UnknownModelError: If no adapter is registered for the model
        """
        adapter = self._adapters.get(model_code)
        if adapter is None:
            raise UnknownModelError(f"No adapter registered for {model_code}")
        return adapter

    def __contains__(self, model_code: object) -> bool:
        return model_code in self._adapters

    def __iter__(self) -> Iterator[ProviderAdapter]:
        return iter(self._adapters.values())

    def __len__(self) -> int:
        return len(self._adapters)


def build_default_registry(
    transport: Transport,
    sleep: Sleep = asyncio.sleep,
) -> AdapterRegistry:
    """Construct one adapter per catalog model, all sharing ``transport``."""
    registry = AdapterRegistry()
    for code in CATALOG:
        adapter_class = ADAPTER_CLASSES[code]
        registry.register(adapter_class(get_model(code), transport, sleep=sleep))
    return registry
