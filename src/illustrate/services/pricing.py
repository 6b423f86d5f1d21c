"""Cost estimation per model.

Image models are priced per image, optionally varying by quality and by
requested dimensions. Video models are priced per second of output and
multiplied by the requested duration. Stability models are billed in
provider credits; everything else is billed in US dollars.

A handful of adapters historically charged a fixed literal instead of
consulting this table. Those literals are kept in ``LEGACY_FIXED_COSTS``
next to the table so the two sources can be compared (see
``pricing_divergences``) rather than silently reconciled.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from illustrate.models.catalog import CATALOG
from illustrate.models.enums import ArtQuality, ModelCode, ProviderCode
from illustrate.models.generation import GenerationRequest, ImageGenerationRequest

DEFAULT_VIDEO_DURATION_SECONDS = 8
DEFAULT_VIDEO_DIMENSIONS = "1280x720"


@dataclass(frozen=True)
class ModelPricing:
    """Static price entry for one model.

    ``dimension_rates`` entries are matched in order against the requested
    dimensions string by substring; the first match wins, ``per_unit`` is
    the fallback. ``hd_*`` fields apply when an image request asks for HD.
    """

    per_unit: float = 0.0
    dimension_rates: tuple[tuple[str, float], ...] = ()
    hd_per_unit: Optional[float] = None
    hd_dimension_rates: tuple[tuple[str, float], ...] = ()
    per_second: bool = False
    flat_per_video: bool = False

    def rate(self, quality: Optional[ArtQuality], dimensions: str) -> float:
        has_hd_rate = self.hd_per_unit is not None or bool(self.hd_dimension_rates)
        hd = quality == ArtQuality.HD and has_hd_rate
        rates = self.hd_dimension_rates if hd else self.dimension_rates
        for needle, value in rates:
            if needle in dimensions:
                return value
        if hd and self.hd_per_unit is not None:
            return self.hd_per_unit
        return self.per_unit


def _gemini(tokens: int) -> float:
    return tokens / 1_000_000 * 30


_WIDE_SORA = (("1792x1024", 0.50), ("1024x1792", 0.50))

PRICING_TABLE: dict[ModelCode, ModelPricing] = {
    # OpenAI
    ModelCode.OPENAI_DALLE3: ModelPricing(
        per_unit=0.08,
        dimension_rates=(("1024x1024", 0.04),),
        hd_per_unit=0.12,
        hd_dimension_rates=(("1024x1024", 0.08),),
    ),
    ModelCode.OPENAI_GPT_IMAGE_1: ModelPricing(per_unit=0.04, hd_per_unit=0.17),
    ModelCode.OPENAI_GPT_IMAGE_1_EDIT: ModelPricing(per_unit=0.04, hd_per_unit=0.17),
    ModelCode.OPENAI_SORA_2: ModelPricing(per_unit=0.10, per_second=True),
    ModelCode.OPENAI_SORA_2_PRO: ModelPricing(
        per_unit=0.30, dimension_rates=_WIDE_SORA, per_second=True
    ),
    # Stability AI (credits)
    ModelCode.STABILITY_ULTRA: ModelPricing(per_unit=8),
    ModelCode.STABILITY_CORE: ModelPricing(per_unit=3),
    ModelCode.STABILITY_SDXL: ModelPricing(per_unit=0.2),
    ModelCode.STABILITY_SD3: ModelPricing(per_unit=6.5),
    ModelCode.STABILITY_SD3_TURBO: ModelPricing(per_unit=4),
    ModelCode.STABILITY_SD35_LARGE: ModelPricing(per_unit=6.5),
    ModelCode.STABILITY_SD35_LARGE_TURBO: ModelPricing(per_unit=4),
    ModelCode.STABILITY_SD35_MEDIUM: ModelPricing(per_unit=3.5),
    ModelCode.STABILITY_SD35_FLASH: ModelPricing(per_unit=2.5),
    ModelCode.STABILITY_CREATIVE_UPSCALE: ModelPricing(per_unit=25),
    ModelCode.STABILITY_CONSERVATIVE_UPSCALE: ModelPricing(per_unit=25),
    ModelCode.STABILITY_ERASE: ModelPricing(per_unit=3),
    ModelCode.STABILITY_INPAINT: ModelPricing(per_unit=3),
    ModelCode.STABILITY_OUTPAINT: ModelPricing(per_unit=4),
    ModelCode.STABILITY_SEARCH_AND_REPLACE: ModelPricing(per_unit=4),
    ModelCode.STABILITY_REMOVE_BACKGROUND: ModelPricing(per_unit=2),
    ModelCode.STABILITY_IMAGE_TO_VIDEO: ModelPricing(per_unit=20, flat_per_video=True),
    # Google
    ModelCode.GOOGLE_GEMINI_FLASH_IMAGE: ModelPricing(per_unit=_gemini(1290)),
    ModelCode.GOOGLE_GEMINI_FLASH_IMAGE_EDIT: ModelPricing(per_unit=_gemini(1290)),
    ModelCode.GOOGLE_GEMINI_PRO_IMAGE: ModelPricing(
        per_unit=_gemini(1210), hd_per_unit=_gemini(2000)
    ),
    ModelCode.GOOGLE_GEMINI_PRO_IMAGE_EDIT: ModelPricing(
        per_unit=_gemini(1210), hd_per_unit=_gemini(2000)
    ),
    ModelCode.GOOGLE_IMAGEN_3: ModelPricing(per_unit=0.03),
    ModelCode.GOOGLE_IMAGEN_4_FAST: ModelPricing(per_unit=0.02),
    ModelCode.GOOGLE_IMAGEN_4_STANDARD: ModelPricing(per_unit=0.04, hd_per_unit=0.08),
    ModelCode.GOOGLE_IMAGEN_4_ULTRA: ModelPricing(per_unit=0.06, hd_per_unit=0.12),
    ModelCode.GOOGLE_VEO_31: ModelPricing(per_unit=0.40, per_second=True),
    ModelCode.GOOGLE_VEO_3: ModelPricing(per_unit=0.40, per_second=True),
    ModelCode.GOOGLE_VEO_31_FAST: ModelPricing(per_unit=0.15, per_second=True),
    ModelCode.GOOGLE_VEO_3_FAST: ModelPricing(per_unit=0.15, per_second=True),
    ModelCode.GOOGLE_VEO_2: ModelPricing(per_unit=0.35, per_second=True),
    # Replicate
    ModelCode.REPLICATE_FLUX_SCHNELL: ModelPricing(per_unit=0.003),
    ModelCode.REPLICATE_FLUX_DEV: ModelPricing(per_unit=0.03),
    ModelCode.REPLICATE_FLUX_PRO: ModelPricing(per_unit=0.055),
    ModelCode.REPLICATE_SEEDREAM_3: ModelPricing(per_unit=0.03),
    ModelCode.REPLICATE_SEEDREAM_4: ModelPricing(per_unit=0.03),
    ModelCode.REPLICATE_SEEDREAM_4_5: ModelPricing(per_unit=0.03),
    ModelCode.REPLICATE_DREAMINA_3_1: ModelPricing(per_unit=0.03),
    ModelCode.REPLICATE_SEEDANCE_1_PRO: ModelPricing(
        per_unit=0.03, dimension_rates=(("1080", 0.15), ("720", 0.06)), per_second=True
    ),
    ModelCode.REPLICATE_SEEDANCE_1_PRO_EDIT: ModelPricing(
        per_unit=0.03, dimension_rates=(("1080", 0.15), ("720", 0.06)), per_second=True
    ),
    ModelCode.REPLICATE_SEEDANCE_1_PRO_FAST: ModelPricing(
        per_unit=0.015, dimension_rates=(("1080", 0.06), ("720", 0.025)), per_second=True
    ),
    ModelCode.REPLICATE_SEEDANCE_1_PRO_FAST_EDIT: ModelPricing(
        per_unit=0.015, dimension_rates=(("1080", 0.06), ("720", 0.025)), per_second=True
    ),
    ModelCode.REPLICATE_SEEDANCE_1_LITE: ModelPricing(
        per_unit=0.018, dimension_rates=(("1080", 0.072), ("720", 0.036)), per_second=True
    ),
    ModelCode.REPLICATE_SEEDANCE_1_LITE_EDIT: ModelPricing(
        per_unit=0.018, dimension_rates=(("1080", 0.072), ("720", 0.036)), per_second=True
    ),
    # FAL
    ModelCode.FAL_FLUX_SCHNELL: ModelPricing(per_unit=0.003),
    ModelCode.FAL_FLUX_DEV: ModelPricing(per_unit=0.025),
    ModelCode.FAL_FLUX_PRO: ModelPricing(per_unit=0.05),
    # Hugging Face serverless inference is free
    ModelCode.HUGGING_FACE_FLUX_SCHNELL: ModelPricing(per_unit=0.0),
    ModelCode.HUGGING_FACE_FLUX_DEV: ModelPricing(per_unit=0.0),
}

# Fixed per-call charges some adapters apply instead of the table
LEGACY_FIXED_COSTS: dict[ModelCode, float] = {
    ModelCode.STABILITY_SDXL: 0.2,
    ModelCode.STABILITY_ULTRA: 8.0,
    ModelCode.STABILITY_CREATIVE_UPSCALE: 25.0,
    ModelCode.STABILITY_CONSERVATIVE_UPSCALE: 25.0,
    ModelCode.STABILITY_OUTPAINT: 4.0,
    ModelCode.STABILITY_INPAINT: 3.0,
    ModelCode.STABILITY_ERASE: 3.0,
    ModelCode.STABILITY_SEARCH_AND_REPLACE: 4.0,
    ModelCode.STABILITY_IMAGE_TO_VIDEO: 20.0,
    ModelCode.REPLICATE_FLUX_SCHNELL: 0.0028,
    ModelCode.REPLICATE_FLUX_DEV: 0.03,
    ModelCode.REPLICATE_FLUX_PRO: 0.055,
    ModelCode.HUGGING_FACE_FLUX_SCHNELL: 0.0,
    ModelCode.HUGGING_FACE_FLUX_DEV: 0.0,
}

_QUANTUM = Decimal("0.000001")


def _round(value: Decimal) -> float:
    return float(value.quantize(_QUANTUM, rounding=ROUND_HALF_UP))


def estimate_image_cost(
    model_code: ModelCode,
    number_of_images: int = 1,
    quality: Optional[ArtQuality] = None,
    dimensions: str = "1024x1024",
) -> float:
    """Estimate the cost of an image job.

    Args:
        model_code: Target model
        number_of_images: Images requested
        quality: Requested quality (HD selects the HD rate where one exists)
        dimensions: Requested ``WxH`` string

    Returns:
        Estimated cost in the model's billing unit; 0.0 for unknown models
    """
    pricing = PRICING_TABLE.get(model_code)
    if pricing is None:
        return 0.0
    rate = Decimal(str(pricing.rate(quality, dimensions)))
    return _round(rate * number_of_images)


def estimate_video_cost(
    model_code: ModelCode,
    duration_seconds: Optional[int] = None,
    number_of_videos: int = 1,
    dimensions: Optional[str] = None,
) -> float:
    """Estimate the cost of a video job.

    Per-second models multiply their rate by the duration (default 8s).
    Flat-priced video models ignore the duration.

    Returns:
        Estimated cost; 0.0 for unknown models or models without a video price
    """
    pricing = PRICING_TABLE.get(model_code)
    if pricing is None:
        return 0.0
    rate = Decimal(str(pricing.rate(None, dimensions or DEFAULT_VIDEO_DIMENSIONS)))
    if pricing.flat_per_video:
        return _round(rate * number_of_videos)
    if not pricing.per_second:
        return 0.0
    duration = duration_seconds or DEFAULT_VIDEO_DURATION_SECONDS
    return _round(rate * duration * number_of_videos)


def estimate_cost(request: GenerationRequest, quantity: Optional[int] = None) -> float:
    """Estimate the cost of a request, dispatching on its type."""
    count = quantity if quantity is not None else request.count
    if request.is_video:
        return estimate_video_cost(
            request.model_code,
            duration_seconds=getattr(request, "duration_seconds", None),
            number_of_videos=count,
            dimensions=request.art_dimensions,
        )
    quality = request.art_quality if isinstance(request, ImageGenerationRequest) else None
    return estimate_image_cost(
        request.model_code,
        number_of_images=count,
        quality=quality,
        dimensions=request.art_dimensions,
    )


def legacy_cost(model_code: ModelCode) -> Optional[float]:
    return LEGACY_FIXED_COSTS.get(model_code)


def pricing_divergences() -> dict[ModelCode, tuple[float, float]]:
    """Models whose legacy fixed charge differs from the table's single-unit price.

    Returns:
        Mapping of model code to ``(table_price, legacy_price)``
    """
    divergent = {}
    for code, legacy in LEGACY_FIXED_COSTS.items():
        pricing = PRICING_TABLE[code]
        if pricing.per_second:
            continue
        if pricing.flat_per_video:
            table = estimate_video_cost(code)
        else:
            table = estimate_image_cost(code)
        if abs(table - legacy) > 1e-9:
            divergent[code] = (table, legacy)
    return divergent


def is_credit_model(model_code: ModelCode) -> bool:
    """Stability models bill in provider credits rather than dollars."""
    model = CATALOG.get(model_code)
    return model is not None and model.provider == ProviderCode.STABILITY_AI


def format_cost(cost: float, is_credit: bool = False) -> str:
    """Render a cost for display.

    Examples:
        0 -> "Free", 8 credits -> "8 credits", 6.5 credits -> "6.5 credits",
        0.003 -> "$0.0030", 0.04 -> "$0.04"
    """
    if cost == 0:
        return "Free"
    if is_credit:
        if cost == int(cost):
            return f"{cost:.0f} credits"
        return f"{cost:.1f} credits"
    if cost < 0.01:
        return f"${cost:.4f}"
    return f"${cost:.2f}"
