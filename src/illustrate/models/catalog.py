"""Static catalog of supported models keyed by model code.

Each entry fixes the wire contract an adapter targets: which provider owns
the model, the submission endpoint, the optional status endpoint for
asynchronous providers, and the request limits the model accepts.
"""

from dataclasses import dataclass
from typing import Optional

from illustrate.models.enums import ModelCode, ProviderCode, SetType

STABILITY_V2 = "https://api.stability.ai/v2beta"
REPLICATE_MODELS = "https://api.replicate.com/v1/models"
REPLICATE_PREDICTIONS = "https://api.replicate.com/v1/predictions"
GOOGLE_V1BETA = "https://generativelanguage.googleapis.com/v1beta"

SD3_DIMENSIONS = ("1024x1024", "576x1024", "1024x576", "768x1024", "1024x768")
ULTRA_DIMENSIONS = (
    "1024x1024",
    "576x1024",
    "1024x576",
    "1344x576",
    "576x1344",
    "1536x1024",
    "1024x1536",
    "1280x1024",
    "1024x1280",
)
SDXL_DIMENSIONS = (
    "1024x1024",
    "1152x896",
    "896x1152",
    "1216x832",
    "1344x768",
    "768x1344",
    "1536x640",
    "640x1536",
)
FLUX_DIMENSIONS = (
    "1024x1024",
    "1920x1080",
    "2560x1080",
    "1024x1536",
    "1620x1080",
    "1280x1024",
    "1080x1920",
    "1080x2520",
)
FAL_DIMENSIONS = ("1024x1024", "1920x1080", "1440x1080", "1080x1920", "1080x1440")
GOOGLE_IMAGE_DIMENSIONS = ("1024x1024", "768x1024", "1024x768", "576x1024", "1024x576")
VIDEO_DIMENSIONS = ("1280x720", "720x1280", "1920x1080", "1080x1920")


@dataclass(frozen=True)
class CatalogModel:
    """Wire contract and limits of one model."""

    code: ModelCode
    provider: ProviderCode
    name: str
    set_type: SetType
    generate_url: str
    status_url: Optional[str] = None
    max_prompt_length: int = 1024
    dimensions: tuple[str, ...] = ("1024x1024",)
    negative_prompt: bool = False

    @property
    def is_video(self) -> bool:
        return self.set_type in (SetType.VIDEO_TEXT, SetType.VIDEO_IMAGE)

    @property
    def is_async(self) -> bool:
        return self.status_url is not None


def _stability(code, name, set_type, path, dimensions=("1024x1024",), status=False):
    url = f"{STABILITY_V2}/{path}"
    return CatalogModel(
        code=code,
        provider=ProviderCode.STABILITY_AI,
        name=name,
        set_type=set_type,
        generate_url=url,
        status_url=url if status else None,
        max_prompt_length=10000,
        dimensions=dimensions,
        negative_prompt=True,
    )


def _replicate(code, name, set_type, slug, dimensions=FLUX_DIMENSIONS, max_prompt_length=2000):
    return CatalogModel(
        code=code,
        provider=ProviderCode.REPLICATE,
        name=name,
        set_type=set_type,
        generate_url=f"{REPLICATE_MODELS}/{slug}/predictions",
        status_url=REPLICATE_PREDICTIONS,
        max_prompt_length=max_prompt_length,
        dimensions=dimensions,
    )


def _google(code, name, set_type, model, method, dimensions, status=False):
    return CatalogModel(
        code=code,
        provider=ProviderCode.GOOGLE_CLOUD,
        name=name,
        set_type=set_type,
        generate_url=f"{GOOGLE_V1BETA}/models/{model}:{method}",
        status_url=GOOGLE_V1BETA if status else None,
        max_prompt_length=4000,
        dimensions=dimensions,
        negative_prompt=status,
    )


_CATALOG: tuple[CatalogModel, ...] = (
    # OpenAI
    CatalogModel(
        code=ModelCode.OPENAI_DALLE3,
        provider=ProviderCode.OPENAI,
        name="DALL·E 3",
        set_type=SetType.GENERATE,
        generate_url="https://api.openai.com/v1/images/generations",
        max_prompt_length=4000,
        dimensions=("1024x1024", "1792x1024", "1024x1792"),
    ),
    CatalogModel(
        code=ModelCode.OPENAI_GPT_IMAGE_1,
        provider=ProviderCode.OPENAI,
        name="GPT Image 1",
        set_type=SetType.GENERATE,
        generate_url="https://api.openai.com/v1/images/generations",
        max_prompt_length=32000,
        dimensions=("1024x1024", "1536x1024", "1024x1536"),
    ),
    CatalogModel(
        code=ModelCode.OPENAI_GPT_IMAGE_1_EDIT,
        provider=ProviderCode.OPENAI,
        name="GPT Image 1 Edit",
        set_type=SetType.EDIT_PROMPT,
        generate_url="https://api.openai.com/v1/images/edits",
        max_prompt_length=32000,
        dimensions=("1024x1024", "1536x1024", "1024x1536"),
    ),
    CatalogModel(
        code=ModelCode.OPENAI_SORA_2,
        provider=ProviderCode.OPENAI,
        name="Sora 2",
        set_type=SetType.VIDEO_TEXT,
        generate_url="https://api.openai.com/v1/videos",
        status_url="https://api.openai.com/v1/videos",
        max_prompt_length=4000,
        dimensions=("1280x720", "720x1280"),
    ),
    CatalogModel(
        code=ModelCode.OPENAI_SORA_2_PRO,
        provider=ProviderCode.OPENAI,
        name="Sora 2 Pro",
        set_type=SetType.VIDEO_TEXT,
        generate_url="https://api.openai.com/v1/videos",
        status_url="https://api.openai.com/v1/videos",
        max_prompt_length=4000,
        dimensions=("1280x720", "720x1280", "1792x1024", "1024x1792"),
    ),
    # Stability AI
    CatalogModel(
        code=ModelCode.STABILITY_SDXL,
        provider=ProviderCode.STABILITY_AI,
        name="Stable Diffusion XL",
        set_type=SetType.GENERATE,
        generate_url=(
            "https://api.stability.ai/v1/generation/stable-diffusion-xl-1024-v1-0/text-to-image"
        ),
        max_prompt_length=2000,
        dimensions=SDXL_DIMENSIONS,
    ),
    _stability(ModelCode.STABILITY_SD3, "Stable Diffusion 3", SetType.GENERATE,
               "stable-image/generate/sd3", SD3_DIMENSIONS),
    _stability(ModelCode.STABILITY_SD3_TURBO, "Stable Diffusion 3 Turbo", SetType.GENERATE,
               "stable-image/generate/sd3", SD3_DIMENSIONS),
    _stability(ModelCode.STABILITY_SD35_LARGE, "Stable Diffusion 3.5 Large", SetType.GENERATE,
               "stable-image/generate/sd3", SD3_DIMENSIONS),
    _stability(ModelCode.STABILITY_SD35_LARGE_TURBO, "Stable Diffusion 3.5 Large Turbo",
               SetType.GENERATE, "stable-image/generate/sd3", SD3_DIMENSIONS),
    _stability(ModelCode.STABILITY_SD35_MEDIUM, "Stable Diffusion 3.5 Medium", SetType.GENERATE,
               "stable-image/generate/sd3", SD3_DIMENSIONS),
    _stability(ModelCode.STABILITY_SD35_FLASH, "Stable Diffusion 3.5 Flash", SetType.GENERATE,
               "stable-image/generate/sd3", SD3_DIMENSIONS),
    _stability(ModelCode.STABILITY_CORE, "Stable Core", SetType.GENERATE,
               "stable-image/generate/core", ULTRA_DIMENSIONS),
    _stability(ModelCode.STABILITY_ULTRA, "Stable Ultra", SetType.GENERATE,
               "stable-image/generate/ultra", ULTRA_DIMENSIONS),
    _stability(ModelCode.STABILITY_CONSERVATIVE_UPSCALE, "Conservative Upscale",
               SetType.EDIT_UPSCALE, "stable-image/upscale/conservative"),
    _stability(ModelCode.STABILITY_CREATIVE_UPSCALE, "Creative Upscale", SetType.EDIT_UPSCALE,
               "stable-image/upscale/creative", status=True),
    _stability(ModelCode.STABILITY_ERASE, "Erase", SetType.EDIT_MASK_ERASE,
               "stable-image/edit/erase"),
    _stability(ModelCode.STABILITY_INPAINT, "Inpaint", SetType.EDIT_MASK,
               "stable-image/edit/inpaint"),
    _stability(ModelCode.STABILITY_OUTPAINT, "Outpaint", SetType.EDIT_EXPAND,
               "stable-image/edit/outpaint"),
    _stability(ModelCode.STABILITY_SEARCH_AND_REPLACE, "Search and Replace",
               SetType.EDIT_REPLACE, "stable-image/edit/search-and-replace"),
    _stability(ModelCode.STABILITY_REMOVE_BACKGROUND, "Remove Background",
               SetType.REMOVE_BACKGROUND, "stable-image/edit/remove-background"),
    _stability(ModelCode.STABILITY_IMAGE_TO_VIDEO, "Stable Video Diffusion", SetType.VIDEO_IMAGE,
               "image-to-video", ("1024x576", "576x1024", "768x768"), status=True),
    # Google
    _google(ModelCode.GOOGLE_IMAGEN_3, "Imagen 3", SetType.GENERATE,
            "imagen-3.0-generate-002", "predict", GOOGLE_IMAGE_DIMENSIONS),
    _google(ModelCode.GOOGLE_IMAGEN_4_FAST, "Imagen 4 Fast", SetType.GENERATE,
            "imagen-4.0-fast-generate-001", "predict", GOOGLE_IMAGE_DIMENSIONS),
    _google(ModelCode.GOOGLE_IMAGEN_4_STANDARD, "Imagen 4", SetType.GENERATE,
            "imagen-4.0-generate-001", "predict", GOOGLE_IMAGE_DIMENSIONS),
    _google(ModelCode.GOOGLE_IMAGEN_4_ULTRA, "Imagen 4 Ultra", SetType.GENERATE,
            "imagen-4.0-ultra-generate-001", "predict", GOOGLE_IMAGE_DIMENSIONS),
    _google(ModelCode.GOOGLE_GEMINI_FLASH_IMAGE, "Gemini 2.5 Flash Image", SetType.GENERATE,
            "gemini-2.5-flash-image", "generateContent", ("1:1", "3:4", "4:3", "9:16", "16:9")),
    _google(ModelCode.GOOGLE_GEMINI_FLASH_IMAGE_EDIT, "Gemini 2.5 Flash Image Edit",
            SetType.EDIT_PROMPT, "gemini-2.5-flash-image", "generateContent",
            ("1:1", "3:4", "4:3", "9:16", "16:9")),
    _google(ModelCode.GOOGLE_GEMINI_PRO_IMAGE, "Gemini 3 Pro Image", SetType.GENERATE,
            "gemini-3-pro-image-preview", "generateContent",
            ("1:1", "3:4", "4:3", "9:16", "16:9", "21:9")),
    _google(ModelCode.GOOGLE_GEMINI_PRO_IMAGE_EDIT, "Gemini 3 Pro Image Edit",
            SetType.EDIT_PROMPT, "gemini-3-pro-image-preview", "generateContent",
            ("1:1", "3:4", "4:3", "9:16", "16:9", "21:9")),
    _google(ModelCode.GOOGLE_VEO_31, "Veo 3.1", SetType.VIDEO_TEXT,
            "veo-3.1-generate-preview", "predictLongRunning", VIDEO_DIMENSIONS, status=True),
    _google(ModelCode.GOOGLE_VEO_31_FAST, "Veo 3.1 Fast", SetType.VIDEO_TEXT,
            "veo-3.1-fast-generate-preview", "predictLongRunning", VIDEO_DIMENSIONS, status=True),
    _google(ModelCode.GOOGLE_VEO_3, "Veo 3", SetType.VIDEO_TEXT,
            "veo-3.0-generate-001", "predictLongRunning", VIDEO_DIMENSIONS, status=True),
    _google(ModelCode.GOOGLE_VEO_3_FAST, "Veo 3 Fast", SetType.VIDEO_TEXT,
            "veo-3.0-fast-generate-001", "predictLongRunning", VIDEO_DIMENSIONS, status=True),
    _google(ModelCode.GOOGLE_VEO_2, "Veo 2", SetType.VIDEO_TEXT,
            "veo-2.0-generate-001", "predictLongRunning", ("1280x720", "720x1280"), status=True),
    # Replicate
    _replicate(ModelCode.REPLICATE_FLUX_SCHNELL, "FLUX.1 [schnell]", SetType.GENERATE,
               "black-forest-labs/flux-schnell", max_prompt_length=256),
    _replicate(ModelCode.REPLICATE_FLUX_DEV, "FLUX.1 [dev]", SetType.GENERATE,
               "black-forest-labs/flux-dev", max_prompt_length=256),
    _replicate(ModelCode.REPLICATE_FLUX_PRO, "FLUX.1 [pro]", SetType.GENERATE,
               "black-forest-labs/flux-pro", max_prompt_length=256),
    _replicate(ModelCode.REPLICATE_SEEDREAM_3, "Seedream 3", SetType.GENERATE,
               "bytedance/seedream-3"),
    _replicate(ModelCode.REPLICATE_SEEDREAM_4, "Seedream 4", SetType.GENERATE,
               "bytedance/seedream-4"),
    _replicate(ModelCode.REPLICATE_SEEDREAM_4_5, "Seedream 4.5", SetType.GENERATE,
               "bytedance/seedream-4.5"),
    _replicate(ModelCode.REPLICATE_DREAMINA_3_1, "Dreamina 3.1", SetType.GENERATE,
               "bytedance/dreamina-3.1"),
    _replicate(ModelCode.REPLICATE_SEEDANCE_1_PRO, "Seedance 1 Pro", SetType.VIDEO_TEXT,
               "bytedance/seedance-1-pro", VIDEO_DIMENSIONS),
    _replicate(ModelCode.REPLICATE_SEEDANCE_1_PRO_EDIT, "Seedance 1 Pro Image to Video",
               SetType.VIDEO_IMAGE, "bytedance/seedance-1-pro", VIDEO_DIMENSIONS),
    _replicate(ModelCode.REPLICATE_SEEDANCE_1_PRO_FAST, "Seedance 1 Pro Fast",
               SetType.VIDEO_TEXT, "bytedance/seedance-1-pro-fast", VIDEO_DIMENSIONS),
    _replicate(ModelCode.REPLICATE_SEEDANCE_1_PRO_FAST_EDIT, "Seedance 1 Pro Fast Image to Video",
               SetType.VIDEO_IMAGE, "bytedance/seedance-1-pro-fast", VIDEO_DIMENSIONS),
    _replicate(ModelCode.REPLICATE_SEEDANCE_1_LITE, "Seedance 1 Lite", SetType.VIDEO_TEXT,
               "bytedance/seedance-1-lite", VIDEO_DIMENSIONS),
    _replicate(ModelCode.REPLICATE_SEEDANCE_1_LITE_EDIT, "Seedance 1 Lite Image to Video",
               SetType.VIDEO_IMAGE, "bytedance/seedance-1-lite", VIDEO_DIMENSIONS),
    # FAL
    CatalogModel(
        code=ModelCode.FAL_FLUX_SCHNELL,
        provider=ProviderCode.FAL_AI,
        name="FLUX.1 [schnell]",
        set_type=SetType.GENERATE,
        generate_url="https://fal.run/fal-ai/flux/schnell",
        max_prompt_length=256,
        dimensions=FAL_DIMENSIONS,
    ),
    CatalogModel(
        code=ModelCode.FAL_FLUX_DEV,
        provider=ProviderCode.FAL_AI,
        name="FLUX.1 [dev]",
        set_type=SetType.GENERATE,
        generate_url="https://fal.run/fal-ai/flux/dev",
        max_prompt_length=256,
        dimensions=FAL_DIMENSIONS,
    ),
    CatalogModel(
        code=ModelCode.FAL_FLUX_PRO,
        provider=ProviderCode.FAL_AI,
        name="FLUX.1 [pro]",
        set_type=SetType.GENERATE,
        generate_url="https://fal.run/fal-ai/flux-pro",
        max_prompt_length=256,
        dimensions=FAL_DIMENSIONS,
    ),
    # Hugging Face
    CatalogModel(
        code=ModelCode.HUGGING_FACE_FLUX_SCHNELL,
        provider=ProviderCode.HUGGING_FACE,
        name="FLUX.1 [schnell]",
        set_type=SetType.GENERATE,
        generate_url=(
            "https://api-inference.huggingface.co/models/black-forest-labs/FLUX.1-schnell"
        ),
        max_prompt_length=256,
    ),
    CatalogModel(
        code=ModelCode.HUGGING_FACE_FLUX_DEV,
        provider=ProviderCode.HUGGING_FACE,
        name="FLUX.1 [dev]",
        set_type=SetType.GENERATE,
        generate_url="https://api-inference.huggingface.co/models/black-forest-labs/FLUX.1-dev",
        max_prompt_length=256,
    ),
)

CATALOG: dict[ModelCode, CatalogModel] = {model.code: model for model in _CATALOG}


def get_model(code: ModelCode) -> CatalogModel:
    """Look up the catalog entry for a model code.

    Raises:
        ValueError: If the model is not in the catalog
    """
    try:
        return CATALOG[ModelCode(code)]
    except (KeyError, ValueError) as e:
        raise ValueError(f"Unknown model: {code}") from e


def models_for_provider(provider: ProviderCode) -> list[CatalogModel]:
    return [model for model in _CATALOG if model.provider == provider]
