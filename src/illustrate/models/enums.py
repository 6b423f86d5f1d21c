"""Enumerations shared by requests, responses and the model catalog."""

from enum import Enum


class ProviderCode(str, Enum):
    """Third-party generation providers."""

    OPENAI = "OPENAI"
    STABILITY_AI = "STABILITY_AI"
    GOOGLE_CLOUD = "GOOGLE_CLOUD"
    REPLICATE = "REPLICATE"
    FAL_AI = "FAL_AI"
    HUGGING_FACE = "HUGGING_FACE"


class ModelCode(str, Enum):
    """Every (provider, model) pairing known to the catalog."""

    OPENAI_DALLE3 = "OPENAI_DALLE3"
    OPENAI_GPT_IMAGE_1 = "OPENAI_GPT_IMAGE_1"
    OPENAI_GPT_IMAGE_1_EDIT = "OPENAI_GPT_IMAGE_1_EDIT"
    OPENAI_SORA_2 = "OPENAI_SORA_2"
    OPENAI_SORA_2_PRO = "OPENAI_SORA_2_PRO"

    STABILITY_SDXL = "STABILITY_SDXL"
    STABILITY_SD3 = "STABILITY_SD3"
    STABILITY_SD3_TURBO = "STABILITY_SD3_TURBO"
    STABILITY_SD35_LARGE = "STABILITY_SD35_LARGE"
    STABILITY_SD35_LARGE_TURBO = "STABILITY_SD35_LARGE_TURBO"
    STABILITY_SD35_MEDIUM = "STABILITY_SD35_MEDIUM"
    STABILITY_SD35_FLASH = "STABILITY_SD35_FLASH"
    STABILITY_CORE = "STABILITY_CORE"
    STABILITY_ULTRA = "STABILITY_ULTRA"
    STABILITY_CONSERVATIVE_UPSCALE = "STABILITY_CONSERVATIVE_UPSCALE"
    STABILITY_CREATIVE_UPSCALE = "STABILITY_CREATIVE_UPSCALE"
    STABILITY_ERASE = "STABILITY_ERASE"
    STABILITY_INPAINT = "STABILITY_INPAINT"
    STABILITY_OUTPAINT = "STABILITY_OUTPAINT"
    STABILITY_SEARCH_AND_REPLACE = "STABILITY_SEARCH_AND_REPLACE"
    STABILITY_REMOVE_BACKGROUND = "STABILITY_REMOVE_BACKGROUND"
    STABILITY_IMAGE_TO_VIDEO = "STABILITY_IMAGE_TO_VIDEO"

    GOOGLE_IMAGEN_3 = "GOOGLE_IMAGEN_3"
    GOOGLE_IMAGEN_4_FAST = "GOOGLE_IMAGEN_4_FAST"
    GOOGLE_IMAGEN_4_STANDARD = "GOOGLE_IMAGEN_4_STANDARD"
    GOOGLE_IMAGEN_4_ULTRA = "GOOGLE_IMAGEN_4_ULTRA"
    GOOGLE_GEMINI_FLASH_IMAGE = "GOOGLE_GEMINI_FLASH_IMAGE"
    GOOGLE_GEMINI_FLASH_IMAGE_EDIT = "GOOGLE_GEMINI_FLASH_IMAGE_EDIT"
    GOOGLE_GEMINI_PRO_IMAGE = "GOOGLE_GEMINI_PRO_IMAGE"
    GOOGLE_GEMINI_PRO_IMAGE_EDIT = "GOOGLE_GEMINI_PRO_IMAGE_EDIT"
    GOOGLE_VEO_2 = "GOOGLE_VEO_2"
    GOOGLE_VEO_3 = "GOOGLE_VEO_3"
    GOOGLE_VEO_3_FAST = "GOOGLE_VEO_3_FAST"
    GOOGLE_VEO_31 = "GOOGLE_VEO_31"
    GOOGLE_VEO_31_FAST = "GOOGLE_VEO_31_FAST"

    REPLICATE_FLUX_SCHNELL = "REPLICATE_FLUX_SCHNELL"
    REPLICATE_FLUX_DEV = "REPLICATE_FLUX_DEV"
    REPLICATE_FLUX_PRO = "REPLICATE_FLUX_PRO"
    REPLICATE_SEEDREAM_3 = "REPLICATE_SEEDREAM_3"
    REPLICATE_SEEDREAM_4 = "REPLICATE_SEEDREAM_4"
    REPLICATE_SEEDREAM_4_5 = "REPLICATE_SEEDREAM_4_5"
    REPLICATE_DREAMINA_3_1 = "REPLICATE_DREAMINA_3_1"
    REPLICATE_SEEDANCE_1_PRO = "REPLICATE_SEEDANCE_1_PRO"
    REPLICATE_SEEDANCE_1_PRO_EDIT = "REPLICATE_SEEDANCE_1_PRO_EDIT"
    REPLICATE_SEEDANCE_1_PRO_FAST = "REPLICATE_SEEDANCE_1_PRO_FAST"
    REPLICATE_SEEDANCE_1_PRO_FAST_EDIT = "REPLICATE_SEEDANCE_1_PRO_FAST_EDIT"
    REPLICATE_SEEDANCE_1_LITE = "REPLICATE_SEEDANCE_1_LITE"
    REPLICATE_SEEDANCE_1_LITE_EDIT = "REPLICATE_SEEDANCE_1_LITE_EDIT"

    FAL_FLUX_SCHNELL = "FAL_FLUX_SCHNELL"
    FAL_FLUX_DEV = "FAL_FLUX_DEV"
    FAL_FLUX_PRO = "FAL_FLUX_PRO"

    HUGGING_FACE_FLUX_SCHNELL = "HUGGING_FACE_FLUX_SCHNELL"
    HUGGING_FACE_FLUX_DEV = "HUGGING_FACE_FLUX_DEV"


class SetType(str, Enum):
    """Kind of operation a model performs."""

    GENERATE = "GENERATE"
    EDIT_UPSCALE = "EDIT_UPSCALE"
    EDIT_EXPAND = "EDIT_EXPAND"
    EDIT_PROMPT = "EDIT_PROMPT"
    EDIT_MASK = "EDIT_MASK"
    EDIT_MASK_ERASE = "EDIT_MASK_ERASE"
    EDIT_REPLACE = "EDIT_REPLACE"
    REMOVE_BACKGROUND = "REMOVE_BACKGROUND"
    VIDEO_TEXT = "VIDEO_TEXT"
    VIDEO_IMAGE = "VIDEO_IMAGE"


class ArtVariant(str, Enum):
    NORMAL = "Normal"
    WATERCOLOR = "Watercolor"
    OIL_PAINTING = "Oil Painting"
    SKETCH = "Sketch"
    CARTOON = "Cartoon"
    PIXEL_ART = "Pixel Art"
    CHARCOAL = "Charcoal"
    ACRYLIC = "Acrylic"
    PASTEL = "Pastel"
    INK = "Ink"
    GRAFFITI = "Graffiti"
    ABSTRACT = "Abstract"
    DIGITAL_ART = "Digital Art"
    IMPRESSIONISM = "Impressionism"
    SURREALISM = "Surrealism"
    MINIMALISM = "Minimalism"
    PHOTOREALISM = "Photorealism"
    LINE_ART = "Line Art"
    SCULPTURE = "Sculpture"
    ANIME = "Anime"
    COMIC_BOOK = "Comic Book"
    FANTASY_ART = "Fantasy Art"
    ANALOG_FILM = "Analog Film"
    NEON_PUNK = "Neon Punk"
    ISOMETRIC = "Isometric"
    ORIGAMI = "Origami"
    MODEL_3D = "3D Model"
    CINEMATIC = "Cinematic"
    TILE_TEXTURE = "Tile Texture"


class ArtQuality(str, Enum):
    HD = "HD"
    STANDARD = "Standard"


class ArtStyle(str, Enum):
    NATURAL = "Natural"
    VIVID = "Vivid"


class GenerationStatus(str, Enum):
    """Terminal outcome of one adapter call."""

    GENERATED = "GENERATED"
    FAILED = "FAILED"


class ErrorCode(str, Enum):
    """Failure kinds carried by a FAILED generation response."""

    GENERATOR_ERROR = "GENERATOR_ERROR"
    MODEL_ERROR = "MODEL_ERROR"
    ADAPTER_ERROR = "ADAPTER_ERROR"
    TRANSFORM_RESPONSE_ERROR = "TRANSFORM_RESPONSE_ERROR"
    TIMEOUT_ERROR = "TIMEOUT_ERROR"

    @property
    def description(self) -> str:
        """Human-readable label for the error kind."""
        return _ERROR_DESCRIPTIONS[self]


_ERROR_DESCRIPTIONS = {
    ErrorCode.GENERATOR_ERROR: "Internal Generator Error",
    ErrorCode.MODEL_ERROR: "Connection Model Error",
    ErrorCode.ADAPTER_ERROR: "Internal Adapter Error",
    ErrorCode.TRANSFORM_RESPONSE_ERROR: "Internal Response Transform Error",
    ErrorCode.TIMEOUT_ERROR: "Generation Timed Out",
}
