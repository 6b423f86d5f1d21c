"""Field mapping and payload helpers shared by provider adapters."""

import base64
import binascii
import math
import re
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Union

from illustrate.models.enums import ArtVariant
from illustrate.models.generation import GenerationRequest, ImageGenerationRequest
from illustrate.services.exceptions import AdapterPreconditionError, TransformResponseError
from illustrate.services.transport import ArrayPayload, BinaryPayload, ObjectPayload, Payload

DATA_URI_PREFIX = re.compile(r"^data:.*;base64,")

STYLE_PRESETS = {
    ArtVariant.PIXEL_ART: "pixel-art",
    ArtVariant.ANIME: "anime",
    ArtVariant.COMIC_BOOK: "comic-book",
    ArtVariant.FANTASY_ART: "fantasy-art",
    ArtVariant.LINE_ART: "line-art",
    ArtVariant.ABSTRACT: "line-art",
    ArtVariant.INK: "line-art",
    ArtVariant.DIGITAL_ART: "digital-art",
    ArtVariant.ANALOG_FILM: "analog-film",
    ArtVariant.NEON_PUNK: "neon-punk",
    ArtVariant.ISOMETRIC: "isometric",
    ArtVariant.ORIGAMI: "origami",
    ArtVariant.MODEL_3D: "3d-model",
    ArtVariant.CINEMATIC: "cinematic",
    ArtVariant.TILE_TEXTURE: "tile-texture",
}

PathKey = Union[str, int]
Path = tuple[PathKey, ...]


def strip_data_uri(value: str) -> str:
    """Remove a ``data:<mime>;base64,`` prefix if present."""
    return DATA_URI_PREFIX.sub("", value)


def decode_base64(value: str, what: str = "payload") -> bytes:
    """Decode base64 after stripping any data-URI prefix.

    Raises:
        TransformResponseError: If the value is not valid base64
    """
    try:
        return base64.b64decode(strip_data_uri(value), validate=True)
    except (binascii.Error, ValueError) as e:
        raise TransformResponseError(f"Could not decode base64 {what}") from e


def encode_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def require_asset(value: Optional[str], message: str) -> bytes:
    """Decode a required input asset or fail with ADAPTER_ERROR.

    Raises:
        AdapterPreconditionError: If the asset is missing or not valid base64
    """
    if not value:
        raise AdapterPreconditionError(message)
    try:
        return base64.b64decode(strip_data_uri(value), validate=True)
    except (binascii.Error, ValueError) as e:
        raise AdapterPreconditionError(f"{message} (invalid image data)") from e


def parse_dimensions(dimensions: str) -> Optional[tuple[int, int]]:
    """Parse ``"WxH"`` into integers; None when the string is malformed."""
    parts = dimensions.lower().split("x")
    if len(parts) != 2:
        return None
    try:
        width, height = int(parts[0]), int(parts[1])
    except ValueError:
        return None
    if width <= 0 or height <= 0:
        return None
    return width, height


def reduced_aspect_ratio(dimensions: str) -> str:
    """Reduce ``WxH`` to its lowest-terms ratio label, ``"0:0"`` when malformed."""
    parsed = parse_dimensions(dimensions)
    if parsed is None:
        return "0:0"
    width, height = parsed
    divisor = math.gcd(width, height)
    return f"{width // divisor}:{height // divisor}"


def closest_aspect_ratio(
    dimensions: str,
    supported: Sequence[tuple[str, float]],
    default: str,
) -> str:
    """Map ``WxH`` onto the nearest supported aspect ratio label.

    The candidate with the smallest absolute difference between its ratio
    and ``width / height`` wins; on exact ties the earlier entry wins.
    Malformed dimensions fall back to ``default``.
    """
    parsed = parse_dimensions(dimensions)
    if parsed is None or not supported:
        return default
    ratio = parsed[0] / parsed[1]
    best_label, _ = min(supported, key=lambda entry: abs(entry[1] - ratio))
    return best_label


def style_preset(variant: ArtVariant) -> str:
    """Provider style preset for an art variant, 'photographic' by default."""
    return STYLE_PRESETS.get(variant, "photographic")


def variant_prompt(request: GenerationRequest) -> str:
    """Prefix the prompt with the art variant unless it is NORMAL."""
    prompt = request.prompt or ""
    if isinstance(request, ImageGenerationRequest) and request.art_variant != ArtVariant.NORMAL:
        return f"{request.art_variant.value} - {prompt}"
    return prompt


def lookup(data: Any, path: Path) -> Any:
    """Walk nested dicts and lists, returning None on any missing step."""
    current = data
    for key in path:
        if isinstance(key, int):
            if not isinstance(current, list) or not -len(current) <= key < len(current):
                return None
            current = current[key]
        else:
            if not isinstance(current, dict):
                return None
            current = current.get(key)
        if current is None:
            return None
    return current


def first_string(value: Any) -> Optional[str]:
    """Return a string, or the first string of a list, else None."""
    if isinstance(value, str):
        return value
    if isinstance(value, list) and value and isinstance(value[0], str):
        return value[0]
    return None


@dataclass(frozen=True)
class ResponseShape:
    """Where one provider puts its result and its error in a reply.

    Each tuple lists alternative paths tried in order. ``error`` paths may
    point at a string, at a list whose first string is used, or at an
    object carrying a ``message``. ``missing`` is the failure message when
    nothing matches.
    """

    inline: tuple[Path, ...] = ()
    url: tuple[Path, ...] = ()
    error: tuple[Path, ...] = (("error",), ("errors",), ("message",))
    model_prompt: Optional[Path] = None
    missing: str = "Invalid response"


@dataclass(frozen=True)
class InlineResult:
    base64: str
    model_prompt: Optional[str] = None


@dataclass(frozen=True)
class UrlResult:
    url: str
    model_prompt: Optional[str] = None


@dataclass(frozen=True)
class ErrorResult:
    message: str


@dataclass(frozen=True)
class NoMatch:
    reason: str = "Invalid response"


Extracted = Union[InlineResult, UrlResult, ErrorResult, NoMatch]


def _extract_object(data: dict[str, Any], shape: ResponseShape) -> Extracted:
    model_prompt = lookup(data, shape.model_prompt) if shape.model_prompt else None
    if not isinstance(model_prompt, str):
        model_prompt = None

    for path in shape.inline:
        value = lookup(data, path)
        if isinstance(value, str) and value:
            return InlineResult(base64=strip_data_uri(value), model_prompt=model_prompt)

    for path in shape.url:
        value = first_string(lookup(data, path))
        if value:
            return UrlResult(url=value, model_prompt=model_prompt)

    for path in shape.error:
        value = lookup(data, path)
        message = first_string(value)
        if message is None and isinstance(value, dict):
            message = first_string(value.get("message"))
        if message:
            return ErrorResult(message=message)

    return NoMatch(shape.missing)


def extract_result(payload: Payload, shape: ResponseShape) -> Extracted:
    """Classify a transport payload against a provider's response shape.

    Priority: inline base64, then URL reference, then (for a top-level
    array) the same two checks against the first element, then the error
    fields. Binary payloads are already the result.
    """
    match payload:
        case BinaryPayload():
            return InlineResult(base64=payload.base64)
        case ObjectPayload(data=data):
            return _extract_object(data, shape)
        case ArrayPayload(items=items):
            if not items:
                return NoMatch("Empty response")
            return _extract_object(items[0], shape)
    return NoMatch()
