"""Domain value types, queue entities and the static model catalog."""

from illustrate.models.catalog import CATALOG, CatalogModel, get_model
from illustrate.models.enums import (
    ArtQuality,
    ArtStyle,
    ArtVariant,
    ErrorCode,
    GenerationStatus,
    ModelCode,
    ProviderCode,
    SetType,
)
from illustrate.models.generation import (
    EditDirection,
    GenerationRequest,
    GenerationResponse,
    ImageGenerationRequest,
    VideoGenerationRequest,
)
from illustrate.models.queue_item import InvalidStateTransition, QueueItem, QueueItemStatus
from illustrate.models.usage import UsageRecord

__all__ = [
    "ArtQuality",
    "ArtStyle",
    "ArtVariant",
    "CATALOG",
    "CatalogModel",
    "EditDirection",
    "ErrorCode",
    "GenerationRequest",
    "GenerationResponse",
    "GenerationStatus",
    "ImageGenerationRequest",
    "InvalidStateTransition",
    "ModelCode",
    "ProviderCode",
    "QueueItem",
    "QueueItemStatus",
    "SetType",
    "UsageRecord",
    "VideoGenerationRequest",
    "get_model",
]
