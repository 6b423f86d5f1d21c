"""Provider-agnostic generation request and response value types.

Requests describe a single job submitted to one model. Which fields a model
actually requires is decided by its adapter, not by the request type:
an upscale needs ``client_image``, an inpaint needs ``client_image`` and
``client_mask``, a text-to-video job needs only a prompt.

Responses are the normalized outcome of one adapter call. A GENERATED
response carries one or more base64 payloads and a cost; a FAILED response
carries an error kind and message and never any payload.
"""

from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

from illustrate.models.enums import (
    ArtQuality,
    ArtStyle,
    ArtVariant,
    ErrorCode,
    GenerationStatus,
    ModelCode,
)


class EditDirection(BaseModel):
    """Pixels an outpaint adds on each side of the source image."""

    model_config = ConfigDict(frozen=True)

    left: int = Field(default=0, ge=0, le=2000)
    right: int = Field(default=0, ge=0, le=2000)
    up: int = Field(default=0, ge=0, le=2000)
    down: int = Field(default=0, ge=0, le=2000)


class GenerationRequest(BaseModel):
    """Fields shared by image and video requests."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model_code: ModelCode
    prompt: Optional[str] = None
    negative_prompt: Optional[str] = None
    search_prompt: Optional[str] = None
    art_dimensions: str = "1024x1024"
    client_image: Optional[str] = None
    client_mask: Optional[str] = None
    connection_secret: Optional[str] = Field(default=None, repr=False)
    usage_record_id: Optional[UUID] = None

    @property
    def is_video(self) -> bool:
        return False

    @property
    def count(self) -> int:
        """Number of outputs requested."""
        return 1

    def with_secret(self, secret: Optional[str]) -> "GenerationRequest":
        """Return a copy carrying the given provider secret."""
        return self.model_copy(update={"connection_secret": secret})


class ImageGenerationRequest(GenerationRequest):
    """Text-to-image and image edit request."""

    art_variant: ArtVariant = ArtVariant.NORMAL
    art_quality: ArtQuality = ArtQuality.HD
    art_style: ArtStyle = ArtStyle.VIVID
    number_of_images: int = Field(default=1, ge=1, le=6)
    edit_direction: Optional[EditDirection] = None
    response_modalities: Optional[list[str]] = None

    @property
    def count(self) -> int:
        return self.number_of_images


class VideoGenerationRequest(GenerationRequest):
    """Text-to-video and image-to-video request."""

    art_dimensions: str = "1280x720"
    client_last_frame: Optional[str] = None
    client_video: Optional[str] = None
    number_of_videos: int = Field(default=1, ge=1, le=4)
    motion: Optional[int] = None
    stickyness: Optional[int] = None
    duration_seconds: Optional[int] = Field(default=None, ge=1)
    resolution: Optional[str] = None
    fps: Optional[int] = None
    generate_audio: Optional[bool] = None
    response_modalities: Optional[list[str]] = None

    @property
    def is_video(self) -> bool:
        return True

    @property
    def count(self) -> int:
        return self.number_of_videos


class GenerationResponse(BaseModel):
    """Outcome of one adapter call."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    generation_id: UUID = Field(default_factory=uuid4)
    status: GenerationStatus
    payloads: list[str] = Field(default_factory=list, repr=False)
    cost: float = 0.0
    model_prompt: Optional[str] = None
    error_code: Optional[ErrorCode] = None
    error_message: Optional[str] = None

    @model_validator(mode="after")
    def validate_outcome(self) -> "GenerationResponse":
        """Keep GENERATED and FAILED shapes mutually exclusive."""
        if self.status == GenerationStatus.GENERATED:
            if self.error_code is not None or self.error_message is not None:
                raise ValueError("GENERATED response cannot carry an error")
            if not self.payloads:
                raise ValueError("GENERATED response requires at least one payload")
        else:
            if self.payloads:
                raise ValueError("FAILED response cannot carry payload data")
            if self.error_code is None:
                raise ValueError("FAILED response requires an error code")
        return self

    @classmethod
    def generated(
        cls,
        payloads: list[str],
        cost: float,
        model_prompt: Optional[str] = None,
    ) -> "GenerationResponse":
        return cls(
            status=GenerationStatus.GENERATED,
            payloads=payloads,
            cost=cost,
            model_prompt=model_prompt,
        )

    @classmethod
    def failed(cls, error_code: ErrorCode, error_message: str) -> "GenerationResponse":
        return cls(
            status=GenerationStatus.FAILED,
            error_code=error_code,
            error_message=error_message,
        )

    @property
    def is_generated(self) -> bool:
        return self.status == GenerationStatus.GENERATED

    @property
    def base64(self) -> Optional[str]:
        """First payload, or None for a FAILED response."""
        return self.payloads[0] if self.payloads else None
