"""Tests for request and response value types."""

import pytest
from pydantic import ValidationError

from illustrate.models.enums import ErrorCode, GenerationStatus, ModelCode, ProviderCode
from illustrate.models.generation import (
    EditDirection,
    GenerationResponse,
    ImageGenerationRequest,
    VideoGenerationRequest,
)
from illustrate.models.usage import UsageRecord


class TestGenerationResponse:
    def test_generated_requires_payload(self):
        with pytest.raises(ValidationError, match="requires at least one payload"):
            GenerationResponse(status=GenerationStatus.GENERATED, payloads=[])

    def test_failed_cannot_carry_payload(self):
        with pytest.raises(ValidationError, match="cannot carry payload"):
            GenerationResponse(
                status=GenerationStatus.FAILED,
                payloads=["YQ=="],
                error_code=ErrorCode.MODEL_ERROR,
            )

    def test_failed_shape(self):
        response = GenerationResponse.failed(ErrorCode.TIMEOUT_ERROR, "timed out")

        assert not response.is_generated
        assert response.base64 is None
        assert response.error_code.description == "Generation Timed Out"


class TestRequests:
    def test_count_follows_request_kind(self):
        image = ImageGenerationRequest(model_code=ModelCode.FAL_FLUX_DEV, number_of_images=4)
        video = VideoGenerationRequest(model_code=ModelCode.GOOGLE_VEO_3, number_of_videos=2)

        assert (image.count, image.is_video) == (4, False)
        assert (video.count, video.is_video) == (2, True)

    def test_with_secret_copies(self):
        request = ImageGenerationRequest(model_code=ModelCode.FAL_FLUX_DEV, prompt="a fox")

        with_secret = request.with_secret("sk-secret-value")

        assert with_secret.connection_secret == "sk-secret-value"
        assert request.connection_secret is None
        assert "sk-secret-value" not in repr(with_secret)

    @pytest.mark.parametrize("field", ["left", "right", "up", "down"])
    def test_edit_direction_bounds(self, field):
        with pytest.raises(ValidationError):
            EditDirection(**{field: 2001})
        with pytest.raises(ValidationError):
            EditDirection(**{field: -1})

    def test_image_count_limit(self):
        with pytest.raises(ValidationError):
            ImageGenerationRequest(model_code=ModelCode.FAL_FLUX_DEV, number_of_images=7)


class TestUsageRecord:
    def test_record_accumulates(self):
        record = UsageRecord(provider=ProviderCode.REPLICATE)

        record.record(0.03)
        record.record(0.0028)

        assert record.credits_used == pytest.approx(0.0328)
        assert record.total_requests == 2
        assert record.last_used_at is not None

    def test_negative_cost_rejected(self):
        with pytest.raises(ValueError):
            UsageRecord(provider=ProviderCode.REPLICATE).record(-1)
