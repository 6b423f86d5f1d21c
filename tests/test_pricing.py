"""Tests for cost estimation and display formatting."""

import pytest

from illustrate.models.enums import ArtQuality, ModelCode
from illustrate.models.generation import ImageGenerationRequest, VideoGenerationRequest
from illustrate.services.pricing import (
    PRICING_TABLE,
    estimate_cost,
    estimate_image_cost,
    estimate_video_cost,
    format_cost,
    is_credit_model,
    legacy_cost,
    pricing_divergences,
)


class TestImageCost:
    @pytest.mark.parametrize(
        "quality,dimensions,expected",
        [
            (ArtQuality.STANDARD, "1024x1024", 0.04),
            (ArtQuality.STANDARD, "1792x1024", 0.08),
            (ArtQuality.HD, "1024x1024", 0.08),
            (ArtQuality.HD, "1024x1792", 0.12),
        ],
    )
    def test_dalle3_quality_and_size(self, quality, dimensions, expected):
        cost = estimate_image_cost(ModelCode.OPENAI_DALLE3, 1, quality, dimensions)

        assert cost == pytest.approx(expected)

    def test_scales_with_number_of_images(self):
        cost = estimate_image_cost(ModelCode.OPENAI_GPT_IMAGE_1, 3, ArtQuality.HD)

        assert cost == pytest.approx(0.51)

    def test_model_without_hd_rate_ignores_quality(self):
        standard = estimate_image_cost(ModelCode.GOOGLE_IMAGEN_3, 1, ArtQuality.STANDARD)
        hd = estimate_image_cost(ModelCode.GOOGLE_IMAGEN_3, 1, ArtQuality.HD)

        assert standard == hd == pytest.approx(0.03)

    def test_unknown_model_is_free(self):
        assert estimate_image_cost("NOT_A_MODEL") == 0.0
        assert estimate_video_cost("NOT_A_MODEL", 8) == 0.0

    def test_every_catalog_model_is_priced(self):
        assert set(PRICING_TABLE) == set(ModelCode)


class TestVideoCost:
    def test_veo_31_defaults_to_eight_seconds(self):
        assert estimate_video_cost(ModelCode.GOOGLE_VEO_31) == pytest.approx(3.20)

    def test_per_second_rate_times_duration(self):
        assert estimate_video_cost(ModelCode.OPENAI_SORA_2, 4) == pytest.approx(0.40)

    def test_dimension_specific_rate(self):
        cost = estimate_video_cost(ModelCode.OPENAI_SORA_2_PRO, 4, dimensions="1792x1024")

        assert cost == pytest.approx(2.0)

    def test_seedance_rate_follows_resolution(self):
        hd = estimate_video_cost(ModelCode.REPLICATE_SEEDANCE_1_PRO, 5, dimensions="1920x1080")
        sd = estimate_video_cost(ModelCode.REPLICATE_SEEDANCE_1_PRO, 5, dimensions="1280x720")

        assert hd == pytest.approx(0.75)
        assert sd == pytest.approx(0.30)

    def test_flat_priced_video_ignores_duration(self):
        cost = estimate_video_cost(ModelCode.STABILITY_IMAGE_TO_VIDEO, 30, number_of_videos=2)

        assert cost == pytest.approx(40)

    def test_image_model_has_no_video_price(self):
        assert estimate_video_cost(ModelCode.OPENAI_DALLE3, 8) == 0.0


class TestEstimateCost:
    def test_dispatches_image_requests(self):
        request = ImageGenerationRequest(
            model_code=ModelCode.FAL_FLUX_DEV, prompt="a fox", number_of_images=3
        )

        assert estimate_cost(request) == pytest.approx(0.075)

    def test_dispatches_video_requests(self):
        request = VideoGenerationRequest(
            model_code=ModelCode.GOOGLE_VEO_3_FAST, prompt="a fox", duration_seconds=6
        )

        assert estimate_cost(request) == pytest.approx(0.90)

    def test_quantity_overrides_request_count(self):
        request = ImageGenerationRequest(
            model_code=ModelCode.FAL_FLUX_DEV, prompt="a fox", number_of_images=4
        )

        assert estimate_cost(request, quantity=1) == pytest.approx(0.025)


class TestLegacyPricing:
    def test_legacy_literal_lookup(self):
        assert legacy_cost(ModelCode.STABILITY_ULTRA) == 8.0
        assert legacy_cost(ModelCode.OPENAI_DALLE3) is None

    def test_divergences_report_table_and_legacy_price(self):
        divergent = pricing_divergences()

        assert divergent[ModelCode.REPLICATE_FLUX_SCHNELL] == (
            pytest.approx(0.003),
            pytest.approx(0.0028),
        )
        assert ModelCode.STABILITY_ULTRA not in divergent


class TestFormatCost:
    @pytest.mark.parametrize(
        "cost,is_credit,expected",
        [
            (0, False, "Free"),
            (0, True, "Free"),
            (8, True, "8 credits"),
            (6.5, True, "6.5 credits"),
            (0.003, False, "$0.0030"),
            (0.04, False, "$0.04"),
            (3.2, False, "$3.20"),
        ],
    )
    def test_format(self, cost, is_credit, expected):
        assert format_cost(cost, is_credit) == expected

    def test_stability_models_bill_in_credits(self):
        assert is_credit_model(ModelCode.STABILITY_CORE)
        assert not is_credit_model(ModelCode.OPENAI_GPT_IMAGE_1)
