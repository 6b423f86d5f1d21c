"""Tests for shared adapter orchestration: validation, error containment, fan-out."""

import pytest

from illustrate.models.catalog import get_model
from illustrate.models.enums import ErrorCode, GenerationStatus, ModelCode
from illustrate.models.generation import (
    GenerationResponse,
    ImageGenerationRequest,
    VideoGenerationRequest,
)
from illustrate.services.adapters import combine_responses
from illustrate.services.adapters.huggingface import HuggingFaceAdapter
from illustrate.services.adapters.registry import ADAPTER_CLASSES

ASSET_MODELS = [code for code, cls in ADAPTER_CLASSES.items() if cls.required_assets]


class TestValidation:
    """Precondition failures never reach the network."""

    @pytest.mark.asyncio
    async def test_missing_credential(self, provider, make_adapter):
        # Arrange
        adapter = make_adapter(ModelCode.FAL_FLUX_DEV)
        request = ImageGenerationRequest(model_code=ModelCode.FAL_FLUX_DEV, prompt="a fox")

        # Act
        response = await adapter.make_request(request)

        # Assert
        assert response.status == GenerationStatus.FAILED
        assert response.error_code == ErrorCode.ADAPTER_ERROR
        assert response.error_message == "Missing credential for FAL_AI"
        assert provider.requests == []

    @pytest.mark.asyncio
    async def test_blank_prompt(self, provider, make_adapter):
        adapter = make_adapter(ModelCode.FAL_FLUX_DEV)
        request = ImageGenerationRequest(
            model_code=ModelCode.FAL_FLUX_DEV, prompt="   ", connection_secret="fk"
        )

        response = await adapter.make_request(request)

        assert response.error_code == ErrorCode.ADAPTER_ERROR
        assert response.error_message == "Enter a prompt"
        assert provider.requests == []

    @pytest.mark.asyncio
    async def test_prompt_over_model_limit(self, provider, make_adapter):
        adapter = make_adapter(ModelCode.REPLICATE_FLUX_SCHNELL)
        request = ImageGenerationRequest(
            model_code=ModelCode.REPLICATE_FLUX_SCHNELL,
            prompt="x" * 300,
            connection_secret="r8",
        )

        response = await adapter.make_request(request)

        assert response.error_code == ErrorCode.ADAPTER_ERROR
        assert "maximum length of 256" in response.error_message
        assert provider.requests == []

    @pytest.mark.asyncio
    async def test_missing_required_asset(self, provider, make_adapter):
        adapter = make_adapter(ModelCode.STABILITY_INPAINT)
        request = ImageGenerationRequest(
            model_code=ModelCode.STABILITY_INPAINT,
            prompt="a hat",
            client_image="aGVsbG8=",
            connection_secret="sk",
        )

        response = await adapter.make_request(request)

        assert response.error_code == ErrorCode.ADAPTER_ERROR
        assert response.error_message == "Draw the mask area on the image"
        assert provider.requests == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("code", ASSET_MODELS, ids=lambda code: code.value)
    async def test_every_asset_model_rejects_missing_assets(self, provider, make_adapter, code):
        # Arrange
        adapter = make_adapter(code)
        request_class = VideoGenerationRequest if adapter.model.is_video else ImageGenerationRequest
        request = request_class(model_code=code, prompt="a fox", connection_secret="sk")

        # Act
        response = await adapter.make_request(request)

        # Assert
        assert response.error_code == ErrorCode.ADAPTER_ERROR
        assert response.error_message == ADAPTER_CLASSES[code].required_assets[0][1]
        assert provider.requests == []

    @pytest.mark.asyncio
    async def test_video_request_to_image_model(self, provider, make_adapter):
        adapter = make_adapter(ModelCode.OPENAI_GPT_IMAGE_1)
        request = VideoGenerationRequest(
            model_code=ModelCode.OPENAI_GPT_IMAGE_1, prompt="a fox", connection_secret="sk"
        )

        response = await adapter.make_request(request)

        assert response.error_code == ErrorCode.ADAPTER_ERROR
        assert "only accepts image requests" in response.error_message
        assert provider.requests == []


class TestErrorContainment:
    @pytest.mark.asyncio
    async def test_transport_status_becomes_model_error(self, provider, make_adapter):
        # Arrange
        provider.reply(429, content=b"slow down")
        adapter = make_adapter(ModelCode.HUGGING_FACE_FLUX_DEV)
        request = ImageGenerationRequest(
            model_code=ModelCode.HUGGING_FACE_FLUX_DEV, prompt="a fox", connection_secret="hf"
        )

        # Act
        response = await adapter.make_request(request)

        # Assert
        assert response.error_code == ErrorCode.MODEL_ERROR
        assert response.error_message == "Too many requests"

    @pytest.mark.asyncio
    async def test_undecodable_inline_payload(self, provider, make_adapter):
        provider.reply(json_body={"data": [{"b64_json": "%%%not-base64%%%"}]})
        adapter = make_adapter(ModelCode.OPENAI_GPT_IMAGE_1)
        request = ImageGenerationRequest(
            model_code=ModelCode.OPENAI_GPT_IMAGE_1, prompt="a fox", connection_secret="sk"
        )

        response = await adapter.make_request(request)

        assert response.error_code == ErrorCode.TRANSFORM_RESPONSE_ERROR

    @pytest.mark.asyncio
    async def test_unexpected_exception_becomes_generator_error(self, provider, no_sleep):
        # Arrange
        class BrokenAdapter(HuggingFaceAdapter):
            def transform_request(self, request):
                raise KeyError("inputs")

        model = get_model(ModelCode.HUGGING_FACE_FLUX_DEV)
        adapter = BrokenAdapter(model, provider.transport(), sleep=no_sleep)
        request = ImageGenerationRequest(
            model_code=ModelCode.HUGGING_FACE_FLUX_DEV, prompt="a fox", connection_secret="hf"
        )

        # Act
        response = await adapter.make_request(request)

        # Assert
        assert response.error_code == ErrorCode.GENERATOR_ERROR
        assert response.error_message == "Failed with error: 'inputs'"


class TestFanOut:
    @pytest.mark.asyncio
    async def test_one_call_per_requested_image(self, provider, make_adapter, png_bytes):
        # Arrange
        for _ in range(3):
            provider.reply(content=png_bytes, headers={"Content-Type": "image/png"})
        adapter = make_adapter(ModelCode.HUGGING_FACE_FLUX_SCHNELL)
        request = ImageGenerationRequest(
            model_code=ModelCode.HUGGING_FACE_FLUX_SCHNELL,
            prompt="a fox",
            number_of_images=3,
            connection_secret="hf",
        )

        # Act
        response = await adapter.generate(request)

        # Assert
        assert response.is_generated
        assert len(response.payloads) == 3
        assert len(provider.requests) == 3

    @pytest.mark.asyncio
    async def test_any_failure_fails_the_generation(self, provider, make_adapter, png_bytes):
        provider.reply(content=png_bytes, headers={"Content-Type": "image/png"})
        provider.reply(json_body={"error": "Model is loading"})
        adapter = make_adapter(ModelCode.HUGGING_FACE_FLUX_SCHNELL)
        request = ImageGenerationRequest(
            model_code=ModelCode.HUGGING_FACE_FLUX_SCHNELL,
            prompt="a fox",
            number_of_images=2,
            connection_secret="hf",
        )

        response = await adapter.generate(request)

        assert response.status == GenerationStatus.FAILED
        assert response.error_message == "Model is loading"
        assert response.payloads == []


class TestCombineResponses:
    def test_sums_cost_and_concatenates_payloads(self):
        first = GenerationResponse.generated(["YQ=="], cost=0.04, model_prompt="a fox")
        second = GenerationResponse.generated(["Yg=="], cost=0.04)

        combined = combine_responses([first, second])

        assert combined.payloads == ["YQ==", "Yg=="]
        assert combined.cost == pytest.approx(0.08)
        assert combined.model_prompt == "a fox"

    def test_empty_list_fails(self):
        combined = combine_responses([])

        assert combined.error_code == ErrorCode.GENERATOR_ERROR
