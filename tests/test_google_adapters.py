"""Tests for Google Imagen, Gemini image and Veo adapters."""

import httpx
import pytest

from illustrate.models.enums import ArtQuality, ErrorCode, ModelCode
from illustrate.models.generation import ImageGenerationRequest, VideoGenerationRequest
from illustrate.services.adapters.google import imagen_aspect_ratio, with_key

VEO_URI = "https://generativelanguage.googleapis.com/v1beta/files/abc:download?alt=media"


class TestImagen:
    @pytest.mark.asyncio
    async def test_predict_request_and_response(self, provider, make_adapter, png_b64):
        # Arrange
        provider.reply(json_body={"predictions": [{"bytesBase64Encoded": png_b64}]})
        adapter = make_adapter(ModelCode.GOOGLE_IMAGEN_4_ULTRA)
        request = ImageGenerationRequest(
            model_code=ModelCode.GOOGLE_IMAGEN_4_ULTRA,
            prompt="a koi pond",
            art_dimensions="1024x576",
            art_quality=ArtQuality.HD,
            connection_secret="gk",
        )

        # Act
        response = await adapter.make_request(request)

        # Assert
        assert response.is_generated
        assert response.cost == pytest.approx(0.12)
        sent = provider.requests[0]
        assert sent.url.params["key"] == "gk"
        assert sent.url.path.endswith("imagen-4.0-ultra-generate-001:predict")
        assert provider.json_body(0) == {
            "instances": [{"prompt": "a koi pond"}],
            "parameters": {"aspectRatio": "16:9", "sampleCount": 1, "imageSize": "2048"},
        }

    @pytest.mark.asyncio
    async def test_imagen_3_has_no_image_size(self, provider, make_adapter, png_b64):
        provider.reply(json_body={"predictions": [{"bytesBase64Encoded": png_b64}]})
        adapter = make_adapter(ModelCode.GOOGLE_IMAGEN_3)

        await adapter.make_request(
            ImageGenerationRequest(
                model_code=ModelCode.GOOGLE_IMAGEN_3, prompt="a koi pond", connection_secret="gk"
            )
        )

        assert "imageSize" not in provider.json_body(0)["parameters"]

    @pytest.mark.asyncio
    async def test_missing_prediction(self, provider, make_adapter):
        provider.reply(json_body={"predictions": []})
        adapter = make_adapter(ModelCode.GOOGLE_IMAGEN_4_FAST)

        response = await adapter.make_request(
            ImageGenerationRequest(
                model_code=ModelCode.GOOGLE_IMAGEN_4_FAST, prompt="koi", connection_secret="gk"
            )
        )

        assert response.error_message == "Invalid response - no image data found"

    @pytest.mark.parametrize(
        "dimensions,expected",
        [("1024x1024", "1:1"), ("768x1024", "3:4"), ("1024x576", "16:9"), ("2560x1080", "1:1")],
    )
    def test_aspect_ratio_tolerance(self, dimensions, expected):
        assert imagen_aspect_ratio(dimensions) == expected


class TestGeminiImage:
    def gemini_request(self, **overrides) -> ImageGenerationRequest:
        fields = dict(
            model_code=ModelCode.GOOGLE_GEMINI_PRO_IMAGE,
            prompt="a paper crane",
            art_dimensions="16:9",
            connection_secret="gk",
        )
        fields.update(overrides)
        return ImageGenerationRequest(**fields)

    @pytest.mark.asyncio
    async def test_first_inline_part_wins(self, provider, make_adapter, png_b64):
        # Arrange
        provider.reply(
            json_body={
                "candidates": [
                    {
                        "content": {
                            "parts": [
                                {"text": "Here is your crane"},
                                {"inlineData": {"mimeType": "image/png", "data": png_b64}},
                            ]
                        }
                    }
                ]
            }
        )
        adapter = make_adapter(ModelCode.GOOGLE_GEMINI_PRO_IMAGE)

        # Act
        response = await adapter.make_request(
            self.gemini_request(response_modalities=["TEXT", "IMAGE"])
        )

        # Assert
        assert response.payloads == [png_b64]
        assert provider.json_body(0)["generationConfig"] == {
            "responseModalities": ["TEXT", "IMAGE"],
            "imageConfig": {"aspectRatio": "16:9", "imageSize": "4K"},
        }

    @pytest.mark.asyncio
    async def test_text_only_reply_is_an_error(self, provider, make_adapter):
        provider.reply(
            json_body={"candidates": [{"content": {"parts": [{"text": "I cannot draw that"}]}}]}
        )
        adapter = make_adapter(ModelCode.GOOGLE_GEMINI_PRO_IMAGE)

        response = await adapter.make_request(self.gemini_request())

        assert response.error_code == ErrorCode.MODEL_ERROR
        assert response.error_message == "No image generated. Response: I cannot draw that"

    @pytest.mark.asyncio
    async def test_blocked_prompt(self, provider, make_adapter):
        provider.reply(json_body={"promptFeedback": {"blockReason": "SAFETY"}})
        adapter = make_adapter(ModelCode.GOOGLE_GEMINI_PRO_IMAGE)

        response = await adapter.make_request(self.gemini_request())

        assert response.error_message == "Prompt blocked: SAFETY"

    @pytest.mark.asyncio
    async def test_edit_sends_source_image(self, provider, make_adapter, png_b64):
        provider.reply(
            json_body={
                "candidates": [{"content": {"parts": [{"inlineData": {"data": png_b64}}]}}]
            }
        )
        adapter = make_adapter(ModelCode.GOOGLE_GEMINI_FLASH_IMAGE_EDIT)

        response = await adapter.make_request(
            self.gemini_request(
                model_code=ModelCode.GOOGLE_GEMINI_FLASH_IMAGE_EDIT,
                client_image=f"data:image/png;base64,{png_b64}",
            )
        )

        assert response.is_generated
        parts = provider.json_body(0)["contents"][0]["parts"]
        assert parts[1] == {"inlineData": {"mimeType": "image/png", "data": png_b64}}

    @pytest.mark.asyncio
    async def test_edit_requires_image(self, provider, make_adapter):
        adapter = make_adapter(ModelCode.GOOGLE_GEMINI_PRO_IMAGE_EDIT)

        response = await adapter.make_request(
            self.gemini_request(model_code=ModelCode.GOOGLE_GEMINI_PRO_IMAGE_EDIT)
        )

        assert response.error_message == "Select an image to edit"
        assert provider.requests == []


class TestVeo:
    @pytest.mark.asyncio
    async def test_long_running_operation(self, provider, make_adapter, sleeps):
        # Arrange
        operation = "models/veo-3.1-generate-preview/operations/op-7"
        provider.reply(json_body={"name": operation})
        provider.reply(json_body={"name": operation, "done": False})
        provider.reply(
            json_body={
                "name": operation,
                "done": True,
                "response": {
                    "generateVideoResponse": {"generatedSamples": [{"video": {"uri": VEO_URI}}]}
                },
            }
        )
        provider.reply(content=b"mp4-bytes")
        adapter = make_adapter(ModelCode.GOOGLE_VEO_31)
        request = VideoGenerationRequest(
            model_code=ModelCode.GOOGLE_VEO_31,
            prompt="waves at night",
            negative_prompt="people",
            connection_secret="gk",
        )

        # Act
        response = await adapter.make_request(request)

        # Assert
        assert response.is_generated
        assert response.cost == pytest.approx(3.20)
        assert provider.json_body(0)["parameters"] == {
            "aspectRatio": "16:9",
            "durationSeconds": 8,
            "resolution": "1080p",
            "negativePrompt": "people",
        }
        poll = provider.requests[1]
        assert poll.method == "GET"
        assert poll.url.path == f"/v1beta/{operation}"
        assert poll.url.params["key"] == "gk"
        download = provider.requests[3]
        assert download.url.params["alt"] == "media"
        assert download.url.params["key"] == "gk"
        assert sleeps == [10, 10]

    @pytest.mark.asyncio
    async def test_operation_error(self, provider, make_adapter):
        provider.reply(json_body={"name": "models/veo-3.0-generate-001/operations/op-1"})
        provider.reply(json_body={"done": True, "error": {"code": 3, "message": "Unsafe prompt"}})
        adapter = make_adapter(ModelCode.GOOGLE_VEO_3)

        response = await adapter.make_request(
            VideoGenerationRequest(
                model_code=ModelCode.GOOGLE_VEO_3, prompt="waves", connection_secret="gk"
            )
        )

        assert response.error_code == ErrorCode.MODEL_ERROR
        assert response.error_message == "Unsafe prompt"

    @pytest.mark.asyncio
    async def test_video_input_only_for_veo_31(self, make_adapter, png_b64):
        request_fields = dict(
            prompt="extend this",
            art_dimensions="1080x1920",
            client_video=png_b64,
            connection_secret="gk",
        )
        veo_31 = make_adapter(ModelCode.GOOGLE_VEO_31).transform_request(
            VideoGenerationRequest(model_code=ModelCode.GOOGLE_VEO_31, **request_fields)
        )
        veo_3 = make_adapter(ModelCode.GOOGLE_VEO_3).transform_request(
            VideoGenerationRequest(model_code=ModelCode.GOOGLE_VEO_3, **request_fields)
        )

        assert veo_31.body["instances"][0]["video"]["mimeType"] == "video/mp4"
        assert "video" not in veo_3.body["instances"][0]
        assert veo_31.body["parameters"]["aspectRatio"] == "9:16"
        assert veo_31.body["parameters"]["resolution"] == "1080p"

    def test_small_frame_uses_720p(self, make_adapter):
        wire = make_adapter(ModelCode.GOOGLE_VEO_2).transform_request(
            VideoGenerationRequest(
                model_code=ModelCode.GOOGLE_VEO_2,
                prompt="waves",
                art_dimensions="720x720",
                connection_secret="gk",
            )
        )

        assert wire.body["parameters"]["resolution"] == "720p"
        assert wire.body["parameters"]["aspectRatio"] == "9:16"


def test_with_key_appends_query():
    url = with_key("https://generativelanguage.googleapis.com/v1beta/models/m:predict", "k1")

    assert url.endswith("models/m:predict?key=k1")


def test_with_key_keeps_existing_query_and_encodes_secret():
    url = httpx.URL(with_key(VEO_URI, "g&k=1 /x"))

    assert url.params["alt"] == "media"
    assert url.params["key"] == "g&k=1 /x"


@pytest.mark.asyncio
async def test_veo_download_encodes_key(provider, make_adapter):
    provider.reply(content=b"mp4-bytes")
    adapter = make_adapter(ModelCode.GOOGLE_VEO_3)
    request = VideoGenerationRequest(
        model_code=ModelCode.GOOGLE_VEO_3, prompt="waves", connection_secret="g&k=1"
    )

    data = await adapter.download(request, VEO_URI)

    assert data == b"mp4-bytes"
    sent = provider.requests[0].url
    assert sent.params["alt"] == "media"
    assert sent.params["key"] == "g&k=1"
    assert b"key=g&k=1" not in sent.query
