"""Unit tests for image captioning."""

import base64
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from document_image_extraction.captioning import OpenAICaptioner, caption_image, caption_images
from document_image_extraction.core.constants import NO_CAPTION
from document_image_extraction.core.errors import CaptionError
from document_image_extraction.core.extracted_image import ExtractedImage


def chat_response(text):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


@pytest.fixture
def client():
    client = MagicMock()
    client.chat.completions.create.return_value = chat_response("  A red square.  ")
    return client


class TestOpenAICaptioner:

    def test_describe_sends_data_url(self, client):
        captioner = OpenAICaptioner(client=client, model="vision-model")

        caption = captioner.describe(b"png-bytes", "image/png")

        assert caption == "A red square."
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "vision-model"
        image_part = kwargs["messages"][0]["content"][1]
        expected = "data:image/png;base64," + base64.b64encode(b"png-bytes").decode()
        assert image_part["image_url"]["url"] == expected

    def test_model_from_environment(self, client, monkeypatch):
        monkeypatch.setenv("OPENAI_MODEL", "env-model")
        assert OpenAICaptioner(client=client).model == "env-model"

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(CaptionError):
            OpenAICaptioner()

    def test_request_failure(self, client):
        client.chat.completions.create.side_effect = RuntimeError("rate limited")
        with pytest.raises(CaptionError):
            OpenAICaptioner(client=client).describe(b"x", "image/png")

    def test_empty_response(self, client):
        client.chat.completions.create.return_value = chat_response("   ")
        with pytest.raises(CaptionError):
            OpenAICaptioner(client=client).describe(b"x", "image/png")


class TestCaptionImages:

    def test_captions_attached_in_order(self):
        captioner = MagicMock()
        captioner.describe.side_effect = ["first", "second"]
        images = [ExtractedImage(f"{i}.png", b"png", "image/png", "doc.pdf") for i in range(2)]

        captioned = caption_images(images, captioner)

        assert [img.caption for img in captioned] == ["first", "second"]
        assert [img.id for img in captioned] == [img.id for img in images]

    def test_failure_downgraded(self):
        captioner = MagicMock()
        captioner.describe.side_effect = CaptionError("service unavailable")
        image = ExtractedImage("a.png", b"png", "image/png", "doc.pdf")

        assert caption_image(image, captioner).caption == NO_CAPTION

    def test_vector_images_not_sent(self):
        captioner = MagicMock()
        image = ExtractedImage("a.wmf", b"wmf", "application/octet-stream", "doc.docx")

        assert caption_image(image, captioner).caption == NO_CAPTION
        captioner.describe.assert_not_called()
