"""
Image captions from an OpenAI vision model.

Captioning is best effort: a failed request leaves the image with the
``NO_CAPTION`` placeholder instead of failing the extraction.
"""

import base64
import logging
import os

from .core.constants import (
    DEFAULT_CAPTION_MODEL, CAPTION_PROMPT, CAPTION_MAX_TOKENS, NO_CAPTION
)
from .core.errors import CaptionError

logger = logging.getLogger(__name__)


class OpenAICaptioner:
    """
    Describes images with a chat completion request.

    Parameters
    ----------
    client : openai.OpenAI, optional
        Configured client. Built from ``api_key`` when omitted.
    model : str, optional
        Vision model name. Defaults to ``OPENAI_MODEL`` or ``gpt-4o-mini``.
    api_key : str, optional
        Defaults to the ``OPENAI_API_KEY`` environment variable.
    prompt : str, optional
        Instruction sent with every image.
    """

    def __init__(self, client=None, model=None, api_key=None, prompt=CAPTION_PROMPT):
        if client is None:
            from openai import OpenAI

            api_key = api_key or os.environ.get('OPENAI_API_KEY')
            if not api_key:
                raise CaptionError("OPENAI_API_KEY is not configured")
            client = OpenAI(api_key=api_key)

        self.client = client
        self.model = model or os.environ.get('OPENAI_MODEL', DEFAULT_CAPTION_MODEL)
        self.prompt = prompt

    def describe(self, data, media_type):
        """
        Return a short caption for one encoded image.

        Raises
        ------
        CaptionError
            If the request fails or returns no text.
        """
        image_data = base64.b64encode(data).decode('utf-8')

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": self.prompt},
                            {
                                "type": "image_url",
                                "image_url": {"url": f"data:{media_type};base64,{image_data}"},
                            },
                        ],
                    }
                ],
                max_tokens=CAPTION_MAX_TOKENS,
            )
        except Exception as exc:
            raise CaptionError(f"Caption request failed: {exc}") from exc

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise CaptionError("Caption response was empty")
        return content.strip()


def caption_image(image, captioner):
    """
    Caption one image.

    Returns
    -------
    ExtractedImage
        A copy of ``image`` with a caption, or ``NO_CAPTION`` when the image
        is a vector payload or the captioner fails.
    """
    if not image.is_raster():
        return image.with_caption(NO_CAPTION)

    try:
        caption = captioner.describe(image.data, image.media_type)
    except KeyboardInterrupt:
        raise
    except Exception as exc:
        logger.warning("No caption for %s: %s", image.name, exc)
        return image.with_caption(NO_CAPTION)

    return image.with_caption(caption)


def caption_images(images, captioner):
    """Caption every image in order; see ``caption_image``."""
    return [caption_image(image, captioner) for image in images]
