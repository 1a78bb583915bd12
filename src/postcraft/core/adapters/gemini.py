"""Gemini gateway adapter.

This module provides the gateway backed by Google's Gemini API through the
``google-genai`` SDK. It uses three models:

- **Imagen** (``config.image_model``) for text-to-image generation
- **Gemini image** (``config.edit_model``) for instruction-based editing
- **Gemini text** (``config.text_model``) for quotes and hashtags

All calls go through the SDK's async client (``client.aio``) so the Gradio
event loop is never blocked.

Response Handling
-----------------
- Image generation: first ``generated_images`` entry; missing bytes raise
  GenerationError.
- Image editing: first part of the first candidate carrying ``inline_data``;
  none raises EditError.
- Quotes: ``response.text`` trimmed; empty or failed raises QuoteError.
- Hashtags: structured JSON output ``{"hashtags": [...]}``; a missing field
  or null yields ``[]``, anything else raises HashtagError.

Usage Example
-------------
    >>> from postcraft.core.adapters.gemini import GeminiGateway
    >>> from postcraft.core.config import config
    >>>
    >>> gateway = GeminiGateway(config)
    >>> image = await gateway.generate_image("a misty fjord at dawn", AspectRatio.STORY)
"""

import base64
import json
import logging
from typing import Any

from google import genai
from google.genai import types

from postcraft.core.catalog import AspectRatio
from postcraft.core.config import PostcraftConfig
from postcraft.core.encoding import EncodedImage, encode_bytes
from postcraft.core.gateway import (
    EditError,
    GatewayBase,
    GenerationError,
    HashtagError,
    QuoteError,
)
from postcraft.core.prompt_builder import QUOTE_REQUEST, build_hashtag_request

logger = logging.getLogger(__name__)

GENERATED_MIME_TYPE = "image/jpeg"

HASHTAG_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "hashtags": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(
                type=types.Type.STRING,
                description="A trending Instagram hashtag without the # symbol.",
            ),
        )
    },
)


def _as_bytes(data: bytes | str) -> bytes:
    """Inline payloads arrive as bytes from the SDK, base64 text from raw JSON."""
    if isinstance(data, str):
        return base64.b64decode(data)
    return data


class GeminiGateway(GatewayBase):
    """Gateway for the Gemini API.

    Attributes
    ----------
    name : str
        Human-readable name ("Gemini")
    config : PostcraftConfig
        Configuration supplying model ids and the credential
    client : genai.Client
        SDK client (built from ``config.require_api_key()`` unless injected)
    """

    name = "Gemini"

    def __init__(self, config: PostcraftConfig, client: Any | None = None) -> None:
        """Initialize the gateway.

        Args:
            config: Configuration object
            client: Pre-built SDK client (tests inject a mock here)

        Raises:
            MissingCredentialError: If no client is given and no API key is configured
        """
        self.config = config
        self.client = client or genai.Client(api_key=config.require_api_key())
        logger.info(
            f"Initialized {self.name} gateway (image={config.image_model}, "
            f"edit={config.edit_model}, text={config.text_model})"
        )

    async def generate_image(self, prompt: str, aspect_ratio: AspectRatio) -> EncodedImage:
        logger.info(f"Generating image ({aspect_ratio.value}): {prompt[:80]}")
        try:
            response = await self.client.aio.models.generate_images(
                model=self.config.image_model,
                prompt=prompt,
                config=types.GenerateImagesConfig(
                    number_of_images=1,
                    output_mime_type=GENERATED_MIME_TYPE,
                    aspect_ratio=aspect_ratio.value,
                ),
            )
        except Exception as e:
            logger.error(f"Error generating image: {e}")
            raise GenerationError("Failed to generate image with Gemini.") from e

        generated = response.generated_images or []
        image = generated[0].image if generated else None
        if image is None or not image.image_bytes:
            logger.error("Image generation response contained no image data")
            raise GenerationError("No image data in response.")

        return encode_bytes(_as_bytes(image.image_bytes), GENERATED_MIME_TYPE)

    async def edit_image(
        self, image_data: str, mime_type: str, instruction: str
    ) -> EncodedImage:
        logger.info(f"Editing image ({mime_type}), instruction length {len(instruction)}")
        try:
            response = await self.client.aio.models.generate_content(
                model=self.config.edit_model,
                contents=[
                    types.Part.from_bytes(data=base64.b64decode(image_data), mime_type=mime_type),
                    types.Part.from_text(text=instruction),
                ],
                config=types.GenerateContentConfig(response_modalities=["IMAGE"]),
            )
        except Exception as e:
            logger.error(f"Error editing image: {e}")
            raise EditError("Failed to edit image with Gemini.") from e

        for candidate in (response.candidates or [])[:1]:
            parts = candidate.content.parts if candidate.content else None
            for part in parts or []:
                if part.inline_data and part.inline_data.data:
                    return encode_bytes(
                        _as_bytes(part.inline_data.data),
                        part.inline_data.mime_type or "image/png",
                    )

        logger.error("Image edit response contained no image data")
        raise EditError("No image data in response.")

    async def generate_quote(self) -> str:
        try:
            response = await self.client.aio.models.generate_content(
                model=self.config.text_model,
                contents=QUOTE_REQUEST,
            )
            quote = (response.text or "").strip()
        except Exception as e:
            logger.error(f"Error generating quote: {e}")
            raise QuoteError("Failed to generate a quote.") from e

        if not quote:
            raise QuoteError("Failed to generate a quote.")

        logger.info(f"Generated quote: {quote}")
        return quote

    async def generate_hashtags(self, context: str) -> list[str]:
        try:
            response = await self.client.aio.models.generate_content(
                model=self.config.text_model,
                contents=build_hashtag_request(context, self.config.hashtag_count),
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=HASHTAG_SCHEMA,
                ),
            )
        except Exception as e:
            logger.error(f"Error generating hashtags: {e}")
            raise HashtagError("Failed to generate hashtags.") from e

        return parse_hashtags(response.text)


def parse_hashtags(text: str | None) -> list[str]:
    """Parse a structured hashtag response.

    Args:
        text: JSON text of the form ``{"hashtags": ["travel", ...]}``

    Returns:
        Hashtags in response order; ``[]`` if the field is absent or null

    Raises:
        HashtagError: If the text is not a JSON object or the field is not a
            list of strings
    """
    try:
        result = json.loads((text or "").strip())
    except json.JSONDecodeError as e:
        logger.error(f"Unparseable hashtag response: {text!r}")
        raise HashtagError("Failed to generate hashtags.") from e

    if not isinstance(result, dict):
        raise HashtagError("Failed to generate hashtags.")

    hashtags = result.get("hashtags", [])
    if hashtags is None:
        return []
    if not isinstance(hashtags, list) or not all(isinstance(tag, str) for tag in hashtags):
        raise HashtagError("Failed to generate hashtags.")

    return hashtags
