"""Core functionality for Postcraft.

This module provides the backend-facing components:

- **PostcraftConfig / config**: Configuration using Pydantic Settings
- **Catalogs**: Fonts, color palettes, quote positions, aspect ratios
- **Encoding**: File and base64 conversion for image payloads
- **Gateway**: Backend contract, error taxonomy and the Gemini adapter
- **Prompt builder**: Edit prompt composition and fixed request templates

Usage Example
-------------
    from postcraft.core import config, create_gateway, compose_edit_prompt

    gateway = create_gateway(config)
    prompt = compose_edit_prompt("", quote="Adventure awaits")
    edited = await gateway.edit_image(image.data, image.mime_type, prompt)
"""

from postcraft.core.adapters import GeminiGateway, create_gateway
from postcraft.core.config import MissingCredentialError, PostcraftConfig, config
from postcraft.core.gateway import (
    EditError,
    GatewayBase,
    GatewayError,
    GenerationError,
    HashtagError,
    QuoteError,
)
from postcraft.core.prompt_builder import StyleSelection, compose_edit_prompt

__all__ = [
    "EditError",
    "GatewayBase",
    "GatewayError",
    "GeminiGateway",
    "GenerationError",
    "HashtagError",
    "MissingCredentialError",
    "PostcraftConfig",
    "QuoteError",
    "StyleSelection",
    "compose_edit_prompt",
    "config",
    "create_gateway",
]
