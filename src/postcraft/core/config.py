"""Configuration management for Postcraft.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the POSTCRAFT_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (POSTCRAFT_* prefix)
2. .env file in the project root
3. Default values defined in PostcraftConfig

Example .env file:
    POSTCRAFT_GEMINI_API_KEY=your-key-here
    POSTCRAFT_EDIT_MODEL=gemini-2.5-flash-image
    POSTCRAFT_OUTPUTS_DIR=outputs

The backend credential is also accepted under the unprefixed names
``GEMINI_API_KEY`` and ``API_KEY``.

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
A missing credential does not fail the import; it is reported by
:meth:`PostcraftConfig.require_api_key` when the gateway is built at startup.

Usage Example
-------------
    from postcraft.core.config import config

    api_key = config.require_api_key()
    print(config.edit_model)
"""

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MissingCredentialError(RuntimeError):
    """Raised when the generative-AI backend credential is not configured.

    This is the only fatal condition of the application: without a credential
    no stage can reach the backend.
    """

    pass


class PostcraftConfig(BaseSettings):
    """Main configuration for Postcraft.

    Attributes
    ----------
    Backend Settings:
        gemini_api_key : str | None
            Credential for the Gemini API (required at startup)
        image_model : str
            Model id used to generate images from text
        edit_model : str
            Model id used to edit images from instructions
        text_model : str
            Model id used for quotes and hashtags
        hashtag_count : int
            Number of hashtags requested from the backend

    Paths:
        outputs_dir : Path
            Directory where downloadable post images are written
        download_filename : str
            Filename of the downloadable post image

    UI Settings:
        gradio_server_name : str
            Server bind address (0.0.0.0 for local network)
        gradio_server_port : int
            Server port (1024-65535)
        gradio_share : bool
            Create public gradio.live link (keep False for local-only)

    Examples
    --------
        >>> custom_config = PostcraftConfig(
        ...     gemini_api_key="test-key",
        ...     outputs_dir="/tmp/postcraft",
        ... )
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="POSTCRAFT_",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Backend credential
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("POSTCRAFT_GEMINI_API_KEY", "GEMINI_API_KEY", "API_KEY"),
        description="Credential for the Gemini API",
    )

    # Backend models
    image_model: str = Field(
        default="imagen-4.0-generate-001",
        description="Model id for text-to-image generation",
    )
    edit_model: str = Field(
        default="gemini-2.5-flash-image",
        description="Model id for instruction-based image editing",
    )
    text_model: str = Field(
        default="gemini-2.5-flash",
        description="Model id for quote and hashtag generation",
    )
    hashtag_count: int = Field(
        default=10,
        description="Number of hashtags requested per generation",
        ge=1,
        le=30,
    )

    # Paths
    outputs_dir: Path = Field(
        default=Path("outputs"),
        description="Directory to save downloadable post images",
    )
    download_filename: str = Field(
        default="ai-generated-post.png",
        description="Filename of the downloadable post image",
    )

    # UI settings
    gradio_server_name: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    gradio_server_port: int = Field(
        default=7860,
        description="Server port",
        ge=1024,
        le=65535,
    )
    gradio_share: bool = Field(
        default=False,
        description="Create public gradio.live link (keep False for local-only)",
    )

    def __init__(self, **kwargs):
        """Initialize configuration and create the outputs directory.

        Args:
            **kwargs: Configuration overrides (typically from environment variables)
        """
        super().__init__(**kwargs)

        self.outputs_dir.mkdir(parents=True, exist_ok=True)

    def require_api_key(self) -> str:
        """Return the backend credential or fail.

        Returns:
            The configured API key

        Raises:
            MissingCredentialError: If no non-blank key is configured
        """
        if not self.gemini_api_key or not self.gemini_api_key.strip():
            raise MissingCredentialError(
                "Gemini API key is not set. Export POSTCRAFT_GEMINI_API_KEY "
                "(or GEMINI_API_KEY) before starting Postcraft."
            )
        return self.gemini_api_key.strip()


# Global configuration instance
# Loads values from environment variables (POSTCRAFT_* prefix) and .env file.
config = PostcraftConfig()
