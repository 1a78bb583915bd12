"""Gateway adapters for generative-AI backends.

Currently only the Gemini backend is implemented.
"""

from postcraft.core.config import PostcraftConfig
from postcraft.core.gateway import GatewayBase

from .gemini import GeminiGateway


def create_gateway(config: PostcraftConfig) -> GatewayBase:
    """Build the configured gateway.

    Raises:
        MissingCredentialError: If the backend credential is not configured
    """
    return GeminiGateway(config)


__all__ = ["GeminiGateway", "create_gateway"]
