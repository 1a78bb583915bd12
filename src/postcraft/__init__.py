"""Postcraft - AI-assisted social media post creation."""

__version__ = "0.1.0"

from postcraft.core.config import PostcraftConfig, config
from postcraft.core.gateway import GatewayBase

__all__ = [
    "GatewayBase",
    "PostcraftConfig",
    "config",
]
