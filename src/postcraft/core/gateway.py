"""Base class and error taxonomy for generative-AI gateways.

A gateway exposes the four backend operations Postcraft relies on. Each is a
single request/response call: no retries, no cancellation, no timeout beyond
what the transport provides. Concrete backends live in
``postcraft.core.adapters``.

Error Taxonomy
--------------
GatewayError
    Base class for every backend failure.
GenerationError
    Image generation returned no image payload or failed in transport.
EditError
    Image editing returned no image payload or failed in transport.
QuoteError
    Quote generation failed for any reason.
HashtagError
    Hashtag response could not be parsed as ``{"hashtags": [...]}``.

Usage Example
-------------
    >>> from postcraft.core.adapters import create_gateway
    >>> gateway = create_gateway(config)
    >>> quote = await gateway.generate_quote()
    >>> tags = await gateway.generate_hashtags(quote)
"""

import logging
from abc import ABC, abstractmethod

from .catalog import AspectRatio
from .encoding import EncodedImage

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """Base class for backend failures. The message is user-presentable."""

    pass


class GenerationError(GatewayError):
    pass


class EditError(GatewayError):
    pass


class QuoteError(GatewayError):
    pass


class HashtagError(GatewayError):
    pass


class GatewayBase(ABC):
    """Abstract base class for generative-AI gateways.

    Attributes
    ----------
    name : str
        Human-readable name of the backend
    """

    name: str = "Base Gateway"

    @abstractmethod
    async def generate_image(self, prompt: str, aspect_ratio: AspectRatio) -> EncodedImage:
        """Generate one image from a text prompt.

        Raises:
            GenerationError: If no image payload is returned
        """

    @abstractmethod
    async def edit_image(
        self, image_data: str, mime_type: str, instruction: str
    ) -> EncodedImage:
        """Edit a base64-encoded image following a natural-language instruction.

        Raises:
            EditError: If no image payload is returned
        """

    @abstractmethod
    async def generate_quote(self) -> str:
        """Generate a short motivational quote.

        Raises:
            QuoteError: On any transport or response problem
        """

    @abstractmethod
    async def generate_hashtags(self, context: str) -> list[str]:
        """Generate hashtags (without ``#``) relevant to the context.

        Returns an empty list when the response carries no ``hashtags`` field.

        Raises:
            HashtagError: If the response cannot be parsed
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
