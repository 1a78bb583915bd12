"""Shared pytest fixtures for Postcraft tests."""

import asyncio
import base64
import io
import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest
from PIL import Image

from postcraft.core.catalog import AspectRatio
from postcraft.core.config import PostcraftConfig
from postcraft.core.encoding import EncodedImage
from postcraft.core.gateway import GatewayBase
from postcraft.ui.models import Session


def make_png_bytes(color: str = "red", size: tuple[int, int] = (8, 8)) -> bytes:
    """Create a small in-memory PNG."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_encoded(color: str = "red", mime_type: str = "image/png") -> EncodedImage:
    return EncodedImage(base64.b64encode(make_png_bytes(color)).decode("ascii"), mime_type)


class FakeGateway(GatewayBase):
    """In-memory gateway recording every call.

    Set ``*_result`` to control return values, ``*_error`` to raise instead,
    and ``gate`` to an ``asyncio.Event`` to hold calls until it is set.
    """

    name = "Fake"

    def __init__(self):
        self.calls: list[tuple] = []
        self.generate_result = make_encoded("blue", "image/jpeg")
        self.edit_result = make_encoded("green")
        self.quote_result = "Adventure awaits"
        self.hashtags_result = ["travel", "nature"]
        self.generate_error: Exception | None = None
        self.edit_error: Exception | None = None
        self.quote_error: Exception | None = None
        self.hashtags_error: Exception | None = None
        self.gate: asyncio.Event | None = None

    async def _respond(self, result, error):
        if self.gate is not None:
            await self.gate.wait()
        if error is not None:
            raise error
        return result

    async def generate_image(self, prompt: str, aspect_ratio: AspectRatio) -> EncodedImage:
        self.calls.append(("generate_image", prompt, aspect_ratio))
        return await self._respond(self.generate_result, self.generate_error)

    async def edit_image(self, image_data: str, mime_type: str, instruction: str) -> EncodedImage:
        self.calls.append(("edit_image", image_data, mime_type, instruction))
        return await self._respond(self.edit_result, self.edit_error)

    async def generate_quote(self) -> str:
        self.calls.append(("generate_quote",))
        return await self._respond(self.quote_result, self.quote_error)

    async def generate_hashtags(self, context: str) -> list[str]:
        self.calls.append(("generate_hashtags", context))
        return await self._respond(self.hashtags_result, self.hashtags_error)

    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> PostcraftConfig:
    """Create a test configuration with a temporary outputs directory."""
    return PostcraftConfig(
        _env_file=None,
        gemini_api_key="test-key",
        outputs_dir=str(temp_dir / "outputs"),
    )


@pytest.fixture
def sample_image_path(temp_dir: Path) -> Path:
    """Write a small PNG to disk."""
    path = temp_dir / "sample.png"
    path.write_bytes(make_png_bytes())
    return path


@pytest.fixture
def encoded_image() -> EncodedImage:
    return make_encoded()


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def session() -> Session:
    """Create an empty session for testing."""
    return Session()
