"""Image encoding helpers.

Images cross the gateway boundary as base64 text plus a MIME type. This
module converts between files on disk, that transport encoding, and Pillow
images used for display and download.
"""

import base64
import binascii
import io
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path

from PIL import Image

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "image/jpeg"


@dataclass(frozen=True)
class EncodedImage:
    """An image in transport encoding.

    Attributes:
        data: Base64 text of the image bytes
        mime_type: MIME type of the encoded bytes (e.g. "image/png")
    """

    data: str
    mime_type: str = DEFAULT_MIME_TYPE

    def to_bytes(self) -> bytes:
        """Decode the base64 payload back to raw bytes."""
        return base64.b64decode(self.data)


def encode_bytes(raw: bytes, mime_type: str = DEFAULT_MIME_TYPE) -> EncodedImage:
    """Encode raw image bytes for transport."""
    return EncodedImage(data=base64.b64encode(raw).decode("ascii"), mime_type=mime_type)


def encode_image_file(path: str | Path) -> EncodedImage:
    """Read an image file and encode it for transport.

    The file is opened with Pillow to confirm it holds a readable image and
    to detect its MIME type. Extension-based detection is the fallback, then
    ``image/jpeg``.

    Args:
        path: Path to the image file

    Returns:
        EncodedImage with base64 data and detected MIME type

    Raises:
        OSError: If the file cannot be read or is not a recognizable image
    """
    path = Path(path)
    raw = path.read_bytes()

    # UnidentifiedImageError is an OSError subclass
    with Image.open(io.BytesIO(raw)) as img:
        mime_type = Image.MIME.get(img.format or "")

    if not mime_type:
        mime_type = mimetypes.guess_type(path.name)[0] or DEFAULT_MIME_TYPE

    logger.debug(f"Encoded {path.name}: {len(raw)} bytes as {mime_type}")
    return encode_bytes(raw, mime_type)


def decode_image(encoded: EncodedImage | str) -> Image.Image:
    """Decode a transport-encoded image into a Pillow image.

    Args:
        encoded: EncodedImage or bare base64 text

    Returns:
        Loaded PIL Image

    Raises:
        OSError: If the payload is not valid base64 or not an image
    """
    data = encoded.data if isinstance(encoded, EncodedImage) else encoded
    try:
        raw = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise OSError(f"Invalid image payload: {e}") from e

    image = Image.open(io.BytesIO(raw))
    image.load()
    return image


def save_download(encoded: EncodedImage, outputs_dir: Path, filename: str) -> Path:
    """Write an encoded image to disk as PNG for download.

    Args:
        encoded: Image to save
        outputs_dir: Directory to write into (created if missing)
        filename: Target filename

    Returns:
        Path of the written file
    """
    outputs_dir.mkdir(parents=True, exist_ok=True)
    target = outputs_dir / filename

    image = decode_image(encoded)
    if image.mode not in ("RGB", "RGBA"):
        image = image.convert("RGBA")
    image.save(target, format="PNG")

    logger.info(f"Saved download image to {target}")
    return target
