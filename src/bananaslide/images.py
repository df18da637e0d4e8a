"""Helpers for base64 image payloads.

Generated images travel through the engine as base64 strings; these helpers
convert at the edges (files, HTTP bodies) and inspect payloads with Pillow.
"""

from __future__ import annotations

import base64
import binascii
from io import BytesIO
from pathlib import Path

from PIL import Image

# Base64 prefixes of common image signatures
_MIME_SIGNATURES = (
    ("/9j/", "image/jpeg"),
    ("iVBORw0KGgo", "image/png"),
    ("R0lGOD", "image/gif"),
    ("UklGR", "image/webp"),
)


def encode_image(data: bytes) -> str:
    """Encode raw image bytes as base64 text."""
    return base64.b64encode(data).decode("ascii")


def decode_image(image: str) -> bytes:
    """Decode a base64 image, accepting ``data:`` URLs.

    Raises:
        ValueError: If the payload is not valid base64.
    """
    if image.startswith("data:") and "," in image:
        image = image.split(",", 1)[1]
    try:
        return base64.b64decode(image, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid base64 image data: {e}") from e


def detect_mime_type(image: str) -> str:
    """Guess the MIME type from the base64 signature, PNG when unknown."""
    for prefix, mime in _MIME_SIGNATURES:
        if image.startswith(prefix):
            return mime
    return "image/png"


def to_data_url(image: str) -> str:
    """Wrap a base64 image in a data URL."""
    return f"data:{detect_mime_type(image)};base64,{image}"


def encode_image_file(path: Path) -> str:
    """Read an image file as base64 (user supplied reference/content images)."""
    return encode_image(Path(path).read_bytes())


def image_dimensions(image: str) -> tuple[int, int]:
    """Pixel size of a base64 image."""
    with Image.open(BytesIO(decode_image(image))) as img:
        return img.size


def save_image(image: str, output_path: Path) -> Path:
    """Write a base64 image to disk in the format implied by the suffix.

    Args:
        image: Base64 image.
        output_path: Destination; ``.jpg``/``.jpeg`` is written as JPEG,
            anything else as PNG.

    Returns:
        Path to the saved image.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with Image.open(BytesIO(decode_image(image))) as img:
        if output_path.suffix.lower() in (".jpg", ".jpeg"):
            if img.mode in ("RGBA", "P", "LA"):
                img = img.convert("RGB")
            img.save(output_path, format="JPEG", quality=95, optimize=True)
        else:
            img.save(output_path, format="PNG")

    return output_path
