"""
Embedded image helpers.

Profile pictures and source uploads travel inside the document as data URIs
(data:<mime>;base64,<payload>).
"""

import base64
import binascii
import re
from io import BytesIO
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

DATA_URI_PATTERN = re.compile(r"^data:(?P<mime>[^;,]*)(?P<b64>;base64)?,(?P<data>.*)$", re.DOTALL)


def to_data_uri(payload: bytes, media_type: str) -> str:
    """Encode raw bytes as a base64 data URI."""
    return f"data:{media_type};base64,{base64.b64encode(payload).decode('ascii')}"


def decode_data_uri(uri: str) -> Optional[Tuple[str, bytes]]:
    """
    Split a data URI into (media type, raw bytes).

    Returns None when the value is empty or not a decodable data URI.
    """
    if not uri:
        return None
    match = DATA_URI_PATTERN.match(uri)
    if match is None:
        return None
    data = match.group("data")
    try:
        raw = base64.b64decode(data) if match.group("b64") else data.encode("utf-8")
    except (binascii.Error, ValueError):
        return None
    return match.group("mime") or "text/plain", raw


def load_image(uri: str) -> Optional[Image.Image]:
    """Open an embedded image as RGB, or None when it is absent or unreadable."""
    decoded = decode_data_uri(uri)
    if decoded is None:
        return None
    media_type, raw = decoded
    if not media_type.startswith("image/"):
        return None
    try:
        image = Image.open(BytesIO(raw))
        image.load()
    except (UnidentifiedImageError, OSError):
        return None
    return image.convert("RGB")


def cover_crop(image: Image.Image, width: int, height: int) -> Image.Image:
    """Scale and center-crop an image to fill width x height (CSS object-fit: cover)."""
    scale = max(width / image.width, height / image.height)
    resized = image.resize(
        (max(1, round(image.width * scale)), max(1, round(image.height * scale))),
        Image.Resampling.LANCZOS,
    )
    left = (resized.width - width) // 2
    top = (resized.height - height) // 2
    return resized.crop((left, top, left + width, top + height))


def png_bytes(image: Image.Image) -> bytes:
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()
