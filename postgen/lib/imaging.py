from __future__ import annotations
import base64
import binascii
import re
from io import BytesIO

from PIL import Image, UnidentifiedImageError

_DATAURL_RE = re.compile(r"^data:(image/[\w+.-]+);base64,(.+)$", re.IGNORECASE | re.DOTALL)

_ALLOWED_FORMATS = {"PNG": "image/png", "JPEG": "image/jpeg", "WEBP": "image/webp"}


def _sniff_mime(data: bytes) -> str:
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if data.startswith(b"\xff\xd8"):
        return "image/jpeg"
    if len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return "application/octet-stream"


def decode_image_b64(image_b64: str) -> bytes:
    """
    Decode 'data:image/png;base64,...' or raw base64 into bytes and check that
    it really is a PNG, JPEG or WEBP image. Raises ValueError otherwise.
    """
    if not image_b64 or not image_b64.strip():
        raise ValueError("empty base64")
    s = image_b64.strip()
    m = _DATAURL_RE.match(s)
    payload = m.group(2) if m else s
    # Normalize whitespace and padding
    payload = "".join(payload.split())
    payload += "=" * ((-len(payload)) % 4)
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"not valid base64: {e}") from e

    try:
        with Image.open(BytesIO(data)) as im:
            fmt = im.format
            im.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise ValueError(f"not a readable image: {e}") from e
    if fmt not in _ALLOWED_FORMATS:
        raise ValueError("image must be PNG, JPEG or WEBP")
    return data


def image_mime_type(data: bytes) -> str:
    return _sniff_mime(data)


def encode_b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")
