from __future__ import annotations

import base64
import io
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from ad_composer.errors import ValidationError

# Pillow format name → MIME type accepted for uploads
SUPPORTED_FORMATS = {
    "PNG": "image/png",
    "JPEG": "image/jpeg",
    "WEBP": "image/webp",
}


def probe_image(data: bytes) -> tuple[int, int, str]:
    """Read dimensions and MIME type without decoding the full image.

    Raises ValidationError for anything that is not PNG, JPEG or WebP.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            fmt = img.format
            width, height = img.size
    except (UnidentifiedImageError, OSError) as exc:
        raise ValidationError("Uploaded file is not a readable image") from exc

    mime = SUPPORTED_FORMATS.get(fmt or "")
    if mime is None:
        raise ValidationError(f"Unsupported image format {fmt!r} (PNG, JPEG or WebP only)")
    return width, height, mime


def to_data_url(data: bytes, mime: str) -> str:
    """Raw image bytes → base64 data URL for the OpenAI vision API."""
    b64 = base64.b64encode(data).decode("utf-8")
    return f"data:{mime};base64,{b64}"


def anthropic_image_block(data: bytes, mime: str) -> dict:
    """Raw image bytes → Anthropic `image` content block."""
    return {
        "type": "image",
        "source": {
            "type": "base64",
            "media_type": mime,
            "data": base64.b64encode(data).decode("utf-8"),
        },
    }


def mime_for_filename(filename: str) -> str:
    suffix = Path(filename).suffix.lower()
    return {
        ".png": "image/png",
        ".webp": "image/webp",
    }.get(suffix, "image/jpeg")
