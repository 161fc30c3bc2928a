# signature/logic/image_embedder.py
"""Decoding of the signature image payload.

The payload is a data URI (``data:image/png;base64,...``). Decoding never
raises: anything that cannot be turned into a PNG or JPEG raster comes back
as a :class:`PlaceholderFallback`, and the renderer draws a placeholder box
instead of the image.
"""
from __future__ import annotations

import base64
import binascii
import logging
import re
from dataclasses import dataclass
from io import BytesIO
from typing import Union

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

_DATA_URI = re.compile(r"^data:image/(png|jpeg|jpg);base64,", re.IGNORECASE)

_WHITESPACE = re.compile(r"\s+")

_PIL_FORMATS = {"png": "PNG", "jpeg": "JPEG", "jpg": "JPEG"}


@dataclass(frozen=True)
class EmbeddedImage:
    image: Image.Image
    media_type: str

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height


@dataclass(frozen=True)
class PlaceholderFallback:
    reason: str


EmbedResult = Union[EmbeddedImage, PlaceholderFallback]


def decode_signature_image(data_uri: str) -> EmbedResult:
    """Turn a PNG/JPEG data URI into a loaded raster, or a fallback marker."""
    match = _DATA_URI.match(data_uri)
    declared = match.group(1).lower() if match else "jpeg"
    payload = data_uri[match.end():] if match else data_uri
    payload = _WHITESPACE.sub("", payload)

    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        logger.warning("Signature image is not valid base64: %s", exc)
        return PlaceholderFallback(f"invalid base64: {exc}")

    try:
        img = Image.open(BytesIO(raw))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        logger.warning("Signature image could not be decoded: %s", exc)
        return PlaceholderFallback(f"undecodable image: {exc}")

    expected = _PIL_FORMATS[declared]
    if img.format != expected:
        logger.warning("Signature image declared as %s but is %s", expected, img.format)
        return PlaceholderFallback(f"expected {expected}, got {img.format}")

    if expected == "PNG":
        return EmbeddedImage(image=img.convert("RGBA"), media_type="image/png")
    return EmbeddedImage(image=img.convert("RGB"), media_type="image/jpeg")
