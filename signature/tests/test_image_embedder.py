from __future__ import annotations

import base64

from signature.logic.image_embedder import EmbeddedImage, PlaceholderFallback, decode_signature_image
from signature.tests.factories import image_data_uri, oversized_png_data_uri


def test_png_data_uri_decodes_with_alpha() -> None:
    result = decode_signature_image(image_data_uri("PNG", (200, 50)))
    assert isinstance(result, EmbeddedImage)
    assert result.media_type == "image/png"
    assert (result.width, result.height) == (200, 50)
    assert result.image.mode == "RGBA"


def test_jpeg_data_uri_decodes() -> None:
    result = decode_signature_image(image_data_uri("JPEG", (60, 90)))
    assert isinstance(result, EmbeddedImage)
    assert result.media_type == "image/jpeg"
    assert (result.width, result.height) == (60, 90)


def test_bare_base64_is_read_as_jpeg() -> None:
    bare = image_data_uri("JPEG").split(",", 1)[1]
    assert isinstance(decode_signature_image(bare), EmbeddedImage)


def test_corrupt_base64_falls_back() -> None:
    result = decode_signature_image("data:image/png;base64,@@not base64@@")
    assert isinstance(result, PlaceholderFallback)
    assert "base64" in result.reason


def test_valid_base64_of_garbage_falls_back() -> None:
    garbage = base64.b64encode(b"definitely not an image").decode("ascii")
    result = decode_signature_image(f"data:image/png;base64,{garbage}")
    assert isinstance(result, PlaceholderFallback)


def test_declared_type_must_match_content() -> None:
    jpeg_payload = image_data_uri("JPEG").split(",", 1)[1]
    result = decode_signature_image(f"data:image/png;base64,{jpeg_payload}")
    assert isinstance(result, PlaceholderFallback)
    assert "PNG" in result.reason


def test_decompression_bomb_falls_back() -> None:
    result = decode_signature_image(oversized_png_data_uri())
    assert isinstance(result, PlaceholderFallback)
    assert "undecodable" in result.reason


def test_base64_with_line_breaks_decodes() -> None:
    prefix, payload = image_data_uri("PNG", (40, 20)).split(",", 1)
    wrapped = "\r\n".join(payload[i:i + 76] for i in range(0, len(payload), 76))
    result = decode_signature_image(f"{prefix},{wrapped} ")
    assert isinstance(result, EmbeddedImage)
    assert (result.width, result.height) == (40, 20)
