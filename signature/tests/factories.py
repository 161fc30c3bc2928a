"""Builders for test documents, images and request payloads."""
from __future__ import annotations

import base64
import struct
import zlib
from io import BytesIO
from typing import Tuple

from PIL import Image
from reportlab.pdfgen import canvas

FIXED_DATE = "01/02/2030"


def make_pdf_bytes(pages: int = 2, size: Tuple[float, float] = (612, 792)) -> bytes:
    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=size, invariant=True)
    for n in range(1, pages + 1):
        c.setFont("Helvetica", 14)
        c.drawString(72, size[1] - 72, f"Base page {n}")
        c.showPage()
    c.save()
    return buf.getvalue()


def image_data_uri(fmt: str = "PNG", size: Tuple[int, int] = (200, 50)) -> str:
    mode = "RGBA" if fmt == "PNG" else "RGB"
    img = Image.new(mode, size, (20, 20, 120, 255)[: len(mode)])
    buf = BytesIO()
    img.save(buf, format=fmt)
    media = "png" if fmt == "PNG" else "jpeg"
    return f"data:image/{media};base64," + base64.b64encode(buf.getvalue()).decode("ascii")


def text_field(value: str = "Alice", page: int = 1, **coords) -> dict:
    box = {"x": 10, "y": 10, "width": 100, "height": 20, "page": page}
    box.update(coords)
    return {"type": "text", "value": value, "coordinates": box}


def _png_chunk(kind: bytes, body: bytes) -> bytes:
    return struct.pack(">I", len(body)) + kind + body + struct.pack(">I", zlib.crc32(kind + body) & 0xFFFFFFFF)


def oversized_png_data_uri(width: int = 20000, height: int = 20000) -> str:
    """A PNG without pixel data whose header claims huge dimensions."""
    ihdr = struct.pack(">IIBBBBB", width, height, 8, 6, 0, 0, 0)
    data = b"\x89PNG\r\n\x1a\n" + _png_chunk(b"IHDR", ihdr) + _png_chunk(b"IEND", b"")
    return "data:image/png;base64," + base64.b64encode(data).decode("ascii")
