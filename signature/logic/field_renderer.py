# signature/logic/field_renderer.py
"""
Drawing rules for form fields.

Each field type has exactly one rule. Rules draw onto a reportlab canvas that
has the size of the target page; the canvas is later merged onto that page by
:class:`signature.logic.pdf_signer.PdfSigner`. Coordinates are PDF points with
the origin at the bottom-left corner, the same convention reportlab uses.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Dict, Optional, Tuple

from reportlab.lib.utils import ImageReader
from reportlab.pdfgen.canvas import Canvas

from core.helpers.date_time_helper import locale_date_str
from ..models.field import Field, FieldType
from .aspect_fitter import fit_image
from .image_embedder import EmbeddedImage, EmbedResult, PlaceholderFallback

logger = logging.getLogger(__name__)

Rgb = Tuple[float, float, float]

_BLACK: Rgb = (0, 0, 0)
_WHITE: Rgb = (1, 1, 1)
_RED: Rgb = (1, 0, 0)
_LIGHT_RED: Rgb = (1, 0.9, 0.9)
_BLUE: Rgb = (0.2, 0.4, 0.8)
_LIGHT_BLUE: Rgb = (0.95, 0.95, 1)
_MAGENTA: Rgb = (0.8, 0.2, 0.8)
_LIGHT_MAGENTA: Rgb = (1, 0.95, 1)

_FONT = "Helvetica"
_TEXT_INSET = 5
_BASELINE_DROP = 6
_RADIO_MARGIN = 2


class RenderOutcome(str, Enum):
    DRAWN = "drawn"
    SKIPPED = "skipped"
    PLACEHOLDER = "placeholder"


def resolve_page_index(page: float, total_pages: int) -> int:
    """0-based page index; pages past the end clamp to the last page."""
    return min(int(page) - 1, total_pages - 1)


class FieldRenderer:
    """Dispatches each field to the drawing rule of its type."""

    def __init__(self, *, signature_opacity: float = 0.9,
                 date_text: Optional[Callable[[], str]] = None) -> None:
        self._opacity = signature_opacity
        self._date_text = date_text or locale_date_str
        self._rules: Dict[FieldType, Callable[[Canvas, Field, Optional[EmbedResult]], RenderOutcome]] = {
            FieldType.SIGNATURE: self._draw_signature,
            FieldType.TEXT: self._draw_text,
            FieldType.DATE: self._draw_date,
            FieldType.RADIO: self._draw_radio,
            FieldType.IMAGE: self._draw_image_placeholder,
        }
        missing = set(FieldType) - set(self._rules)
        if missing:
            raise RuntimeError(f"No drawing rule for field type(s): {sorted(m.value for m in missing)}")

    def render(self, c: Canvas, field: Field, signature: Optional[EmbedResult] = None) -> RenderOutcome:
        outcome = self._rules[field.type](c, field, signature)
        logger.debug("Rendered %s field on page %s: %s",
                     field.type.value, field.coordinates.page, outcome.value)
        return outcome

    # ------------------------------------------------------------------ #
    #  Primitives                                                        #
    # ------------------------------------------------------------------ #
    @staticmethod
    def _box(c: Canvas, field: Field, *, border: Rgb, fill: Rgb, border_width: float) -> None:
        co = field.coordinates
        c.saveState()
        c.setStrokeColorRGB(*border)
        c.setFillColorRGB(*fill)
        c.setLineWidth(border_width)
        c.rect(co.x, co.y, co.width, co.height, stroke=1, fill=1)
        c.restoreState()

    @staticmethod
    def _label(c: Canvas, text: str, x: float, y: float, *, size: int, color: Rgb) -> None:
        c.saveState()
        c.setFillColorRGB(*color)
        c.setFont(_FONT, size)
        c.drawString(x, y, text)
        c.restoreState()

    @staticmethod
    def _baseline(field: Field) -> float:
        co = field.coordinates
        return co.y + co.height / 2 - _BASELINE_DROP

    # ------------------------------------------------------------------ #
    #  Rules                                                             #
    # ------------------------------------------------------------------ #
    def _draw_signature(self, c: Canvas, field: Field, signature: Optional[EmbedResult]) -> RenderOutcome:
        if signature is None:
            return RenderOutcome.SKIPPED

        if isinstance(signature, PlaceholderFallback):
            logger.info("Signature image unusable (%s), drawing placeholder", signature.reason)
            return self._draw_signature_placeholder(c, field)

        assert isinstance(signature, EmbeddedImage)
        co = field.coordinates
        fitted = fit_image(signature.width, signature.height, co.width, co.height)
        c.saveState()
        try:
            c.setFillAlpha(self._opacity)
            c.drawImage(
                ImageReader(signature.image),
                co.x + fitted.x_offset,
                co.y + fitted.y_offset,
                width=fitted.width,
                height=fitted.height,
                mask="auto",
            )
        except Exception as exc:
            c.restoreState()
            logger.warning("Signature image could not be embedded: %s", exc)
            return self._draw_signature_placeholder(c, field)
        c.restoreState()
        logger.info("Added signature at (%s, %s) on page %s", co.x, co.y, co.page)
        return RenderOutcome.DRAWN

    def _draw_signature_placeholder(self, c: Canvas, field: Field) -> RenderOutcome:
        co = field.coordinates
        self._box(c, field, border=_RED, fill=_LIGHT_RED, border_width=1)
        self._label(c, "SIGNATURE", co.x + _TEXT_INSET, self._baseline(field), size=10, color=_RED)
        return RenderOutcome.PLACEHOLDER

    def _draw_text(self, c: Canvas, field: Field, _signature: Optional[EmbedResult]) -> RenderOutcome:
        if not field.value:
            return RenderOutcome.SKIPPED
        co = field.coordinates
        self._box(c, field, border=_BLACK, fill=_WHITE, border_width=0.5)
        self._label(c, field.value, co.x + _TEXT_INSET, self._baseline(field), size=12, color=_BLACK)
        return RenderOutcome.DRAWN

    def _draw_date(self, c: Canvas, field: Field, _signature: Optional[EmbedResult]) -> RenderOutcome:
        co = field.coordinates
        self._box(c, field, border=_BLUE, fill=_LIGHT_BLUE, border_width=1)
        self._label(c, self._date_text(), co.x + _TEXT_INSET, self._baseline(field), size=10, color=_BLUE)
        return RenderOutcome.DRAWN

    def _draw_radio(self, c: Canvas, field: Field, _signature: Optional[EmbedResult]) -> RenderOutcome:
        co = field.coordinates
        radius = min(co.width, co.height) / 2 - _RADIO_MARGIN
        if radius <= 0:
            return RenderOutcome.SKIPPED
        c.saveState()
        c.setStrokeColorRGB(*_BLACK)
        c.setFillColorRGB(*_WHITE)
        c.setLineWidth(1)
        c.circle(co.x + co.width / 2, co.y + co.height / 2, radius, stroke=1, fill=1)
        c.restoreState()
        return RenderOutcome.DRAWN

    def _draw_image_placeholder(self, c: Canvas, field: Field, _signature: Optional[EmbedResult]) -> RenderOutcome:
        # structural placeholder only, the image itself is never decoded
        co = field.coordinates
        self._box(c, field, border=_MAGENTA, fill=_LIGHT_MAGENTA, border_width=1)
        self._label(c, "[IMAGE]", co.x + co.width / 2 - 20, self._baseline(field), size=10, color=_MAGENTA)
        return RenderOutcome.DRAWN
