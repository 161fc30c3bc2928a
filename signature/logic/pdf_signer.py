from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from io import BytesIO
from typing import Dict, List, Optional, Sequence, Tuple

from pypdf import PdfReader, PdfWriter
from reportlab.pdfgen import canvas

from ..models.field import Field
from .field_renderer import FieldRenderer, RenderOutcome, resolve_page_index
from .image_embedder import EmbedResult, decode_signature_image

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderReport:
    """Serialized output plus what happened to each field, in request order."""
    data: bytes
    outcomes: Tuple[RenderOutcome, ...]
    page_count: int

    @property
    def modified(self) -> bool:
        return any(o != RenderOutcome.SKIPPED for o in self.outcomes)


class PdfSigner:
    def __init__(self, renderer: Optional[FieldRenderer] = None) -> None:
        self._renderer = renderer or FieldRenderer()

    def _make_overlay(
        self,
        page_w: float,
        page_h: float,
        fields: Sequence[Tuple[int, Field]],
        signature: Optional[EmbedResult],
        outcomes: List[Optional[RenderOutcome]],
    ) -> Optional[bytes]:
        """
        Draws all fields of one page onto a page-sized overlay.
        Returns None when every rule was a no-op.
        """
        buf = BytesIO()
        c = canvas.Canvas(buf, pagesize=(page_w, page_h), invariant=True)
        drew = False
        for idx, field in fields:
            outcome = self._renderer.render(c, field, signature)
            outcomes[idx] = outcome
            drew = drew or outcome != RenderOutcome.SKIPPED
        if not drew:
            return None
        c.showPage()
        c.save()
        return buf.getvalue()

    def apply_fields(
        self,
        source: bytes,
        fields: Sequence[Field],
        *,
        signature_image: Optional[str] = None,
    ) -> RenderReport:
        """
        Renders *fields* onto a copy of *source* and serializes the result.

        The signature payload is decoded once and shared by all signature
        fields. If no rule draws anything the source bytes are returned as-is.
        """
        reader = PdfReader(BytesIO(source))
        total = len(reader.pages)
        signature = decode_signature_image(signature_image) if signature_image else None

        by_page: Dict[int, List[Tuple[int, Field]]] = defaultdict(list)
        for idx, field in enumerate(fields):
            by_page[resolve_page_index(field.coordinates.page, total)].append((idx, field))

        outcomes: List[Optional[RenderOutcome]] = [None] * len(fields)
        overlays: Dict[int, bytes] = {}
        for page_index, page_fields in by_page.items():
            box = reader.pages[page_index].mediabox
            overlay = self._make_overlay(float(box.width), float(box.height),
                                         page_fields, signature, outcomes)
            if overlay is not None:
                overlays[page_index] = overlay

        if not overlays:
            logger.debug("No drawing operations, returning source document unchanged")
            return RenderReport(data=source, outcomes=tuple(outcomes), page_count=total)

        writer = PdfWriter()
        for i, page in enumerate(reader.pages):
            if i in overlays:
                overlay_reader = PdfReader(BytesIO(overlays[i]))
                page.merge_page(overlay_reader.pages[0])
            writer.add_page(page)
        if reader.metadata:
            writer.add_metadata(reader.metadata)

        out = BytesIO()
        writer.write(out)
        return RenderReport(data=out.getvalue(), outcomes=tuple(outcomes), page_count=total)
