from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FittedBox:
    """Scaled image size plus the offset that centres it in its box."""
    width: float
    height: float
    x_offset: float
    y_offset: float


def fit_image(image_width: float, image_height: float,
              max_width: float, max_height: float) -> FittedBox:
    """
    Scale an image into a box without distortion and centre it.

    A relatively wider image is clamped to the box width, otherwise to the box
    height. Box dimensions must be positive (guaranteed by coordinate validation).
    """
    image_aspect = image_width / image_height
    box_aspect = max_width / max_height

    if image_aspect > box_aspect:
        width = max_width
        height = max_width / image_aspect
    else:
        height = max_height
        width = max_height * image_aspect

    return FittedBox(
        width=width,
        height=height,
        x_offset=(max_width - width) / 2,
        y_offset=(max_height - height) / 2,
    )
