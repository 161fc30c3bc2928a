from __future__ import annotations

import itertools
import math

import pytest

from signature.logic.aspect_fitter import fit_image

SIZES = [1, 3, 50, 120.5, 400, 1000]


@pytest.mark.parametrize(
    "img_w,img_h,box_w,box_h",
    [s for s in itertools.product(SIZES, repeat=4)][::7],
)
def test_fit_preserves_ratio_fits_and_centres(img_w, img_h, box_w, box_h) -> None:
    fitted = fit_image(img_w, img_h, box_w, box_h)

    assert fitted.width <= box_w + 1e-9
    assert fitted.height <= box_h + 1e-9
    assert math.isclose(fitted.width / fitted.height, img_w / img_h, rel_tol=1e-9)
    assert math.isclose(fitted.x_offset + fitted.width / 2, box_w / 2, rel_tol=1e-9)
    assert math.isclose(fitted.y_offset + fitted.height / 2, box_h / 2, rel_tol=1e-9)


def test_wide_image_is_clamped_to_box_width() -> None:
    fitted = fit_image(200, 50, 100, 100)
    assert (fitted.width, fitted.height) == (100, 25)
    assert (fitted.x_offset, fitted.y_offset) == (0, 37.5)


def test_tall_image_is_clamped_to_box_height() -> None:
    fitted = fit_image(50, 200, 100, 100)
    assert (fitted.width, fitted.height) == (25, 100)
    assert (fitted.x_offset, fitted.y_offset) == (37.5, 0)


def test_same_ratio_fills_box() -> None:
    fitted = fit_image(40, 20, 100, 50)
    assert (fitted.width, fitted.height, fitted.x_offset, fitted.y_offset) == (100, 50, 0, 0)
