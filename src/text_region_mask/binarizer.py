"""Threshold accepted regions at their own contour brightness into the output mask."""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np

from text_region_mask.config import TextMaskConfig, default_config
from text_region_mask.imaging import BoundingBox, sample_luma
from text_region_mask.region_selector import AcceptedRegion


def foreground_estimate(luma: np.ndarray, points: np.ndarray) -> float:
    """Mean luma along the contour. Points outside the image count as 0."""
    if len(points) == 0:
        return 0.0
    h, w = luma.shape[:2]
    xs = points[:, 0]
    ys = points[:, 1]
    inside = (xs >= 0) & (xs < w) & (ys >= 0) & (ys < h)
    values = np.zeros(len(points), dtype=np.float64)
    values[inside] = luma[ys[inside], xs[inside]]
    return float(values.mean())


def background_points(box: BoundingBox) -> list[tuple[int, int]]:
    """Twelve sample points ringing the four box corners, three per corner."""
    x, y, x2, y2 = box.x, box.y, box.x2, box.y2
    return [
        # top left
        (x - 1, y - 1), (x - 1, y), (x, y - 1),
        # top right
        (x2 + 1, y - 1), (x2 + 1, y), (x2, y - 1),
        # bottom left
        (x - 1, y2 + 1), (x - 1, y2), (x, y2 + 1),
        # bottom right
        (x2 + 1, y2 + 1), (x2, y2 + 1), (x2 + 1, y2),
    ]


def background_samples(luma: np.ndarray, box: BoundingBox) -> list[int]:
    return [sample_luma(luma, px, py) for px, py in background_points(box)]


def background_estimate(luma: np.ndarray, box: BoundingBox) -> float:
    # Even sample count: median averages the two middle values.
    return float(np.median(background_samples(luma, box)))


def fill_values(foreground: float, background: float) -> tuple[int, int]:
    """Return (foreground_fill, background_fill) for the region polarity.

    A glyph at least as bright as its surroundings is painted white on
    black, a darker glyph black on white.
    """
    if foreground >= background:
        return 255, 0
    return 0, 255


def fill_region(
    mask: np.ndarray,
    luma: np.ndarray,
    box: BoundingBox,
    threshold: float,
    fg_fill: int,
    bg_fill: int,
) -> None:
    """Paint ``box`` of ``mask`` in place, thresholding luma at ``threshold``."""
    h, w = mask.shape[:2]
    x0, y0, x1, y1 = box.clip(w, h)
    if x0 >= x1 or y0 >= y1:
        return
    patch = luma[y0:y1, x0:x1]
    mask[y0:y1, x0:x1] = np.where(patch > threshold, bg_fill, fg_fill).astype(mask.dtype)


def binarize_regions(
    luma: np.ndarray,
    regions: Iterable[AcceptedRegion],
    cfg: TextMaskConfig = default_config,
) -> np.ndarray:
    """Build the output mask from accepted regions of a luma plane.

    Regions are painted in order; where boxes overlap the later region
    wins.
    """
    mask = np.full(luma.shape[:2], cfg.mask_background, dtype=np.uint8)
    for region in regions:
        fg = foreground_estimate(luma, region.points)
        bg = background_estimate(luma, region.box)
        fg_fill, bg_fill = fill_values(fg, bg)
        fill_region(mask, luma, region.box, fg, fg_fill, bg_fill)
    return mask
