"""Decide whether a single contour looks like the outline of a glyph stroke."""

from __future__ import annotations

import numpy as np

from text_region_mask.config import TextMaskConfig, default_config
from text_region_mask.imaging import BoundingBox, bounding_box


def has_text_ratio(
    box: BoundingBox,
    image_size: tuple[int, int],
    cfg: TextMaskConfig = default_config,
) -> bool:
    """Check the box shape and size against glyph-like limits.

    ``image_size`` is (width, height) of the working image.
    """
    ratio = box.aspect_ratio
    if ratio < cfg.min_aspect_ratio or ratio > cfg.max_aspect_ratio:
        return False

    img_w, img_h = image_size
    image_area = img_w * img_h
    return cfg.min_box_area <= box.area <= image_area * cfg.max_area_fraction


def is_closed(points: np.ndarray, cfg: TextMaskConfig = default_config) -> bool:
    """True when the first and last points are within the closure tolerance.

    An empty contour is never closed.
    """
    if len(points) == 0:
        return False
    first = points[0]
    last = points[-1]
    tol = cfg.closure_tolerance
    return abs(int(first[0]) - int(last[0])) <= tol and abs(int(first[1]) - int(last[1])) <= tol


def keep(
    points: np.ndarray,
    image_size: tuple[int, int],
    cfg: TextMaskConfig = default_config,
) -> bool:
    # is_closed rejects empty contours before a box is computed
    return is_closed(points, cfg) and has_text_ratio(bounding_box(points), image_size, cfg)
