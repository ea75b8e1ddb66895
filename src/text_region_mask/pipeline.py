"""Locate glyph-like regions in a photo and binarize them for OCR.

Pipeline:
1. Pad the source with a constant black border.
2. Canny edges on each colour channel, OR-ed together.
3. Extract the full contour tree from the edge map.
4. Select glyph-like contours (shape, closure, ancestors, children).
5. Threshold each selected box at the mean luma of its own contour,
   with polarity chosen against the luma just outside the box corners.

Everything outside the selected boxes stays white.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from text_region_mask.binarizer import binarize_regions
from text_region_mask.config import TextMaskConfig, default_config
from text_region_mask.contour_forest import extract_contours
from text_region_mask.imaging import detect_edges, luma_map, pad_image
from text_region_mask.region_selector import AcceptedRegion, select_regions

logger = logging.getLogger(__name__)


@dataclass
class TextMaskResult:
    mask: np.ndarray  # uint8, padded size
    regions: list[AcceptedRegion]
    edges: np.ndarray  # uint8 edge map the contours came from
    contour_count: int


def _check_image(image: np.ndarray | None) -> np.ndarray:
    if image is None or image.size == 0:
        raise ValueError("image is empty")
    if image.ndim not in (2, 3) or (image.ndim == 3 and image.shape[2] not in (3, 4)):
        raise ValueError(f"expected an H x W or H x W x 3 image, got shape {image.shape}")
    if image.dtype != np.uint8:
        image = np.clip(image, 0, 255).astype(np.uint8)
    if image.ndim == 3 and image.shape[2] == 4:
        image = image[..., :3]
    return np.ascontiguousarray(image)


def analyze_image(
    image: np.ndarray,
    config: TextMaskConfig | None = None,
) -> TextMaskResult:
    """Run the full pipeline and keep the intermediate products.

    Args:
        image: RGB image (H x W x 3) or grayscale (H x W), uint8.
        config: Optional configuration override. Uses module defaults
                if not provided.
    """
    cfg = config or default_config
    cfg.validate()
    src = _check_image(image)

    padded = pad_image(src, cfg.border_size)
    edges = detect_edges(padded, cfg.canny_low, cfg.canny_high)
    forest = extract_contours(edges)

    h, w = edges.shape[:2]
    regions = select_regions(forest, (w, h), cfg)
    mask = binarize_regions(luma_map(padded), regions, cfg)

    logger.info(
        "text mask %dx%d: %d contours, %d regions",
        w, h, len(forest), len(regions),
    )
    return TextMaskResult(mask=mask, regions=regions, edges=edges, contour_count=len(forest))


def compute_text_mask(
    image: np.ndarray,
    config: TextMaskConfig | None = None,
) -> np.ndarray:
    """Return the single-channel text mask for ``image`` (border-padded size)."""
    return analyze_image(image, config).mask
