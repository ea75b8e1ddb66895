"""Pick glyph-like contours out of a contour forest.

A contour is accepted when:
1. it passes the region predicate itself,
2. no ancestor fails the predicate (otherwise it sits inside some
   non-glyph structure such as a plate frame),
3. its subtree holds at most ``max_children`` plausible contours
   (the counters of "0", "8", "B" and the like).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from text_region_mask.config import TextMaskConfig, default_config
from text_region_mask.contour_forest import ContourForest
from text_region_mask.imaging import BoundingBox, bounding_box
from text_region_mask.region_filter import keep

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AcceptedRegion:
    index: int  # position in the contour forest
    points: np.ndarray
    box: BoundingBox
    num_children: int


def _kept_flags(
    forest: ContourForest,
    image_size: tuple[int, int],
    cfg: TextMaskConfig,
) -> list[bool]:
    return [keep(node.points, image_size, cfg) for node in forest]


def count_children(
    forest: ContourForest,
    index: int,
    image_size: tuple[int, int],
    cfg: TextMaskConfig = default_config,
    kept: Sequence[bool] | None = None,
) -> int:
    """Count plausible contours below ``index``.

    Visits the first child, its forward and backward siblings, and
    every descendant of those, using an explicit stack so deeply nested
    input cannot exhaust the interpreter stack.

    Args:
        forest: Contour forest to walk.
        index: Contour whose subtree is counted (not counted itself).
        image_size: (width, height) of the working image.
        cfg: Thresholds for the region predicate.
        kept: Optional precomputed predicate result per contour.
    """
    if kept is None:
        kept = _kept_flags(forest, image_size, cfg)

    stop_at_zero = cfg.zero_index_sentinel
    count = 0
    visited = 0
    stack = [index]
    while stack:
        node = stack.pop()
        for member in forest.children(node, stop_at_zero):
            visited += 1
            if visited > len(forest):
                raise ValueError(f"contour forest below {index} contains a cycle")
            if kept[member]:
                count += 1
            stack.append(member)
    return count


def find_blocking_ancestor(
    forest: ContourForest,
    index: int,
    image_size: tuple[int, int],
    cfg: TextMaskConfig = default_config,
    kept: Sequence[bool] | None = None,
) -> int | None:
    """Return the nearest ancestor that fails the predicate, or None.

    The walk climbs through ancestors that pass the predicate and stops
    on the first one that does not.
    """
    if kept is None:
        kept = _kept_flags(forest, image_size, cfg)

    for ancestor in forest.ancestors(index, cfg.zero_index_sentinel):
        if not kept[ancestor]:
            return ancestor
    return None


def select_regions(
    forest: ContourForest,
    image_size: tuple[int, int],
    cfg: TextMaskConfig = default_config,
) -> list[AcceptedRegion]:
    """Return accepted regions in forest order."""
    kept = _kept_flags(forest, image_size, cfg)

    regions: list[AcceptedRegion] = []
    for i, node in enumerate(forest):
        box = bounding_box(node.points) if len(node.points) else BoundingBox(0, 0, 0, 0)
        parent = find_blocking_ancestor(forest, i, image_size, cfg, kept)
        num_children = count_children(forest, i, image_size, cfg, kept)

        few_children = num_children <= cfg.max_children
        if kept[i] and not (parent is not None and few_children) and few_children:
            regions.append(AcceptedRegion(i, node.points, box, num_children))
            logger.debug(
                "region %d: box=%s parent=%s children=%d",
                i, box.as_tuple(), parent, num_children,
            )
        else:
            logger.debug(
                "reject %d: kept=%s parent=%s children=%d",
                i, kept[i], parent, num_children,
            )

    logger.debug("accepted %d of %d contours", len(regions), len(forest))
    return regions
