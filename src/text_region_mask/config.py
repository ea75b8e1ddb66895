"""Tunable parameters for the text mask pipeline."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class TextMaskConfig:
    """All thresholds and limits used by region selection and binarization.

    Default values are calibrated for cropped license plates and signage
    photographed at a few hundred pixels across.
    """

    # -- Edge detection --
    # Constant black border added around the source before edge detection.
    # Keeps glyphs touching the crop edge from producing open contours.
    border_size: int = 50
    # Canny hysteresis thresholds, applied to each colour channel separately.
    canny_low: int = 200
    canny_high: int = 250

    # -- Region predicate --
    # Bounding box width / height limits. Glyph boxes are roughly square
    # to moderately elongated.
    min_aspect_ratio: float = 0.1
    max_aspect_ratio: float = 10.0
    # Minimum bounding box area in pixels. Rejects speckle noise.
    min_box_area: int = 15
    # Maximum bounding box area as fraction of the padded image area.
    # Rejects the plate border and large background blobs.
    max_area_fraction: float = 0.2
    # Max |dx| and |dy| between first and last contour point for the
    # contour to count as closed.
    closure_tolerance: int = 1

    # -- Region selection --
    # Maximum number of plausible descendants a glyph may contain.
    max_children: int = 2
    # Treat contour index 0 as "none" in sibling and ancestor walks: a walk
    # that reaches contour 0 ends there. Set False to visit contour 0 like
    # any other node.
    zero_index_sentinel: bool = True

    # -- Output --
    # Value the mask starts with before regions are painted.
    mask_background: int = 255

    def validate(self) -> None:
        if self.border_size < 0:
            raise ValueError(f"border_size must be >= 0, got {self.border_size}")
        if self.canny_low < 0 or self.canny_high < self.canny_low:
            raise ValueError(
                f"invalid Canny thresholds: low={self.canny_low}, high={self.canny_high}"
            )
        if not 0 < self.min_aspect_ratio <= self.max_aspect_ratio:
            raise ValueError(
                "aspect ratio limits must satisfy 0 < min <= max, got "
                f"{self.min_aspect_ratio}..{self.max_aspect_ratio}"
            )
        if self.min_box_area < 0:
            raise ValueError(f"min_box_area must be >= 0, got {self.min_box_area}")
        if not 0 < self.max_area_fraction <= 1:
            raise ValueError(
                f"max_area_fraction must be in (0, 1], got {self.max_area_fraction}"
            )
        if self.closure_tolerance < 0:
            raise ValueError(
                f"closure_tolerance must be >= 0, got {self.closure_tolerance}"
            )
        if self.max_children < 0:
            raise ValueError(f"max_children must be >= 0, got {self.max_children}")
        if not 0 <= self.mask_background <= 255:
            raise ValueError(
                f"mask_background must be in [0, 255], got {self.mask_background}"
            )


# Singleton default config used when callers pass none.
default_config = TextMaskConfig()
