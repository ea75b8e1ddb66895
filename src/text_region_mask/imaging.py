"""Pixel-level helpers: luma sampling, bounding boxes, padding, edges."""

from __future__ import annotations

from dataclasses import dataclass

import cv2
import numpy as np

# Weighted RGB -> luma coefficients.
LUMA_WEIGHTS = (0.30, 0.59, 0.11)


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned rectangle (x, y, width, height)."""

    x: int
    y: int
    width: int
    height: int

    @property
    def x2(self) -> int:
        return self.x + self.width

    @property
    def y2(self) -> int:
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def aspect_ratio(self) -> float:
        """Width to height ratio. Returns inf if height is 0."""
        return self.width / self.height if self.height > 0 else float("inf")

    def clip(self, width: int, height: int) -> tuple[int, int, int, int]:
        """Return (x0, y0, x1, y1) clipped to an image of the given size.

        The result may be empty (x0 == x1 or y0 == y1) when the box lies
        entirely outside the image.
        """
        x0 = min(max(self.x, 0), width)
        y0 = min(max(self.y, 0), height)
        x1 = min(max(self.x2, x0), width)
        y1 = min(max(self.y2, y0), height)
        return x0, y0, x1, y1

    def as_tuple(self) -> tuple[int, int, int, int]:
        return self.x, self.y, self.width, self.height


def bounding_box(points: np.ndarray) -> BoundingBox:
    x, y, w, h = cv2.boundingRect(points)
    return BoundingBox(int(x), int(y), int(w), int(h))


def luma_map(image: np.ndarray) -> np.ndarray:
    """Convert an RGB (H x W x 3) image to a uint8 luma plane.

    Grayscale (H x W) input is returned as uint8 unchanged. Values are
    rounded rather than truncated so that neutral greys keep their level.
    """
    if image.ndim == 2:
        return image.astype(np.uint8, copy=False)
    rgb = image[..., :3].astype(np.float32)
    r_w, g_w, b_w = LUMA_WEIGHTS
    luma = rgb[..., 0] * r_w + rgb[..., 1] * g_w + rgb[..., 2] * b_w
    return np.clip(np.rint(luma), 0, 255).astype(np.uint8)


def sample_luma(luma: np.ndarray, x: int, y: int) -> int:
    """Luma at (x, y), or 0 when the coordinate is outside the image."""
    h, w = luma.shape[:2]
    if x < 0 or x >= w or y < 0 or y >= h:
        return 0
    return int(luma[y, x])


def pad_image(image: np.ndarray, border: int) -> np.ndarray:
    """Surround the image with a constant black border."""
    if border <= 0:
        return image.copy()
    return cv2.copyMakeBorder(
        image, border, border, border, border, cv2.BORDER_CONSTANT, value=0
    )


def detect_edges(image: np.ndarray, low: int, high: int) -> np.ndarray:
    """Canny edges of every channel, OR-ed into a single binary map."""
    if image.ndim == 2:
        return cv2.Canny(image, low, high)

    edges = np.zeros(image.shape[:2], dtype=np.uint8)
    for chan in cv2.split(image):
        edges = cv2.bitwise_or(edges, cv2.Canny(chan, low, high))
    return edges
