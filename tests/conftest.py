from __future__ import annotations

import numpy as np
import pytest


def rect_contour(x: int, y: int, w: int, h: int) -> np.ndarray:
    """Perimeter of a w x h box traced clockwise from (x, y), like findContours."""
    pts = [(x + i, y) for i in range(w)]
    pts += [(x + w - 1, y + j) for j in range(1, h)]
    pts += [(x + i, y + h - 1) for i in range(w - 2, -1, -1)]
    pts += [(x, y + j) for j in range(h - 2, 0, -1)]
    return np.array(pts, dtype=np.int32)


@pytest.fixture
def make_rect():
    return rect_contour
