"""Tests for per-region polarity and thresholding."""

import numpy as np

from text_region_mask.binarizer import (
    background_estimate,
    background_points,
    background_samples,
    binarize_regions,
    fill_region,
    fill_values,
    foreground_estimate,
)
from text_region_mask.config import TextMaskConfig
from text_region_mask.imaging import BoundingBox, luma_map, sample_luma
from text_region_mask.region_selector import AcceptedRegion

BOX = BoundingBox(10, 10, 10, 10)


def _scene(contour_luma: int, background_luma: int, interior_luma: int, make_rect):
    """Luma plane with a box outline, a filled interior and a uniform surround."""
    luma = np.full((40, 40), background_luma, dtype=np.uint8)
    luma[11:19, 11:19] = interior_luma
    points = make_rect(BOX.x, BOX.y, BOX.width, BOX.height)
    luma[points[:, 1], points[:, 0]] = contour_luma
    return luma, AcceptedRegion(index=0, points=points, box=BOX, num_children=0)


def test_bright_glyph_is_white(make_rect):
    luma, region = _scene(200, 50, 230, make_rect)

    fg = foreground_estimate(luma, region.points)
    bg = background_estimate(luma, region.box)

    assert fg == 200.0
    assert bg == 50.0
    assert fill_values(fg, bg) == (255, 0)

    mask = binarize_regions(luma, [region])
    assert (mask[10, 10:20] == 255).all(), "contour pixels are at the threshold -> foreground"
    assert (mask[11:19, 11:19] == 0).all(), "brighter interior -> background fill"


def test_swapped_estimates_invert_polarity(make_rect):
    luma, region = _scene(50, 200, 230, make_rect)

    fg = foreground_estimate(luma, region.points)
    bg = background_estimate(luma, region.box)

    assert fill_values(fg, bg) == (0, 255)

    mask = binarize_regions(luma, [region])
    assert (mask[10, 10:20] == 0).all()
    assert (mask[11:19, 11:19] == 255).all()


def test_equal_estimates_count_as_bright():
    assert fill_values(120.0, 120.0) == (255, 0)


def test_mask_outside_regions_stays_background(make_rect):
    luma, region = _scene(50, 200, 230, make_rect)
    mask = binarize_regions(luma, [region])
    assert (mask[:10, :] == 255).all()
    assert (mask[20:, :] == 255).all()

    custom = binarize_regions(luma, [], TextMaskConfig(mask_background=0))
    assert (custom == 0).all()


def test_background_ring_points():
    points = background_points(BoundingBox(5, 6, 3, 4))
    assert len(points) == 12
    assert points[:3] == [(4, 5), (4, 6), (5, 5)]
    assert points[9:] == [(9, 11), (8, 11), (9, 10)]


def test_background_median_averages_middle_values():
    luma = np.zeros((40, 40), dtype=np.uint8)
    for value, (x, y) in enumerate(background_points(BOX), start=1):
        luma[y, x] = value * 10

    assert sorted(background_samples(luma, BOX)) == [v * 10 for v in range(1, 13)]
    assert background_estimate(luma, BOX) == 65.0


def test_out_of_bounds_samples_are_zero():
    luma = np.full((10, 10), 100, dtype=np.uint8)
    samples = background_samples(luma, BoundingBox(0, 0, 5, 5))
    assert samples.count(0) == 7
    assert samples.count(100) == 5
    assert sample_luma(luma, -1, 3) == 0
    assert sample_luma(luma, 3, 10) == 0
    assert sample_luma(luma, 9, 9) == 100


def test_foreground_estimate_counts_outside_points_as_zero():
    luma = np.full((10, 10), 100, dtype=np.uint8)
    points = np.array([(0, 0), (-1, 0)], dtype=np.int32)
    assert foreground_estimate(luma, points) == 50.0


def test_fill_region_clips_to_mask():
    luma = np.full((10, 10), 30, dtype=np.uint8)
    mask = np.full((10, 10), 255, dtype=np.uint8)

    fill_region(mask, luma, BoundingBox(-3, -3, 6, 6), threshold=100, fg_fill=0, bg_fill=255)

    assert (mask[:3, :3] == 0).all()
    assert (mask[3:, :] == 255).all()
    assert (mask[:, 3:] == 255).all()

    fill_region(mask, luma, BoundingBox(20, 20, 5, 5), threshold=100, fg_fill=0, bg_fill=255)
    assert (mask[3:, 3:] == 255).all(), "box fully outside paints nothing"


def test_overlapping_regions_last_write_wins(make_rect):
    luma = np.full((40, 40), 100, dtype=np.uint8)
    bright_box = BoundingBox(10, 10, 10, 10)
    dark_box = BoundingBox(15, 15, 10, 10)
    for x, y in background_points(dark_box):
        luma[y, x] = 200

    bright = AcceptedRegion(0, make_rect(10, 10, 10, 10), bright_box, 0)
    dark = AcceptedRegion(1, make_rect(15, 15, 10, 10), dark_box, 0)

    bright_then_dark = binarize_regions(luma, [bright, dark])
    dark_then_bright = binarize_regions(luma, [dark, bright])

    assert (bright_then_dark[15:20, 15:20] == 0).all()
    assert (dark_then_bright[15:20, 15:20] == 255).all()


def test_luma_map_weights():
    rgb = np.zeros((2, 2, 3), dtype=np.uint8)
    rgb[0, 0] = (200, 200, 200)
    rgb[0, 1] = (0, 100, 0)
    rgb[1, 0] = (0, 0, 100)
    rgb[1, 1] = (100, 0, 0)

    luma = luma_map(rgb)

    assert luma.dtype == np.uint8
    assert luma.tolist() == [[200, 59], [11, 30]]


def test_luma_map_passes_grayscale_through():
    gray = np.arange(12, dtype=np.uint8).reshape(3, 4)
    assert np.array_equal(luma_map(gray), gray)
