from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import sys

import numpy as np
from PIL import Image, UnidentifiedImageError

from text_region_mask.config import TextMaskConfig
from text_region_mask.debug_service import DebugService, is_debug_enabled
from text_region_mask.pipeline import analyze_image

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    defaults = TextMaskConfig()
    parser = argparse.ArgumentParser(
        prog="text-region-mask",
        description="Binarize glyph-like regions of a photo for OCR.",
    )
    parser.add_argument("input", help="source image (any format Pillow reads)")
    parser.add_argument("output", help="path of the mask PNG to write")
    parser.add_argument("--border", type=int, default=defaults.border_size,
                        help="black border added before edge detection (default: %(default)s)")
    parser.add_argument("--canny-low", type=int, default=defaults.canny_low)
    parser.add_argument("--canny-high", type=int, default=defaults.canny_high)
    parser.add_argument("--max-children", type=int, default=defaults.max_children,
                        help="plausible sub-contours a glyph may contain (default: %(default)s)")
    parser.add_argument("--count-contour-zero", action="store_true",
                        help="visit contour 0 in sibling and ancestor walks instead of stopping there")
    parser.add_argument("--debug", action="store_true",
                        help="save intermediate images (also enabled by TRM_DEBUG=1)")
    parser.add_argument("-v", "--verbose", action="store_true", help="log every region decision")
    return parser


def _load_rgb(path: str) -> np.ndarray:
    with Image.open(path) as img:
        return np.array(img.convert("RGB"))


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = dataclasses.replace(
        TextMaskConfig(),
        border_size=args.border,
        canny_low=args.canny_low,
        canny_high=args.canny_high,
        max_children=args.max_children,
        zero_index_sentinel=not args.count_contour_zero,
    )

    try:
        rgb = _load_rgb(args.input)
    except (OSError, UnidentifiedImageError) as e:
        logger.error("Cannot read %s: %s", args.input, e)
        return 1

    try:
        result = analyze_image(rgb, config)
    except ValueError as e:
        logger.error("Cannot process %s: %s", args.input, e)
        return 1

    Image.fromarray(result.mask).save(args.output)
    logger.info("Wrote %s (%d regions)", args.output, len(result.regions))

    if args.debug or is_debug_enabled():
        debug = DebugService()
        name = os.path.splitext(os.path.basename(args.input))[0]
        folder = debug.save_result(name, rgb, result)
        debug.shutdown()
        logger.info("Debug artifacts in %s", folder)

    return 0


if __name__ == "__main__":
    sys.exit(main())
