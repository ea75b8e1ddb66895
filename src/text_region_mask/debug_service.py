"""Debug service: per-image artifact saving and pipeline logging.

When ``TRM_DEBUG=1`` is set (or ``--debug`` is passed on the command
line), DebugService creates a session directory under ``.tests/debug/``
and records every stage of the edge -> contour -> mask pipeline.

Each processed image gets its own numbered folder::

    .tests/debug/session_YYYYMMDD_HHMMSS/
        pipeline.log
        001_<name>/
            source.png        # image as given
            edges.png         # padded Canny edge map
            overlay.png       # edge map with accepted boxes drawn in red
            mask.png          # final text mask
            regions.txt       # one line per accepted region
        002_<name>/ ...
"""

from __future__ import annotations

import os
from datetime import datetime

import cv2
import numpy as np
from PIL import Image

from text_region_mask.pipeline import TextMaskResult
from text_region_mask.region_selector import AcceptedRegion

_DEBUG_ROOT = os.path.join(".tests", "debug")


def is_debug_enabled() -> bool:
    return os.environ.get("TRM_DEBUG", "0") == "1"


def render_overlay(edges: np.ndarray, regions: list[AcceptedRegion]) -> np.ndarray:
    """Draw accepted bounding boxes over the edge map as an RGB image."""
    overlay = cv2.cvtColor(edges, cv2.COLOR_GRAY2RGB)
    for region in regions:
        box = region.box
        cv2.rectangle(
            overlay,
            (box.x, box.y),
            (box.x2 - 1, box.y2 - 1),
            (255, 0, 0),
            1,
        )
    return overlay


class DebugService:
    def __init__(self, root: str | None = None) -> None:
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        self._session_dir = os.path.join(root or _DEBUG_ROOT, f"session_{ts}")
        os.makedirs(self._session_dir, exist_ok=True)

        log_path = os.path.join(self._session_dir, "pipeline.log")
        self._log_file = open(log_path, "w", encoding="utf-8")  # noqa: SIM115
        self._image_count = 0

        self.log("SESSION", f"started at {ts}")

    @property
    def session_dir(self) -> str:
        return self._session_dir

    # ------------------------------------------------------------------
    # Pipeline logging
    # ------------------------------------------------------------------

    def log(self, tag: str, text: str) -> None:
        ts = datetime.now().strftime("%H:%M:%S.%f")[:-3]
        self._log_file.write(f"{ts}  [{tag}]  {text}\n")
        self._log_file.flush()

    # ------------------------------------------------------------------
    # Artifact saving
    # ------------------------------------------------------------------

    def save_result(self, name: str, source: np.ndarray, result: TextMaskResult) -> str:
        """Write all artifacts for one image and return its folder."""
        self._image_count += 1
        folder = os.path.join(self._session_dir, f"{self._image_count:03d}_{name}")
        os.makedirs(folder, exist_ok=True)

        Image.fromarray(source).save(os.path.join(folder, "source.png"))
        Image.fromarray(result.edges).save(os.path.join(folder, "edges.png"))
        Image.fromarray(render_overlay(result.edges, result.regions)).save(
            os.path.join(folder, "overlay.png")
        )
        Image.fromarray(result.mask).save(os.path.join(folder, "mask.png"))

        with open(os.path.join(folder, "regions.txt"), "w", encoding="utf-8") as f:
            for region in result.regions:
                x, y, w, h = region.box.as_tuple()
                f.write(
                    f"{region.index}\t{x}\t{y}\t{w}\t{h}\t"
                    f"children={region.num_children}\tpoints={len(region.points)}\n"
                )

        self.log(
            "SAVED",
            f"{name}: {result.contour_count} contours, {len(result.regions)} regions",
        )
        return folder

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def shutdown(self) -> None:
        self.log("SESSION", "ended")
        self._log_file.close()
