"""Contour forest: contours plus parent/child/sibling links, stored by index.

OpenCV reports contour hierarchy as an ``(1, N, 4)`` array of
``[next, prev, first_child, parent]`` with ``-1`` meaning "none".
ContourForest converts that into nodes whose relations are either an
index into the forest or ``None``, so index 0 is an ordinary contour.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

import cv2
import numpy as np

_NEXT, _PREV, _CHILD, _PARENT = range(4)


@dataclass(frozen=True)
class ContourNode:
    points: np.ndarray  # (N, 2) int32, x then y
    parent: int | None = None
    first_child: int | None = None
    next_sibling: int | None = None
    prev_sibling: int | None = None


def _link(value: int) -> int | None:
    return int(value) if value >= 0 else None


def _as_points(contour) -> np.ndarray:
    return np.asarray(contour, dtype=np.int32).reshape(-1, 2)


class ContourForest(Sequence):
    """Immutable arena of ContourNode, indexed in discovery order."""

    def __init__(self, nodes: Sequence[ContourNode]) -> None:
        self._nodes: tuple[ContourNode, ...] = tuple(nodes)
        self._validate()

    @classmethod
    def from_hierarchy(cls, contours: Sequence, hierarchy: np.ndarray | None) -> ContourForest:
        if len(contours) == 0:
            return cls([])
        if hierarchy is None:
            raise ValueError("hierarchy is required when contours are present")

        links = np.asarray(hierarchy).reshape(-1, 4)
        if len(links) != len(contours):
            raise ValueError(
                f"hierarchy has {len(links)} entries for {len(contours)} contours"
            )

        nodes = [
            ContourNode(
                points=_as_points(contour),
                parent=_link(row[_PARENT]),
                first_child=_link(row[_CHILD]),
                next_sibling=_link(row[_NEXT]),
                prev_sibling=_link(row[_PREV]),
            )
            for contour, row in zip(contours, links)
        ]
        return cls(nodes)

    def _validate(self) -> None:
        n = len(self._nodes)
        for i, node in enumerate(self._nodes):
            for name in ("parent", "first_child", "next_sibling", "prev_sibling"):
                target = getattr(node, name)
                if target is not None and not 0 <= target < n:
                    raise ValueError(
                        f"contour {i}: {name}={target} outside forest of size {n}"
                    )
                if target == i:
                    raise ValueError(f"contour {i}: {name} points at itself")

    def __len__(self) -> int:
        return len(self._nodes)

    def __getitem__(self, index):
        return self._nodes[index]

    def points(self, index: int) -> np.ndarray:
        return self._nodes[index].points

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def sibling_chain(self, index: int, stop_at_zero: bool = False) -> Iterator[int]:
        """Yield ``index`` and every sibling reachable forward, then backward.

        With ``stop_at_zero`` the walks end on reaching contour 0, which
        then is never yielded as a sibling.
        """
        yield index
        for attr in ("next_sibling", "prev_sibling"):
            current = getattr(self._nodes[index], attr)
            steps = 0
            while current is not None and not (stop_at_zero and current == 0):
                yield current
                steps += 1
                if steps > len(self._nodes):
                    raise ValueError(f"sibling chain of contour {index} contains a cycle")
                current = getattr(self._nodes[current], attr)

    def children(self, index: int, stop_at_zero: bool = False) -> list[int]:
        """Direct children of ``index`` (its first child's sibling chain)."""
        child = self._nodes[index].first_child
        if child is None:
            return []
        return list(self.sibling_chain(child, stop_at_zero))

    def ancestors(self, index: int, stop_at_zero: bool = False) -> Iterator[int]:
        """Yield parent, grandparent, ... of ``index``."""
        current = self._nodes[index].parent
        steps = 0
        while current is not None and not (stop_at_zero and current == 0):
            yield current
            steps += 1
            if steps > len(self._nodes):
                raise ValueError(f"ancestor chain of contour {index} contains a cycle")
            current = self._nodes[current].parent


def extract_contours(edges: np.ndarray) -> ContourForest:
    """Find every contour of a binary edge map with full tree hierarchy."""
    contours, hierarchy = cv2.findContours(
        edges, cv2.RETR_TREE, cv2.CHAIN_APPROX_NONE
    )
    return ContourForest.from_hierarchy(contours, hierarchy)
