from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import cv2
import numpy as np

from .config import MIN_CONTOUR_AREA, OVERLAY_THICKNESS


@dataclass(eq=False)
class Contour:
    """Traced boundary of one connected edge region."""

    points: np.ndarray
    area: float
    is_hole: bool = False
    parent: int = -1

    def __len__(self) -> int:
        return int(self.points.shape[0])

    def as_cv(self) -> np.ndarray:
        """Return the points in OpenCV's (N, 1, 2) int32 layout."""
        return self.points.reshape(-1, 1, 2).astype(np.int32)


def _find_contours(edges: np.ndarray) -> Tuple[Sequence[np.ndarray], np.ndarray | None]:
    # OpenCV 3 returns (image, contours, hierarchy); 4.x drops the image.
    found = cv2.findContours(edges, cv2.RETR_TREE, cv2.CHAIN_APPROX_SIMPLE)
    contours, hierarchy = found[-2], found[-1]
    return contours, hierarchy


def extract_contours(edges: np.ndarray) -> List[Contour]:
    """
    Trace every boundary in a binary edge map, outer and inner.

    Uses the full hierarchy so regions nested inside other regions are found,
    and collapses straight runs to their end points. Each ``Contour`` records
    whether it is the inner boundary (hole) of a region and the index of the
    contour that encloses it.
    """
    if edges.size == 0:
        return []

    # findContours only distinguishes zero from non-zero.
    binary = np.where(edges > 0, 255, 0).astype(np.uint8)
    raw_contours, hierarchy = _find_contours(binary)
    if hierarchy is None or not len(raw_contours):
        return []

    links = hierarchy.reshape(-1, 4)
    contours: List[Contour] = []
    for idx, raw in enumerate(raw_contours):
        parent = int(links[idx, 3])
        contours.append(
            Contour(
                points=raw.reshape(-1, 2).copy(),
                area=float(cv2.contourArea(raw)),
                is_hole=_depth(links, idx) % 2 == 1,
                parent=parent,
            )
        )
    return contours


def _depth(links: np.ndarray, idx: int) -> int:
    depth = 0
    parent = int(links[idx, 3])
    while parent >= 0:
        depth += 1
        parent = int(links[parent, 3])
    return depth


def significant_contours(
    contours: Sequence[Contour],
    min_area: float = MIN_CONTOUR_AREA,
    include_holes: bool = False,
) -> List[Contour]:
    """
    Keep contours whose enclosed area is strictly greater than ``min_area``.

    A shape is a connected edge region represented by its outer boundary, so
    inner boundaries are skipped unless ``include_holes`` is set. A closed
    outline stroke therefore counts once, not once per side of the stroke.
    """
    return [
        contour
        for contour in contours
        if contour.area > min_area and (include_holes or not contour.is_hole)
    ]


def count_significant_contours(edges: np.ndarray, min_area: float = MIN_CONTOUR_AREA) -> int:
    return len(significant_contours(extract_contours(edges), min_area=min_area))


def draw_contours(
    image: np.ndarray,
    contours: Sequence[Contour],
    color: Tuple[int, int, int],
    thickness: int = OVERLAY_THICKNESS,
    copy: bool = True,
) -> np.ndarray:
    """
    Stroke each contour onto ``image``.

    Parameters
    ----------
    image:
        3-channel image to draw on.
    contours:
        Contours to draw, usually the output of ``significant_contours``.
    color:
        Stroke color in the image's own channel order.
    thickness:
        Stroke width in pixels.
    copy:
        When True, operate on a copy and keep the original untouched.
    """
    output = image.copy() if copy else image
    if not contours:
        return output
    cv2.drawContours(
        output,
        [contour.as_cv() for contour in contours],
        -1,
        tuple(int(channel) for channel in color),
        int(thickness),
    )
    return output


__all__ = [
    "Contour",
    "extract_contours",
    "significant_contours",
    "count_significant_contours",
    "draw_contours",
]
