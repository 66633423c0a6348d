from __future__ import annotations

import math

import cv2
import numpy as np

from .config import COMPLEX_MIN_CONTOURS, MODERATE_MIN_CONTOURS, SYMMETRY_TOLERANCE
from .result import ComplexityLevel


def _percent(numerator: int, denominator: int) -> int:
    if denominator <= 0:
        return 0
    # Half-up rounding; Python's round() would send 12.5 to 12.
    return int(math.floor(100.0 * numerator / denominator + 0.5))


def edge_density(edges: np.ndarray) -> int:
    """Percentage (0-100) of non-zero cells in the edge map."""
    if edges.size == 0:
        return 0
    return _percent(int(cv2.countNonZero(edges)), int(edges.size))


def symmetry_score(gray: np.ndarray) -> int:
    """
    Percentage (0-100) of mirrored pixel pairs whose intensities differ by
    less than ``SYMMETRY_TOLERANCE``.

    Each row compares column ``c`` with column ``width - 1 - c`` for
    ``c < width // 2``; the center column of an odd-width image is never
    compared. Images narrower than two pixels score 0.
    """
    if gray.ndim != 2:
        raise ValueError(f"symmetry_score expects a single-channel image, got shape {gray.shape}")
    h, w = gray.shape
    half = w // 2
    if h == 0 or half == 0:
        return 0

    left = gray[:, :half].astype(np.int16)
    right = gray[:, ::-1][:, :half].astype(np.int16)
    matches = int(np.count_nonzero(np.abs(left - right) < SYMMETRY_TOLERANCE))
    return _percent(matches, h * half)


def classify_complexity(contour_count: int) -> ComplexityLevel:
    if contour_count < 0:
        raise ValueError(f"Contour count cannot be negative: {contour_count}")
    if contour_count < MODERATE_MIN_CONTOURS:
        return "simple"
    if contour_count < COMPLEX_MIN_CONTOURS:
        return "moderate"
    return "complex"


__all__ = [
    "edge_density",
    "symmetry_score",
    "classify_complexity",
]
