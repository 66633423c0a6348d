"""
Fixed constants for the glass pattern analysis pipeline.

These values define the observable contract of ``analyze``; changing them
changes every downstream metric, so they are not exposed as CLI options.
"""
from __future__ import annotations

from typing import Sequence, Tuple

# === NOISE SUPPRESSION ===
BLUR_KERNEL_SIZE: Tuple[int, int] = (7, 7)
BLUR_SIGMA = 1.5

# === EDGE DETECTION ===
CANNY_LOW = 40
CANNY_HIGH = 120

# === SHAPE EXTRACTION ===
MIN_CONTOUR_AREA = 150.0  # Contours with area <= this are noise

# === METRICS ===
SYMMETRY_TOLERANCE = 30  # Mirrored pixels match when |a - b| < tolerance
MODERATE_MIN_CONTOURS = 10
COMPLEX_MIN_CONTOURS = 30

# === OVERLAY ===
OVERLAY_COLOR_RGB: Tuple[int, int, int] = (255, 165, 0)  # orange
OVERLAY_THICKNESS = 3

# === INPUT ===
SUPPORTED_CHANNELS: Sequence[int] = (3, 4)
COLOR_ORDERS: Sequence[str] = ("rgb", "bgr")
SUPPORTED_SUFFIXES: Sequence[str] = (".png", ".jpg", ".jpeg", ".bmp", ".tif", ".tiff", ".webp")


__all__ = [
    "BLUR_KERNEL_SIZE",
    "BLUR_SIGMA",
    "CANNY_LOW",
    "CANNY_HIGH",
    "MIN_CONTOUR_AREA",
    "SYMMETRY_TOLERANCE",
    "MODERATE_MIN_CONTOURS",
    "COMPLEX_MIN_CONTOURS",
    "OVERLAY_COLOR_RGB",
    "OVERLAY_THICKNESS",
    "SUPPORTED_CHANNELS",
    "COLOR_ORDERS",
    "SUPPORTED_SUFFIXES",
]
