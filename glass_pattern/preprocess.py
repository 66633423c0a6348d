from __future__ import annotations

from pathlib import Path
from typing import Dict, Tuple

import cv2
import numpy as np

from .config import (
    BLUR_KERNEL_SIZE,
    BLUR_SIGMA,
    CANNY_HIGH,
    CANNY_LOW,
    COLOR_ORDERS,
    SUPPORTED_CHANNELS,
)
from .errors import InvalidInput

_GRAY_CONVERSIONS: Dict[Tuple[str, int], int] = {
    ("rgb", 3): cv2.COLOR_RGB2GRAY,
    ("rgb", 4): cv2.COLOR_RGBA2GRAY,
    ("bgr", 3): cv2.COLOR_BGR2GRAY,
    ("bgr", 4): cv2.COLOR_BGRA2GRAY,
}


def validate_color_image(image: object, color_order: str = "rgb") -> np.ndarray:
    """
    Check that ``image`` is a non-empty 8-bit color buffer and return it as an array.

    Raises ``InvalidInput`` for anything the pipeline cannot consume.
    """
    if color_order not in COLOR_ORDERS:
        raise InvalidInput(f"Unsupported color order '{color_order}'; expected one of {COLOR_ORDERS}")
    if image is None:
        raise InvalidInput("Image buffer is missing.")
    if not isinstance(image, np.ndarray):
        raise InvalidInput(f"Image buffer must be a numpy array, got {type(image).__name__}")
    if image.dtype != np.uint8:
        raise InvalidInput(f"Image buffer must be 8-bit per channel, got dtype {image.dtype}")
    if image.ndim != 3:
        raise InvalidInput(f"Color image must have shape (height, width, channels), got {image.shape}")

    h, w, channels = image.shape
    if h == 0 or w == 0:
        raise InvalidInput(f"Image has zero size: {w}x{h}")
    if channels not in SUPPORTED_CHANNELS:
        raise InvalidInput(f"Unsupported channel count {channels}; expected 3 or 4")
    return image


def to_grayscale(image: np.ndarray, color_order: str = "rgb") -> np.ndarray:
    image = validate_color_image(image, color_order)
    code = _GRAY_CONVERSIONS[(color_order, image.shape[2])]
    return cv2.cvtColor(np.ascontiguousarray(image), code)


def suppress_noise(gray: np.ndarray) -> np.ndarray:
    # BORDER_REFLECT_101 keeps mirror-symmetric input symmetric after blurring.
    return cv2.GaussianBlur(
        gray,
        BLUR_KERNEL_SIZE,
        BLUR_SIGMA,
        borderType=cv2.BORDER_REFLECT_101,
    )


def detect_edges(blurred: np.ndarray) -> np.ndarray:
    """
    Binary Canny edge map (0 or 255) of the smoothed grayscale image.

    Gradient magnitude and direction come from 3x3 Sobel filters; pixels that
    are not a local maximum along the gradient direction are suppressed, then
    hysteresis keeps everything above ``CANNY_HIGH`` plus any pixel above
    ``CANNY_LOW`` connected to such a pixel.
    """
    return cv2.Canny(blurred, CANNY_LOW, CANNY_HIGH)


def to_display_color(image: np.ndarray, color_order: str = "rgb") -> np.ndarray:
    """Return a 3-channel copy of ``image`` in the same channel order, alpha dropped."""
    image = validate_color_image(image, color_order)
    if image.shape[2] == 4:
        code = cv2.COLOR_RGBA2RGB if color_order == "rgb" else cv2.COLOR_BGRA2BGR
        return cv2.cvtColor(np.ascontiguousarray(image), code)
    return image.copy()


def load_image(path: str | Path) -> np.ndarray:
    """
    Decode an image file into an RGB (or RGBA, when the file has alpha) buffer.
    """
    image = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if image is None:
        raise FileNotFoundError(f"Unable to load image: {path}")
    if image.dtype == np.uint16:
        image = (image >> 8).astype(np.uint8)
    elif image.dtype != np.uint8:
        raise InvalidInput(f"Unsupported image depth {image.dtype} in {path}")
    if image.ndim == 2 or image.shape[2] == 1:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2RGB)
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA)
    return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)


__all__ = [
    "validate_color_image",
    "to_grayscale",
    "suppress_noise",
    "detect_edges",
    "to_display_color",
    "load_image",
]
