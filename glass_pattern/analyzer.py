"""
Glass pattern analysis: one color image in, one ``AnalysisResult`` out.

The pipeline is grayscale -> Gaussian blur -> Canny, after which shape
extraction and the metric computations branch off the edge map and the
smoothed grayscale image. Every intermediate buffer is local to a call, so
``analyze`` can run on several threads at once without locking.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .config import MIN_CONTOUR_AREA, OVERLAY_COLOR_RGB, OVERLAY_THICKNESS
from .errors import run_stage
from .metrics import classify_complexity, edge_density, symmetry_score
from .preprocess import (
    detect_edges,
    suppress_noise,
    to_display_color,
    to_grayscale,
    validate_color_image,
)
from .result import AnalysisResult
from .shapes import draw_contours, extract_contours, significant_contours

logger = logging.getLogger(__name__)


def _edge_pass(image: np.ndarray, color_order: str) -> Tuple[np.ndarray, np.ndarray]:
    gray = run_stage("grayscale conversion", to_grayscale, image, color_order)
    blurred = run_stage("noise suppression", suppress_noise, gray)
    edges = run_stage("edge detection", detect_edges, blurred)
    return blurred, edges


@dataclass(frozen=True)
class GlassPatternAnalyzer:
    """Stateless analyzer; safe to share between threads."""

    color_order: str = "rgb"
    min_contour_area: float = MIN_CONTOUR_AREA

    def analyze(self, image: np.ndarray) -> AnalysisResult:
        image = validate_color_image(image, self.color_order)
        start = time.perf_counter()

        blurred, edges = _edge_pass(image, self.color_order)
        contours = run_stage("contour extraction", extract_contours, edges)
        shapes = run_stage(
            "contour filtering",
            significant_contours,
            contours,
            min_area=self.min_contour_area,
        )
        density = run_stage("edge density", edge_density, edges)
        symmetry = run_stage("symmetry", symmetry_score, blurred)

        result = AnalysisResult(
            contour_count=len(shapes),
            edge_strength=density,
            symmetry_score=symmetry,
            complexity_level=classify_complexity(len(shapes)),
        )
        logger.debug(
            "Analyzed %dx%d image in %.1fms: %d/%d contours kept",
            image.shape[1],
            image.shape[0],
            (time.perf_counter() - start) * 1000,
            len(shapes),
            len(contours),
        )
        return result

    def render_overlay(self, image: np.ndarray) -> np.ndarray:
        """
        Copy of ``image`` (alpha dropped) with every significant contour
        stroked in the highlight color.
        """
        image = validate_color_image(image, self.color_order)
        _, edges = _edge_pass(image, self.color_order)
        contours = run_stage("contour extraction", extract_contours, edges)
        shapes = run_stage(
            "contour filtering",
            significant_contours,
            contours,
            min_area=self.min_contour_area,
            include_holes=True,
        )

        color = OVERLAY_COLOR_RGB if self.color_order == "rgb" else OVERLAY_COLOR_RGB[::-1]
        canvas = run_stage("overlay copy", to_display_color, image, self.color_order)
        logger.debug("Drawing %d contours on overlay", len(shapes))
        return run_stage(
            "overlay drawing",
            draw_contours,
            canvas,
            shapes,
            color,
            thickness=OVERLAY_THICKNESS,
            copy=False,
        )


def analyze(image: np.ndarray, *, color_order: str = "rgb") -> AnalysisResult:
    return GlassPatternAnalyzer(color_order=color_order).analyze(image)


def render_overlay(image: np.ndarray, *, color_order: str = "rgb") -> np.ndarray:
    return GlassPatternAnalyzer(color_order=color_order).render_overlay(image)


__all__ = ["GlassPatternAnalyzer", "analyze", "render_overlay"]
