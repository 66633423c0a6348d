from __future__ import annotations

from typing import Callable, TypeVar

import cv2

T = TypeVar("T")

ALLOCATION_MARKERS = [
    "insufficient memory",
    "failed to allocate",
    "out of memory",
]


class PatternAnalysisError(Exception):
    """Base class for failures raised by the analysis pipeline."""


class InvalidInput(PatternAnalysisError, ValueError):
    """The image buffer is empty, malformed, or has an unsupported layout."""


class ResourceExhaustion(PatternAnalysisError, MemoryError):
    """An intermediate buffer could not be allocated."""


def _is_allocation_failure(exc: cv2.error) -> bool:
    lowered = str(exc).lower()
    return any(marker in lowered for marker in ALLOCATION_MARKERS)


def run_stage(name: str, fn: Callable[..., T], *args, **kwargs) -> T:
    """
    Run one pipeline stage, mapping allocation failures to ``ResourceExhaustion``.
    """
    try:
        return fn(*args, **kwargs)
    except MemoryError as exc:
        raise ResourceExhaustion(f"Out of memory during {name}") from exc
    except cv2.error as exc:
        if _is_allocation_failure(exc):
            raise ResourceExhaustion(f"Out of memory during {name}: {exc}") from exc
        raise


__all__ = [
    "PatternAnalysisError",
    "InvalidInput",
    "ResourceExhaustion",
    "run_stage",
]
