from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, Literal, Union, get_args

ComplexityLevel = Literal["simple", "moderate", "complex"]

COMPLEXITY_LEVELS = get_args(ComplexityLevel)

_FIELD_NAMES = {
    "contour_count": "contourCount",
    "edge_strength": "edgeStrength",
    "symmetry_score": "symmetryScore",
    "complexity_level": "complexityLevel",
}


@dataclass(frozen=True)
class AnalysisResult:
    contour_count: int
    edge_strength: int
    symmetry_score: int
    complexity_level: ComplexityLevel

    def __post_init__(self) -> None:
        if self.contour_count < 0:
            raise ValueError(f"contour_count must be >= 0, got {self.contour_count}")
        for name in ("edge_strength", "symmetry_score"):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ValueError(f"{name} must be within [0, 100], got {value}")
        if self.complexity_level not in COMPLEXITY_LEVELS:
            raise ValueError(f"Unknown complexity level: {self.complexity_level}")

    def to_dict(self) -> Dict[str, Union[int, str]]:
        """Return the camelCase record consumed by display layers."""
        return {_FIELD_NAMES[key]: value for key, value in asdict(self).items()}

    def to_json(self, **kwargs) -> str:
        return json.dumps(self.to_dict(), **kwargs)


def from_dict(payload: Dict[str, Union[int, str]]) -> AnalysisResult:
    return AnalysisResult(
        contour_count=int(payload["contourCount"]),
        edge_strength=int(payload["edgeStrength"]),
        symmetry_score=int(payload["symmetryScore"]),
        complexity_level=str(payload["complexityLevel"]),  # type: ignore[arg-type]
    )


def from_json_file(path: str | Path) -> AnalysisResult:
    file_path = Path(path)
    with file_path.open("r", encoding="utf-8") as fp:
        payload = json.load(fp)
    return from_dict(payload)


__all__ = ["AnalysisResult", "ComplexityLevel", "COMPLEXITY_LEVELS", "from_dict", "from_json_file"]
