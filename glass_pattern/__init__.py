from .analyzer import GlassPatternAnalyzer, analyze, render_overlay
from .errors import InvalidInput, PatternAnalysisError, ResourceExhaustion
from .metrics import classify_complexity, edge_density, symmetry_score
from .preprocess import detect_edges, load_image, suppress_noise, to_grayscale
from .result import AnalysisResult, ComplexityLevel, from_dict, from_json_file
from .runner import main as cli_main, process_images
from .shapes import Contour, count_significant_contours, extract_contours, significant_contours

__version__ = "0.1.0"

__all__ = [
    "analyze",
    "render_overlay",
    "GlassPatternAnalyzer",
    "AnalysisResult",
    "ComplexityLevel",
    "from_dict",
    "from_json_file",
    "PatternAnalysisError",
    "InvalidInput",
    "ResourceExhaustion",
    "to_grayscale",
    "suppress_noise",
    "detect_edges",
    "load_image",
    "Contour",
    "extract_contours",
    "significant_contours",
    "count_significant_contours",
    "edge_density",
    "symmetry_score",
    "classify_complexity",
    "process_images",
    "cli_main",
]
