from __future__ import annotations

import argparse
import json
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Sequence

import cv2

from .analyzer import GlassPatternAnalyzer
from .config import SUPPORTED_SUFFIXES
from .errors import PatternAnalysisError
from .preprocess import load_image
from .result import AnalysisResult


def _collect_images(root: Path) -> List[Path]:
    if root.is_file():
        return [root] if root.suffix.lower() in SUPPORTED_SUFFIXES else []
    return sorted(
        path
        for path in root.rglob("*")
        if path.is_file() and path.suffix.lower() in SUPPORTED_SUFFIXES
    )


def _write_overlay(analyzer: GlassPatternAnalyzer, image, target: Path) -> None:
    overlay = analyzer.render_overlay(image)
    target.parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(target), cv2.cvtColor(overlay, cv2.COLOR_RGB2BGR)):
        raise OSError(f"Unable to write overlay: {target}")


def _analyze_one(
    analyzer: GlassPatternAnalyzer,
    image_path: Path,
    overlay_dir: Path | None,
) -> dict:
    try:
        image = load_image(image_path)
    except (FileNotFoundError, PatternAnalysisError) as exc:
        return {"image": str(image_path), "error": str(exc)}

    try:
        result: AnalysisResult = analyzer.analyze(image)
        if overlay_dir is not None:
            _write_overlay(analyzer, image, overlay_dir / f"{image_path.stem}_overlay.png")
    except (PatternAnalysisError, OSError, cv2.error) as exc:
        return {"image": str(image_path), "error": str(exc)}

    return {"image": str(image_path), "result": result.to_dict()}


def _report(idx: int, total: int, entry: dict) -> None:
    name = Path(entry["image"]).name
    if "error" in entry:
        print(f"[{idx}/{total}] Skipping {name} ({entry['error']}).", flush=True)
        return
    result = entry["result"]
    print(
        f"[{idx}/{total}] {name} -> "
        f"contours={result['contourCount']} edges={result['edgeStrength']} "
        f"symmetry={result['symmetryScore']} complexity={result['complexityLevel']}",
        flush=True,
    )


def process_images(
    image_path: str,
    output_dir: str | None = None,
    *,
    limit: int | None = None,
    overlays: bool = False,
    workers: int = 1,
    verbose: bool = True,
) -> List[dict]:
    root = Path(image_path).expanduser()
    images = _collect_images(root)
    if limit is not None and limit > 0:
        images = images[:limit]
    if not images:
        raise FileNotFoundError(f"No supported images found in {image_path}")

    output = Path(output_dir).expanduser() if output_dir else None
    if output is not None:
        output.mkdir(parents=True, exist_ok=True)
    overlay_dir = output if (output is not None and overlays) else None

    analyzer = GlassPatternAnalyzer()
    entries: List[dict] = []
    with ThreadPoolExecutor(max_workers=max(1, workers)) as pool:
        results = pool.map(lambda path: _analyze_one(analyzer, path, overlay_dir), images)
        for idx, entry in enumerate(results, start=1):
            entries.append(entry)
            if verbose:
                _report(idx, len(images), entry)

    if output is not None:
        with (output / "summary.json").open("w", encoding="utf-8") as fh:
            json.dump(entries, fh, indent=2)

    return entries


def _run_overlay(args: argparse.Namespace) -> None:
    image = load_image(args.image)
    target = Path(args.out).expanduser()
    _write_overlay(GlassPatternAnalyzer(), image, target)
    if not args.quiet:
        print(f"Overlay written to {target}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Edge, shape and symmetry analysis for photographs of glass surfaces."
    )
    subparsers = parser.add_subparsers(dest="command")

    analyze_parser = subparsers.add_parser("analyze", help="Analyze an image or a folder of images.")
    analyze_parser.add_argument("images", help="Image file or directory containing images.")
    analyze_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Directory where summary.json (and overlays) are written.",
    )
    analyze_parser.add_argument("--limit", type=int, default=None, help="Only process the first N images.")
    analyze_parser.add_argument(
        "--overlays",
        action="store_true",
        help="Also write <name>_overlay.png files (requires --output).",
    )
    analyze_parser.add_argument("--workers", type=int, default=1, help="Number of analysis threads.")
    analyze_parser.add_argument("--quiet", action="store_true", help="Suppress per-image output.")

    overlay_parser = subparsers.add_parser(
        "overlay",
        help="Render the significant contours of one image.",
    )
    overlay_parser.add_argument("image", help="Image to render.")
    overlay_parser.add_argument("-o", "--out", required=True, help="Output PNG path.")
    overlay_parser.add_argument("--quiet", action="store_true")

    return parser


def _inject_default_command(argv: Sequence[str]) -> List[str]:
    argv = list(argv)
    if not argv:
        return argv
    if argv[0] in {"analyze", "overlay", "-h", "--help"}:
        return argv
    return ["analyze", *argv]


def main(argv: List[str] | None = None) -> None:
    args_list = sys.argv[1:] if argv is None else argv
    parser = build_parser()
    parsed = parser.parse_args(_inject_default_command(args_list))

    if parsed.command == "analyze":
        if parsed.overlays and not parsed.output:
            parser.error("--overlays requires --output")
        process_images(
            parsed.images,
            parsed.output,
            limit=parsed.limit,
            overlays=parsed.overlays,
            workers=parsed.workers,
            verbose=not parsed.quiet,
        )
        return

    if parsed.command == "overlay":
        _run_overlay(parsed)
        return

    parser.print_help()


__all__ = ["process_images", "build_parser", "main"]
