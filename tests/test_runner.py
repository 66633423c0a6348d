from __future__ import annotations

import json
import threading
from pathlib import Path
import sys

import cv2
import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from glass_pattern.preprocess import load_image
import glass_pattern.runner as runner_module
from glass_pattern.runner import main, process_images


def _write_pattern(path: Path, circles: int) -> None:
    canvas = np.full((200, 100 * max(circles, 1), 3), 255, dtype=np.uint8)
    for idx in range(circles):
        cv2.circle(canvas, (50 + idx * 100, 100), 30, (30, 30, 30), -1)
    cv2.imwrite(str(path), canvas)


def test_load_image_returns_rgb(tmp_path: Path) -> None:
    rgb = np.zeros((8, 8, 3), dtype=np.uint8)
    rgb[:, :, 0] = 255
    path = tmp_path / "red.png"
    cv2.imwrite(str(path), cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR))

    loaded = load_image(path)

    assert loaded.shape == (8, 8, 3)
    assert tuple(loaded[0, 0]) == (255, 0, 0)


def test_load_image_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_image(tmp_path / "missing.png")


def test_process_images_writes_summary_and_overlays(tmp_path: Path) -> None:
    images = tmp_path / "captures"
    images.mkdir()
    _write_pattern(images / "three.png", 3)
    _write_pattern(images / "blank.png", 0)
    (images / "broken.jpg").write_bytes(b"not an image")
    out = tmp_path / "out"

    entries = process_images(str(images), str(out), overlays=True, workers=2, verbose=False)

    assert len(entries) == 3
    by_name = {Path(entry["image"]).name: entry for entry in entries}
    assert "error" in by_name["broken.jpg"]
    assert by_name["three.png"]["result"]["contourCount"] == 3
    assert by_name["blank.png"]["result"]["edgeStrength"] == 0

    summary = json.loads((out / "summary.json").read_text(encoding="utf-8"))
    assert summary == entries
    assert (out / "three_overlay.png").exists()
    assert (out / "blank_overlay.png").exists()


def test_process_images_without_images_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        process_images(str(tmp_path), verbose=False)


def test_cli_defaults_to_analyze(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    image_path = tmp_path / "pattern.png"
    _write_pattern(image_path, 2)

    main([str(image_path)])

    captured = capsys.readouterr().out
    assert "pattern.png" in captured
    assert "contours=2" in captured


def test_cli_overlay_command(tmp_path: Path) -> None:
    image_path = tmp_path / "pattern.png"
    _write_pattern(image_path, 1)
    target = tmp_path / "render" / "overlay.png"

    main(["overlay", str(image_path), "-o", str(target), "--quiet"])

    written = cv2.imread(str(target))
    assert written is not None
    assert written.shape == (200, 100, 3)


def test_progress_is_reported_as_images_finish(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("a.png", "b.png"):
        (tmp_path / name).write_bytes(b"")
    first_reported = threading.Event()
    waited: list = []

    def _fake_analyze(_analyzer, image_path: Path, _overlay_dir) -> dict:
        if image_path.name == "b.png":
            waited.append(first_reported.wait(timeout=5))
        return {"image": str(image_path), "error": "stub"}

    def _fake_report(idx: int, total: int, entry: dict) -> None:
        first_reported.set()

    monkeypatch.setattr(runner_module, "_analyze_one", _fake_analyze)
    monkeypatch.setattr(runner_module, "_report", _fake_report)

    entries = process_images(str(tmp_path), workers=1, verbose=True)

    assert len(entries) == 2
    assert waited == [True]


def test_overlay_write_failure_does_not_abort_batch(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    images = tmp_path / "captures"
    images.mkdir()
    _write_pattern(images / "first.png", 1)
    _write_pattern(images / "second.png", 2)
    out = tmp_path / "out"
    original = runner_module._write_overlay

    def _flaky_write(analyzer, image, target: Path) -> None:
        if target.name.startswith("first"):
            raise OSError(f"Unable to write overlay: {target}")
        original(analyzer, image, target)

    monkeypatch.setattr(runner_module, "_write_overlay", _flaky_write)

    entries = process_images(str(images), str(out), overlays=True, verbose=False)

    by_name = {Path(entry["image"]).name: entry for entry in entries}
    assert "Unable to write overlay" in by_name["first.png"]["error"]
    assert by_name["second.png"]["result"]["contourCount"] == 2
    assert (out / "summary.json").exists()
    assert (out / "second_overlay.png").exists()
