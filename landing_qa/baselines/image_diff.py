"""Pixel comparison between a baseline screenshot and a fresh capture."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, ImageChops

logger = logging.getLogger(__name__)


@dataclass
class DiffResult:
    passed: bool
    diff_pixels: int = 0
    total_pixels: int = 0
    size_mismatch: bool = False
    baseline_size: tuple[int, int] = (0, 0)
    current_size: tuple[int, int] = (0, 0)
    diff_image_path: str | None = None

    @property
    def diff_ratio(self) -> float:
        if self.total_pixels == 0:
            return 0.0
        return self.diff_pixels / self.total_pixels

    @property
    def message(self) -> str:
        if self.size_mismatch:
            return (f"Image size differs: baseline {self.baseline_size[0]}x{self.baseline_size[1]}, "
                    f"current {self.current_size[0]}x{self.current_size[1]}")
        return f"Pixel diff: {self.diff_pixels} px ({self.diff_ratio:.2%})"


def _difference_mask(baseline: Image.Image, current: Image.Image, pixel_threshold: float) -> Image.Image:
    """Return an L-mode mask where 255 marks a pixel whose colour moved past the threshold."""
    diff = ImageChops.difference(baseline, current)
    r, g, b = diff.split()
    channel_max = ImageChops.lighter(ImageChops.lighter(r, g), b)
    cutoff = int(round(pixel_threshold * 255))
    return channel_max.point(lambda v: 255 if v > cutoff else 0)


def _write_diff_image(baseline: Image.Image, mask: Image.Image, output_path: Path) -> None:
    faded = Image.blend(baseline, Image.new("RGB", baseline.size, (255, 255, 255)), 0.7)
    highlight = Image.new("RGB", baseline.size, (255, 0, 64))
    Image.composite(highlight, faded, mask).save(output_path)


def compare_images(
    baseline_path: Path,
    current_path: Path,
    pixel_threshold: float = 0.2,
    max_diff_pixel_ratio: float = 0.0,
    diff_output_path: Path | None = None,
) -> DiffResult:
    """Compare two PNGs pixel by pixel.

    A pixel differs when any RGB channel moves by more than
    ``pixel_threshold`` of the channel range. The comparison passes when the
    ratio of differing pixels is within ``max_diff_pixel_ratio``. Images of
    different sizes never match.
    """
    with Image.open(baseline_path) as b_img, Image.open(current_path) as c_img:
        baseline = b_img.convert("RGB")
        current = c_img.convert("RGB")

    if baseline.size != current.size:
        return DiffResult(
            passed=False,
            size_mismatch=True,
            baseline_size=baseline.size,
            current_size=current.size,
        )

    total = baseline.size[0] * baseline.size[1]
    mask = _difference_mask(baseline, current, pixel_threshold)
    diff_pixels = mask.histogram()[255]
    result = DiffResult(
        passed=(diff_pixels / total if total else 0.0) <= max_diff_pixel_ratio,
        diff_pixels=diff_pixels,
        total_pixels=total,
        baseline_size=baseline.size,
        current_size=current.size,
    )

    if not result.passed and diff_output_path is not None:
        try:
            _write_diff_image(baseline, mask, diff_output_path)
            result.diff_image_path = str(diff_output_path)
        except OSError as e:
            logger.warning("Could not write diff image %s: %s", diff_output_path, e)

    logger.debug("Compared %s vs %s: %s", baseline_path, current_path, result.message)
    return result
