"""
Pixel-by-pixel comparison of two equally sized rasters.

The scan walks both images row by row through sliding windows. Pixels whose
perceptual delta exceeds the threshold are counted unless the anti-aliasing
check explains them. When an output slot is configured the scan also renders a
diff image: a dimmed grayscale copy of the first image with highlighted pixels.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from .antialias import is_antialiased
from .colors import blend, luma
from .delta import max_delta, row_delta
from .identical import rasters_identical
from .options import MatchOptions, RGBColor
from .raster import ImageLike, Raster, as_raster
from .window import SlidingWindowReader

logger = logging.getLogger(__name__)

OPAQUE = 255


class ImageSizeMismatchError(ValueError):
    def __init__(self, size_a: Tuple[int, int], size_b: Tuple[int, int]) -> None:
        super().__init__(
            f"image sizes do not match: {size_a[0]}x{size_a[1]} vs {size_b[0]}x{size_b[1]}"
        )
        self.size_a = size_a
        self.size_b = size_b


@dataclass(frozen=True)
class DiffResult:
    diff_count: int
    total_pixels: int
    identical: bool = False
    diff_image: Optional[Raster] = None

    @property
    def diff_ratio(self) -> float:
        if not self.total_pixels:
            return 0.0
        return self.diff_count / self.total_pixels


def _opaque(color: RGBColor) -> Tuple[int, int, int, int]:
    r, g, b = color
    return r, g, b, OPAQUE


def preview_row(line: np.ndarray, alpha: float) -> np.ndarray:
    """Dimmed grayscale rendering of one canonical row.

    The shade is the unblended luma of the premultiplied color, faded toward
    white by ``alpha`` times the pixel coverage.
    """
    gray = luma(line[:, 0:3])
    shade = blend(gray, alpha * line[:, 3] / 255.0)
    shade = np.clip(shade, 0, 255).astype(np.uint8)
    out = np.empty((line.shape[0], 4), dtype=np.uint8)
    out[:, 0:3] = shade[:, np.newaxis]
    out[:, 3] = OPAQUE
    return out


def _row_bands(height: int, workers: int) -> List[Tuple[int, int]]:
    count = max(1, min(workers, height))
    edges = np.linspace(0, height, count + 1).astype(int)
    return [(int(start), int(stop)) for start, stop in zip(edges[:-1], edges[1:])]


def _scan_band(
    a: Raster,
    b: Raster,
    options: MatchOptions,
    cutoff: float,
    output: Optional[np.ndarray],
    start: int,
    stop: int,
) -> int:
    reader_a = SlidingWindowReader(a, start, stop)
    reader_b = SlidingWindowReader(b, start, stop)
    render_background = output is not None and not options.diff_mask
    exclude_aa = not options.include_anti_aliasing
    aa_pixel = _opaque(options.anti_aliased_color)
    diff_pixel = _opaque(options.diff_color)
    alt_pixel = _opaque(options.diff_color_alt) if options.diff_color_alt is not None else None

    diff = 0
    while reader_a.advance() and reader_b.advance():
        y = reader_a.row
        line_a = reader_a.row_at(y)
        deltas = row_delta(line_a, reader_b.row_at(y))
        if render_background:
            output[y] = preview_row(line_a, options.alpha)

        for x in np.flatnonzero(np.abs(deltas) > cutoff).tolist():
            if exclude_aa and (
                is_antialiased(reader_a, reader_b, x, y) or is_antialiased(reader_b, reader_a, x, y)
            ):
                if render_background:
                    output[y, x] = aa_pixel
                continue

            diff += 1
            if output is not None:
                if alt_pixel is not None and deltas[x] < 0:
                    output[y, x] = alt_pixel
                else:
                    output[y, x] = diff_pixel
    return diff


def _render_preview(a: Raster, alpha: float, output: np.ndarray) -> None:
    reader = SlidingWindowReader(a)
    while reader.advance():
        output[reader.row] = preview_row(reader.row_at(reader.row), alpha)


def match_pixel(
    image_a: ImageLike,
    image_b: ImageLike,
    options: Optional[MatchOptions] = None,
    *,
    workers: int = 1,
) -> DiffResult:
    """
    Count the pixels that differ visibly between two images.

    Args:
        image_a: Reference image (Raster, PIL image or numpy array)
        image_b: Image compared against the reference
        options: Comparison settings; defaults to ``MatchOptions()``
        workers: Number of row bands scanned concurrently

    Returns:
        DiffResult with the differing-pixel count and, when
        ``options.write_to`` is set, the rendered diff image

    Raises:
        ImageSizeMismatchError: The images have different dimensions
    """
    options = options or MatchOptions()
    a = as_raster(image_a)
    b = as_raster(image_b)
    if a.size != b.size:
        raise ImageSizeMismatchError(a.size, b.size)

    width, height = a.size
    output: Optional[np.ndarray] = None
    if options.renders:
        output = np.zeros((height, width, 4), dtype=np.uint8)

    if rasters_identical(a, b):
        logger.debug("Images are byte-identical; skipping pixel scan")
        if output is not None and not options.diff_mask:
            _render_preview(a, options.alpha, output)
        return _finish(a, 0, output, options, identical=True)

    cutoff = max_delta(options.threshold)
    bands = _row_bands(height, workers)
    if len(bands) == 1:
        start, stop = bands[0]
        diff = _scan_band(a, b, options, cutoff, output, start, stop)
    else:
        logger.debug(f"Scanning {height} rows in {len(bands)} bands")
        with ThreadPoolExecutor(max_workers=len(bands)) as executor:
            futures = [
                executor.submit(_scan_band, a, b, options, cutoff, output, start, stop)
                for start, stop in bands
            ]
            diff = sum(future.result() for future in futures)

    return _finish(a, diff, output, options, identical=False)


def _finish(
    a: Raster,
    diff: int,
    output: Optional[np.ndarray],
    options: MatchOptions,
    identical: bool,
) -> DiffResult:
    diff_image: Optional[Raster] = None
    if output is not None:
        diff_image = Raster(output, "RGBA", a.origin)
        options.write_to.image = diff_image

    width, height = a.size
    logger.debug(f"{diff} of {width * height} pixels differ")
    return DiffResult(
        diff_count=diff,
        total_pixels=width * height,
        identical=identical,
        diff_image=diff_image,
    )
