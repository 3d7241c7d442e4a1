from __future__ import annotations

import numpy as np

from .raster import Raster


def _same_layout(a: Raster, b: Raster) -> bool:
    return a.mode == b.mode and a.pixels.dtype == b.pixels.dtype and a.size == b.size


def rasters_identical(a: Raster, b: Raster) -> bool:
    """Byte-level equality of two rasters sharing a packed layout.

    Sub-views carry row padding in their backing buffer, so they are compared
    one row at a time instead of as a single block.
    """
    if not _same_layout(a, b):
        return False
    if a.is_contiguous and b.is_contiguous:
        return a.pixels.tobytes() == b.pixels.tobytes()
    for row_a, row_b in zip(a.pixels, b.pixels):
        if not np.array_equal(row_a, row_b):
            return False
    return True
