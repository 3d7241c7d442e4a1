"""
Sliding window of canonical rows.

The anti-aliasing check needs the 3x3 neighbourhood of a pixel and of each of
its neighbours, so a scan must see two rows above and below the current one.
Rows are converted once when they enter the window and kept in a five-slot
ring indexed by ``row % 5``.
"""
from __future__ import annotations

from typing import List, Optional

import numpy as np

from .colors import Color, canonical_rows
from .raster import Raster

WINDOW_SIZE = 5
REACH = 2


class SlidingWindowReader:
    """Forward-only row cursor over a raster.

    Coordinates are relative to the raster's origin. ``start``/``stop``
    restrict the rows visited by :meth:`advance`; neighbouring rows outside
    that range are still readable.
    """

    def __init__(self, raster: Raster, start: int = 0, stop: Optional[int] = None) -> None:
        height = raster.height
        stop = height if stop is None else stop
        if not 0 <= start <= stop <= height:
            raise ValueError(f"invalid row range [{start}, {stop}) for height {height}")

        self._raster = raster
        self._start = start
        self._stop = stop
        self._row = start - 1
        self._started = False
        self._finished = False
        self._lines = np.empty((WINDOW_SIZE, raster.width, 4), dtype=np.float64)
        self._slot_rows: List[int] = [-1] * WINDOW_SIZE

    @property
    def width(self) -> int:
        return self._raster.width

    @property
    def height(self) -> int:
        return self._raster.height

    @property
    def row(self) -> int:
        if not self._started or self._finished:
            raise RuntimeError("reader is not positioned on a row")
        return self._row

    @property
    def finished(self) -> bool:
        return self._finished

    def advance(self) -> bool:
        if self._finished:
            return False
        if self._row + 1 >= self._stop:
            self._finished = True
            return False

        self._row += 1
        self._started = True
        first = max(self._row - REACH, 0)
        last = min(self._row + REACH, self.height - 1)
        for y in range(first, last + 1):
            if self._slot_rows[y % WINDOW_SIZE] != y:
                self._materialize(y)
        return True

    def _materialize(self, y: int) -> None:
        slot = y % WINDOW_SIZE
        self._lines[slot] = canonical_rows(self._raster.pixels[y], self._raster.mode)
        self._slot_rows[slot] = y

    def row_at(self, y: int) -> np.ndarray:
        """Canonical ``(width, 4)`` line for row ``y``; must lie within two rows of the cursor."""
        if not self._started or self._finished:
            raise IndexError("reader is not positioned on a row")
        if abs(y - self._row) > REACH or not 0 <= y < self.height:
            raise IndexError(f"row {y} is outside the window around row {self._row}")
        slot = y % WINDOW_SIZE
        if self._slot_rows[slot] != y:
            raise IndexError(f"row {y} has not been materialized")
        return self._lines[slot]

    def pixel_at(self, x: int, y: int) -> Color:
        return Color(*self.row_at(y)[x].tolist())
