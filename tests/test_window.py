"""Tests for the sliding row window."""
from __future__ import annotations

import numpy as np
import pytest

from pixelmatch_core.colors import Color, canonical_rows
from pixelmatch_core.raster import Raster
from pixelmatch_core.window import SlidingWindowReader


def _row_marked(height: int, width: int = 3) -> Raster:
    arr = np.zeros((height, width, 4), dtype=np.uint8)
    for y in range(height):
        arr[y, :, 0] = y
        arr[y, :, 3] = 255
    return Raster(arr)


def test_advance_visits_every_row_then_stops():
    reader = SlidingWindowReader(_row_marked(7))
    rows = []
    while reader.advance():
        rows.append(reader.row)
    assert rows == list(range(7))
    assert reader.finished
    assert reader.advance() is False


def test_window_covers_two_rows_each_side():
    raster = _row_marked(9)
    reader = SlidingWindowReader(raster)
    while reader.advance():
        current = reader.row
        for y in range(max(0, current - 2), min(9, current + 3)):
            np.testing.assert_array_equal(
                reader.row_at(y),
                canonical_rows(raster.pixels[y], raster.mode),
            )


def test_rows_outside_window_raise():
    reader = SlidingWindowReader(_row_marked(9))
    for _ in range(5):
        reader.advance()
    assert reader.row == 4
    with pytest.raises(IndexError):
        reader.row_at(1)
    with pytest.raises(IndexError):
        reader.row_at(7)


def test_access_before_first_advance_raises():
    reader = SlidingWindowReader(_row_marked(3))
    with pytest.raises(IndexError):
        reader.row_at(0)
    with pytest.raises(RuntimeError):
        reader.row


def test_edges_are_clamped():
    reader = SlidingWindowReader(_row_marked(2))
    assert reader.advance()
    reader.row_at(1)
    with pytest.raises(IndexError):
        reader.row_at(-1)
    with pytest.raises(IndexError):
        reader.row_at(2)


def test_pixel_at_returns_canonical_color():
    arr = np.array([[[255, 5, 0, 51], [1, 2, 3, 255]]], dtype=np.uint8)
    reader = SlidingWindowReader(Raster(arr))
    assert reader.advance()
    assert reader.pixel_at(0, 0) == Color(51.0, 1.0, 0.0, 51.0)
    assert reader.pixel_at(1, 0) == Color(1.0, 2.0, 3.0, 255.0)


def test_row_range_reads_neighbours_outside_the_band():
    raster = _row_marked(10)
    reader = SlidingWindowReader(raster, start=4, stop=6)
    assert reader.advance()
    assert reader.row == 4
    assert reader.row_at(2)[0][0] == 2
    assert reader.row_at(6)[0][0] == 6
    assert reader.advance()
    assert reader.row_at(7)[0][0] == 7
    assert not reader.advance()


def test_invalid_row_range():
    with pytest.raises(ValueError):
        SlidingWindowReader(_row_marked(3), start=2, stop=1)
    with pytest.raises(ValueError):
        SlidingWindowReader(_row_marked(3), stop=4)


def test_empty_raster_is_terminal():
    reader = SlidingWindowReader(Raster(np.zeros((0, 4, 4), dtype=np.uint8)))
    assert reader.advance() is False
