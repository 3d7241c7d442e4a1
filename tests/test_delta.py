"""Tests for the signed perceptual delta."""
from __future__ import annotations

import numpy as np
import pytest

from pixelmatch_core.delta import MAX_DELTA, color_delta, max_delta, row_delta

BLACK = (0, 0, 0, 255)
WHITE = (255, 255, 255, 255)
RED = (255, 0, 0, 255)


def test_identical_colors_have_zero_delta():
    for color in (BLACK, WHITE, RED, (12, 34, 56, 78), (0, 0, 0, 0)):
        assert color_delta(color, color) == 0
        assert color_delta(color, color, luma_only=True) == 0


def test_lighter_pixel_is_positive():
    delta = color_delta(BLACK, WHITE)
    assert delta > 0
    assert delta == pytest.approx(0.5053 * 255.0 ** 2, rel=1e-6)


def test_darker_pixel_is_negative():
    assert color_delta(WHITE, BLACK) < 0


def test_delta_is_antisymmetric():
    rng = np.random.default_rng(42)
    for _ in range(200):
        a = tuple(int(v) for v in rng.integers(0, 256, size=4))
        b = tuple(int(v) for v in rng.integers(0, 256, size=4))
        forward = color_delta(a, b)
        backward = color_delta(b, a)
        assert abs(forward) == abs(backward)
        if color_delta(a, b, luma_only=True) != 0:
            assert forward == -backward


def test_luma_only_returns_signed_luma_difference():
    assert color_delta(WHITE, BLACK, luma_only=True) == pytest.approx(255.0, abs=1e-4)
    assert color_delta(BLACK, WHITE, luma_only=True) == pytest.approx(-255.0, abs=1e-4)


def test_transparent_pixels_compare_as_white():
    # fully transparent black composites to white
    assert color_delta((0, 0, 0, 0), WHITE) == pytest.approx(0.0, abs=1e-6)


def test_magnitude_never_exceeds_max_delta():
    rng = np.random.default_rng(3)
    a = rng.integers(0, 256, size=(4096, 4)).astype(np.float64)
    b = rng.integers(0, 256, size=(4096, 4)).astype(np.float64)
    assert np.abs(row_delta(a, b)).max() <= MAX_DELTA
    assert abs(color_delta(BLACK, WHITE)) <= MAX_DELTA


def test_max_delta_from_threshold():
    assert MAX_DELTA == 35215
    assert max_delta(0.0) == 0.0
    assert max_delta(1.0) == 35215.0
    assert max_delta(0.1) == pytest.approx(352.15)


def test_row_delta_matches_scalar():
    rng = np.random.default_rng(11)
    a = rng.integers(0, 256, size=(128, 4)).astype(np.float64)
    b = a.copy()
    b[::3] = rng.integers(0, 256, size=b[::3].shape)
    vectorised = row_delta(a, b)
    luma_only = row_delta(a, b, luma_only=True)
    for idx, (ca, cb) in enumerate(zip(a.tolist(), b.tolist())):
        assert vectorised[idx] == color_delta(ca, cb)
        assert luma_only[idx] == color_delta(ca, cb, luma_only=True)


def test_partial_coverage_blends_premultiplied_channels():
    half_red = (128.0, 0.0, 0.0, 128.0)
    pink = (255.0, 127.0, 127.0, 255.0)
    coverage = 128.0 / 255.0
    r, g, b = (255.0 + (c - 255.0) * coverage for c in half_red[:3])
    dr, dg, db = r - 255.0, g - 127.0, b - 127.0
    y = 0.29889531 * dr + 0.58662247 * dg + 0.11448223 * db
    i = 0.59597799 * dr - 0.27417610 * dg - 0.32180189 * db
    q = 0.21147017 * dr - 0.52261711 * dg + 0.31114694 * db
    expected = 0.5053 * y * y + 0.299 * i * i + 0.1957 * q * q

    # pink is lighter than red composited on white
    assert color_delta(half_red, pink) == pytest.approx(expected, rel=1e-9)
    assert color_delta(half_red, pink) > max_delta(0.1)
    assert color_delta(pink, half_red) == pytest.approx(-expected, rel=1e-9)
    row = row_delta(np.array([half_red]), np.array([pink]))
    assert row[0] == color_delta(half_red, pink)
