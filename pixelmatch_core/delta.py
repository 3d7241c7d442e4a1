"""Signed perceptual distance between colors."""
from __future__ import annotations

from typing import Sequence

import numpy as np

from .colors import Color, blend_rgb, in_phase, luma, quadrature

# Largest weighted YIQ distance between any two 8-bit colors.
MAX_DELTA = 35215.0

Y_WEIGHT = 0.5053
I_WEIGHT = 0.299
Q_WEIGHT = 0.1957


def max_delta(threshold: float) -> float:
    """Absolute squared-distance cutoff for a 0-1 sensitivity threshold."""
    return MAX_DELTA * threshold * threshold


def color_delta(a: Sequence[float], b: Sequence[float], luma_only: bool = False) -> float:
    """
    Perceptual difference between two canonical colors.

    Positive when ``b`` is lighter than ``a``, negative when it is darker.
    With ``luma_only`` the raw luma difference ``Ya - Yb`` is returned instead
    of the weighted squared distance.
    """
    ca = Color(*a)
    cb = Color(*b)
    if ca == cb:
        return 0.0

    ca = ca.blended()
    cb = cb.blended()
    ya = ca.luma
    yb = cb.luma
    y = ya - yb
    if luma_only:
        return y

    i = ca.in_phase - cb.in_phase
    q = ca.quadrature - cb.quadrature
    magnitude = Y_WEIGHT * y * y + I_WEIGHT * i * i + Q_WEIGHT * q * q
    if ya > yb:
        return -magnitude
    return magnitude


def row_delta(rgba_a: np.ndarray, rgba_b: np.ndarray, luma_only: bool = False) -> np.ndarray:
    """Vectorised :func:`color_delta` over matching arrays of canonical colors."""
    same = np.all(rgba_a == rgba_b, axis=-1)

    rgb_a = blend_rgb(rgba_a)
    rgb_b = blend_rgb(rgba_b)
    ya = luma(rgb_a)
    yb = luma(rgb_b)
    y = ya - yb
    if luma_only:
        return np.where(same, 0.0, y)

    i = in_phase(rgb_a) - in_phase(rgb_b)
    q = quadrature(rgb_a) - quadrature(rgb_b)
    magnitude = Y_WEIGHT * y * y + I_WEIGHT * i * i + Q_WEIGHT * q * q
    signed = np.where(ya > yb, -magnitude, magnitude)
    return np.where(same, 0.0, signed)
