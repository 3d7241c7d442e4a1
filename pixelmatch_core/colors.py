"""
Canonical colors and the YIQ perceptual projection.

Every pixel layout is normalised to premultiplied RGBA with channels on the
8-bit scale, so all fully transparent pixels share one canonical value.
Partially transparent colors are composited on white before their luma and
chroma are taken.
"""
from __future__ import annotations

from typing import NamedTuple

import numpy as np

WHITE = 255.0
SIXTEEN_BIT_SCALE = 257.0

Y_COEFFICIENTS = (0.29889531, 0.58662247, 0.11448223)
I_COEFFICIENTS = (0.59597799, -0.27417610, -0.32180189)
Q_COEFFICIENTS = (0.21147017, -0.52261711, 0.31114694)

_GRAY_MODES = {"L", "LA", "La"}
_ALPHA_MODES = {"LA", "La", "RGBA", "RGBa"}
_PREMULTIPLIED_MODES = {"La", "RGBa"}


def blend(channel, alpha):
    """Composite ``channel`` at coverage ``alpha`` (0-1) over white."""
    return WHITE + (channel - WHITE) * alpha


def _project(r, g, b, coefficients):
    cr, cg, cb = coefficients
    return r * cr + g * cg + b * cb


class Color(NamedTuple):
    r: float
    g: float
    b: float
    a: float = WHITE

    def blended(self) -> "Color":
        if self.a < WHITE:
            alpha = self.a / WHITE
            return Color(blend(self.r, alpha), blend(self.g, alpha), blend(self.b, alpha), self.a)
        return self

    @property
    def luma(self) -> float:
        return _project(self.r, self.g, self.b, Y_COEFFICIENTS)

    @property
    def in_phase(self) -> float:
        return _project(self.r, self.g, self.b, I_COEFFICIENTS)

    @property
    def quadrature(self) -> float:
        return _project(self.r, self.g, self.b, Q_COEFFICIENTS)


def canonical_rows(block: np.ndarray, mode: str) -> np.ndarray:
    """
    Convert raw pixels of a given layout into canonical float RGBA.

    Args:
        block: Array whose last axis holds the channels of ``mode``
        mode: Raster layout (``L``, ``LA``, ``La``, ``RGB``, ``RGBA``, ``RGBa``)

    Returns:
        float64 array with the same leading shape and a last axis of 4,
        color channels premultiplied by coverage
    """
    values = block.astype(np.float64)
    if block.dtype == np.uint16:
        values /= SIXTEEN_BIT_SCALE

    if mode in _GRAY_MODES:
        gray = values[..., 0:1]
        rgb = np.concatenate((gray, gray, gray), axis=-1)
    else:
        rgb = values[..., 0:3]

    if mode in _ALPHA_MODES:
        alpha = values[..., -1:]
    else:
        alpha = np.full(values.shape[:-1] + (1,), WHITE)

    if mode not in _PREMULTIPLIED_MODES:
        # opaque pixels keep their exact values
        rgb = np.where(alpha < WHITE, rgb * alpha / WHITE, rgb)

    return np.concatenate((rgb, alpha), axis=-1)


def blend_rgb(rgba: np.ndarray) -> np.ndarray:
    rgb = rgba[..., 0:3]
    alpha = rgba[..., 3:4]
    return np.where(alpha < WHITE, blend(rgb, alpha / WHITE), rgb)


def luma(rgb: np.ndarray) -> np.ndarray:
    return _project(rgb[..., 0], rgb[..., 1], rgb[..., 2], Y_COEFFICIENTS)


def in_phase(rgb: np.ndarray) -> np.ndarray:
    return _project(rgb[..., 0], rgb[..., 1], rgb[..., 2], I_COEFFICIENTS)


def quadrature(rgb: np.ndarray) -> np.ndarray:
    return _project(rgb[..., 0], rgb[..., 1], rgb[..., 2], Q_COEFFICIENTS)
