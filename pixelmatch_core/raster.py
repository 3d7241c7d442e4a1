"""
Raster wrapper around numpy pixel buffers.

A raster is a ``(height, width, channels)`` array plus a layout mode and an
origin. Mode names follow Pillow: a lower-case ``a`` marks premultiplied alpha.
Channel depth comes from the array dtype (``uint8`` or ``uint16``).
"""
from __future__ import annotations

from typing import Optional, Tuple, Union

import numpy as np
from PIL import Image

from .colors import SIXTEEN_BIT_SCALE, WHITE

MODE_CHANNELS = {
    "L": 1,
    "LA": 2,
    "La": 2,
    "RGB": 3,
    "RGBA": 4,
    "RGBa": 4,
}
PREMULTIPLIED_MODES = {"La", "RGBa"}
SUPPORTED_DTYPES = (np.dtype(np.uint8), np.dtype(np.uint16))

_DEFAULT_MODES = {1: "L", 2: "LA", 3: "RGB", 4: "RGBA"}
_SIXTEEN_BIT_PIL_MODES = {"I;16", "I;16L", "I;16B", "I;16N"}
_GRAY_PIL_MODES = {"I", "F"}

Box = Tuple[int, int, int, int]


class Raster:
    """Pixel grid with bounds, addressed in absolute coordinates."""

    __slots__ = ("pixels", "mode", "origin")

    def __init__(
        self,
        pixels: np.ndarray,
        mode: Optional[str] = None,
        origin: Tuple[int, int] = (0, 0),
    ) -> None:
        arr = np.asarray(pixels)
        if arr.ndim == 2:
            arr = arr[:, :, np.newaxis]
        if arr.ndim != 3:
            raise ValueError(f"Raster pixels must be 2-D or 3-D, got shape {arr.shape}.")

        channels = arr.shape[2]
        if mode is None:
            mode = _DEFAULT_MODES.get(channels)
            if mode is None:
                raise ValueError(f"Cannot infer a raster mode for {channels} channels.")
        expected = MODE_CHANNELS.get(mode)
        if expected is None:
            raise ValueError(
                f"Unsupported raster mode '{mode}'. Supported: {sorted(MODE_CHANNELS)}"
            )
        if expected != channels:
            raise ValueError(
                f"Mode '{mode}' expects {expected} channels, got {channels}."
            )
        if arr.dtype not in SUPPORTED_DTYPES:
            raise ValueError(
                f"Unsupported pixel dtype {arr.dtype}; expected uint8 or uint16."
            )

        self.pixels = arr
        self.mode = mode
        self.origin = (int(origin[0]), int(origin[1]))

    def __repr__(self) -> str:
        return (
            f"Raster(mode={self.mode!r}, size={self.size}, "
            f"dtype={self.pixels.dtype}, origin={self.origin})"
        )

    @classmethod
    def from_pil(cls, image: Image.Image) -> "Raster":
        """Wrap a Pillow image, converting modes the engine does not read natively."""
        mode = image.mode
        if mode in _SIXTEEN_BIT_PIL_MODES:
            return cls(np.asarray(image).astype(np.uint16), "L")
        if mode in _GRAY_PIL_MODES:
            image = image.convert("L")
        elif mode not in MODE_CHANNELS:
            image = image.convert("RGBA")
        return cls(np.asarray(image), image.mode)

    @classmethod
    def blank(cls, width: int, height: int, origin: Tuple[int, int] = (0, 0)) -> "Raster":
        return cls(np.zeros((height, width, 4), dtype=np.uint8), "RGBA", origin)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def bounds(self) -> Box:
        x0, y0 = self.origin
        return x0, y0, x0 + self.width, y0 + self.height

    @property
    def channels(self) -> int:
        return int(self.pixels.shape[2])

    @property
    def premultiplied(self) -> bool:
        return self.mode in PREMULTIPLIED_MODES

    @property
    def is_contiguous(self) -> bool:
        return bool(self.pixels.flags["C_CONTIGUOUS"])

    def pixel(self, x: int, y: int) -> Tuple[int, ...]:
        x0, y0, x1, y1 = self.bounds
        if not (x0 <= x < x1 and y0 <= y < y1):
            raise IndexError(f"pixel ({x}, {y}) outside raster bounds {self.bounds}")
        return tuple(int(v) for v in self.pixels[y - y0, x - x0])

    def crop(self, box: Box) -> "Raster":
        """Return a sub-view sharing this raster's buffer; ``box`` is absolute."""
        x0, y0, x1, y1 = box
        bx0, by0, bx1, by1 = self.bounds
        if not (bx0 <= x0 <= x1 <= bx1 and by0 <= y0 <= y1 <= by1):
            raise ValueError(f"crop box {box} exceeds raster bounds {self.bounds}")
        view = self.pixels[y0 - by0 : y1 - by0, x0 - bx0 : x1 - bx0]
        return Raster(view, self.mode, (x0, y0))

    def to_pil(self) -> Image.Image:
        """Straight-alpha 8-bit Pillow image of this raster."""
        arr = self.pixels
        if arr.dtype != np.uint8 or self.premultiplied:
            values = arr.astype(np.float64)
            if arr.dtype == np.uint16:
                values /= SIXTEEN_BIT_SCALE
            if self.premultiplied:
                color = values[..., :-1]
                alpha = values[..., -1:]
                straight = np.zeros_like(color)
                np.divide(color * WHITE, alpha, out=straight, where=alpha > 0)
                values = np.concatenate((np.minimum(straight, WHITE), alpha), axis=-1)
            arr = np.clip(np.rint(values), 0, 255).astype(np.uint8)
        arr = np.ascontiguousarray(arr)
        if arr.shape[2] == 1:
            arr = arr[:, :, 0]
        return Image.fromarray(arr)


ImageLike = Union[Raster, Image.Image, np.ndarray]


def as_raster(image: ImageLike) -> Raster:
    if isinstance(image, Raster):
        return image
    if isinstance(image, Image.Image):
        return Raster.from_pil(image)
    if isinstance(image, np.ndarray):
        return Raster(image)
    raise TypeError(f"Expected Raster, PIL image or numpy array, got {type(image).__name__}")
