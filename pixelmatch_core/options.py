from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

from PIL import ImageColor

from .raster import Raster

RGBColor = Tuple[int, int, int]
ColorLike = Union[str, Sequence[int]]

__all__ = [
    "MatchOptions",
    "OutputSlot",
    "parse_color",
]


def parse_color(value: ColorLike) -> RGBColor:
    """
    Normalise a color specification to an ``(r, g, b)`` tuple.

    Accepts Pillow color strings (``"red"``, ``"#ff0000"``, ``"rgb(255,0,0)"``),
    comma-separated channel lists (``"255,0,0"``) and 3- or 4-item sequences.
    Alpha is dropped; overlay colors are always rendered opaque.

    Raises:
        ValueError: Unknown color name or channel out of range
    """
    if isinstance(value, str):
        text = value.strip()
        if "," in text and "(" not in text:
            channels = tuple(int(part) for part in text.split(","))
        else:
            channels = tuple(ImageColor.getrgb(text))
    else:
        channels = tuple(int(part) for part in value)

    if len(channels) not in (3, 4):
        raise ValueError(f"color must have 3 or 4 channels, got {len(channels)}: {value!r}")
    if any(channel < 0 or channel > 255 for channel in channels):
        raise ValueError(f"color channels must be within 0-255: {value!r}")
    r, g, b = channels[:3]
    return r, g, b


@dataclass
class OutputSlot:
    """Receives the rendered diff image when passed as ``MatchOptions.write_to``."""

    image: Optional[Raster] = None


@dataclass(frozen=True)
class MatchOptions:
    threshold: float = 0.1
    include_anti_aliasing: bool = False
    alpha: float = 0.1
    anti_aliased_color: ColorLike = (255, 255, 0)
    diff_color: ColorLike = (255, 0, 0)
    diff_color_alt: Optional[ColorLike] = None
    diff_mask: bool = False
    write_to: Optional[OutputSlot] = None

    def __post_init__(self) -> None:
        if not 0.0 <= self.threshold <= 1.0:
            raise ValueError(f"threshold must be between 0.0 and 1.0, got {self.threshold}")
        if not 0.0 <= self.alpha <= 1.0:
            raise ValueError(f"alpha must be between 0.0 and 1.0, got {self.alpha}")
        object.__setattr__(self, "threshold", float(self.threshold))
        object.__setattr__(self, "alpha", float(self.alpha))
        object.__setattr__(self, "anti_aliased_color", parse_color(self.anti_aliased_color))
        object.__setattr__(self, "diff_color", parse_color(self.diff_color))
        if self.diff_color_alt is not None:
            object.__setattr__(self, "diff_color_alt", parse_color(self.diff_color_alt))

    @property
    def renders(self) -> bool:
        return self.write_to is not None

    def with_changes(self, **changes: object) -> "MatchOptions":
        return dataclasses.replace(self, **changes)
