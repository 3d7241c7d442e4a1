from .__version__ import __version__
from .colors import Color
from .delta import MAX_DELTA, color_delta, max_delta
from .engine import DiffResult, ImageSizeMismatchError, match_pixel
from .options import MatchOptions, OutputSlot, parse_color
from .raster import Raster, as_raster

__all__ = [
    "__version__",
    "Color",
    "DiffResult",
    "ImageSizeMismatchError",
    "MAX_DELTA",
    "MatchOptions",
    "OutputSlot",
    "Raster",
    "as_raster",
    "color_delta",
    "match_pixel",
    "max_delta",
    "parse_color",
]
