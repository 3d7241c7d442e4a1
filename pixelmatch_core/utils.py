from __future__ import annotations

import io
import sys
from pathlib import Path
from typing import Union

from PIL import Image

from .raster import Raster

STDOUT_DEST = "-"
OUTPUT_FORMATS = {".png": "PNG", ".jpg": "JPEG", ".jpeg": "JPEG"}

PathLike = Union[str, Path]


def output_format(dest: PathLike) -> str:
    """Pillow format name for a destination; ``-`` means PNG on stdout."""
    if str(dest) == STDOUT_DEST:
        return "PNG"
    suffix = Path(dest).suffix.lower()
    try:
        return OUTPUT_FORMATS[suffix]
    except KeyError:
        raise ValueError(f"unsupported format: {suffix or str(dest)}") from None


def pil_image_from_path(path: PathLike) -> Image.Image:
    im = Image.open(path)
    try:
        # Force decode so truncated files fail here rather than mid-scan
        im.load()
    except Exception:
        im.close()
        raise
    return im


def load_raster(path: PathLike) -> Raster:
    with pil_image_from_path(path) as im:
        return Raster.from_pil(im)


def raster_from_bytes(data: bytes) -> Raster:
    with Image.open(io.BytesIO(data)) as im:
        im.load()
        return Raster.from_pil(im)


def _encode(raster: Raster, fmt: str) -> bytes:
    image = raster.to_pil()
    if fmt == "JPEG" and image.mode != "RGB":
        image = image.convert("RGB")
    buf = io.BytesIO()
    image.save(buf, format=fmt)
    return buf.getvalue()


def encode_png(raster: Raster) -> bytes:
    return _encode(raster, "PNG")


def save_raster(raster: Raster, dest: PathLike) -> None:
    fmt = output_format(dest)
    data = _encode(raster, fmt)
    if str(dest) == STDOUT_DEST:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
        return
    Path(dest).write_bytes(data)
