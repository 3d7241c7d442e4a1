"""
Comparison routes.

Provides an endpoint that accepts two uploaded images, runs the perceptual
pixel comparison and returns the diff count with an optional diff image.
"""

from __future__ import annotations

import asyncio
import base64
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from pydantic import BaseModel

from pixelmatch_core.config import load_match_config
from pixelmatch_core.engine import ImageSizeMismatchError, match_pixel
from pixelmatch_core.options import OutputSlot
from pixelmatch_core.raster import Raster
from pixelmatch_core.utils import encode_png, raster_from_bytes

from .app import GatewayConfig

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/images", tags=["compare"])


class CompareResponse(BaseModel):
    """Response for the comparison endpoint."""
    diff_count: int
    total_pixels: int
    diff_ratio: float
    identical: bool
    width: int
    height: int
    diff_image_png: Optional[str] = None


def get_config(request: Request) -> GatewayConfig:
    return request.app.state.config


def boolean_from_form(value: Optional[str], default: bool) -> bool:
    """
    Parse boolean from form field string.

    Args:
        value: Form field value (e.g., "1", "true", "yes", "on")
        default: Default value if None

    Returns:
        Parsed boolean value
    """
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


async def _read_upload(upload: UploadFile, field: str, limit: int) -> bytes:
    data = await upload.read(limit + 1)
    if not data:
        raise HTTPException(status_code=400, detail=f"{field}: empty upload")
    if len(data) > limit:
        raise HTTPException(status_code=400, detail=f"{field}: file exceeds {limit} bytes")
    return data


def _decode(data: bytes, field: str) -> Raster:
    try:
        return raster_from_bytes(data)
    except (OSError, ValueError) as e:
        raise HTTPException(status_code=400, detail=f"{field}: unable to decode image") from e


@router.post("/compare", response_model=CompareResponse)
async def compare_endpoint(
    image_a: UploadFile = File(...),
    image_b: UploadFile = File(...),
    threshold: Optional[float] = Form(None),
    alpha: Optional[float] = Form(None),
    include_anti_aliasing: Optional[str] = Form(None),
    diff_mask: Optional[str] = Form(None),
    include_diff_image: Optional[str] = Form(None),
    config: GatewayConfig = Depends(get_config),
) -> CompareResponse:
    """
    Compare two images of identical size.

    **Parameters**:
    - `threshold`: Perceptual sensitivity 0.0-1.0 (default from config: 0.1)
    - `alpha`: Opacity of the dimmed background in the diff image
    - `include_anti_aliasing`: Count anti-aliased pixels as differences
    - `diff_mask`: Render only highlighted pixels
    - `include_diff_image`: Return the diff image as base64 PNG (default: true)

    **Returns**:
    - `diff_count`, `total_pixels`, `diff_ratio`, `identical`, `width`, `height`
    - `diff_image_png`: base64 PNG when requested
    """
    raster_a = _decode(await _read_upload(image_a, "image_a", config.max_file_size), "image_a")
    raster_b = _decode(await _read_upload(image_b, "image_b", config.max_file_size), "image_b")

    render = boolean_from_form(include_diff_image, True)
    slot = OutputSlot() if render else None

    try:
        runtime = load_match_config(config.match_config_path)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"invalid match configuration: {e}")
        raise HTTPException(status_code=500, detail=f"invalid match configuration: {e}") from e

    changes: Dict[str, Any] = {}
    if threshold is not None:
        changes["threshold"] = threshold
    if alpha is not None:
        changes["alpha"] = alpha
    if include_anti_aliasing is not None:
        changes["include_anti_aliasing"] = boolean_from_form(include_anti_aliasing, False)
    if diff_mask is not None:
        changes["diff_mask"] = boolean_from_form(diff_mask, False)
    try:
        options = runtime.create_options(write_to=slot).with_changes(**changes)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    workers = config.workers or runtime.workers
    try:
        result = await asyncio.to_thread(match_pixel, raster_a, raster_b, options, workers=workers)
    except ImageSizeMismatchError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    logger.info(f"Compared {image_a.filename} and {image_b.filename}: {result.diff_count} pixels differ")

    diff_png: Optional[str] = None
    if result.diff_image is not None:
        diff_png = base64.b64encode(encode_png(result.diff_image)).decode("ascii")

    width, height = raster_a.size
    return CompareResponse(
        diff_count=result.diff_count,
        total_pixels=result.total_pixels,
        diff_ratio=result.diff_ratio,
        identical=result.identical,
        width=width,
        height=height,
        diff_image_png=diff_png,
    )
