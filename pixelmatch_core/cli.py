from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .__version__ import format_version_info
from .config import load_match_config
from .engine import ImageSizeMismatchError, match_pixel
from .options import OutputSlot
from .utils import STDOUT_DEST, load_raster, output_format, save_raster

logger = logging.getLogger("pixelmatch")


def setup_logging(verbose: bool = False) -> None:
    """
    Configure logging for command-line use.

    Logs go to stderr because stdout may carry the encoded diff image.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=[
            logging.StreamHandler(sys.stderr)
        ]
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="pixelmatch",
        description=(
            "Compare two equally sized images pixel by pixel and write a diff image"
            " highlighting the visible differences."
        ),
    )
    p.add_argument("image1", type=Path, help="Reference image")
    p.add_argument("image2", type=Path, help="Image compared against the reference")
    p.add_argument("--threshold", type=float, help="Perceptual sensitivity 0.0-1.0 (default: 0.1)")
    p.add_argument("--dest", default=STDOUT_DEST, help="Diff image path (.png/.jpg/.jpeg), '-' for stdout")
    p.add_argument("--include-aa", action="store_true", help="Count anti-aliased pixels as differences")
    p.add_argument("--alpha", type=float, help="Opacity of the dimmed background 0.0-1.0 (default: 0.1)")
    p.add_argument("--aa-color", help="Color for anti-aliased pixels (default: 255,255,0)")
    p.add_argument("--diff-color", help="Color for differing pixels (default: 255,0,0)")
    p.add_argument("--diff-color-alt", help="Color for pixels that got darker in image2")
    p.add_argument("--diff-mask", action="store_true", help="Draw only highlighted pixels on a transparent background")
    p.add_argument("--workers", type=int, help="Row bands scanned concurrently")
    p.add_argument("--config", type=Path, help="JSON or TOML settings file")
    p.add_argument("--no-output", action="store_true", help="Only count differences; do not render a diff image")
    p.add_argument("--json-out", type=Path, help="Write a JSON summary to path")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    p.add_argument("--version", action="version", version=format_version_info())
    return p


def _option_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if args.threshold is not None:
        overrides["threshold"] = args.threshold
    if args.alpha is not None:
        overrides["alpha"] = args.alpha
    if args.include_aa:
        overrides["include_anti_aliasing"] = True
    if args.diff_mask:
        overrides["diff_mask"] = True
    if args.aa_color:
        overrides["anti_aliased_color"] = args.aa_color
    if args.diff_color:
        overrides["diff_color"] = args.diff_color
    if args.diff_color_alt:
        overrides["diff_color_alt"] = args.diff_color_alt
    return overrides


def main(argv: List[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    slot: Optional[OutputSlot] = None if args.no_output else OutputSlot()
    try:
        runtime = load_match_config(args.config)
        options = runtime.create_options(write_to=slot).with_changes(**_option_overrides(args))
        if slot is not None:
            output_format(args.dest)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"invalid configuration: {e}")
        return 1
    workers = args.workers if args.workers is not None else runtime.workers

    rasters = []
    for path in (args.image1, args.image2):
        try:
            rasters.append(load_raster(path))
        except OSError as e:
            logger.error(f"failed to open image(path={path}): {e}")
            return 1

    try:
        result = match_pixel(rasters[0], rasters[1], options, workers=workers)
    except ImageSizeMismatchError as e:
        logger.error(f"failed to match pixel: {e}")
        return 1

    if result.diff_image is not None:
        try:
            save_raster(result.diff_image, args.dest)
        except OSError as e:
            logger.error(f"failed to encode diff image: {e}")
            return 1

    logger.info(f"{result.diff_count} of {result.total_pixels} pixels differ")

    if args.json_out:
        summary = {
            "image1": str(args.image1.resolve()),
            "image2": str(args.image2.resolve()),
            "diff_count": result.diff_count,
            "total_pixels": result.total_pixels,
            "diff_ratio": result.diff_ratio,
            "identical": result.identical,
            "dest": None if result.diff_image is None else str(args.dest),
        }
        args.json_out.write_text(json.dumps(summary, indent=2), encoding="utf-8")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
