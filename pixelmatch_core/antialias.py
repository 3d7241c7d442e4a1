"""
Anti-aliasing detection.

A pixel that differs between two renders is treated as anti-aliasing noise when
its neighbourhood shows a graded edge (both darker and lighter neighbours, few
identical ones) and one of the extreme neighbours sits inside a flat region in
both images.

Pixels on the image border get one zero-match for free: the clamped
neighbourhood counts as already holding one identical neighbour. The same rule
applies to the sibling count.
"""
from __future__ import annotations

from typing import Tuple

from .delta import color_delta
from .window import SlidingWindowReader

# More identical neighbours than this means a flat region.
MAX_ZEROES = 2


def _neighbourhood(reader: SlidingWindowReader, x: int, y: int) -> Tuple[int, int, int, int, int]:
    x0 = max(x - 1, 0)
    y0 = max(y - 1, 0)
    x2 = min(x + 1, reader.width - 1)
    y2 = min(y + 1, reader.height - 1)
    on_edge = x == x0 or x == x2 or y == y0 or y == y2
    return x0, y0, x2, y2, 1 if on_edge else 0


def is_antialiased(
    primary: SlidingWindowReader,
    other: SlidingWindowReader,
    x: int,
    y: int,
) -> bool:
    x0, y0, x2, y2, zeroes = _neighbourhood(primary, x, y)

    min_delta = 0.0
    max_delta = 0.0
    min_x = min_y = max_x = max_y = 0
    center = primary.pixel_at(x, y)
    for nx in range(x0, x2 + 1):
        for ny in range(y0, y2 + 1):
            if nx == x and ny == y:
                continue
            delta = color_delta(center, primary.pixel_at(nx, ny), luma_only=True)
            if delta == 0:
                zeroes += 1
                if zeroes > MAX_ZEROES:
                    return False
            elif delta < min_delta:
                min_delta = delta
                min_x, min_y = nx, ny
            elif delta > max_delta:
                max_delta = delta
                max_x, max_y = nx, ny

    # an anti-aliased edge has both darker and lighter neighbours
    if min_delta == 0 or max_delta == 0:
        return False

    return (
        has_many_siblings(primary, min_x, min_y) and has_many_siblings(other, min_x, min_y)
    ) or (
        has_many_siblings(primary, max_x, max_y) and has_many_siblings(other, max_x, max_y)
    )


def has_many_siblings(reader: SlidingWindowReader, x: int, y: int) -> bool:
    """True when more than two neighbours of (x, y) share its exact color."""
    x0, y0, x2, y2, zeroes = _neighbourhood(reader, x, y)

    center = reader.pixel_at(x, y)
    for nx in range(x0, x2 + 1):
        for ny in range(y0, y2 + 1):
            if nx == x and ny == y:
                continue
            if reader.pixel_at(nx, ny) == center:
                zeroes += 1
            if zeroes > MAX_ZEROES:
                return True
    return False
