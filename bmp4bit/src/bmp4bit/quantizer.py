"""Nearest-color search over the fixed palette."""

from __future__ import annotations

import functools
import math
from typing import Callable, Sequence

from .palette import PALETTE, Color24, PaletteEntry

LOOKUP_CACHE_SIZE = 65536


def color_distance(pixel: Color24, entry: PaletteEntry) -> float:
    return math.sqrt(_squared_distance(pixel, entry))


def _squared_distance(pixel: Color24, entry: PaletteEntry) -> int:
    return (
        (entry.blue - pixel.blue) ** 2
        + (entry.green - pixel.green) ** 2
        + (entry.red - pixel.red) ** 2
    )


def nearest_index(pixel: Color24, palette: Sequence[PaletteEntry] = PALETTE) -> int:
    """
    Map a stored BGR pixel to the palette slot it should use in the 4-bit output.
    Entries are scanned from index 0 upward and an entry only replaces the
    current pick when it is strictly closer, so a pixel halfway between two
    colors keeps the lower slot. Closeness is compared on squared (blue,
    green, red) differences, which rank entries exactly as
    :func:`color_distance` does.
    """
    best_idx = 0
    best_dist = None
    for i, entry in enumerate(palette):
        dist = _squared_distance(pixel, entry)
        if best_dist is None or dist < best_dist:
            best_idx = i
            best_dist = dist
    return best_idx


def cached_lookup(
    palette: Sequence[PaletteEntry] = PALETTE, maxsize: int = LOOKUP_CACHE_SIZE
) -> Callable[[Color24], int]:
    """Return :func:`nearest_index` for ``palette`` behind a bounded LRU cache.

    A conversion keeps one of these so repeated colors skip the palette scan,
    while photographs with millions of distinct colors stay within ``maxsize``
    cached entries.
    """

    palette = tuple(palette)

    @functools.lru_cache(maxsize=maxsize)
    def lookup(pixel: Color24) -> int:
        return nearest_index(pixel, palette)

    return lookup
