"""Pack quantized pixels into 4-bit rows."""

from __future__ import annotations

import struct
from typing import Callable, Iterable, Iterator, List, Sequence

from .headers import row_stride
from .palette import PALETTE, PALETTE_SIZE, Color24, PaletteEntry
from .quantizer import cached_lookup

TARGET_BITS_PER_PIXEL = 4
SOURCE_BITS_PER_PIXEL = 24
_PIXEL_STRUCT = struct.Struct("<BBB")


def packed_row_size(width: int) -> int:
    """Bytes per 4-bit row: ``4 * ceil(width / 8)``."""

    return row_stride(width, TARGET_BITS_PER_PIXEL)


def source_row_size(width: int) -> int:
    return row_stride(width, SOURCE_BITS_PER_PIXEL)


def iter_pixels(row: bytes, width: int) -> Iterator[Color24]:
    """Decode the first ``width`` pixels of a stored 24-bit row."""

    needed = width * _PIXEL_STRUCT.size
    if len(row) < needed:
        raise ValueError(f"Row holds {len(row)} bytes, {needed} needed for {width} pixels")
    for blue, green, red in _PIXEL_STRUCT.iter_unpack(row[:needed]):
        yield Color24(blue, green, red)


def pack_indices(indices: Iterable[int], width: int, pad_index: int = 0) -> bytes:
    """Pack palette indices two per byte, left pixel in the high nibble.

    Exactly ``width`` indices are consumed. When ``width`` is odd the last
    byte carries ``pad_index`` in its low nibble. The row is zero-filled up
    to its 4-byte aligned size.
    """

    if not 0 <= pad_index < PALETTE_SIZE:
        raise ValueError(f"pad_index must be between 0 and {PALETTE_SIZE - 1}")

    out = bytearray(packed_row_size(width))
    it = iter(indices)
    for column in range(width):
        try:
            index = next(it)
        except StopIteration:
            raise ValueError(f"Expected {width} indices, got {column}") from None
        if column % 2 == 0:
            out[column // 2] = index << 4
        else:
            out[column // 2] |= index
    if width % 2:
        out[width // 2] |= pad_index
    return bytes(out)


def pack_row(
    pixels: Sequence[Color24],
    palette: Sequence[PaletteEntry] = PALETTE,
    lookup: Callable[[Color24], int] | None = None,
    pad_index: int = 0,
) -> bytes:
    """Quantize one row of pixels and pack it into 4-bit form."""

    if lookup is None:
        lookup = cached_lookup(palette)
    indices: List[int] = [lookup(pixel) for pixel in pixels]
    return pack_indices(indices, len(indices), pad_index=pad_index)
