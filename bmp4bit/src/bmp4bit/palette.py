"""The fixed 16-color palette used as the quantization target."""

from __future__ import annotations

from typing import NamedTuple, Sequence, Tuple


class Color24(NamedTuple):
    """One stored 24-bit pixel, in on-disk (blue, green, red) order."""

    blue: int
    green: int
    red: int


class PaletteEntry(NamedTuple):
    """One 4-byte color table entry (RGBQUAD)."""

    blue: int
    green: int
    red: int
    reserved: int = 0

    def to_bytes(self) -> bytes:
        return bytes((self.blue, self.green, self.red, self.reserved))


# 16-color palette of the Epoch Super Cassette Vision (EPOCH TV-1).
# Index order is part of the output format: a nibble N refers to PALETTE[N].
#  0: Black        #000000
#  1: Red          #ff0000
#  2: Orange       #ffa100
#  3: Light Red    #ffa09f
#  4: Yellow       #ffff00
#  5: Dark Yellow  #a3a000
#  6: Green        #00a100
#  7: Lime         #00ff00
#  8: Light Green  #a0ff9d
#  9: Dark Blue    #00009b
# 10: Blue         #0000ff
# 11: Purple       #a200ff
# 12: Magenta      #ff00ff
# 13: Cyan         #00ffff
# 14: Gray         #a2a19f
# 15: White        #ffffff
PALETTE: Tuple[PaletteEntry, ...] = (
    PaletteEntry(0x00, 0x00, 0x00),
    PaletteEntry(0x00, 0x00, 0xFF),
    PaletteEntry(0x00, 0xA1, 0xFF),
    PaletteEntry(0x9F, 0xA0, 0xFF),
    PaletteEntry(0x00, 0xFF, 0xFF),
    PaletteEntry(0x00, 0xA0, 0xA3),
    PaletteEntry(0x00, 0xA1, 0x00),
    PaletteEntry(0x00, 0xFF, 0x00),
    PaletteEntry(0x9D, 0xFF, 0xA0),
    PaletteEntry(0x9B, 0x00, 0x00),
    PaletteEntry(0xFF, 0x00, 0x00),
    PaletteEntry(0xFF, 0x00, 0xA2),
    PaletteEntry(0xFF, 0x00, 0xFF),
    PaletteEntry(0xFF, 0xFF, 0x00),
    PaletteEntry(0x9F, 0xA1, 0xA2),
    PaletteEntry(0xFF, 0xFF, 0xFF),
)

PALETTE_NAMES: Tuple[str, ...] = (
    "black",
    "red",
    "orange",
    "light red",
    "yellow",
    "dark yellow",
    "green",
    "lime",
    "light green",
    "dark blue",
    "blue",
    "purple",
    "magenta",
    "cyan",
    "gray",
    "white",
)

PALETTE_SIZE = len(PALETTE)
PALETTE_ENTRY_SIZE = 4
PALETTE_BYTES = PALETTE_SIZE * PALETTE_ENTRY_SIZE


def encode_palette(palette: Sequence[PaletteEntry] = PALETTE) -> bytes:
    return b"".join(entry.to_bytes() for entry in palette)


def format_palette_text(palette: Sequence[PaletteEntry] = PALETTE) -> str:
    entries = [
        f"{idx}: {name} (#{entry.red:02x}{entry.green:02x}{entry.blue:02x})"
        for idx, (entry, name) in enumerate(zip(palette, PALETTE_NAMES))
    ]
    return ", ".join(entries)
