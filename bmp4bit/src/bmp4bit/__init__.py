"""Convert 24-bit BMP images to 4-bit paletted BMPs.

Every pixel is mapped to the nearest color of a fixed 16-color palette. The
package can be used through the CLI (``python -m bmp4bit``) or imported to
convert and inspect files and streams.
"""

from .converter import ConversionResult, ConvertOptions, convert, convert_stream
from .errors import (
    BitmapError,
    DepthError,
    FormatError,
    OpenError,
    PreviewError,
    ShortReadError,
    SignatureError,
    UnsupportedLayoutError,
)
from .inspector import BitmapInfo, format_report, inspect, inspect_stream
from .palette import PALETTE, Color24, PaletteEntry, format_palette_text
from .quantizer import nearest_index

__all__ = [
    "BitmapError",
    "BitmapInfo",
    "Color24",
    "ConversionResult",
    "ConvertOptions",
    "DepthError",
    "FormatError",
    "OpenError",
    "PALETTE",
    "PaletteEntry",
    "PreviewError",
    "ShortReadError",
    "SignatureError",
    "UnsupportedLayoutError",
    "convert",
    "convert_stream",
    "format_palette_text",
    "format_report",
    "inspect",
    "inspect_stream",
    "nearest_index",
]
