"""Core conversion logic: 24-bit BMP in, 4-bit paletted BMP out."""

from __future__ import annotations

import io
import warnings
from dataclasses import dataclass, replace
from pathlib import Path
from typing import BinaryIO, Tuple

from .errors import DepthError, FormatError, OpenError, ShortReadError, UnsupportedLayoutError
from .headers import (
    BI_RGB,
    FILE_HEADER_SIZE,
    INFO_HEADER_SIZE,
    FileHeader,
    InfoHeader,
    read_exact,
    read_headers,
    write_file_header,
    write_info_header,
)
from .packer import (
    SOURCE_BITS_PER_PIXEL,
    TARGET_BITS_PER_PIXEL,
    iter_pixels,
    pack_row,
    packed_row_size,
    source_row_size,
)
from .palette import PALETTE, PALETTE_BYTES, PALETTE_SIZE, encode_palette
from .quantizer import cached_lookup

OUTPUT_PIXEL_DATA_OFFSET = FILE_HEADER_SIZE + INFO_HEADER_SIZE + PALETTE_BYTES


@dataclass
class ConvertOptions:
    """Options for writing the 4-bit output."""

    recompute_image_size: bool = True  # False keeps the input's biSizeImage
    pad_index: int = 0  # low nibble of the last byte on odd-width rows

    def validate(self) -> None:
        if not 0 <= self.pad_index < PALETTE_SIZE:
            raise ValueError(f"pad_index must be between 0 and {PALETTE_SIZE - 1}")


@dataclass(frozen=True)
class ConversionResult:
    width: int
    height: int
    bits_per_pixel: int
    file_size: int


def validate_source(file_header: FileHeader, info_header: InfoHeader) -> None:
    """Reject headers the converter cannot handle.

    The signature has already been checked by :func:`read_headers`.
    """

    if info_header.bits_per_pixel != SOURCE_BITS_PER_PIXEL:
        raise DepthError(
            f"Expected {SOURCE_BITS_PER_PIXEL} bits per pixel, got {info_header.bits_per_pixel}"
        )
    if info_header.compression != BI_RGB:
        raise UnsupportedLayoutError(
            f"Compressed bitmaps are not supported (compression {info_header.compression})"
        )
    if info_header.header_size < INFO_HEADER_SIZE:
        raise UnsupportedLayoutError(
            f"Info header of {info_header.header_size} bytes is too small (need {INFO_HEADER_SIZE})"
        )
    if info_header.height < 0:
        raise UnsupportedLayoutError("Top-down bitmaps (negative height) are not supported")
    if info_header.width < 0:
        raise UnsupportedLayoutError("Negative width is not supported")
    if file_header.pixel_data_offset < FILE_HEADER_SIZE + info_header.header_size:
        raise UnsupportedLayoutError(
            f"Pixel data offset {file_header.pixel_data_offset} overlaps the headers"
        )


def build_output_headers(
    file_header: FileHeader, info_header: InfoHeader, options: ConvertOptions
) -> Tuple[FileHeader, InfoHeader]:
    """Rewrite the input headers for a 4-bit image with the 16-entry palette."""

    pixel_array_size = packed_row_size(info_header.width) * info_header.height
    out_file = replace(
        file_header,
        file_size=OUTPUT_PIXEL_DATA_OFFSET + pixel_array_size,
        pixel_data_offset=OUTPUT_PIXEL_DATA_OFFSET,
    )
    out_info = replace(
        info_header,
        header_size=INFO_HEADER_SIZE,
        bits_per_pixel=TARGET_BITS_PER_PIXEL,
        image_size=pixel_array_size if options.recompute_image_size else info_header.image_size,
        colors_used=0,
        colors_important=0,
    )
    return out_file, out_info


def pixel_data_size(info_header: InfoHeader) -> int:
    """Smallest pixel array that holds every row; the last row may omit its padding."""

    if info_header.width == 0 or info_header.height == 0:
        return 0
    width = info_header.width
    return source_row_size(width) * (info_header.height - 1) + width * 3


def check_pixel_data_size(source: BinaryIO, gap: int, info_header: InfoHeader) -> None:
    """Fail before reading if ``source`` cannot hold ``gap`` bytes plus the pixel array."""

    position = source.tell()
    available = source.seek(0, io.SEEK_END) - position
    source.seek(position)
    needed = gap + pixel_data_size(info_header)
    if available < needed:
        raise ShortReadError(
            f"Pixel data is truncated ({available} of {needed} bytes for "
            f"{info_header.width}x{info_header.height} pixels)"
        )


def read_source_headers(source: BinaryIO) -> Tuple[FileHeader, InfoHeader]:
    """Read and validate the headers, leaving ``source`` at the pixel data."""

    file_header, info_header = read_headers(source)
    validate_source(file_header, info_header)

    if info_header.header_size > INFO_HEADER_SIZE:
        warnings.warn(
            f"Extended {info_header.header_size}-byte info header reduced to {INFO_HEADER_SIZE} bytes",
            RuntimeWarning,
            stacklevel=3,
        )
    gap = file_header.pixel_data_offset - FILE_HEADER_SIZE - INFO_HEADER_SIZE
    if source.seekable():
        check_pixel_data_size(source, gap, info_header)
    if gap:
        read_exact(source, gap, "data before the pixel array")
    return file_header, info_header


def write_converted(
    source: BinaryIO,
    sink: BinaryIO,
    file_header: FileHeader,
    info_header: InfoHeader,
    options: ConvertOptions | None = None,
) -> ConversionResult:
    """Write the 4-bit image for headers already read from ``source``.

    Rows are transcribed in storage order; a failure part way leaves what
    was written so far in ``sink``.
    """

    options = options or ConvertOptions()
    options.validate()

    out_file, out_info = build_output_headers(file_header, info_header, options)
    write_file_header(sink, out_file)
    write_info_header(sink, out_info)
    sink.write(encode_palette(PALETTE))

    width = info_header.width
    stride = source_row_size(width)
    lookup = cached_lookup(PALETTE)
    for row in range(info_header.height):
        data = source.read(stride)
        if len(data) < width * 3:
            raise ShortReadError(f"Pixel row {row} is truncated ({len(data)} of {width * 3} bytes)")
        pixels = list(iter_pixels(data, width))
        sink.write(pack_row(pixels, lookup=lookup, pad_index=options.pad_index))

    return ConversionResult(
        width=width,
        height=info_header.height,
        bits_per_pixel=out_info.bits_per_pixel,
        file_size=out_file.file_size,
    )


def convert_stream(
    source: BinaryIO, sink: BinaryIO, options: ConvertOptions | None = None
) -> ConversionResult:
    file_header, info_header = read_source_headers(source)
    return write_converted(source, sink, file_header, info_header, options)


def convert(
    input_path: str | Path,
    output_path: str | Path,
    options: ConvertOptions | None = None,
) -> ConversionResult:
    """Convert the 24-bit BMP at ``input_path`` into a 4-bit BMP.

    The input headers are validated before ``output_path`` is opened, so a
    rejected input never creates an output file.
    """

    options = options or ConvertOptions()
    options.validate()
    input_path = Path(input_path)
    output_path = Path(output_path)
    try:
        source = input_path.open("rb")
    except OSError as exc:
        raise OpenError(f"Failed to open input file {input_path}: {exc.strerror or exc}") from exc

    with source:
        try:
            file_header, info_header = read_source_headers(source)
        except (FormatError, ShortReadError) as exc:
            raise type(exc)(f"{input_path}: {exc}") from exc
        try:
            sink = output_path.open("wb")
        except OSError as exc:
            raise OpenError(f"Failed to open output file {output_path}: {exc.strerror or exc}") from exc
        with sink:
            try:
                return write_converted(source, sink, file_header, info_header, options)
            except ShortReadError as exc:
                raise ShortReadError(f"{input_path}: {exc}") from exc
