"""Fixed-size BMP header records and their binary codec."""

# Reference: BITMAPFILEHEADER + BITMAPINFOHEADER (little endian, no padding)
# Offset | Size | Field
# -------|------|----------------------------------------------------------
# 0      | 2    | signature, "BM"
# 2      | 4    | file size in bytes (u32)
# 6      | 2    | reserved1
# 8      | 2    | reserved2
# 10     | 4    | offset of the pixel array (u32)
# 14     | 4    | info header size, 40 for BITMAPINFOHEADER (u32)
# 18     | 4    | width in pixels (i32)
# 22     | 4    | height in pixels, positive = bottom-up rows (i32)
# 26     | 2    | color planes, always 1 (u16)
# 28     | 2    | bits per pixel (u16)
# 30     | 4    | compression, 0 = BI_RGB (u32)
# 34     | 4    | pixel array size in bytes (u32)
# 38     | 4    | horizontal resolution, pixels per meter (i32)
# 42     | 4    | vertical resolution, pixels per meter (i32)
# 46     | 4    | colors used (u32)
# 50     | 4    | important colors (u32)

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO, Tuple

from .errors import ShortReadError, SignatureError

BMP_SIGNATURE = b"BM"
BI_RGB = 0

FILE_HEADER_STRUCT = struct.Struct("<2sIHHI")
INFO_HEADER_STRUCT = struct.Struct("<IiiHHIIiiII")

FILE_HEADER_SIZE = FILE_HEADER_STRUCT.size  # 14
INFO_HEADER_SIZE = INFO_HEADER_STRUCT.size  # 40


@dataclass(frozen=True)
class FileHeader:
    signature: bytes
    file_size: int
    reserved1: int
    reserved2: int
    pixel_data_offset: int

    @classmethod
    def unpack(cls, data: bytes) -> "FileHeader":
        return cls(*FILE_HEADER_STRUCT.unpack(data))

    def pack(self) -> bytes:
        return FILE_HEADER_STRUCT.pack(
            self.signature,
            self.file_size,
            self.reserved1,
            self.reserved2,
            self.pixel_data_offset,
        )


@dataclass(frozen=True)
class InfoHeader:
    header_size: int
    width: int
    height: int
    planes: int
    bits_per_pixel: int
    compression: int
    image_size: int
    x_pels_per_meter: int
    y_pels_per_meter: int
    colors_used: int
    colors_important: int

    @classmethod
    def unpack(cls, data: bytes) -> "InfoHeader":
        return cls(*INFO_HEADER_STRUCT.unpack(data))

    def pack(self) -> bytes:
        return INFO_HEADER_STRUCT.pack(
            self.header_size,
            self.width,
            self.height,
            self.planes,
            self.bits_per_pixel,
            self.compression,
            self.image_size,
            self.x_pels_per_meter,
            self.y_pels_per_meter,
            self.colors_used,
            self.colors_important,
        )


def row_stride(width: int, bits_per_pixel: int) -> int:
    """Bytes per stored row, padded to a 4-byte boundary."""

    return ((bits_per_pixel * width + 31) // 32) * 4


def read_exact(stream: BinaryIO, size: int, what: str) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise ShortReadError(f"Unexpected end of data while reading {what} ({len(data)} of {size} bytes)")
    return data


def read_file_header(stream: BinaryIO) -> FileHeader:
    return FileHeader.unpack(read_exact(stream, FILE_HEADER_SIZE, "file header"))


def read_info_header(stream: BinaryIO) -> InfoHeader:
    return InfoHeader.unpack(read_exact(stream, INFO_HEADER_SIZE, "info header"))


def write_file_header(stream: BinaryIO, header: FileHeader) -> None:
    stream.write(header.pack())


def write_info_header(stream: BinaryIO, header: InfoHeader) -> None:
    stream.write(header.pack())


def read_headers(stream: BinaryIO) -> Tuple[FileHeader, InfoHeader]:
    """Read both header records and check the ``BM`` signature.

    Whatever part of the signature is present is checked first, so a
    non-bitmap file is rejected as such even when it is shorter than 54 bytes.
    """

    data = stream.read(FILE_HEADER_SIZE)
    prefix = data[: len(BMP_SIGNATURE)]
    if prefix != BMP_SIGNATURE[: len(prefix)]:
        raise SignatureError(f"Not a BMP file (signature {prefix!r})")
    if len(data) != FILE_HEADER_SIZE:
        raise ShortReadError(
            f"Unexpected end of data while reading file header ({len(data)} of {FILE_HEADER_SIZE} bytes)"
        )
    file_header = FileHeader.unpack(data)
    info_header = read_info_header(stream)
    return file_header, info_header
