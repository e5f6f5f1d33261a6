"""Report the dimensions and bit depth stored in a BMP header."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from .errors import FormatError, OpenError, ShortReadError
from .headers import read_headers


@dataclass(frozen=True)
class BitmapInfo:
    width: int
    height: int
    bits_per_pixel: int


def inspect_stream(stream: BinaryIO) -> BitmapInfo:
    # Only the signature is checked; any bit depth is reported as stored.
    _, info_header = read_headers(stream)
    return BitmapInfo(
        width=info_header.width,
        height=info_header.height,
        bits_per_pixel=info_header.bits_per_pixel,
    )


def inspect(input_path: str | Path) -> BitmapInfo:
    input_path = Path(input_path)
    try:
        stream = input_path.open("rb")
    except OSError as exc:
        raise OpenError(f"Failed to open input file {input_path}: {exc.strerror or exc}") from exc
    with stream:
        try:
            return inspect_stream(stream)
        except (FormatError, ShortReadError) as exc:
            raise type(exc)(f"{input_path}: {exc}") from exc


def format_report(info: BitmapInfo) -> str:
    return (
        f"Width: {info.width} Height: {info.height}\n"
        f"Number of bits per pixel: {info.bits_per_pixel}\n"
    )
