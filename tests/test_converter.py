import io
import math
import struct

import pytest

from bmp4bit.converter import ConvertOptions, convert, convert_stream
from bmp4bit.errors import (
    DepthError,
    OpenError,
    ShortReadError,
    SignatureError,
    UnsupportedLayoutError,
)
from bmp4bit.headers import FileHeader, InfoHeader
from bmp4bit.inspector import inspect
from bmp4bit.palette import encode_palette

from bmp_samples import BLACK, BLUE, GRAY, LIME, RED, WHITE, make_bmp24, write_bmp24


def _split_output(data: bytes):
    file_header = FileHeader.unpack(data[:14])
    info_header = InfoHeader.unpack(data[14:54])
    return file_header, info_header, data[54:118], data[118:]


def test_two_pixel_image_packs_black_and_white() -> None:
    sink = io.BytesIO()

    result = convert_stream(io.BytesIO(make_bmp24([[BLACK, WHITE]])), sink)

    file_header, info_header, palette, pixels = _split_output(sink.getvalue())
    assert pixels == bytes([0x0F, 0x00, 0x00, 0x00])
    assert palette == encode_palette()
    assert file_header.signature == b"BM"
    assert file_header.file_size == 4 + 14 + 40 + 64
    assert file_header.pixel_data_offset == 54 + 64
    assert info_header.bits_per_pixel == 4
    assert (info_header.width, info_header.height) == (2, 1)
    assert result.bits_per_pixel == 4
    assert result.file_size == len(sink.getvalue())


@pytest.mark.parametrize("width,height", [(1, 1), (5, 3), (8, 2), (9, 4), (17, 1)])
def test_header_fields_follow_dimensions(width: int, height: int) -> None:
    rows = [[GRAY] * width for _ in range(height)]
    sink = io.BytesIO()

    convert_stream(io.BytesIO(make_bmp24(rows)), sink)

    data = sink.getvalue()
    file_header, info_header, _, pixels = _split_output(data)
    row_bytes = 4 * math.ceil(width / 8)
    assert file_header.file_size == row_bytes * height + 14 + 40 + 64
    assert file_header.file_size == len(data)
    assert info_header.image_size == row_bytes * height
    assert info_header.header_size == 40
    assert info_header.planes == 1
    assert info_header.x_pels_per_meter == 2835
    assert len(pixels) == row_bytes * height


def test_input_row_padding_is_skipped() -> None:
    rows = [
        [RED, LIME, BLUE],
        [WHITE, BLACK, GRAY],
    ]
    sink = io.BytesIO()

    convert_stream(io.BytesIO(make_bmp24(rows, padding_byte=0xEE)), sink)

    _, _, _, pixels = _split_output(sink.getvalue())
    assert pixels == bytes([0x17, 0xA0, 0, 0, 0xF0, 0xE0, 0, 0])


def test_odd_width_uses_pad_index() -> None:
    sink = io.BytesIO()

    convert_stream(io.BytesIO(make_bmp24([[WHITE]])), sink, ConvertOptions(pad_index=3))

    _, _, _, pixels = _split_output(sink.getvalue())
    assert pixels == bytes([0xF3, 0, 0, 0])


def test_keep_image_size_copies_input_value() -> None:
    sink = io.BytesIO()
    source = io.BytesIO(make_bmp24([[BLACK, WHITE]], image_size=0))

    convert_stream(source, sink, ConvertOptions(recompute_image_size=False))

    _, info_header, _, _ = _split_output(sink.getvalue())
    assert info_header.image_size == 0


def test_invalid_pad_index_rejected_before_output(tmp_path) -> None:
    src = write_bmp24(tmp_path / "in.bmp", [[BLACK]])
    out = tmp_path / "out.bmp"

    with pytest.raises(ValueError):
        convert(src, out, ConvertOptions(pad_index=16))
    assert not out.exists()


def test_extended_info_header_is_reduced(tmp_path) -> None:
    src = write_bmp24(tmp_path / "in.bmp", [[BLACK, WHITE]], header_size=108)
    out = tmp_path / "out.bmp"

    with pytest.warns(RuntimeWarning, match="108-byte"):
        convert(src, out)

    _, info_header, _, pixels = _split_output(out.read_bytes())
    assert info_header.header_size == 40
    assert pixels == bytes([0x0F, 0, 0, 0])


def test_convert_then_inspect_reports_four_bits(tmp_path) -> None:
    src = write_bmp24(tmp_path / "in.bmp", [[RED] * 7 for _ in range(3)])
    out = tmp_path / "out.bmp"

    convert(src, out)

    info = inspect(out)
    assert (info.width, info.height, info.bits_per_pixel) == (7, 3, 4)


def test_signature_error_creates_no_output(tmp_path) -> None:
    src = write_bmp24(tmp_path / "in.bmp", [[BLACK, WHITE]], signature=b"XX")
    out = tmp_path / "out.bmp"

    with pytest.raises(SignatureError, match="in.bmp"):
        convert(src, out)
    assert not out.exists()


def test_depth_error_for_32_bit_input(tmp_path) -> None:
    src = write_bmp24(tmp_path / "in.bmp", [[BLACK, WHITE]], bits_per_pixel=32)
    out = tmp_path / "out.bmp"

    with pytest.raises(DepthError):
        convert(src, out)
    assert not out.exists()


def test_top_down_bitmap_is_unsupported(tmp_path) -> None:
    src = write_bmp24(tmp_path / "in.bmp", [[BLACK, WHITE]], negative_height=True)
    out = tmp_path / "out.bmp"

    with pytest.raises(UnsupportedLayoutError):
        convert(src, out)
    assert not out.exists()


def test_compressed_bitmap_is_unsupported() -> None:
    source = io.BytesIO(make_bmp24([[BLACK, WHITE]], compression=3))

    with pytest.raises(UnsupportedLayoutError):
        convert_stream(source, io.BytesIO())


class _PipeStream(io.BytesIO):
    def seekable(self) -> bool:
        return False


def test_truncated_pixels_create_no_output(tmp_path) -> None:
    rows = [[BLACK, WHITE], [WHITE, BLACK]]
    # drop the last row's padding and one pixel byte
    src = write_bmp24(tmp_path / "in.bmp", rows, truncate=3)
    out = tmp_path / "out.bmp"

    with pytest.raises(ShortReadError, match="truncated"):
        convert(src, out)
    assert not out.exists()


def test_missing_last_row_padding_is_accepted() -> None:
    rows = [[BLACK, WHITE], [WHITE, BLACK]]
    sink = io.BytesIO()

    convert_stream(io.BytesIO(make_bmp24(rows, truncate=2)), sink)

    _, _, _, pixels = _split_output(sink.getvalue())
    assert pixels == bytes([0x0F, 0, 0, 0, 0xF0, 0, 0, 0])


def test_truncated_unseekable_stream_leaves_partial_output() -> None:
    rows = [[BLACK, WHITE], [WHITE, BLACK]]
    sink = io.BytesIO()

    with pytest.raises(ShortReadError, match="row 1"):
        convert_stream(_PipeStream(make_bmp24(rows, truncate=3)), sink)

    data = sink.getvalue()
    assert len(data) == 118 + 4
    assert data[118:] == bytes([0x0F, 0, 0, 0])


def test_oversized_width_is_rejected_before_output(tmp_path) -> None:
    data = bytearray(make_bmp24([[BLACK, WHITE]]))
    struct.pack_into("<i", data, 18, 0x7FFFFFFF)
    src = tmp_path / "in.bmp"
    src.write_bytes(bytes(data))
    out = tmp_path / "out.bmp"

    with pytest.raises(ShortReadError, match="in.bmp"):
        convert(src, out)
    assert not out.exists()


def test_oversized_pixel_offset_is_rejected() -> None:
    data = bytearray(make_bmp24([[BLACK, WHITE]]))
    struct.pack_into("<I", data, 10, 0xFFFFFFF0)

    with pytest.raises(ShortReadError):
        convert_stream(io.BytesIO(bytes(data)), io.BytesIO())


def test_color_counts_are_reset_for_the_fixed_palette() -> None:
    source = io.BytesIO(make_bmp24([[BLACK, WHITE]], colors_used=256, colors_important=200))
    sink = io.BytesIO()

    convert_stream(source, sink)

    _, info_header, _, _ = _split_output(sink.getvalue())
    assert (info_header.colors_used, info_header.colors_important) == (0, 0)


def test_short_header_raises() -> None:
    with pytest.raises(ShortReadError):
        convert_stream(io.BytesIO(make_bmp24([[BLACK]])[:20]), io.BytesIO())


def test_missing_input_raises_open_error(tmp_path) -> None:
    with pytest.raises(OpenError, match="missing.bmp"):
        convert(tmp_path / "missing.bmp", tmp_path / "out.bmp")


def test_unwritable_output_raises_open_error(tmp_path) -> None:
    src = write_bmp24(tmp_path / "in.bmp", [[BLACK, WHITE]])

    with pytest.raises(OpenError, match="output"):
        convert(src, tmp_path / "no_such_dir" / "out.bmp")


def test_pixel_data_offset_gap_is_skipped() -> None:
    data = bytearray(make_bmp24([[BLACK, WHITE]]))
    # move the pixel array 4 bytes further and record it in the header
    data[54:54] = b"\xAA" * 4
    struct.pack_into("<I", data, 10, 58)
    sink = io.BytesIO()

    convert_stream(io.BytesIO(bytes(data)), sink)

    _, _, _, pixels = _split_output(sink.getvalue())
    assert pixels == bytes([0x0F, 0, 0, 0])
