"""Command line interface for the 24-bit to 4-bit BMP converter."""

from __future__ import annotations

import argparse
import sys
import warnings
from pathlib import Path

from .converter import ConvertOptions, convert
from .errors import BitmapError
from .inspector import format_report, inspect
from .palette import PALETTE_SIZE, format_palette_text
from .preview import save_preview

ASSETS_DIR_NAME = "assets"
DEFAULT_INPUT_NAME = "input.bmp"
DEFAULT_OUTPUT_NAME = "output_4bit.bmp"


def default_paths(cwd: Path | None = None) -> tuple[Path, Path]:
    assets = (cwd or Path.cwd()) / ASSETS_DIR_NAME
    return assets / DEFAULT_INPUT_NAME, assets / DEFAULT_OUTPUT_NAME


def pad_index_arg(text: str) -> int:
    value = int(text)
    if not 0 <= value < PALETTE_SIZE:
        raise argparse.ArgumentTypeError(f"must be between 0 and {PALETTE_SIZE - 1}")
    return value


def build_parser() -> argparse.ArgumentParser:
    default_input, default_output = default_paths()

    parser = argparse.ArgumentParser(
        prog="bmp4bit",
        description=(
            "Convert 24-bit BMP files into 4-bit paletted BMPs, or print a BMP's size and depth.\n"
            f"Palette: {format_palette_text()}"
        ),
        formatter_class=argparse.RawTextHelpFormatter,
    )
    commands = parser.add_subparsers(dest="command", required=True)

    convert_parser = commands.add_parser("convert", help="Convert a 24-bit BMP to 4-bit")
    convert_parser.add_argument(
        "input",
        nargs="?",
        type=Path,
        default=default_input,
        help=f"24-bit BMP to read (default: {default_input})",
    )
    convert_parser.add_argument(
        "output",
        nargs="?",
        type=Path,
        default=default_output,
        help=f"Destination for the 4-bit BMP (default: {default_output})",
    )
    convert_parser.add_argument(
        "--keep-image-size",
        action="store_true",
        help="Copy the input's image size field instead of recomputing it",
    )
    convert_parser.add_argument(
        "--pad-index",
        type=pad_index_arg,
        default=0,
        help="Palette index for the unused last nibble of odd-width rows",
    )
    convert_parser.add_argument(
        "--preview",
        type=Path,
        help="Also write a PNG rendering of the converted image",
    )
    convert_parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Overwrite an existing output file",
    )

    inspect_parser = commands.add_parser("inspect", help="Print width, height and bits per pixel")
    inspect_parser.add_argument(
        "input",
        nargs="?",
        type=Path,
        default=default_input,
        help=f"BMP to inspect (default: {default_input})",
    )

    return parser


def run_convert(args: argparse.Namespace) -> None:
    output: Path = args.output
    if output.exists() and not args.force:
        raise BitmapError(f"Output file already exists (use --force to overwrite): {output}")

    options = ConvertOptions()
    options.recompute_image_size = not args.keep_image_size
    options.pad_index = args.pad_index

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        result = convert(args.input, output, options)
    for warning in caught:
        print(f"Warning: {warning.message}", file=sys.stderr)
    print(f"wrote {output} ({result.width}x{result.height}, {result.file_size} bytes)")

    if args.preview is not None:
        save_preview(output, args.preview)
        print(f"wrote {args.preview}")


def run_inspect(args: argparse.Namespace) -> None:
    info = inspect(args.input)
    sys.stdout.write(format_report(info))


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "convert":
            run_convert(args)
        else:
            run_inspect(args)
        return 0
    except BitmapError as exc:
        print(exc, file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
