"""Render a converted 4-bit bitmap as a PNG preview."""

from __future__ import annotations

from pathlib import Path

from PIL import Image

from .errors import PreviewError


def render_preview(bmp_path: str | Path) -> Image.Image:
    """Decode ``bmp_path`` with Pillow and return it as an RGB image."""

    bmp_path = Path(bmp_path)
    try:
        with Image.open(bmp_path) as img:
            if img.mode != "P":
                raise PreviewError(f"Expected a paletted bitmap, got mode {img.mode}: {bmp_path}")
            return img.convert("RGB")
    except FileNotFoundError as exc:
        raise PreviewError(f"Bitmap not found: {bmp_path}") from exc
    except OSError as exc:
        raise PreviewError(f"Failed to read bitmap: {bmp_path}") from exc


def save_preview(bmp_path: str | Path, png_path: str | Path) -> Path:
    png_path = Path(png_path)
    preview = render_preview(bmp_path)
    try:
        png_path.parent.mkdir(parents=True, exist_ok=True)
        preview.save(png_path, format="PNG")
    except OSError as exc:
        raise PreviewError(f"Failed to write preview: {png_path}") from exc
    return png_path
