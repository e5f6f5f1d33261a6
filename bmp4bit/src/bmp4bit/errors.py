"""Exceptions raised by the bitmap converter and inspector."""


class BitmapError(Exception):
    """Base class for every error reported by bmp4bit."""


class OpenError(BitmapError):
    """Raised when a source or destination path cannot be opened."""


class ShortReadError(BitmapError):
    """Raised when the stream ends before a record or pixel row is complete."""


class FormatError(BitmapError):
    """Raised when the data is readable but not something we can convert."""


class SignatureError(FormatError):
    """Raised when the file does not start with the ``BM`` marker."""


class DepthError(FormatError):
    """Raised when the input bit depth is not 24 bits per pixel."""


class UnsupportedLayoutError(FormatError):
    """Raised for compressed or top-down bitmaps."""


class PreviewError(BitmapError):
    """Raised when a converted bitmap cannot be rendered to PNG."""
