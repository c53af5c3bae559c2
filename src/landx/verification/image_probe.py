"""Image probing: byte size and pixel dimensions.

Only the image header is read; pixel data is never decoded. Dimensions are
reported as displayed, i.e. after applying the EXIF orientation tag.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from PIL import Image, UnidentifiedImageError

if TYPE_CHECKING:
    from pathlib import Path

# Only headers are read here and pixel data is never decoded, so Pillow's
# decompression-bomb limit would only reject legitimate high-megapixel photos.
Image.MAX_IMAGE_PIXELS = None

_EXIF_ORIENTATION_TAG = 0x0112
# Orientations 5-8 rotate by 90 or 270 degrees.
_TRANSPOSED_ORIENTATIONS = frozenset({5, 6, 7, 8})


class ImageProbeError(Exception):
    """Base class for probe failures."""


class ImageNotFoundError(ImageProbeError):
    """The image resource does not exist or cannot be stat'ed."""


class ImageDecodeError(ImageProbeError):
    """The image header could not be decoded into pixel dimensions."""


@dataclass(frozen=True)
class ImageMetadata:
    """Size and dimensions of one image resource."""

    size_bytes: int
    width: int
    height: int

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def resolution(self) -> str:
        return f"{self.width}x{self.height}"


def read_file_size(path: str | Path) -> int:
    """Return the size of ``path`` in bytes.

    Raises:
        ImageNotFoundError: If the file does not exist or is not a regular file.
    """
    try:
        if not os.path.isfile(path):
            raise ImageNotFoundError(f"Image file does not exist: {path}")
        return os.path.getsize(path)
    except OSError as exc:
        raise ImageNotFoundError(f"Cannot stat image file {path}: {exc}") from exc


def read_dimensions(path: str | Path) -> tuple[int, int]:
    """Return ``(width, height)`` of the image at ``path``.

    Raises:
        ImageDecodeError: If Pillow cannot identify the image or it reports a
            zero-sized dimension.
    """
    try:
        with Image.open(path) as img:
            width, height = img.size
            orientation = img.getexif().get(_EXIF_ORIENTATION_TAG)
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise ImageDecodeError(f"Cannot decode image {path}: {exc}") from exc

    if width <= 0 or height <= 0:
        raise ImageDecodeError(f"Image {path} has invalid dimensions {width}x{height}")

    if orientation in _TRANSPOSED_ORIENTATIONS:
        width, height = height, width
    return width, height
