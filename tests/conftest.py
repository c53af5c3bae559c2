"""Shared fixtures: synthetic images of exact dimensions and file size."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

import pytest
from PIL import Image

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


def _encode(width: int, height: int, fmt: str, orientation: int | None) -> bytes:
    buf = io.BytesIO()
    if fmt == "JPEG":
        img = Image.new("L", (width, height), 255)
        if orientation is None:
            img.save(buf, format="JPEG")
        else:
            exif = Image.Exif()
            exif[0x0112] = orientation
            img.save(buf, format="JPEG", exif=exif)
    else:
        # 1-bit solid images keep even multi-megapixel PNGs to a few KB.
        Image.new("1", (width, height), 1).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture()
def make_image(tmp_path: Path) -> Callable[..., Path]:
    """Write an image of ``width`` x ``height`` padded to exactly ``size_kb`` kilobytes."""
    counter = 0

    def _make(
        width: int,
        height: int,
        size_kb: float = 600,
        *,
        fmt: str = "PNG",
        orientation: int | None = None,
    ) -> Path:
        nonlocal counter
        counter += 1
        data = _encode(width, height, fmt, orientation)
        target = int(size_kb * 1024)
        if len(data) > target:
            raise ValueError(f"Encoded image is {len(data)} bytes, larger than requested {target}")
        path = tmp_path / f"image_{counter}.{fmt.lower()}"
        # Decoders stop at the end marker, so trailing padding only changes the file size.
        path.write_bytes(data + b"\x00" * (target - len(data)))
        return path

    return _make
