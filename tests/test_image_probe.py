"""Tests for reading image size and dimensions."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from landx.verification.image_probe import (
    ImageDecodeError,
    ImageMetadata,
    ImageNotFoundError,
    ImageProbeError,
    read_dimensions,
    read_file_size,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


class TestReadFileSize:
    def test_reports_exact_bytes(self, make_image: Callable[..., Path]) -> None:
        path = make_image(100, 100, size_kb=64)
        assert read_file_size(path) == 64 * 1024

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ImageNotFoundError):
            read_file_size(tmp_path / "nope.png")

    def test_directory_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ImageNotFoundError):
            read_file_size(tmp_path)


class TestReadDimensions:
    def test_png(self, make_image: Callable[..., Path]) -> None:
        assert read_dimensions(make_image(640, 480, size_kb=10)) == (640, 480)

    def test_jpeg_without_orientation(self, make_image: Callable[..., Path]) -> None:
        assert read_dimensions(make_image(640, 480, size_kb=50, fmt="JPEG")) == (640, 480)

    @pytest.mark.parametrize("orientation", [5, 6, 7, 8])
    def test_rotating_orientations_swap_axes(self, make_image: Callable[..., Path], orientation: int) -> None:
        path = make_image(640, 480, size_kb=50, fmt="JPEG", orientation=orientation)
        assert read_dimensions(path) == (480, 640)

    @pytest.mark.parametrize("orientation", [1, 2, 3, 4])
    def test_non_rotating_orientations_keep_axes(self, make_image: Callable[..., Path], orientation: int) -> None:
        path = make_image(640, 480, size_kb=50, fmt="JPEG", orientation=orientation)
        assert read_dimensions(path) == (640, 480)

    def test_200_megapixel_photo_is_not_treated_as_a_bomb(self, make_image: Callable[..., Path]) -> None:
        path = make_image(16320, 12240, size_kb=9000)
        assert read_dimensions(path) == (16320, 12240)

    def test_garbage_raises_decode_error(self, tmp_path: Path) -> None:
        path = tmp_path / "fake.jpg"
        path.write_bytes(b"this is a text file, not a photo\n" * 20)
        with pytest.raises(ImageDecodeError):
            read_dimensions(path)

    def test_missing_file_raises_probe_error(self, tmp_path: Path) -> None:
        with pytest.raises(ImageProbeError):
            read_dimensions(tmp_path / "nope.png")


class TestImageMetadata:
    def test_derived_values(self) -> None:
        meta = ImageMetadata(size_bytes=2048, width=1600, height=1000)
        assert meta.aspect_ratio == 1.6
        assert meta.pixel_count == 1_600_000
        assert meta.resolution == "1600x1000"
