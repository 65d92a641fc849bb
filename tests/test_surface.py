"""Tests for the Pillow surface provider."""

from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image

from screen_melt.errors import SurfaceIOError
from screen_melt.surface import PillowSurfaceProvider, clip_box


def test_clip_box_inside_and_outside() -> None:
    assert clip_box((2, 3, 4, 5), 10, 10) == (2, 3, 6, 8)
    assert clip_box((8, 0, 5, 20), 10, 10) == (8, 0, 10, 10)
    assert clip_box((10, 0, 5, 5), 10, 10) is None
    assert clip_box((0, 0, 5, 0), 10, 10) is None


def test_load_converts_to_rgba(tmp_path: Path) -> None:
    path = tmp_path / "rgb.png"
    Image.new("RGB", (4, 3), (1, 2, 3)).save(path)
    surface = PillowSurfaceProvider().load(path)
    assert surface.mode == "RGBA"
    assert surface.size == (4, 3)
    assert surface.getpixel((0, 0)) == (1, 2, 3, 255)


def test_load_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(SurfaceIOError) as excinfo:
        PillowSurfaceProvider().load(tmp_path / "missing.png")
    assert "missing.png" in str(excinfo.value)


def test_load_garbage_raises(tmp_path: Path) -> None:
    path = tmp_path / "garbage.png"
    path.write_bytes(b"not an image")
    with pytest.raises(SurfaceIOError):
        PillowSurfaceProvider().load(path)


def test_save_into_missing_directory_raises(tmp_path: Path) -> None:
    provider = PillowSurfaceProvider()
    with pytest.raises(SurfaceIOError):
        provider.save(provider.new_surface(2, 2), tmp_path / "nope" / "f.png")


def test_new_surface_is_white() -> None:
    surface = PillowSurfaceProvider().new_surface(3, 2)
    assert surface.getcolors() == [(6, (255, 255, 255, 255))]


def test_draw_full_copies_alpha() -> None:
    provider = PillowSurfaceProvider()
    dst = provider.new_surface(2, 2)
    provider.draw_full(dst, Image.new("RGBA", (2, 2), (0, 0, 0, 0)))
    assert dst.getpixel((1, 1)) == (0, 0, 0, 0)


def test_draw_clipped_region_clips_to_source_and_destination() -> None:
    provider = PillowSurfaceProvider()
    dst = Image.new("RGBA", (4, 4), (0, 0, 255, 255))
    src = Image.new("RGBA", (4, 4), (255, 0, 0, 255))
    provider.draw_clipped_region(dst, src, (2, 0, 4, 10), 2, 2)
    assert dst.getpixel((2, 1)) == (0, 0, 255, 255)
    assert dst.getpixel((3, 3)) == (255, 0, 0, 255)
    assert dst.getpixel((1, 3)) == (0, 0, 255, 255)


def test_draw_clipped_region_off_canvas_is_noop() -> None:
    provider = PillowSurfaceProvider()
    dst = Image.new("RGBA", (4, 4), (0, 0, 255, 255))
    src = Image.new("RGBA", (4, 4), (255, 0, 0, 255))
    provider.draw_clipped_region(dst, src, (0, 0, 4, 1), 0, 4)
    assert dst.getcolors() == [(16, (0, 0, 255, 255))]
