"""Pytest configuration for screen-melt."""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Callable

import pytest
from PIL import Image


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    del config
    if os.environ.get("SCREEN_MELT_CI") != "1" and shutil.which("ffmpeg"):
        return
    skip_ffmpeg = pytest.mark.skip(reason="Skipping ffmpeg-dependent tests.")
    for item in items:
        if "ffmpeg" in item.keywords:
            item.add_marker(skip_ffmpeg)


@pytest.fixture
def write_image(tmp_path: Path) -> Callable[..., Path]:
    """Write a solid-color PNG into tmp_path and return its path."""

    def _write(
        name: str,
        size: tuple[int, int],
        color: tuple[int, int, int, int] = (255, 0, 0, 255),
    ) -> Path:
        path = tmp_path / name
        Image.new("RGBA", size, color).save(path)
        return path

    return _write
