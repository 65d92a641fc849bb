"""Image surface capability used by the compositor."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol

from PIL import Image

from screen_melt.errors import SurfaceIOError

Box = tuple[int, int, int, int]


class SurfaceProvider(Protocol):
    """Load, save, create and draw raster surfaces.

    Surfaces only need ``width`` and ``height`` attributes; everything else is
    opaque to the compositor.
    """

    def load(self, path: Path) -> Any: ...

    def save(self, surface: Any, path: Path) -> None: ...

    def new_surface(self, width: int, height: int) -> Any: ...

    def draw_full(self, dst: Any, src: Any) -> None: ...

    def draw_clipped_region(
        self, dst: Any, src: Any, src_box: Box, dst_x: int, dst_y: int
    ) -> None: ...


def clip_box(box: Box, width: int, height: int) -> Box | None:
    """Clip an ``(x, y, w, h)`` box to a ``width x height`` area.

    Returns ``(left, top, right, bottom)`` or None when nothing is left.
    """
    x, y, w, h = box
    left = max(0, x)
    top = max(0, y)
    right = min(width, x + w)
    bottom = min(height, y + h)
    if right <= left or bottom <= top:
        return None
    return left, top, right, bottom


class PillowSurfaceProvider:
    """Pillow-backed surfaces. Draws copy pixels, alpha included."""

    mode = "RGBA"

    def load(self, path: Path) -> Image.Image:
        try:
            with Image.open(path) as image:
                return image.convert(self.mode)
        except (OSError, ValueError) as exc:
            raise SurfaceIOError(f"Cannot load image {path}: {exc}") from exc

    def save(self, surface: Image.Image, path: Path) -> None:
        try:
            surface.save(path, format="PNG")
        except (OSError, ValueError) as exc:
            raise SurfaceIOError(f"Cannot save frame {path}: {exc}") from exc

    def new_surface(self, width: int, height: int) -> Image.Image:
        return Image.new(self.mode, (width, height), (255, 255, 255, 255))

    def draw_full(self, dst: Image.Image, src: Image.Image) -> None:
        dst.paste(src, (0, 0))

    def draw_clipped_region(
        self,
        dst: Image.Image,
        src: Image.Image,
        src_box: Box,
        dst_x: int,
        dst_y: int,
    ) -> None:
        clipped = clip_box(src_box, src.width, src.height)
        if clipped is None:
            return
        left, top, _, _ = clipped
        # Shift the destination by whatever was clipped off the source origin.
        dst_x += left - src_box[0]
        dst_y += top - src_box[1]
        if dst_x >= dst.width or dst_y >= dst.height:
            return
        dst.paste(src.crop(clipped), (dst_x, dst_y))
