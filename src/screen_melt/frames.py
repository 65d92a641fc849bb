"""Numbered frame files and their cleanup."""

from __future__ import annotations

import logging
import os
from pathlib import Path
import re
from types import TracebackType
from typing import Any, Optional

from screen_melt.surface import SurfaceProvider

logger = logging.getLogger(__name__)

FRAME_PATTERN = "Frame%04d.png"


def default_temp_dir() -> Path:
    local_appdata = os.getenv("LOCALAPPDATA")
    if local_appdata:
        return Path(local_appdata) / "ScreenMeltTemp"
    return Path.home() / ".screen_melt" / "temp"


class FrameStore:
    """Write frames as numbered images and remove them again on exit.

    Entering the store creates the directory and deletes frames a previous
    run left behind, so the encoder only sees this run's sequence. Used as a
    context manager, the written frames are deleted when the block exits,
    successfully or not, unless ``keep`` is set. With ``remove_directory``
    the then empty directory goes too.
    """

    def __init__(
        self,
        directory: Path,
        provider: SurfaceProvider,
        *,
        keep: bool = False,
        pattern: str = FRAME_PATTERN,
        remove_directory: bool = False,
    ) -> None:
        self.directory = directory
        self.provider = provider
        self.keep = keep
        self.pattern = pattern
        self.remove_directory = remove_directory
        self.sequence: list[Path] = []

    @property
    def input_pattern(self) -> str:
        """Pattern understood by ffmpeg's image2 demuxer."""
        return str(self.directory / self.pattern)

    def frame_path(self, index: int) -> Path:
        return self.directory / (self.pattern % index)

    def stale_frames(self) -> list[Path]:
        """Existing files in the directory that match the frame pattern."""
        if not self.directory.is_dir():
            return []
        glob = re.sub(r"%0?\d*d", "*", self.pattern)
        return sorted(self.directory.glob(glob))

    def prepare(self) -> None:
        """Create the directory and remove frames left by an earlier run."""
        self.directory.mkdir(parents=True, exist_ok=True)
        stale = self.stale_frames()
        if not stale:
            return
        logger.warning("Removing %d stale frames from %s", len(stale), self.directory)
        for path in stale:
            path.unlink(missing_ok=True)

    def save(self, canvas: Any, index: int) -> Path:
        if index != len(self.sequence):
            raise ValueError(
                f"Frame {index} out of order, expected {len(self.sequence)}"
            )
        path = self.frame_path(index)
        self.provider.save(canvas, path)
        self.sequence.append(path)
        return path

    def cleanup(self) -> list[Path]:
        """Delete written frames, returning the ones that could not be removed."""
        failed: list[Path] = []
        for path in self.sequence:
            try:
                path.unlink(missing_ok=True)
            except OSError:
                logger.warning("Cannot delete %s", path, exc_info=True)
                failed.append(path)
        logger.info("Removed %d temp frames", len(self.sequence) - len(failed))
        if self.remove_directory and not failed:
            try:
                self.directory.rmdir()
            except OSError:
                logger.warning("Cannot remove %s", self.directory, exc_info=True)
        return failed

    def __enter__(self) -> FrameStore:
        self.prepare()
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        if self.keep:
            logger.info("Keeping %d frames in %s", len(self.sequence), self.directory)
            return
        self.cleanup()
