"""End-to-end melt generation: load, render, encode, clean up."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import tempfile
from typing import Callable, Optional

from screen_melt.compositor import MeltCompositor
from screen_melt.encoder import FfmpegEncoder
from screen_melt.frames import FrameStore, default_temp_dir
from screen_melt.options import MeltOptions
from screen_melt.surface import PillowSurfaceProvider, SurfaceProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VideoJob:
    """Where a melt reads its images and writes its output.

    Without a ``temp_dir`` every run renders into its own fresh directory
    below :func:`default_temp_dir`.
    """

    start_path: Path
    end_path: Path
    video_path: Optional[Path] = None
    temp_dir: Optional[Path] = None
    keep_temp: bool = False


def load_compositor(
    options: MeltOptions,
    provider: SurfaceProvider,
    start_path: Path,
    end_path: Path,
) -> MeltCompositor:
    """Load both images and set up a validated compositor for them."""
    start = provider.load(start_path)
    end = provider.load(end_path)
    return MeltCompositor(options, start, end, provider)


def generate_frames(
    options: MeltOptions,
    start_path: Path,
    end_path: Path,
    store: FrameStore,
    *,
    on_frame: Optional[Callable[[int], None]] = None,
) -> list[Path]:
    """Render every melt frame into ``store`` and return the frame paths.

    All validation happens before the first frame is written.
    """
    compositor = load_compositor(options, store.provider, start_path, end_path)
    store.prepare()
    return compositor.generate(store, on_frame)


def _run_directory(job: VideoJob) -> tuple[Path, bool]:
    if job.temp_dir is not None:
        return job.temp_dir, False
    base = default_temp_dir()
    base.mkdir(parents=True, exist_ok=True)
    return Path(tempfile.mkdtemp(prefix="melt-", dir=base)), True


def generate_video(
    job: VideoJob,
    options: MeltOptions,
    *,
    provider: Optional[SurfaceProvider] = None,
    encoder: Optional[FfmpegEncoder] = None,
    on_frame: Optional[Callable[[int], None]] = None,
) -> list[Path]:
    """Render the melt and, when ``job.video_path`` is set, encode it.

    Temporary frames are removed on every exit path unless ``job.keep_temp``.
    """
    provider = provider or PillowSurfaceProvider()
    compositor = load_compositor(options, provider, job.start_path, job.end_path)
    directory, owned = _run_directory(job)
    with FrameStore(
        directory, provider, keep=job.keep_temp, remove_directory=owned
    ) as store:
        frames = compositor.generate(store, on_frame)
        if job.video_path is not None:
            (encoder or FfmpegEncoder()).encode(store.input_pattern, job.video_path)
    logger.info("Processing completed (%d frames)", len(frames))
    return frames
