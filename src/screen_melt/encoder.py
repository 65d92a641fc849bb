"""ffmpeg-backed video assembly."""

from __future__ import annotations

import logging
from pathlib import Path
import shlex
import subprocess

from screen_melt.errors import EncoderError

logger = logging.getLogger(__name__)


class FfmpegEncoder:
    """Thin wrapper around the ffmpeg command line."""

    def __init__(
        self,
        executable: str = "ffmpeg",
        *,
        extra_options: str = "",
        framerate: int = 30,
        quiet: bool = True,
    ) -> None:
        self.executable = executable
        self.extra_options = extra_options
        self.framerate = framerate
        self.quiet = quiet

    def build_command(self, input_pattern: str, output: Path) -> list[str]:
        """Return the ffmpeg argv that turns the frame pattern into ``output``."""
        cmd = [self.executable, "-y"]
        if self.quiet:
            cmd.extend(["-loglevel", "quiet"])
        if self.extra_options.strip():
            cmd.extend(["-i", input_pattern])
            cmd.extend(shlex.split(self.extra_options))
        else:
            cmd.extend(
                [
                    "-framerate",
                    str(self.framerate),
                    "-i",
                    input_pattern,
                    "-c:v",
                    "libx264",
                    "-pix_fmt",
                    "yuv420p",
                ]
            )
        cmd.append(str(output))
        return cmd

    def encode(self, input_pattern: str, output: Path) -> Path:
        """Run ffmpeg and return the output path."""
        cmd = self.build_command(input_pattern, output)
        logger.info("Encoding video: %s", shlex.join(cmd))
        try:
            proc = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as exc:
            raise EncoderError(
                f"Cannot start ffmpeg ({self.executable}): {exc}"
            ) from exc
        if proc.returncode != 0:
            raise EncoderError(
                f"ffmpeg exited with code {proc.returncode} writing {output}",
                stderr=proc.stderr or "",
            )
        logger.info("Video saved to %s", output)
        return output
