"""Tests for the ffmpeg wrapper."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest
from PIL import Image

from screen_melt import encoder
from screen_melt.errors import EncoderError


def test_default_command() -> None:
    cmd = encoder.FfmpegEncoder().build_command("tmp/Frame%04d.png", Path("out.mp4"))
    assert cmd == [
        "ffmpeg",
        "-y",
        "-loglevel",
        "quiet",
        "-framerate",
        "30",
        "-i",
        "tmp/Frame%04d.png",
        "-c:v",
        "libx264",
        "-pix_fmt",
        "yuv420p",
        "out.mp4",
    ]


def test_verbose_command_keeps_ffmpeg_logging() -> None:
    cmd = encoder.FfmpegEncoder(quiet=False, framerate=60).build_command(
        "p", Path("o.mp4")
    )
    assert "-loglevel" not in cmd
    assert cmd[cmd.index("-framerate") + 1] == "60"


def test_custom_options_replace_defaults() -> None:
    ff = encoder.FfmpegEncoder(
        "/opt/ffmpeg", extra_options="-c:v libvpx-vp9 -b:v '2M'", quiet=False
    )
    cmd = ff.build_command("p", Path("o.webm"))
    assert cmd == [
        "/opt/ffmpeg",
        "-y",
        "-i",
        "p",
        "-c:v",
        "libvpx-vp9",
        "-b:v",
        "2M",
        "o.webm",
    ]


def test_encode_runs_ffmpeg(monkeypatch) -> None:
    calls: list[list[str]] = []

    def fake_run(cmd, capture_output: bool, text: bool):
        calls.append(cmd)
        return SimpleNamespace(returncode=0, stderr="")

    monkeypatch.setattr(encoder.subprocess, "run", fake_run)
    result = encoder.FfmpegEncoder().encode("p", Path("o.mp4"))
    assert result == Path("o.mp4")
    assert calls and calls[0][0] == "ffmpeg"


def test_encode_failure_raises_with_stderr(monkeypatch) -> None:
    monkeypatch.setattr(
        encoder.subprocess,
        "run",
        lambda *_args, **_kwargs: SimpleNamespace(returncode=1, stderr="bad codec"),
    )
    with pytest.raises(EncoderError) as excinfo:
        encoder.FfmpegEncoder().encode("p", Path("o.mp4"))
    assert excinfo.value.stderr == "bad codec"


def test_missing_executable_raises(monkeypatch) -> None:
    def boom(*_args, **_kwargs):
        raise FileNotFoundError("ffmpeg")

    monkeypatch.setattr(encoder.subprocess, "run", boom)
    with pytest.raises(EncoderError):
        encoder.FfmpegEncoder("missing-ffmpeg").encode("p", Path("o.mp4"))


@pytest.mark.ffmpeg
def test_encode_real_frames(tmp_path: Path) -> None:
    for index in range(3):
        Image.new("RGB", (16, 16), (index * 80, 0, 0)).save(
            tmp_path / f"Frame{index:04d}.png"
        )
    output = tmp_path / "melt.mp4"
    encoder.FfmpegEncoder().encode(str(tmp_path / "Frame%04d.png"), output)
    assert output.stat().st_size > 0
