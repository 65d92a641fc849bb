"""Command-line interface for screen-melt."""

from __future__ import annotations

import argparse
from dataclasses import replace
import logging
from pathlib import Path
import sys
from typing import Iterable, Optional

from rich.console import Console

from screen_melt.config import AppConfig, load_config, save_config
from screen_melt.encoder import FfmpegEncoder
from screen_melt.errors import MeltError, ParameterError
from screen_melt.faultlog import dump_threads, enable_faulthandler
from screen_melt.logging_setup import init_logging, set_console_level
from screen_melt.melt import VideoJob, generate_video
from screen_melt.options import MeltOptions

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_START_MISSING = 2
EXIT_END_MISSING = 3
EXIT_PARAMETER_ERROR = 4
EXIT_PROCESSING_ERROR = 5


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="screen-melt",
        description="Render a screen melt transition between two images",
    )
    parser.add_argument("start", help="Path of the start image")
    parser.add_argument("end", help="Path of the end image")
    parser.add_argument("-o", "--output", default=None, help="Output video file")
    parser.add_argument(
        "-a",
        "--algorithm",
        type=int,
        choices=(0, 1, 2),
        default=None,
        help="Melting algorithm type",
    )
    parser.add_argument(
        "-sw", "--stripe-width", type=int, default=None, help="Stripe width"
    )
    parser.add_argument(
        "-sd",
        "--stripe-displacement",
        type=int,
        default=None,
        help="Stripe displacement per frame",
    )
    parser.add_argument(
        "-sr",
        "--max-delay",
        type=int,
        default=None,
        help="Max stripe start delay (frames)",
    )
    parser.add_argument(
        "-f", "--frames", type=int, default=None, help="Frames of the transition"
    )
    parser.add_argument(
        "-r", "--seed", type=int, default=None, help="Random number generator seed"
    )
    parser.add_argument(
        "-e",
        "--even",
        action="store_true",
        default=None,
        help="Force even image dimensions (drop one pixel)",
    )
    parser.add_argument(
        "-nv", "--quiet", action="store_true", help="Disable console output"
    )
    parser.add_argument(
        "-k",
        "--keep-temp",
        action="store_true",
        default=None,
        help="Keep temporary frame images",
    )
    parser.add_argument("-t", "--temp", default=None, help="Temporary frame folder")
    parser.add_argument("-ffp", "--ffmpeg", default=None, help="ffmpeg executable")
    parser.add_argument(
        "-ffo",
        "--ffmpeg-options",
        default=None,
        help="Options for ffmpeg (override the defaults)",
    )
    parser.add_argument(
        "--framerate", type=int, default=None, help="Video framerate"
    )
    parser.add_argument(
        "--save-defaults",
        action="store_true",
        help="Store the given options as defaults for later runs",
    )
    return parser


def _pick(value, default):
    return default if value is None else value


def config_from_args(args: argparse.Namespace, cfg: AppConfig) -> AppConfig:
    """Overlay command-line values on the persisted defaults."""
    return replace(
        cfg,
        stripe_width=_pick(args.stripe_width, cfg.stripe_width),
        stripe_displacement=_pick(args.stripe_displacement, cfg.stripe_displacement),
        frame_count=_pick(args.frames, cfg.frame_count),
        max_random=_pick(args.max_delay, cfg.max_random),
        random_seed=_pick(args.seed, cfg.random_seed),
        force_even=_pick(args.even, cfg.force_even),
        algorithm=_pick(args.algorithm, cfg.algorithm),
        keep_temp=_pick(args.keep_temp, cfg.keep_temp),
        temp_dir=_pick(args.temp, cfg.temp_dir),
        ffmpeg_path=_pick(args.ffmpeg, cfg.ffmpeg_path),
        ffmpeg_options=_pick(args.ffmpeg_options, cfg.ffmpeg_options),
        framerate=_pick(args.framerate, cfg.framerate),
    )


def _print_summary(
    console: Console, job: VideoJob, options: MeltOptions
) -> None:
    console.print()
    console.print(f"Start image: {job.start_path}")
    console.print(f"End image: {job.end_path}")
    if options.frame_count > 0:
        console.print(f"Frames: {options.frame_count}")
    if job.video_path is not None:
        console.print(f"Output file: {job.video_path}")
    console.print()


def _run(
    console: Console,
    job: VideoJob,
    options: MeltOptions,
    encoder: FfmpegEncoder,
) -> list[Path]:
    if console.quiet:
        return generate_video(job, options, encoder=encoder)
    with console.status("Rendering frames...") as status:

        def on_frame(index: int) -> None:
            status.update(f"Processing frame {index}...")

        return generate_video(job, options, encoder=encoder, on_frame=on_frame)


def _report(console: Console, title: str, exc: BaseException) -> None:
    console.print(f"{title}:", style="bold red")
    console.print(str(exc), markup=False)
    stderr = getattr(exc, "stderr", "")
    if stderr:
        console.print(stderr, markup=False)


def main(argv: Optional[Iterable[str]] = None) -> int:
    """Entry point for the CLI."""
    log_path = init_logging()
    enable_faulthandler(log_path)
    logger.info("App start")

    def excepthook(exc_type, exc, tb) -> None:
        logger.exception("Uncaught exception", exc_info=(exc_type, exc, tb))
        dump_threads("uncaught exception")

    sys.excepthook = excepthook

    parser = build_parser()
    try:
        args = parser.parse_args(list(argv) if argv is not None else None)
    except SystemExit as exc:
        return EXIT_OK if exc.code in (0, None) else EXIT_USAGE

    if args.quiet:
        set_console_level(logging.ERROR)
    console = Console(quiet=args.quiet, highlight=False)
    errors = Console(stderr=True, highlight=False, soft_wrap=True)
    console.print("[bold]Screen Melt[/bold] command line")

    start_path = Path(args.start).expanduser()
    end_path = Path(args.end).expanduser()
    if not start_path.is_file():
        errors.print("Start image was not found!", style="bold red")
        return EXIT_START_MISSING
    if not end_path.is_file():
        errors.print("End image was not found!", style="bold red")
        return EXIT_END_MISSING

    cfg = config_from_args(args, load_config())
    if args.save_defaults:
        save_config(cfg)
        logger.info("Saved defaults")
    options = cfg.melt_options()
    job = VideoJob(
        start_path=start_path,
        end_path=end_path,
        video_path=Path(args.output).expanduser() if args.output else None,
        temp_dir=Path(cfg.temp_dir).expanduser() if cfg.temp_dir else None,
        keep_temp=cfg.keep_temp,
    )
    encoder = FfmpegEncoder(
        cfg.ffmpeg_path,
        extra_options=cfg.ffmpeg_options,
        framerate=cfg.framerate,
        quiet=args.quiet,
    )
    logger.info("Options %s", options)
    _print_summary(console, job, options)

    try:
        frames = _run(console, job, options, encoder)
    except ParameterError as exc:
        logger.error("Parameter error: %s", exc)
        _report(errors, "Parameter error", exc)
        return EXIT_PARAMETER_ERROR
    except (MeltError, OSError) as exc:
        logger.error("Processing error: %s", exc)
        logger.info("Processing error details", exc_info=True)
        _report(errors, "Processing error", exc)
        return EXIT_PROCESSING_ERROR

    console.print(f"Processing completed! ({len(frames)} frames)")
    logger.info("App exit code=%s", EXIT_OK)
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
