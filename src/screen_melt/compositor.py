"""Frame-by-frame melt simulation and compositing."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Any, Callable, Iterator, Optional, Protocol

from screen_melt.errors import ParameterError
from screen_melt.options import MeltOptions
from screen_melt.schedule import build_schedule, make_rng, stripe_count
from screen_melt.surface import SurfaceProvider

logger = logging.getLogger(__name__)


@dataclass
class StripeState:
    """Per-stripe simulation state."""

    index: int
    start_delay: int
    position_y: float = 0.0


class FrameSink(Protocol):
    def save(self, canvas: Any, index: int) -> Path: ...


def working_size(width: int, height: int, force_even: bool) -> tuple[int, int]:
    """Return the rendering size, dropping a trailing odd pixel if asked."""
    if not force_even:
        return width, height
    return width - width % 2, height - height % 2


def stripe_step(work_height: int, options: MeltOptions) -> float:
    """Return the per-frame vertical advance of a moving stripe."""
    if options.frame_count <= 0:
        step = float(options.stripe_displacement)
    else:
        travel_frames = options.frame_count - options.max_random
        if travel_frames <= 0:
            raise ParameterError(
                "Invalid parameter combination! Frame count "
                f"({options.frame_count}) must be greater than max start "
                f"delay ({options.max_random})."
            )
        step = work_height / travel_frames
    if step <= 0:
        raise ParameterError(
            f"Stripe displacement per frame must be positive, got {step}"
        )
    return step


def render_frames(
    start: Any,
    end: Any,
    schedule: list[int],
    step_y: float,
    stripe_width: int,
    size: tuple[int, int],
    provider: SurfaceProvider,
) -> Iterator[Any]:
    """Yield one composited canvas per simulation step.

    The same canvas object is redrawn for every frame; a consumer that wants
    to keep a frame must save or copy it before advancing the iterator. The
    last frame yielded is the one in which every stripe has left the canvas.
    """
    work_width, work_height = size
    canvas = provider.new_surface(work_width, work_height)
    stripes = [
        StripeState(index=index, start_delay=delay)
        for index, delay in enumerate(schedule)
    ]
    current_frame = 0
    completed = False
    while not completed:
        provider.draw_full(canvas, end)
        completed = True
        for stripe in stripes:
            if current_frame > stripe.start_delay:
                stripe.position_y += step_y
            if stripe.position_y < work_height:
                completed = False
            x = stripe.index * stripe_width
            width = min(stripe_width, work_width - x)
            # +1 row of source avoids a hairline seam at the sliding edge.
            height = int(work_height - stripe.position_y + 1)
            if width <= 0 or height <= 0:
                continue
            provider.draw_clipped_region(
                canvas,
                start,
                (x, 0, width, height),
                x,
                int(stripe.position_y),
            )
        yield canvas
        current_frame += 1


class MeltCompositor:
    """Validate a melt setup and render its frames."""

    def __init__(
        self,
        options: MeltOptions,
        start: Any,
        end: Any,
        provider: SurfaceProvider,
    ) -> None:
        options.validate()
        if (start.width, start.height) != (end.width, end.height):
            raise ParameterError(
                "Images have different dimensions! "
                f"start={start.width}x{start.height} "
                f"end={end.width}x{end.height}"
            )
        self.options = options
        self.start = start
        self.end = end
        self.provider = provider
        self.size = working_size(start.width, start.height, options.force_even)
        work_width, work_height = self.size
        self.step_y = stripe_step(work_height, options)
        self.schedule = build_schedule(
            stripe_count(work_width, options.stripe_width),
            options.max_random,
            options.algorithm,
            make_rng(options.random_seed),
        )
        logger.info(
            "Melt %dx%d stripes=%d step=%.3f algorithm=%d",
            work_width,
            work_height,
            len(self.schedule),
            self.step_y,
            options.algorithm,
        )

    def frames(self) -> Iterator[Any]:
        return render_frames(
            self.start,
            self.end,
            self.schedule,
            self.step_y,
            self.options.stripe_width,
            self.size,
            self.provider,
        )

    def generate(
        self,
        sink: FrameSink,
        on_frame: Optional[Callable[[int], None]] = None,
    ) -> list[Path]:
        """Hand every finished frame to ``sink`` and return the saved paths."""
        sequence: list[Path] = []
        for index, canvas in enumerate(self.frames()):
            logger.debug("Processing frame %d", index)
            if on_frame is not None:
                on_frame(index)
            sequence.append(sink.save(canvas, index))
        logger.info("Rendered %d frames", len(sequence))
        return sequence
