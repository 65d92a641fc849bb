"""Stripe start-delay schedules.

Each stripe of the melt waits a number of frames before it starts sliding.
The delays come from one of three algorithms:

- ``WALK`` (0): a bounded random walk over the fixed lookup table, shifted so
  the earliest stripe starts at frame 0.
- ``WALK_STRETCHED`` (1): the same walk, shifted and rescaled to span the full
  ``[0, max_random]`` range.
- ``UNIFORM`` (2): independent uniform draws per stripe.
"""

from __future__ import annotations

from enum import IntEnum
import logging
import random

from screen_melt.errors import DegenerateScheduleError, ParameterError
from screen_melt.rndtable import MELT_TABLE

logger = logging.getLogger(__name__)


class Algorithm(IntEnum):
    WALK = 0
    WALK_STRETCHED = 1
    UNIFORM = 2


def stripe_count(work_width: int, stripe_width: int) -> int:
    """Return the number of stripes covering ``work_width``.

    One extra stripe is always produced; it starts at or past the right edge
    and is clipped when drawn.
    """
    if stripe_width <= 0:
        raise ParameterError(f"Stripe width must be positive, got {stripe_width}")
    return work_width // stripe_width + 1


def make_rng(seed: int | None) -> random.Random:
    """Return a seeded RNG, or an OS-seeded one when ``seed`` is None."""
    if seed is None:
        return random.Random()
    return random.Random(seed)


def table_walk(count: int, max_random: int, rng: random.Random) -> list[int]:
    """Generate a bounded random walk of ``count`` values in ``[0, max_random]``."""
    if count <= 0:
        return []
    seed = rng.randint(0, 255)
    values = [rng.randint(0, max_random)]
    for _ in range(1, count):
        step = MELT_TABLE[seed % len(MELT_TABLE)] % 3 - 1
        values.append(max(0, min(max_random, values[-1] + step)))
        seed += 1
    return values


def _shift_to_zero(values: list[int]) -> list[int]:
    low = min(values)
    return [value - low for value in values]


def _stretch(values: list[int], max_random: int) -> list[int]:
    low = min(values)
    high = max(values)
    spread = high - low
    if spread == 0:
        raise DegenerateScheduleError(
            f"Cannot stretch a flat walk of {len(values)} stripes "
            f"(every delay is {low}) to span 0..{max_random}"
        )
    return [(value - low) * max_random // spread for value in values]


def build_schedule(
    count: int,
    max_random: int,
    algorithm: int,
    rng: random.Random,
) -> list[int]:
    """Return one start delay per stripe using the selected algorithm."""
    if max_random < 0:
        raise ParameterError(f"Max start delay must be >= 0, got {max_random}")
    try:
        kind = Algorithm(algorithm)
    except ValueError:
        raise ParameterError(f"Unknown melt algorithm: {algorithm}") from None
    if count <= 0:
        return []
    if max_random == 0:
        return [0] * count
    if kind is Algorithm.UNIFORM:
        schedule = [rng.randint(0, max_random) for _ in range(count)]
    else:
        walk = table_walk(count, max_random, rng)
        if kind is Algorithm.WALK_STRETCHED:
            schedule = _stretch(walk, max_random)
        else:
            schedule = _shift_to_zero(walk)
    logger.debug(
        "Schedule algorithm=%s stripes=%d min=%d max=%d",
        kind.name,
        count,
        min(schedule),
        max(schedule),
    )
    return schedule
