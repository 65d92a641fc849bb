"""Immutable options for a single melt run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from screen_melt.errors import ParameterError
from screen_melt.schedule import Algorithm


@dataclass(frozen=True)
class MeltOptions:
    """Geometry, timing and randomness settings for a melt."""

    stripe_width: int = 5
    stripe_displacement: int = 10
    frame_count: int = 0
    max_random: int = 15
    random_seed: Optional[int] = None
    force_even: bool = False
    algorithm: int = Algorithm.WALK

    def validate(self) -> None:
        """Raise ParameterError for values that can never produce a melt."""
        if self.stripe_width <= 0:
            raise ParameterError(
                f"Stripe width must be positive, got {self.stripe_width}"
            )
        if self.max_random < 0:
            raise ParameterError(
                f"Max start delay must be >= 0, got {self.max_random}"
            )
        if self.algorithm not in {a.value for a in Algorithm}:
            raise ParameterError(f"Unknown melt algorithm: {self.algorithm}")


def normalize_seed(seed: Optional[int]) -> Optional[int]:
    """Map negative seeds (the "no seed" sentinel) to None."""
    if seed is None or seed < 0:
        return None
    return seed
