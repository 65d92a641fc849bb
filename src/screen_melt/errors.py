"""Exception types raised while generating a melt."""

from __future__ import annotations


class MeltError(Exception):
    """Base class for screen melt failures."""


class ParameterError(MeltError, ValueError):
    """Invalid option combination or mismatched source images."""


class DegenerateScheduleError(MeltError, ArithmeticError):
    """A normalized schedule cannot be rescaled because its walk is flat."""


class SurfaceIOError(MeltError, OSError):
    """An image surface could not be loaded or saved."""


class EncoderError(MeltError, RuntimeError):
    """The external video encoder failed or could not be started."""

    def __init__(self, message: str, *, stderr: str = "") -> None:
        super().__init__(message)
        self.stderr = stderr
