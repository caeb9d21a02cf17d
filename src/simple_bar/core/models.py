"""Data models and exceptions for progress tracking."""

from dataclasses import dataclass
from enum import Enum


class ProgressError(Exception):
    """Base exception for progress bar operations."""
    pass


class PreconditionError(ProgressError, ValueError):
    """Raised when a bar is configured with invalid parameters."""
    pass


class OutOfRangeError(ProgressError, IndexError):
    """Raised when a bar is advanced past its total."""
    pass


def _check_char(name: str, value: object) -> None:
    if not isinstance(value, str) or len(value) != 1:
        raise PreconditionError(f"{name} must be a single character, got: {value!r}")


@dataclass(frozen=True)
class Glyphs:
    """Characters used for the cells of the bar."""

    fill: str = "█"
    head: str = "█"
    empty: str = " "

    def __post_init__(self):
        _check_char("fill glyph", self.fill)
        _check_char("head glyph", self.head)
        _check_char("empty glyph", self.empty)


@dataclass(frozen=True)
class Delimiters:
    """Characters framing the bar."""

    open: str = "["
    close: str = "]"

    def __post_init__(self):
        _check_char("opening delimiter", self.open)
        _check_char("closing delimiter", self.close)


class EstimatorState(str, Enum):
    """Warm-up state of an ETA estimator."""

    COLD = "cold"
    WARMING = "warming"
    STEADY = "steady"


class AveragingPolicy(str, Enum):
    """How a partially filled sample window is averaged."""

    SAMPLE_COUNT = "sample_count"  # divide by samples taken
    FULL_WINDOW = "full_window"  # divide by capacity, empty slots count as 0
