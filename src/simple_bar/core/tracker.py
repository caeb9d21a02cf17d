"""Progress tracking for a fixed number of steps."""

import logging
import sys
import time
from dataclasses import fields
from typing import Any, Callable, Iterable, Iterator, Optional, TextIO, TypeVar

from .eta import EtaEstimator
from .models import Delimiters, Glyphs, OutOfRangeError, PreconditionError
from ..ui.render import percent, render_line
from ..utils.config import DEFAULT_BAR_WIDTH, BarConfig, get_preset

# Configure logging
logger = logging.getLogger(__name__)

T = TypeVar("T")

CONFIG_FIELDS = frozenset(field.name for field in fields(BarConfig))


def _check_positive(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise PreconditionError(f"{name} must be a positive integer, got: {value!r}")


class ProgressTracker:
    """Single-line terminal progress bar counting from 0 to total.

    Every call to ``advance`` moves the bar one step and redraws it on the
    output stream, overwriting the previous line with a carriage return. The
    final step ends the line with a newline. A tracker owns its stream and is
    not thread-safe: callers sharing one across threads must serialize
    ``advance`` themselves.
    """

    def __init__(
        self,
        total: int,
        bar_width: int = DEFAULT_BAR_WIDTH,
        glyphs: Optional[Glyphs] = None,
        delimiters: Optional[Delimiters] = None,
        eta_enabled: bool = False,
        stream: Optional[TextIO] = None,
        clock: Callable[[], float] = time.monotonic,
        config: Optional[BarConfig] = None,
    ):
        """Initialize the tracker.

        Args:
            total: Number of steps, must be > 0
            bar_width: Number of glyph cells, must be > 0
            glyphs: Cell characters
            delimiters: Framing characters
            eta_enabled: Whether to estimate and show time remaining
            stream: Output stream, defaults to stderr
            clock: Monotonic time source used by the estimator
            config: Estimator settings; its display fields are ignored in
                favour of the explicit arguments

        Raises:
            PreconditionError: If total or bar_width is not a positive integer
        """
        _check_positive("total", total)
        _check_positive("bar_width", bar_width)

        config = (config or BarConfig()).validate()
        self._total = total
        self._current = 0
        self.bar_width = bar_width
        self.glyphs = glyphs or Glyphs()
        self.delimiters = delimiters or Delimiters()
        self.stream = stream if stream is not None else sys.stderr
        self.clock = clock

        self.estimator: Optional[EtaEstimator] = None
        if eta_enabled:
            self.estimator = EtaEstimator(
                total,
                clock=clock,
                capacity=config.window_capacity,
                refresh_interval=config.refresh_interval,
                policy=config.averaging,
            )

        logger.debug(f"Created progress tracker: total={total}, bar_width={bar_width}, eta={eta_enabled}")

    @classmethod
    def from_config(cls, total: int, config: BarConfig, **kwargs: Any) -> "ProgressTracker":
        """Create a tracker from a configuration object.

        Args:
            total: Number of steps
            config: Display and estimator settings
            **kwargs: Passed through to the constructor (stream, clock)

        Returns:
            New tracker
        """
        config.validate()
        return cls(
            total,
            bar_width=config.bar_width,
            glyphs=config.glyphs,
            delimiters=config.delimiters,
            eta_enabled=config.eta_enabled,
            config=config,
            **kwargs,
        )

    @classmethod
    def from_preset(cls, name: str, total: int, bar_width: int = DEFAULT_BAR_WIDTH,
                    eta_enabled: bool = False, **kwargs: Any) -> "ProgressTracker":
        """Create a tracker from a named preset.

        Args:
            name: Preset name, ``default`` or ``cargo``
            total: Number of steps
            bar_width: Number of glyph cells
            eta_enabled: Whether to estimate and show time remaining
            **kwargs: ``BarConfig`` fields (glyphs, delimiters, ...) override the
                preset; the rest go to the constructor (stream, clock)

        Returns:
            New tracker
        """
        overrides = {key: kwargs.pop(key) for key in list(kwargs) if key in CONFIG_FIELDS}
        config = get_preset(name, bar_width=bar_width, eta_enabled=eta_enabled, **overrides)
        return cls.from_config(total, config, **kwargs)

    @classmethod
    def default(cls, total: int, bar_width: int = DEFAULT_BAR_WIDTH, **kwargs: Any) -> "ProgressTracker":
        """Block-glyph bar without ETA."""
        return cls.from_preset("default", total, bar_width, **kwargs)

    @classmethod
    def default_eta(cls, total: int, bar_width: int = DEFAULT_BAR_WIDTH, **kwargs: Any) -> "ProgressTracker":
        """Block-glyph bar with ETA."""
        return cls.from_preset("default", total, bar_width, eta_enabled=True, **kwargs)

    @classmethod
    def cargo_format(cls, total: int, bar_width: int = DEFAULT_BAR_WIDTH, **kwargs: Any) -> "ProgressTracker":
        """Build-tool style bar (``[====>   ]``) without ETA."""
        return cls.from_preset("cargo", total, bar_width, **kwargs)

    @classmethod
    def cargo_format_eta(cls, total: int, bar_width: int = DEFAULT_BAR_WIDTH, **kwargs: Any) -> "ProgressTracker":
        """Build-tool style bar with ETA."""
        return cls.from_preset("cargo", total, bar_width, eta_enabled=True, **kwargs)

    @property
    def total(self) -> int:
        return self._total

    @property
    def current(self) -> int:
        return self._current

    @property
    def percent(self) -> int:
        return percent(self._current, self._total)

    def is_complete(self) -> bool:
        return self._current == self._total

    def advance(self) -> None:
        """Move one step forward and redraw.

        Raises:
            OutOfRangeError: If the bar is already complete
        """
        if self._current >= self._total:
            raise OutOfRangeError(
                f"Cannot advance past total: current={self._current}, total={self._total}"
            )
        self._current += 1
        self.render()

    def reset(self) -> None:
        """Return to step 0, discarding any ETA history."""
        self._current = 0
        if self.estimator is not None:
            self.estimator.reset()
        logger.debug(f"Reset progress tracker with total={self._total}")

    def reformat(self, glyphs: Optional[Glyphs] = None, delimiters: Optional[Delimiters] = None) -> None:
        """Change display characters; takes effect on the next render.

        Args:
            glyphs: New cell characters, None keeps the current ones
            delimiters: New framing characters, None keeps the current ones
        """
        if glyphs is not None:
            self.glyphs = glyphs
        if delimiters is not None:
            self.delimiters = delimiters

    def render(self) -> None:
        """Write the current state to the stream and flush it."""
        eta_seconds: Optional[float] = None
        rate = 0.0
        if self.estimator is not None:
            eta_seconds = self.estimator.eta(self.clock(), self._current)
            rate = self.estimator.rate_per_second
            if self.is_complete():
                eta_seconds = 0.0

        line = render_line(
            self._current,
            self._total,
            self.bar_width,
            self.glyphs,
            self.delimiters,
            show_eta=self.estimator is not None,
            eta_seconds=eta_seconds,
            rate_per_second=rate,
        )

        self.stream.write("\r" + line)
        if self.is_complete():
            self.stream.write("\n")
        self.stream.flush()

    def __repr__(self) -> str:
        return f"ProgressTracker(current={self._current}, total={self._total}, eta={self.estimator is not None})"


def track(
    iterable: Iterable[T],
    total: Optional[int] = None,
    preset: str = "default",
    eta: bool = False,
    **kwargs: Any,
) -> Iterator[T]:
    """Yield items from an iterable while advancing a progress bar.

    Args:
        iterable: Items to iterate over
        total: Number of items, required if the iterable has no ``__len__``
        preset: Preset name, ``default`` or ``cargo``
        eta: Whether to show the ETA
        **kwargs: Passed through to ``ProgressTracker.from_preset``

    Yields:
        Each item from the iterable
    """
    if total is None:
        try:
            total = len(iterable)  # type: ignore[arg-type]
        except TypeError:
            raise PreconditionError("A 'total' argument must be provided if the iterable has no __len__")

    if total == 0:
        for _ in iterable:
            raise OutOfRangeError("Cannot advance past total: current=0, total=0")
        return

    tracker = ProgressTracker.from_preset(preset, total, eta_enabled=eta, **kwargs)
    for item in iterable:
        yield item
        tracker.advance()
