"""Single-line bar rendering."""

import io
import math
from typing import Optional

from ..core.models import Delimiters, Glyphs

UNKNOWN_ETA = "--:--:--"
UNKNOWN_RATE = "--"


def percent(current: int, total: int) -> int:
    """Truncated integer percentage, 33.6% renders as 33."""
    return current * 100 // total


def format_counter(current: int, total: int) -> str:
    """Format the step counter, zero-padded to the digit count of total.

    Args:
        current: Current step
        total: Total number of steps

    Returns:
        Counter string such as ``007 / 500``
    """
    width = len(str(total))
    return f"{current:0{width}d} / {total}"


def filled_cells(current: int, total: int, bar_width: int) -> int:
    """Map current from [0, total] onto [1, bar_width], rounding down."""
    return 1 + current * (bar_width - 1) // total


def render_cells(current: int, total: int, bar_width: int, glyphs: Glyphs) -> str:
    filled = filled_cells(current, total, bar_width)
    boundary = glyphs.fill if current == total else glyphs.head
    return glyphs.fill * (filled - 1) + boundary + glyphs.empty * (bar_width - filled)


def format_eta(seconds: Optional[float]) -> str:
    """Format remaining time as HH:MM:SS.

    Args:
        seconds: Remaining seconds, None when unknown

    Returns:
        Formatted duration, or a placeholder when unknown or above 99 hours
    """
    if seconds is None or not math.isfinite(seconds) or seconds < 0:
        return UNKNOWN_ETA

    hours, remainder = divmod(int(seconds), 3600)
    minutes, secs = divmod(remainder, 60)

    if hours > 99:
        return UNKNOWN_ETA
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_rate(rate_per_second: float) -> str:
    if not math.isfinite(rate_per_second) or rate_per_second <= 0:
        return f"{UNKNOWN_RATE} it/s"
    return f"{rate_per_second:.2f} it/s"


def render_line(
    current: int,
    total: int,
    bar_width: int,
    glyphs: Glyphs,
    delimiters: Delimiters,
    show_eta: bool = False,
    eta_seconds: Optional[float] = None,
    rate_per_second: float = 0.0,
) -> str:
    """Build the text of one bar line, without carriage return or newline.

    Args:
        current: Current step
        total: Total number of steps
        bar_width: Number of glyph cells
        glyphs: Cell characters
        delimiters: Framing characters
        show_eta: Whether to append the ETA and rate fields
        eta_seconds: Remaining seconds, None when unknown
        rate_per_second: Smoothed throughput

    Returns:
        Rendered line
    """
    buffer = io.StringIO()
    buffer.write(format_counter(current, total))
    buffer.write(" ")
    buffer.write(delimiters.open)
    buffer.write(render_cells(current, total, bar_width, glyphs))
    buffer.write(delimiters.close)
    buffer.write(f" ({percent(current, total)}%)")

    if show_eta:
        buffer.write(f" ETA {format_eta(eta_seconds)} ({format_rate(rate_per_second)})")

    return buffer.getvalue()
