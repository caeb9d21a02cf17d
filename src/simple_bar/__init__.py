"""Simple single-line terminal progress bar."""

import logging

__version__ = "0.1.0"

from .core.models import (
    AveragingPolicy,
    Delimiters,
    EstimatorState,
    Glyphs,
    OutOfRangeError,
    PreconditionError,
    ProgressError,
)
from .core.eta import EtaEstimator, RateWindow
from .core.tracker import ProgressTracker, track
from .utils.config import BarConfig, get_preset

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AveragingPolicy",
    "BarConfig",
    "Delimiters",
    "EstimatorState",
    "EtaEstimator",
    "Glyphs",
    "OutOfRangeError",
    "PreconditionError",
    "ProgressError",
    "ProgressTracker",
    "RateWindow",
    "get_preset",
    "track",
]
