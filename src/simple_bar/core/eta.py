"""Rolling-window ETA estimation."""

import logging
import time
from typing import Callable, List, Optional

from .models import AveragingPolicy, EstimatorState, PreconditionError

# Configure logging
logger = logging.getLogger(__name__)

WINDOW_CAPACITY = 10
REFRESH_INTERVAL = 1.0  # seconds
EPSILON = 1e-6


class RateWindow:
    """Fixed-capacity ring buffer of rate samples.

    Slots are preallocated and overwritten in place through a write cursor,
    so pushing a sample never shifts the stored ones. Unused slots hold 0.0.
    """

    def __init__(self, capacity: int = WINDOW_CAPACITY):
        """Initialize the window.

        Args:
            capacity: Maximum number of samples kept
        """
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise PreconditionError(f"window capacity must be a positive integer, got: {capacity!r}")
        self.capacity = capacity
        self._slots: List[float] = [0.0] * capacity
        self._cursor = 0
        self._count = 0

    def __len__(self) -> int:
        return self._count

    @property
    def is_full(self) -> bool:
        return self._count == self.capacity

    def push(self, rate: float) -> None:
        """Store a sample, overwriting the oldest one once full."""
        self._slots[self._cursor] = rate
        self._cursor = (self._cursor + 1) % self.capacity
        if self._count < self.capacity:
            self._count += 1

    def samples(self) -> List[float]:
        """Return stored samples, oldest first."""
        if not self.is_full:
            return self._slots[:self._count]
        return self._slots[self._cursor:] + self._slots[:self._cursor]

    def mean(self, policy: AveragingPolicy = AveragingPolicy.SAMPLE_COUNT) -> float:
        """Average the window.

        Args:
            policy: Whether to divide by the samples taken or by the capacity

        Returns:
            Mean rate, 0.0 for an empty window
        """
        if self._count == 0:
            return 0.0
        divisor = self._count if policy is AveragingPolicy.SAMPLE_COUNT else self.capacity
        return sum(self._slots) / divisor

    def clear(self) -> None:
        self._slots = [0.0] * self.capacity
        self._cursor = 0
        self._count = 0


class EtaEstimator:
    """Smoothed time-remaining estimate for a fixed number of steps.

    Rates are sampled in steps per millisecond, at most once per refresh
    interval, and averaged over a small rolling window. Time comes from a
    monotonic clock so wall-clock adjustments cannot corrupt elapsed times.
    """

    def __init__(
        self,
        total: int,
        clock: Callable[[], float] = time.monotonic,
        capacity: int = WINDOW_CAPACITY,
        refresh_interval: float = REFRESH_INTERVAL,
        policy: AveragingPolicy = AveragingPolicy.SAMPLE_COUNT,
    ):
        """Initialize the estimator.

        Args:
            total: Number of steps the tracked run consists of
            clock: Zero-argument callable returning monotonic seconds
            capacity: Number of rate samples averaged
            refresh_interval: Minimum seconds between two samples
            policy: Averaging policy for a window that is not yet full
        """
        if refresh_interval <= 0:
            raise PreconditionError(f"refresh_interval must be greater than 0: {refresh_interval}")
        self.total = total
        self.clock = clock
        self.refresh_interval = refresh_interval
        self.policy = AveragingPolicy(policy)
        self.window = RateWindow(capacity)
        self.reset()

    def reset(self) -> None:
        """Discard all history and return to the cold state."""
        self.window.clear()
        self.last_sample_time = self.clock()
        self.last_sample_step = 0
        self.smoothed_eta: Optional[float] = None
        self.smoothed_rate = 0.0
        self._sampled = False

    @property
    def state(self) -> EstimatorState:
        if len(self.window) == 0:
            return EstimatorState.COLD
        if self.window.is_full:
            return EstimatorState.STEADY
        return EstimatorState.WARMING

    @property
    def rate_per_second(self) -> float:
        return self.smoothed_rate * 1000.0

    def should_refresh(self, now: float) -> bool:
        if not self._sampled:
            return True
        return now - self.last_sample_time >= self.refresh_interval

    def record(self, now: float, step: int) -> float:
        """Take one rate sample.

        Args:
            now: Current clock reading in seconds
            step: Current step of the tracked run

        Returns:
            The stored rate in steps per millisecond, or 0.0 when the first
            sample lands on the anchor's clock tick and nothing is stored
        """
        steps_taken = step - self.last_sample_step
        elapsed_ms = (now - self.last_sample_time) * 1000.0

        if elapsed_ms <= 0 and not self._sampled:
            # Move the anchor forward; the first real sample is measured from here.
            logger.debug(f"First sample at step {step} on the anchor tick, re-anchoring")
            self.last_sample_time = now
            self.last_sample_step = step
            return 0.0

        if elapsed_ms <= 0:
            logger.debug(f"No time elapsed since last sample at step {step}, using epsilon")
            elapsed_ms = EPSILON
        if steps_taken <= 0:
            logger.debug(f"No progress since last sample at step {step}, using epsilon")
            steps_taken = EPSILON

        rate = steps_taken / elapsed_ms
        previous = self.state
        self.window.push(rate)
        self.last_sample_time = now
        self.last_sample_step = step
        self._sampled = True

        if self.state is not previous:
            logger.debug(f"ETA estimator {previous.value} -> {self.state.value}")
        return rate

    def mean_rate(self) -> float:
        return self.window.mean(self.policy)

    def eta(self, now: float, step: int) -> Optional[float]:
        """Estimated seconds remaining, refreshed at most once per interval.

        Args:
            now: Current clock reading in seconds
            step: Current step of the tracked run

        Returns:
            Seconds remaining, or None while unknown
        """
        if not self.should_refresh(now):
            return self.smoothed_eta

        self.record(now, step)
        self.smoothed_rate = self.mean_rate()
        if len(self.window) < 2 or self.smoothed_rate <= 0:
            self.smoothed_eta = None
        else:
            self.smoothed_eta = (self.total - step) / self.smoothed_rate / 1000.0
        return self.smoothed_eta
