"""Bar configuration and presets."""

from dataclasses import dataclass, field, replace
from typing import Any, Dict

from ..core.eta import REFRESH_INTERVAL, WINDOW_CAPACITY
from ..core.models import AveragingPolicy, Delimiters, Glyphs, PreconditionError

DEFAULT_BAR_WIDTH = 50


@dataclass(frozen=True)
class BarConfig:
    """Display and estimator settings for a progress bar."""

    bar_width: int = DEFAULT_BAR_WIDTH
    glyphs: Glyphs = field(default_factory=Glyphs)
    delimiters: Delimiters = field(default_factory=Delimiters)
    eta_enabled: bool = False
    window_capacity: int = WINDOW_CAPACITY
    refresh_interval: float = REFRESH_INTERVAL
    averaging: AveragingPolicy = AveragingPolicy.SAMPLE_COUNT

    def validate(self) -> "BarConfig":
        """Validate configuration values.

        Returns:
            The config itself, for chaining

        Raises:
            PreconditionError: If a value is out of range or of the wrong type
        """
        if isinstance(self.bar_width, bool) or not isinstance(self.bar_width, int) or self.bar_width <= 0:
            raise PreconditionError(f"bar_width must be a positive integer, got: {self.bar_width!r}")
        if not isinstance(self.glyphs, Glyphs):
            raise PreconditionError(f"glyphs must be a Glyphs instance, got: {type(self.glyphs)}")
        if not isinstance(self.delimiters, Delimiters):
            raise PreconditionError(f"delimiters must be a Delimiters instance, got: {type(self.delimiters)}")
        if (
            isinstance(self.window_capacity, bool)
            or not isinstance(self.window_capacity, int)
            or self.window_capacity <= 0
        ):
            raise PreconditionError(
                f"window_capacity must be a positive integer, got: {self.window_capacity!r}"
            )
        if self.refresh_interval <= 0:
            raise PreconditionError(f"refresh_interval must be greater than 0: {self.refresh_interval}")
        try:
            AveragingPolicy(self.averaging)
        except ValueError:
            raise PreconditionError(f"Unknown averaging policy: {self.averaging!r}")
        return self

    def with_overrides(self, **overrides: Any) -> "BarConfig":
        """Return a validated copy with some fields replaced."""
        try:
            updated = replace(self, **overrides)
        except TypeError as e:
            raise PreconditionError(f"Invalid configuration override: {e}")
        return updated.validate()


PRESETS: Dict[str, BarConfig] = {
    "default": BarConfig(),
    "cargo": BarConfig(glyphs=Glyphs(fill="=", head=">", empty=" ")),
}


def get_preset(name: str, **overrides: Any) -> BarConfig:
    """Get a named preset.

    Args:
        name: Preset name, ``default`` or ``cargo``
        **overrides: Fields to replace in the returned copy

    Returns:
        Validated configuration
    """
    if name not in PRESETS:
        raise PreconditionError(f"Unknown preset: {name!r} (available: {', '.join(sorted(PRESETS))})")
    return PRESETS[name].with_overrides(**overrides)
