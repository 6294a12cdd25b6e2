"""Meter configuration.

``MeterConfig`` is immutable: derive variants with ``dataclasses.replace``,
which runs the same validation as the constructor.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from . import constants
from .cache import color_cache
from .colors import to_rgb
from .errors import ConfigurationError


@dataclass(frozen=True)
class MeterConfig:
    """Geometry, palette and animation timing of one level meter.

    Args:
        width: Surface width in pixels.
        height: Surface height in pixels.
        margin: Horizontal gap on each side of a bar inside its slot.
        colors: Bar palette, used cyclically per channel.
        background: Background fill color.
        labels: Optional axis label per channel, drawn under the graph.
        max_value: Fixed top of the scale; ``None`` uses the default scale.
        interval_ms: Duration of one interpolation segment.
        steps: Number of ticks per segment.
    """

    width: int = constants.width
    height: int = constants.height
    margin: int = constants.margin
    colors: tuple[str, ...] = constants.colors
    background: str = constants.background
    labels: tuple[str, ...] = ()
    max_value: Optional[float] = None
    interval_ms: float = constants.interval_ms
    steps: int = constants.steps

    def __post_init__(self) -> None:
        # Stored as tuples whatever sequence the caller passed
        object.__setattr__(self, "colors", tuple(self.colors))
        object.__setattr__(self, "labels", tuple(self.labels))

        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError(
                f"width and height must be positive, got {self.width}x{self.height}"
            )
        if not self.colors:
            raise ConfigurationError("color palette must not be empty")
        if not 0 <= self.margin < constants.bar_slot / 2:
            raise ConfigurationError(
                f"margin must be in [0, {constants.bar_slot // 2}), got {self.margin}"
            )
        if self.max_value is not None and self.max_value <= 0:
            raise ConfigurationError(f"max_value must be positive, got {self.max_value}")
        if self.steps < 1:
            raise ConfigurationError(f"steps must be at least 1, got {self.steps}")
        if self.interval_ms < 0:
            raise ConfigurationError(
                f"interval_ms must not be negative, got {self.interval_ms}"
            )
        for color in (*self.colors, self.background):
            to_rgb(color, color_cache)

    @property
    def effective_max(self) -> float:
        if self.max_value:
            return float(self.max_value)
        return constants.default_scale

    @property
    def tick_delay_ms(self) -> float:
        return self.interval_ms / self.steps

    def color_for(self, channel: int) -> str:
        return self.colors[channel % len(self.colors)]

    def label_for(self, channel: int) -> Optional[str]:
        if channel < len(self.labels) and self.labels[channel]:
            return self.labels[channel]
        return None
