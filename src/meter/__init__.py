"""Meter package public API.
This module re-exports key classes and functions from submodules
to provide a simplified interface.
"""

from .anims.level_meter import LevelMeter
from .anims.scheduler import AsyncioScheduler, ManualScheduler, Scheduler, TimerHandle
from .core.cache import color_cache, font_cache
from .core.config import MeterConfig
from .core.errors import (
    ConfigurationError,
    InvariantViolation,
    MeterError,
    PipelineMessageError,
)
from .core.snapshot import Snapshot
from .io.loudness import LoudnessReport, LoudnessWindow, parse_loudness_report
from .io.surfaces import PilSurface, RecordingSurface, Surface
from .plots.draw_meter import draw_meter

__all__ = [
    "LevelMeter",
    "AsyncioScheduler",
    "ManualScheduler",
    "Scheduler",
    "TimerHandle",
    "color_cache",
    "font_cache",
    "MeterConfig",
    "ConfigurationError",
    "InvariantViolation",
    "MeterError",
    "PipelineMessageError",
    "Snapshot",
    "LoudnessReport",
    "LoudnessWindow",
    "parse_loudness_report",
    "PilSurface",
    "RecordingSurface",
    "Surface",
    "draw_meter",
]
