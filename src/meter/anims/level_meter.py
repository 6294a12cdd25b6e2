"""Animated multi-bar level meter.

The meter decouples the arrival rate of level snapshots from its own refresh
cadence: every ``update`` sets a new target and a single self-rescheduling
tick walks the displayed values toward it in fixed linear steps.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..core.config import MeterConfig
from ..core.snapshot import Snapshot
from ..io.surfaces import Surface
from ..plots.draw_meter import draw_meter
from .scheduler import Scheduler, TimerHandle
from .state import AnimationState

logger = logging.getLogger(__name__)


class LevelMeter:
    """Level meter bound to one drawing surface.

    Args:
        config: Validated meter configuration.
        surface: Surface the meter draws on.
        scheduler: Source of timed callbacks for animation ticks.
    """

    def __init__(
        self, config: MeterConfig, surface: Surface, scheduler: Scheduler
    ) -> None:
        self._config = config
        self._surface = surface
        self._scheduler = scheduler
        self._state: Optional[AnimationState] = None
        self._timer: Optional[TimerHandle] = None
        self._looping = False
        self._closed = False
        self.frames_rendered = 0

    @property
    def config(self) -> MeterConfig:
        return self._config

    @property
    def surface(self) -> Surface:
        return self._surface

    @property
    def animating(self) -> bool:
        return self._looping

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def channels(self) -> int:
        return self._state.channels if self._state is not None else 0

    @property
    def current(self) -> Optional[Snapshot]:
        """Values currently displayed, or None before the first update."""
        return self._state.snapshot() if self._state is not None else None

    @property
    def target(self) -> Optional[Snapshot]:
        if self._state is None:
            return None
        return Snapshot(tuple(self._state.target), tuple(self._state.peak_target))

    def update(self, values: Sequence[float], peaks: Sequence[float]) -> None:
        """Animate toward a new snapshot.

        The first snapshot, or one with a different channel count, is shown
        immediately. Otherwise the displayed values become the segment start
        and the loop is started unless one is already running, in which case
        it carries on toward the new target from where it is.

        Raises:
            InvariantViolation: If ``values`` and ``peaks`` differ in length.
                The meter state is left untouched.
        """
        snapshot = Snapshot.of(values, peaks)
        if self._closed:
            logger.debug("update ignored on closed meter")
            return

        if self._state is None or self._state.channels != snapshot.channels:
            self._cancel_timer()
            if self._state is None:
                self._state = AnimationState(snapshot)
            else:
                logger.info(
                    "channel count changed %d -> %d, snapping",
                    self._state.channels,
                    snapshot.channels,
                )
                self._state.snap(snapshot)
            self._render()
            return

        self._state.retarget(snapshot, self._config.steps)
        if not self._looping:
            self._tick()

    def close(self) -> None:
        """Stop animating; no tick touches the surface after this returns."""
        self._closed = True
        self._cancel_timer()

    def _tick(self) -> None:
        self._timer = None
        if self._closed or self._state is None:
            self._looping = False
            return

        self._looping = True
        if not self._state.step(self._config.steps):
            self._looping = False
            return

        try:
            self._render()
            self._timer = self._scheduler.call_later(
                self._config.tick_delay_ms, self._tick
            )
        finally:
            # A failed frame must not leave the loop marked as running
            if self._timer is None:
                self._looping = False

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._looping = False

    def _render(self) -> None:
        draw_meter(
            self._surface,
            self._config,
            self._state.current,
            self._state.peak_current,
        )
        self.frames_rendered += 1
