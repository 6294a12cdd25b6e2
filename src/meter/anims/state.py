"""Animation state container used by level meters.

Tracks start, current and target bar values and peak markers per channel to
support smooth transitions between snapshots.
"""

from __future__ import annotations

from ..core.snapshot import Snapshot


class AnimationState:
    """Holds per-channel interpolation state for a level meter.

    Args:
        snapshot: Values shown before any animation takes place.
    """

    def __init__(self, snapshot: Snapshot) -> None:
        self.current: list[float]
        self.start: list[float]
        self.target: list[float]
        self.peak_current: list[float]
        self.peak_start: list[float]
        self.peak_target: list[float]
        self.ticks_left: int = 0
        self.snap(snapshot)

    @property
    def channels(self) -> int:
        return len(self.current)

    def snap(self, snapshot: Snapshot) -> None:
        """Jump straight to ``snapshot`` with no segment in progress."""
        self.current = list(snapshot.values)
        self.start = list(snapshot.values)
        self.target = list(snapshot.values)
        self.peak_current = list(snapshot.peaks)
        self.peak_start = list(snapshot.peaks)
        self.peak_target = list(snapshot.peaks)
        self.ticks_left = 0

    def retarget(self, snapshot: Snapshot, steps: int) -> None:
        """Begin a new segment from the values currently displayed."""
        self.start = list(self.current)
        self.peak_start = list(self.peak_current)
        self.target = list(snapshot.values)
        self.peak_target = list(snapshot.peaks)
        self.ticks_left = steps

    def step(self, steps: int) -> bool:
        """Advance every channel by one tick of the current segment.

        Each channel moves by ``(target - start) / steps``; the last tick of a
        segment lands exactly on the target. Once the segment is spent all
        increments are zero.

        Returns:
            True if any channel moved on this tick.
        """
        if self.ticks_left <= 0:
            return False

        moved = False
        for i in range(self.channels):
            delta = (self.target[i] - self.start[i]) / steps
            delta_peak = (self.peak_target[i] - self.peak_start[i]) / steps
            self.current[i] += delta
            self.peak_current[i] += delta_peak
            if delta or delta_peak:
                moved = True

        self.ticks_left = self.ticks_left - 1 if moved else 0
        if self.ticks_left == 0:
            self.current = list(self.target)
            self.peak_current = list(self.peak_target)
        return moved

    def snapshot(self) -> Snapshot:
        return Snapshot(tuple(self.current), tuple(self.peak_current))
