"""Loudness reports posted by the media pipeline.

The pipeline's loudness filter posts one colon-separated string per audio
buffer::

    <pipe>:<planes>:<momentary_0>:<max_0>:<momentary_1>:<max_1>:

``momentary`` is the short-term level of each plane and ``max`` the highest
momentary level seen during the last second. ``LoudnessWindow`` produces the
same reports from raw PCM blocks so meters can be fed without the pipeline.
"""

from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..core import constants
from ..core.errors import PipelineMessageError
from ..core.snapshot import Snapshot

# Offset of the momentary loudness formula; applied to unweighted mean-square
# levels, so reports approximate the pipeline filter rather than match it
LOUDNESS_OFFSET_DB: float = -0.691
MAX_HISTORY: int = 255


@dataclass(frozen=True)
class LoudnessReport:
    pipe: int
    momentary: tuple[float, ...]
    maxima: tuple[float, ...]

    @property
    def planes(self) -> int:
        return len(self.momentary)

    def to_snapshot(self) -> Snapshot:
        """Bars go on the shifted scale; peak markers stay raw levels."""
        return Snapshot(
            tuple(m + constants.level_offset for m in self.momentary),
            self.maxima,
        )

    def to_message(self) -> str:
        parts = [f"{self.pipe}:{self.planes}:"]
        for m, mx in zip(self.momentary, self.maxima):
            parts.append(f"{m:4.8f}:{mx:4.8f}:")
        return "".join(parts)


def parse_loudness_report(text: str) -> LoudnessReport:
    """Parse a loudness string into a ``LoudnessReport``.

    Raises:
        PipelineMessageError: On a wrong field count or non-numeric field.
    """
    fields = text.strip().split(":")
    if fields and fields[-1] == "":
        fields.pop()
    if len(fields) < 2:
        raise PipelineMessageError(f"loudness report too short: {text!r}")

    try:
        pipe = int(fields[0])
        planes = int(fields[1])
        numbers = [float(f) for f in fields[2:]]
    except ValueError as e:
        raise PipelineMessageError(f"bad loudness report {text!r}: {e}") from e

    if planes < 0 or len(numbers) != planes * 2:
        raise PipelineMessageError(
            f"loudness report announces {planes} planes but carries "
            f"{len(numbers)} levels: {text!r}"
        )
    if not all(math.isfinite(n) for n in numbers):
        raise PipelineMessageError(f"loudness report has infinite levels: {text!r}")

    return LoudnessReport(pipe, tuple(numbers[0::2]), tuple(numbers[1::2]))


class LoudnessWindow:
    """Compute loudness reports from int16 PCM blocks.

    Keeps one sliding window of momentary levels per plane; its length in
    blocks is derived from ``window_ms``, the sample rate and the block size.
    Levels are unweighted mean-square dB, an approximation of the pipeline
    filter's momentary loudness.

    Args:
        pipe: Pipe number stamped on every report.
        window_ms: Span over which the maximum is tracked.
    """

    def __init__(self, pipe: int = 0, window_ms: int = 1000) -> None:
        self.pipe = pipe
        self.window_ms = window_ms
        self._history: list[deque] = []

    def _window_length(self, samples: int, rate: int) -> int:
        n = (self.window_ms * rate) // (samples * 1000)
        return max(1, min(int(n), MAX_HISTORY))

    def push(self, block: np.ndarray, rate: int) -> Optional[LoudnessReport]:
        """Add one block shaped ``(samples, planes)`` and report.

        Returns:
            The report for this block, or None when a plane is silent (its
            level is infinite) or the block is empty. Silent blocks are not
            added to the window.
        """
        block = np.asarray(block)
        if block.ndim == 1:
            block = block[:, np.newaxis]
        samples, planes = block.shape
        if samples == 0 or planes == 0:
            return None

        x = block.astype(np.float64) / 32768.0
        mean_square = np.mean(x * x, axis=0)
        with np.errstate(divide="ignore"):
            levels = LOUDNESS_OFFSET_DB + 10.0 * np.log10(mean_square)
        if not np.all(np.isfinite(levels)):
            return None

        length = self._window_length(samples, rate)
        if len(self._history) != planes:
            self._history = [deque(maxlen=length) for _ in range(planes)]
        elif self._history[0].maxlen != length:
            self._history = [deque(h, maxlen=length) for h in self._history]

        for h, level in zip(self._history, levels):
            h.append(float(level))

        return LoudnessReport(
            self.pipe,
            tuple(float(v) for v in levels),
            tuple(max(h) for h in self._history),
        )
