"""Snapshot of per-channel levels as delivered by a sample source."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from .errors import InvariantViolation


@dataclass(frozen=True)
class Snapshot:
    """Bar values and peak markers captured at one point in time.

    Both sequences are stored as tuples of floats and must have one entry
    per channel.
    """

    values: tuple[float, ...]
    peaks: tuple[float, ...]

    def __post_init__(self) -> None:
        try:
            values = tuple(float(v) for v in self.values)
            peaks = tuple(float(p) for p in self.peaks)
        except (TypeError, ValueError) as e:
            raise InvariantViolation(f"snapshot values must be numeric: {e}") from e

        if len(values) != len(peaks):
            raise InvariantViolation(
                f"got {len(values)} values but {len(peaks)} peaks"
            )
        if not all(math.isfinite(x) for x in values + peaks):
            raise InvariantViolation("snapshot values must be finite")

        object.__setattr__(self, "values", values)
        object.__setattr__(self, "peaks", peaks)

    @classmethod
    def of(cls, values: Sequence[float], peaks: Sequence[float]) -> "Snapshot":
        return cls(tuple(values), tuple(peaks))

    @property
    def channels(self) -> int:
        return len(self.values)
