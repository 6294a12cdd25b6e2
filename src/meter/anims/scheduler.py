"""Timed callback schedulers driving meter animations.

Every scheduler runs callbacks on a single logical thread and hands back a
``TimerHandle`` so the owner can cancel a pending tick on teardown.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from typing import Callable, Optional, Protocol


class TimerHandle:
    """Cancelable reference to one pending callback."""

    def __init__(self, on_cancel: Optional[Callable[[], None]] = None) -> None:
        self._on_cancel = on_cancel
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._on_cancel is not None:
            self._on_cancel()


class Scheduler(Protocol):
    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        ...


class AsyncioScheduler:
    """Schedule callbacks on an asyncio event loop.

    Args:
        loop: Loop to schedule on. Defaults to the loop running when
            ``call_later`` is first used.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        handle = self.loop.call_later(max(delay_ms, 0.0) / 1000.0, callback)
        return TimerHandle(handle.cancel)


class ManualScheduler:
    """Deterministic scheduler driven by a virtual millisecond clock.

    Nothing runs until ``advance`` or ``run_until_idle`` is called, which
    makes animation timing reproducible in tests and offline rendering.
    """

    def __init__(self) -> None:
        self.now_ms: float = 0.0
        self._queue: list[tuple[float, int, TimerHandle, Callable[[], None]]] = []
        self._seq = itertools.count()

    @property
    def pending(self) -> int:
        return sum(1 for _, _, handle, _ in self._queue if not handle.cancelled)

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle()
        due = self.now_ms + max(delay_ms, 0.0)
        heapq.heappush(self._queue, (due, next(self._seq), handle, callback))
        return handle

    def _run_next(self, until: Optional[float]) -> bool:
        while self._queue:
            due, _, handle, callback = self._queue[0]
            if until is not None and due > until:
                return False
            heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now_ms = max(self.now_ms, due)
            callback()
            return True
        return False

    def advance(self, ms: float) -> int:
        """Move the clock forward by ``ms``, running every callback that falls due.

        Returns:
            Number of callbacks run.
        """
        until = self.now_ms + ms
        ran = 0
        while self._run_next(until):
            ran += 1
        self.now_ms = until
        return ran

    def run_until_idle(self, max_callbacks: int = 100_000) -> int:
        """Run callbacks in due order until none are pending.

        Raises:
            RuntimeError: If more than ``max_callbacks`` callbacks run, which
                means something keeps rescheduling itself forever.
        """
        ran = 0
        while self._run_next(None):
            ran += 1
            if ran > max_callbacks:
                raise RuntimeError(f"scheduler still busy after {max_callbacks} callbacks")
        return ran
