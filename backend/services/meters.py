"""Registry of live level meters, one per viewer.

All meters share one asyncio event loop running in a daemon thread. Request
handlers never touch a meter directly: every call is marshalled onto the
loop, so animation state is only mutated from the loop thread.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Union

from backend.core.config import MAX_VIEWERS, meter_config_from_env
from backend.services.pipeline import ModuleError, parse_module_message
from backend.services.system import log_mem
from src.meter import (
    AsyncioScheduler,
    LevelMeter,
    LoudnessReport,
    MeterConfig,
    PilSurface,
    Snapshot,
)

logger = logging.getLogger(__name__)

CALL_TIMEOUT_SECONDS = 5.0


class RegistryFullError(RuntimeError):
    """Raised when a new viewer would exceed the viewer limit."""


class UnknownViewerError(KeyError):
    """Raised for operations on a viewer that has no meter."""


@dataclass
class Viewer:
    meter: LevelMeter
    surface: PilSurface
    status: str = ""


class MeterRegistry:
    """Owns the meters of every active viewer, keyed by viewer id.

    Args:
        config_factory: Builds the config of each new meter.
        max_viewers: Upper bound on simultaneously live meters.
    """

    def __init__(
        self,
        config_factory: Callable[[], MeterConfig] = meter_config_from_env,
        max_viewers: int = MAX_VIEWERS,
    ) -> None:
        self._config_factory = config_factory
        self.max_viewers = max_viewers
        self._viewers: dict[str, Viewer] = {}
        # Status notices for viewers that have no meter yet
        self._statuses: dict[str, str] = {}
        self._loop = asyncio.new_event_loop()
        self._scheduler = AsyncioScheduler(self._loop)
        self._thread = threading.Thread(
            target=self._loop.run_forever, name="meter-loop", daemon=True
        )
        self._closed = False
        self._thread.start()

    def _call(self, fn: Callable, *args):
        async def run():
            return fn(*args)

        future = asyncio.run_coroutine_threadsafe(run(), self._loop)
        return future.result(CALL_TIMEOUT_SECONDS)

    # -- loop thread only ------------------------------------------------

    def _get(self, viewer_id: str) -> Viewer:
        try:
            return self._viewers[viewer_id]
        except KeyError:
            raise UnknownViewerError(viewer_id) from None

    def _get_or_create(self, viewer_id: str) -> Viewer:
        viewer = self._viewers.get(viewer_id)
        if viewer is not None:
            return viewer
        if len(self._viewers) >= self.max_viewers:
            raise RegistryFullError(
                f"{len(self._viewers)} viewers already active (max {self.max_viewers})"
            )
        config = self._config_factory()
        surface = PilSurface(config.width, config.height)
        viewer = Viewer(
            LevelMeter(config, surface, self._scheduler),
            surface,
            self._statuses.pop(viewer_id, ""),
        )
        self._viewers[viewer_id] = viewer
        logger.info("viewer %s created (%d active)", viewer_id, len(self._viewers))
        log_mem(f"After creating viewer {viewer_id}")
        return viewer

    def _update(self, viewer_id: str, values, peaks) -> None:
        # Reject malformed snapshots before a viewer gets created for them
        snapshot = Snapshot.of(values, peaks)
        viewer = self._get_or_create(viewer_id)
        viewer.meter.update(snapshot.values, snapshot.peaks)

    def _set_status(self, viewer_id: str, status: str) -> None:
        viewer = self._viewers.get(viewer_id)
        if viewer is None:
            self._statuses[viewer_id] = status
        else:
            viewer.status = status

    def _remove(self, viewer_id: str) -> bool:
        had_status = self._statuses.pop(viewer_id, None) is not None
        viewer = self._viewers.pop(viewer_id, None)
        if viewer is None:
            return had_status
        viewer.meter.close()
        logger.info("viewer %s removed (%d active)", viewer_id, len(self._viewers))
        log_mem(f"After removing viewer {viewer_id}")
        return True

    def _describe(self, viewer_id: str) -> dict:
        if viewer_id not in self._viewers and viewer_id in self._statuses:
            return {
                "viewer_id": viewer_id,
                "channels": 0,
                "animating": False,
                "values": [],
                "peaks": [],
                "status": self._statuses[viewer_id],
            }
        viewer = self._get(viewer_id)
        current = viewer.meter.current
        return {
            "viewer_id": viewer_id,
            "channels": viewer.meter.channels,
            "animating": viewer.meter.animating,
            "values": list(current.values) if current else [],
            "peaks": list(current.peaks) if current else [],
            "status": viewer.status,
        }

    def _close_all(self) -> None:
        for viewer_id in list(self._viewers):
            self._remove(viewer_id)

    # -- any thread --------------------------------------------------------

    def update(
        self, viewer_id: str, values: Sequence[float], peaks: Sequence[float]
    ) -> None:
        """Push a snapshot to a viewer's meter, creating the meter if needed."""
        self._call(self._update, viewer_id, list(values), list(peaks))

    def handle_message(
        self, viewer_id: Optional[str], text: str
    ) -> tuple[str, Union[ModuleError, LoudnessReport]]:
        """Route one message from the pipeline to the matching viewer.

        Loudness reports update the meter; error notices become the viewer
        status. Without an explicit viewer id the pipe number picks one.

        Returns:
            The viewer id used and the parsed message.
        """
        message = parse_module_message(text)
        if isinstance(message, ModuleError):
            viewer_id = viewer_id or "default"
            logger.warning("pipeline error for viewer %s: %s", viewer_id, message.message)
            self._call(self._set_status, viewer_id, message.status_text())
            return viewer_id, message

        viewer_id = viewer_id or f"pipe-{message.pipe}"
        snapshot = message.to_snapshot()
        self._call(self._update, viewer_id, snapshot.values, snapshot.peaks)
        return viewer_id, message

    def frame_png(self, viewer_id: str) -> bytes:
        return self._call(lambda: self._get(viewer_id).surface.to_png())

    def describe(self, viewer_id: str) -> dict:
        return self._call(self._describe, viewer_id)

    def remove(self, viewer_id: str) -> bool:
        return self._call(self._remove, viewer_id)

    def viewer_ids(self) -> list[str]:
        """Ids of viewers holding a live meter."""
        return self._call(lambda: list(self._viewers))

    def close(self) -> None:
        """Tear down every meter and stop the loop thread."""
        if self._closed:
            return
        self._closed = True
        self._call(self._close_all)
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(CALL_TIMEOUT_SECONDS)
        self._loop.close()
