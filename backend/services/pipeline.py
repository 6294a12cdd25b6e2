"""Message contract with the native media pipeline.

Outbound control records start, stop or shut down the stream; inbound
strings are either loudness reports or ``error:`` notices.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass
from typing import Union

from src.meter import LoudnessReport, PipelineMessageError, parse_loudness_report

logger = logging.getLogger(__name__)

MODES = ("udp", "ssm", "amt", "any")
ACTIONS = ("set_uri", "stop", "quit")
ERROR_PREFIX = "error:"


@dataclass(frozen=True)
class ModuleError:
    message: str

    def status_text(self) -> str:
        return (
            f"ERROR {self.message}. "
            "Please check that the player is allowed to open multicast sockets."
        )


def build_set_uri(
    mode: str, source: str, group: str, port: Union[int, str], relay: str = ""
) -> dict:
    """Build the record asking the pipeline to play ``source@group:port``.

    Raises:
        PipelineMessageError: On an unknown mode, missing group or bad port.
    """
    if mode not in MODES:
        raise PipelineMessageError(f"unknown mode {mode!r}, expected one of {MODES}")
    if not group:
        raise PipelineMessageError("multicast group address is required")
    try:
        port_num = int(port)
    except (TypeError, ValueError) as e:
        raise PipelineMessageError(f"bad multicast port {port!r}") from e
    if not 0 < port_num < 65536:
        raise PipelineMessageError(f"multicast port out of range: {port_num}")

    return {
        "message": "set_uri",
        "mode": mode,
        "value": f"{source or ''}@{group}:{port_num}",
        "relay": relay or "",
    }


def build_stop() -> dict:
    return {"message": "stop"}


def build_quit() -> dict:
    return {"message": "quit"}


def build_command(action: str, data: dict) -> dict:
    """Build a control record from a request body."""
    if action == "set_uri":
        return build_set_uri(
            data.get("mode"),
            data.get("source", ""),
            data.get("group", ""),
            data.get("port"),
            data.get("relay", ""),
        )
    if action == "stop":
        return build_stop()
    if action == "quit":
        return build_quit()
    raise PipelineMessageError(f"unknown action {action!r}, expected one of {ACTIONS}")


def parse_module_message(text: str) -> Union[ModuleError, LoudnessReport]:
    if not isinstance(text, str):
        raise PipelineMessageError("module message must be a string")
    if text.startswith(ERROR_PREFIX):
        return ModuleError(text[len(ERROR_PREFIX):].strip())
    return parse_loudness_report(text)


class CommandOutbox:
    """Bounded queue of control records waiting to be picked up.

    The oldest record is dropped when the queue is full.
    """

    def __init__(self, maxlen: int) -> None:
        self._items: deque = deque(maxlen=maxlen)
        self._lock = threading.Lock()

    def push(self, command: dict) -> None:
        with self._lock:
            if len(self._items) == self._items.maxlen:
                logger.warning("outbox full, dropping %s", self._items[0])
            self._items.append(command)

    def drain(self) -> list[dict]:
        with self._lock:
            items = list(self._items)
            self._items.clear()
        return items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
