"""Drawing surfaces a level meter renders onto.

A surface only needs to accept mutation primitives: resize, fill a
rectangle and fill text at explicit pixel coordinates.
"""

from __future__ import annotations

from io import BytesIO
from typing import NamedTuple, Protocol

from PIL import Image, ImageDraw

from ..core.cache import color_cache, font_cache
from ..core.colors import to_rgb
from ..core.fonts import get_font

# Canvas textAlign -> Pillow anchor on the alphabetic baseline
_ANCHORS = {"left": "ls", "start": "ls", "center": "ms", "right": "rs", "end": "rs"}


class Surface(Protocol):
    @property
    def size(self) -> tuple[int, int]:
        ...

    def set_size(self, width: int, height: int) -> None:
        ...

    def fill_rect(self, x: float, y: float, w: float, h: float, color: str) -> None:
        ...

    def fill_text(
        self, text: str, x: float, y: float, font: str, align: str, color: str
    ) -> None:
        ...


class DrawOp(NamedTuple):
    kind: str
    args: tuple


class RecordingSurface:
    """Surface that records every primitive instead of drawing it.

    Args:
        width: Initial width.
        height: Initial height.
    """

    def __init__(self, width: int = 0, height: int = 0) -> None:
        self._size = (width, height)
        self.ops: list[DrawOp] = []

    @property
    def size(self) -> tuple[int, int]:
        return self._size

    def set_size(self, width: int, height: int) -> None:
        self._size = (width, height)
        self.ops.append(DrawOp("set_size", (width, height)))

    def fill_rect(self, x, y, w, h, color) -> None:
        self.ops.append(DrawOp("fill_rect", (x, y, w, h, color)))

    def fill_text(self, text, x, y, font, align, color) -> None:
        self.ops.append(DrawOp("fill_text", (text, x, y, font, align, color)))

    def of_kind(self, kind: str) -> list[tuple]:
        return [op.args for op in self.ops if op.kind == kind]

    def clear(self) -> None:
        self.ops.clear()


class PilSurface:
    """Surface backed by a Pillow RGB image.

    Resizing replaces the image, the same way resizing an HTML canvas
    clears it.
    """

    def __init__(self, width: int = 1, height: int = 1) -> None:
        self.image = Image.new("RGB", (width, height), "white")
        self._draw = ImageDraw.Draw(self.image)

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size

    def set_size(self, width: int, height: int) -> None:
        self.image = Image.new("RGB", (width, height), "white")
        self._draw = ImageDraw.Draw(self.image)

    def fill_rect(self, x, y, w, h, color) -> None:
        if w <= 0 or h <= 0:
            return
        x0, y0 = round(x), round(y)
        x1, y1 = round(x + w) - 1, round(y + h) - 1
        if x1 < x0 or y1 < y0:
            return
        self._draw.rectangle((x0, y0, x1, y1), fill=to_rgb(color, color_cache))

    def fill_text(self, text, x, y, font, align, color) -> None:
        self._draw.text(
            (x, y),
            str(text),
            fill=to_rgb(color, color_cache),
            font=get_font(font, font_cache),
            anchor=_ANCHORS[align],
        )

    def to_png(self) -> bytes:
        with BytesIO() as buf:
            self.image.save(buf, format="PNG")
            return buf.getvalue()
