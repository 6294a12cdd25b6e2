"""Font helpers for meters."""

import os
import re

from PIL import ImageFont

_FONT_RE = re.compile(r"^\s*(?:(bold|normal)\s+)?(\d+)px\s+(.+?)\s*$")


def parse_font(font: str) -> tuple[bool, int, str]:
    """Split a canvas font string such as ``"bold 12px sans-serif"``.

    Returns:
        tuple[bool, int, str]: (bold, size_px, family).

    Raises:
        ValueError: If the string is not of the form ``[weight] <n>px <family>``.
    """
    match = _FONT_RE.match(font)
    if match is None:
        raise ValueError(f"unsupported font {font!r}")
    weight, size, family = match.groups()
    return weight == "bold", int(size), family


def get_font(font: str, cache: dict | None = None):
    """Load a Pillow font matching a canvas font string.

    Uses the Montserrat faces bundled under assets/fonts when present and
    falls back to Pillow's built-in font otherwise.
    """
    if cache is not None and font in cache:
        return cache[font]

    bold, size, _family = parse_font(font)
    face = "Montserrat-Bold.ttf" if bold else "Montserrat-SemiBold.ttf"
    font_path = os.path.join(os.getcwd(), "assets", "fonts", face)
    if os.path.exists(font_path):
        loaded = ImageFont.truetype(font_path, size)
    else:
        loaded = ImageFont.load_default(size=size)

    if cache is not None:
        cache[font] = loaded
    return loaded
