"""Color utilities for meters."""

from PIL import ImageColor

from .errors import ConfigurationError


def to_rgb(color: str, cache: dict | None = None) -> tuple:
    """Resolve a CSS-style color name or hex string to an RGB tuple.

    Args:
        color: Color as accepted by a canvas ``fillStyle`` ("green", "#333").
        cache: Optional dict[str, tuple] cache to reuse results.

    Returns:
        RGB tuple (0-255 each).

    Raises:
        ConfigurationError: If Pillow does not recognise the color.
    """
    if cache is not None and color in cache:
        return cache[color]

    try:
        rgb = ImageColor.getrgb(color)[:3]
    except ValueError as e:
        raise ConfigurationError(f"unknown color {color!r}") from e

    if cache is not None:
        cache[color] = rgb
    return rgb
