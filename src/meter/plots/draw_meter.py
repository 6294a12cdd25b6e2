"""Render one frame of a multi-bar level meter."""

from __future__ import annotations

import logging
from typing import Sequence

from ..core import constants
from ..core.config import MeterConfig
from ..io.surfaces import Surface

logger = logging.getLogger(__name__)

LABEL_FONT = f"bold {constants.font_size}px sans-serif"


def _fill_label(surface: Surface, text: str, x: float, y: float) -> None:
    # One bad label must never abort the frame
    try:
        surface.fill_text(text, x, y, LABEL_FONT, "center", constants.text_color)
    except Exception as e:
        logger.debug("label %r not drawn: %s", text, e)


def draw_meter(
    surface: Surface,
    config: MeterConfig,
    values: Sequence[float],
    peaks: Sequence[float],
) -> None:
    """Draw bars, peak markers and labels for every channel.

    Bars live in fixed-width slots from left to right. A bar whose pixel
    height is not larger than twice the border is skipped together with its
    peak marker. Values are on the shifted scale (level + offset) while peak
    markers are raw levels, so the offset is added back before scaling them.

    Args:
        surface: Target surface; resized only if its size differs from config.
        config: Meter geometry and palette.
        values: Bar value per channel.
        peaks: Peak marker per channel, same length as ``values``.
    """
    width, height = config.width, config.height
    if surface.size != (width, height):
        surface.set_size(width, height)

    surface.fill_rect(0, 0, width, height, config.background)

    border = constants.border
    graph_height = height
    if config.labels:
        graph_height -= constants.label_area

    bar_width = constants.bar_slot - config.margin * 2
    max_bar_height = graph_height - constants.top_padding
    scale = config.effective_max

    for i, (value, peak) in enumerate(zip(values, peaks)):
        bar_height = value / scale * max_bar_height
        x = config.margin + i * constants.bar_slot + border

        if bar_height > border * 2:
            surface.fill_rect(
                x,
                graph_height - bar_height + border,
                bar_width - border * 2,
                bar_height - border * 2,
                config.color_for(i),
            )
            peak_height = max_bar_height * (peak + constants.level_offset) / scale
            surface.fill_rect(
                x,
                graph_height - peak_height + border,
                bar_width - border * 2,
                constants.peak_thickness,
                constants.peak_color,
            )

        center = i * constants.bar_slot + constants.bar_slot / 2
        _fill_label(
            surface,
            str(int(value - constants.level_offset)),
            center,
            graph_height - bar_height - 10,
        )

        label = config.label_for(i)
        if label:
            _fill_label(surface, label, center, height - 10)
