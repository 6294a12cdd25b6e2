"""Centralized configuration for the backend.

Loads environment variables, sets defaults, and exposes constants
used across services and routes.
"""

import os

from dotenv import load_dotenv

from src.meter import MeterConfig
from src.meter.core import constants

load_dotenv("env/.env")

ENV = os.getenv("ENV", "local")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Meter defaults
METER_WIDTH = int(os.getenv("METER_WIDTH", str(constants.width)))
METER_HEIGHT = int(os.getenv("METER_HEIGHT", str(constants.height)))
METER_MARGIN = int(os.getenv("METER_MARGIN", str(constants.margin)))
METER_COLORS = os.getenv("METER_COLORS", ",".join(constants.colors))
METER_BACKGROUND = os.getenv("METER_BACKGROUND", constants.background)
METER_LABELS = os.getenv("METER_LABELS", "")
METER_MAX_VALUE = os.getenv("METER_MAX_VALUE")
METER_INTERVAL_MS = float(os.getenv("METER_INTERVAL_MS", str(constants.interval_ms)))
METER_STEPS = int(os.getenv("METER_STEPS", str(constants.steps)))

# Viewer/session limits
MAX_VIEWERS = int(os.getenv("MAX_VIEWERS", "8"))
OUTBOX_SIZE = int(os.getenv("OUTBOX_SIZE", "64"))


def _split(value: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())


def meter_config_from_env() -> MeterConfig:
    """Build the ``MeterConfig`` every new viewer gets."""
    return MeterConfig(
        width=METER_WIDTH,
        height=METER_HEIGHT,
        margin=METER_MARGIN,
        colors=_split(METER_COLORS),
        background=METER_BACKGROUND,
        labels=_split(METER_LABELS),
        max_value=float(METER_MAX_VALUE) if METER_MAX_VALUE else None,
        interval_ms=METER_INTERVAL_MS,
        steps=METER_STEPS,
    )
