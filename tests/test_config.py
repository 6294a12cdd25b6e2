"""
Configuration and Snapshot Tests

Tests for MeterConfig validation, immutability and Snapshot invariants.
"""

import dataclasses

import pytest

from src.meter import ConfigurationError, InvariantViolation, MeterConfig, Snapshot
from src.meter.core.colors import to_rgb
from src.meter.core.fonts import parse_font


class TestMeterConfig:
    """Tests for MeterConfig construction."""

    def test_defaults(self):
        config = MeterConfig()
        assert (config.width, config.height) == (300, 150)
        assert config.colors == ("green", "blue")
        assert config.effective_max == 120.0
        assert config.tick_delay_ms == 10.0

    @pytest.mark.parametrize("width,height", [(0, 150), (300, 0), (-1, 150), (300, -5)])
    def test_non_positive_geometry(self, width, height):
        with pytest.raises(ConfigurationError):
            MeterConfig(width=width, height=height)

    def test_empty_palette(self):
        with pytest.raises(ConfigurationError):
            MeterConfig(colors=())

    def test_unknown_color(self):
        with pytest.raises(ConfigurationError):
            MeterConfig(colors=("green", "not-a-color"))

    def test_bad_steps(self):
        with pytest.raises(ConfigurationError):
            MeterConfig(steps=0)

    def test_bad_max_value(self):
        with pytest.raises(ConfigurationError):
            MeterConfig(max_value=-10)

    def test_bad_margin(self):
        with pytest.raises(ConfigurationError):
            MeterConfig(margin=25)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            MeterConfig(width=0)

    def test_fixed_max_value(self):
        assert MeterConfig(max_value=60).effective_max == 60.0

    def test_lists_become_tuples(self):
        config = MeterConfig(colors=["red"], labels=["L", "R"])
        assert config.colors == ("red",)
        assert config.labels == ("L", "R")

    def test_immutable(self):
        config = MeterConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.width = 10

    def test_replace_revalidates(self):
        config = MeterConfig()
        assert dataclasses.replace(config, width=400).width == 400
        with pytest.raises(ConfigurationError):
            dataclasses.replace(config, width=0)

    def test_palette_is_cyclic(self):
        config = MeterConfig(colors=("green", "blue"))
        assert [config.color_for(i) for i in range(4)] == [
            "green",
            "blue",
            "green",
            "blue",
        ]

    def test_missing_labels(self):
        config = MeterConfig(labels=("L", ""))
        assert config.label_for(0) == "L"
        assert config.label_for(1) is None
        assert config.label_for(5) is None


class TestSnapshot:
    """Tests for Snapshot invariants."""

    def test_stores_float_tuples(self):
        snap = Snapshot.of([1, 2], [3, 4])
        assert snap.values == (1.0, 2.0)
        assert snap.peaks == (3.0, 4.0)
        assert snap.channels == 2

    def test_length_mismatch(self):
        with pytest.raises(InvariantViolation):
            Snapshot.of([1, 2, 3], [1, 2])

    def test_non_numeric(self):
        with pytest.raises(InvariantViolation):
            Snapshot.of(["loud"], [1])

    def test_non_finite(self):
        with pytest.raises(InvariantViolation):
            Snapshot.of([float("nan")], [0])

    def test_empty_is_valid(self):
        assert Snapshot.of([], []).channels == 0


class TestHelpers:
    """Tests for color and font helpers."""

    def test_named_and_hex_colors(self):
        assert to_rgb("green") == (0, 128, 0)
        assert to_rgb("#333") == (51, 51, 51)

    def test_color_cache(self):
        cache = {}
        to_rgb("#FF0000", cache)
        assert cache == {"#FF0000": (255, 0, 0)}

    def test_parse_font(self):
        assert parse_font("bold 12px sans-serif") == (True, 12, "sans-serif")
        assert parse_font("10px serif") == (False, 10, "serif")

    def test_parse_font_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_font("large")
