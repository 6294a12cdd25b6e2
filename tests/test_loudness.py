"""
Loudness Report Tests

Tests for parsing pipeline loudness strings and for computing reports
from PCM blocks.
"""

import math

import numpy as np
import pytest

from src.meter import (
    LoudnessReport,
    LoudnessWindow,
    PipelineMessageError,
    parse_loudness_report,
)
from src.meter.io.loudness import LOUDNESS_OFFSET_DB

RATE = 48000
BLOCK = 4800  # 100 ms -> ten blocks per one-second window


def _level(amplitude: int) -> float:
    x = amplitude / 32768.0
    return LOUDNESS_OFFSET_DB + 10.0 * math.log10(x * x)


def _block(*amplitudes: int) -> np.ndarray:
    return np.tile(np.array(amplitudes, dtype=np.int16), (BLOCK, 1))


class TestParseLoudnessReport:
    """Tests for parse_loudness_report."""

    def test_two_planes(self):
        report = parse_loudness_report(
            "0:2:-23.50000000:-20.00000000:-30.00000000:-25.00000000:"
        )
        assert report.pipe == 0
        assert report.planes == 2
        assert report.momentary == (-23.5, -30.0)
        assert report.maxima == (-20.0, -25.0)

    def test_without_trailing_colon(self):
        report = parse_loudness_report("3:1:-12.5:-10")
        assert report.pipe == 3
        assert report.momentary == (-12.5,)

    @pytest.mark.parametrize(
        "text",
        ["", "0", "0:2:-23:-20:", "x:1:-1:-1:", "0:1:loud:-1:", "0:1:inf:-1:"],
    )
    def test_malformed(self, text):
        with pytest.raises(PipelineMessageError):
            parse_loudness_report(text)

    def test_message_round_trip(self):
        report = LoudnessReport(1, (-23.25, -18.0), (-20.5, -15.0))
        assert parse_loudness_report(report.to_message()) == report

    def test_snapshot_shifts_bars_only(self):
        snap = LoudnessReport(0, (-23.5, -30.0), (-20.0, -25.0)).to_snapshot()
        assert snap.values == (76.5, 70.0)
        assert snap.peaks == (-20.0, -25.0)


class TestLoudnessWindow:
    """Tests for LoudnessWindow."""

    def test_momentary_level(self):
        report = LoudnessWindow(pipe=2).push(_block(16384), RATE)
        assert report.pipe == 2
        assert report.momentary[0] == pytest.approx(_level(16384))
        assert report.maxima[0] == pytest.approx(_level(16384))

    def test_planes_measured_separately(self):
        report = LoudnessWindow().push(_block(16384, 1638), RATE)
        assert report.planes == 2
        assert report.momentary[0] == pytest.approx(_level(16384))
        assert report.momentary[1] == pytest.approx(_level(1638))

    def test_mono_block(self):
        report = LoudnessWindow().push(np.full(BLOCK, 8192, dtype=np.int16), RATE)
        assert report.planes == 1

    def test_silence_skipped(self):
        window = LoudnessWindow()
        assert window.push(_block(0, 16384), RATE) is None
        assert window.push(np.zeros((0, 2), dtype=np.int16), RATE) is None

    def test_peak_holds_for_window(self):
        window = LoudnessWindow(window_ms=1000)
        window.push(_block(16384), RATE)
        for _ in range(9):
            report = window.push(_block(1638), RATE)
        assert report.maxima[0] == pytest.approx(_level(16384))

        report = window.push(_block(1638), RATE)
        assert report.maxima[0] == pytest.approx(_level(1638))

    def test_report_feeds_meter_snapshot(self):
        report = LoudnessWindow().push(_block(16384), RATE)
        snap = report.to_snapshot()
        assert snap.values[0] == pytest.approx(100 + _level(16384))
