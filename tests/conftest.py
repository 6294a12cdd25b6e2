"""Shared fixtures for meter tests."""

import pytest

from src.meter import LevelMeter, ManualScheduler, MeterConfig, RecordingSurface


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def surface():
    return RecordingSurface(300, 150)


@pytest.fixture
def config():
    # 10 steps over 100 ms -> one tick every 10 ms
    return MeterConfig(interval_ms=100, steps=10)


@pytest.fixture
def meter(config, surface, scheduler):
    m = LevelMeter(config, surface, scheduler)
    yield m
    m.close()
