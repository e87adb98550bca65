"""Shared fixtures for the backend tests."""
import random

import pytest

from config import CollectorConfig, SegmenterConfig, Settings, StabilizerConfig
from phrases import PhraseSynthesizer, build_default_table


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def table():
    return build_default_table()


@pytest.fixture
def synthesizer(table):
    return PhraseSynthesizer(table, rng=random.Random(7))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def test_settings():
    # long check interval so only explicit ticks drive the pause check
    return Settings(
        stabilizer=StabilizerConfig(prediction_threshold=0.6, consecutive_frames_required=5),
        collector=CollectorConfig(debounce_window=1.5),
        segmenter=SegmenterConfig(pause_threshold=3.0, continuous=True),
        pause_check_interval=60.0,
    )
