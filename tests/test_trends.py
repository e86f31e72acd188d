"""Tests for the trend sample recorder."""

import numpy as np
import pytest

from truckmon.config.constants import TREND_CAPACITY
from truckmon.simulation.trends import TrendRecorder


class TestTrendRecorder:
    def test_capacity(self, rng):
        recorder = TrendRecorder(rng=rng)
        for i in range(50):
            recorder.record(38.0, 200.0 - i)
        samples = recorder.recent()
        assert len(samples) == TREND_CAPACITY
        # oldest kept sample is the 31st recorded
        assert samples[0].fuel_level == pytest.approx(170.0, abs=0.3)

    def test_jitter_bounds_and_rounding(self, rng):
        recorder = TrendRecorder(rng=rng)
        for _ in range(200):
            sample = recorder.record(37.6, 120.0)
            assert abs(sample.tire_pressure - 38.0) <= 0.15 + 0.05 + 1e-9
            assert abs(sample.fuel_level - 120.0) <= 0.2 + 0.05 + 1e-9
            assert sample.tire_pressure == round(sample.tire_pressure, 1)
            assert sample.fuel_level == round(sample.fuel_level, 1)

    def test_values_clamped(self, rng):
        recorder = TrendRecorder(rng=rng)
        for _ in range(100):
            low = recorder.record(25.0, 0.0)
            assert low.tire_pressure >= 30.0
            assert low.fuel_level >= 0.0
            high = recorder.record(45.0, 300.0)
            assert high.tire_pressure <= 45.0
            assert high.fuel_level <= 300.0

    def test_record_state_uses_state_timestamp(self, rng, nominal_state):
        recorder = TrendRecorder(rng=rng)
        sample = recorder.record_state(nominal_state)
        assert sample.timestamp == nominal_state.timestamp

    def test_deterministic_with_seed(self):
        a = TrendRecorder(rng=np.random.default_rng(5))
        b = TrendRecorder(rng=np.random.default_rng(5))
        assert a.record(38.0, 100.0) == b.record(38.0, 100.0)

    def test_clear(self, rng):
        recorder = TrendRecorder(rng=rng)
        recorder.record(38.0, 100.0)
        recorder.clear()
        assert recorder.recent() == []
