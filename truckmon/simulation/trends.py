"""Rolling trend samples (tire pressure and fuel) for the dashboard chart."""

from collections import deque
from datetime import datetime
from typing import Deque, List, Optional

import numpy as np

from truckmon.config.constants import (
    FUEL_RANGE_L,
    TREND_CAPACITY,
    TREND_FUEL_JITTER,
    TREND_PRESSURE_JITTER,
    TREND_PRESSURE_RANGE_PSI,
)
from truckmon.config.schema import PhysicalState, TrendSample, clamp, utc_now


class TrendRecorder:
    """Keeps the last N jittered readings, like a noisy sensor feed."""

    def __init__(self, rng: Optional[np.random.Generator] = None, capacity: int = TREND_CAPACITY):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.samples: Deque[TrendSample] = deque(maxlen=capacity)

    def record(
        self,
        avg_tire_pressure: float,
        fuel_level: float,
        timestamp: Optional[datetime] = None,
    ) -> TrendSample:
        pressure_jitter = (self.rng.random() - 0.5) * TREND_PRESSURE_JITTER
        fuel_jitter = (self.rng.random() - 0.5) * TREND_FUEL_JITTER

        pressure = clamp(round(avg_tire_pressure) + pressure_jitter, *TREND_PRESSURE_RANGE_PSI)
        fuel = clamp(fuel_level + fuel_jitter, *FUEL_RANGE_L)

        sample = TrendSample(
            timestamp=timestamp or utc_now(),
            tire_pressure=round(pressure, 1),
            fuel_level=round(fuel, 1),
        )
        self.samples.append(sample)
        return sample

    def record_state(self, state: PhysicalState) -> TrendSample:
        return self.record(state.average_tire_pressure, state.fuel_level, state.timestamp)

    def recent(self) -> List[TrendSample]:
        return list(self.samples)

    def clear(self) -> None:
        self.samples.clear()
