"""Fuel theft / leak detection from consecutive fuel readings.

The fuel delta is compared against the burn expected at the current speed.
Only drops steeper than 0.5 L are considered; the first matching pattern
decides the score:
    stopped truck losing fuel        -> |delta| * 20
    engine off and losing fuel       -> |delta| * 25
    drop beyond 3x expected burn     -> |delta - expected| * 15
Scores are clamped to 0-100.
"""

import logging
from collections import deque
from datetime import datetime
from typing import Deque, List, Optional

from truckmon.config.constants import (
    ANOMALY_DROP_GATE,
    ANOMALY_ENGINE_OFF_DROP,
    ANOMALY_ENGINE_OFF_WEIGHT,
    ANOMALY_EXCESS_WEIGHT,
    ANOMALY_EXPECTED_MULTIPLIER,
    ANOMALY_STOPPED_DROP,
    ANOMALY_STOPPED_WEIGHT,
    FUEL_HISTORY_CAPACITY,
)
from truckmon.config.schema import FuelAnomalyResult, FuelHistorySample, PhysicalState, clamp, utc_now
from truckmon.simulation.fuel import burn_per_tick

logger = logging.getLogger(__name__)


def expected_consumption(speed_kmh: float, engine_on: bool) -> float:
    """Expected fuel delta for one reading (negative = consumption)."""
    return -burn_per_tick(speed_kmh) if engine_on else 0.0


def score_fuel_delta(
    previous_fuel: float,
    current_fuel: float,
    speed_kmh: float,
    engine_on: bool,
) -> FuelAnomalyResult:
    """Classify one fuel change as normal or suspicious."""
    delta = current_fuel - previous_fuel
    expected = expected_consumption(speed_kmh, engine_on)

    anomaly = False
    score = 0.0
    if delta < ANOMALY_DROP_GATE:
        if speed_kmh == 0 and delta < ANOMALY_STOPPED_DROP:
            anomaly = True
            score = abs(delta) * ANOMALY_STOPPED_WEIGHT
        elif not engine_on and delta < ANOMALY_ENGINE_OFF_DROP:
            anomaly = True
            score = abs(delta) * ANOMALY_ENGINE_OFF_WEIGHT
        elif delta < expected * ANOMALY_EXPECTED_MULTIPLIER:
            anomaly = True
            score = abs(delta - expected) * ANOMALY_EXCESS_WEIGHT

    return FuelAnomalyResult(
        is_anomaly=anomaly,
        score=clamp(score, 0.0, 100.0),
        delta=delta,
        expected_consumption=expected,
    )


class FuelAnomalyDetector:
    """Tracks the previous fuel reading and keeps a short display history."""

    def __init__(self, capacity: int = FUEL_HISTORY_CAPACITY):
        self.previous_fuel: Optional[float] = None
        self.history: Deque[FuelHistorySample] = deque(maxlen=capacity)
        self.last_result = FuelAnomalyResult(False, 0.0, 0.0, 0.0)

    def evaluate(
        self,
        fuel_level: float,
        speed_kmh: float,
        engine_on: bool,
        timestamp: Optional[datetime] = None,
    ) -> FuelAnomalyResult:
        """Score the change since the last reading and record a history sample.

        The first reading has no predecessor and is compared against itself.
        """
        previous = fuel_level if self.previous_fuel is None else self.previous_fuel
        result = score_fuel_delta(previous, fuel_level, speed_kmh, engine_on)

        if result.is_anomaly:
            logger.warning(
                f"Fuel anomaly: {previous:.1f}L -> {fuel_level:.1f}L "
                f"(delta={result.delta:.2f}, expected={result.expected_consumption:.3f}, "
                f"score={result.score:.1f})"
            )

        self.history.append(FuelHistorySample(
            timestamp=timestamp or utc_now(),
            fuel_level=fuel_level,
            is_anomaly=result.is_anomaly,
        ))
        self.previous_fuel = fuel_level
        self.last_result = result
        return result

    def evaluate_state(self, state: PhysicalState) -> FuelAnomalyResult:
        return self.evaluate(state.fuel_level, state.speed_kmh, state.engine_on, state.timestamp)

    def recent(self) -> List[FuelHistorySample]:
        """History samples, oldest first."""
        return list(self.history)

    def reset(self) -> None:
        self.previous_fuel = None
        self.history.clear()
        self.last_result = FuelAnomalyResult(False, 0.0, 0.0, 0.0)
