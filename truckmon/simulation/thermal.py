"""Engine temperature dynamics per simulation tick.

First-order approach toward a load/speed/rain-dependent target:
    T_next = T_prev + (T_target - T_prev) * alpha + jitter
with an extra blend toward ambient while the truck is stationary. Switching
the engine off is a hard reset to ambient, not a decay.
"""

from typing import Optional

import numpy as np

from truckmon.config.constants import (
    AMBIENT_TEMP_C,
    LOAD_RANGE_TONS,
    SPEED_RANGE_KMH,
    STATIONARY_COOLING,
    STATIONARY_SPEED_KMH,
    TEMPERATURE_RANGE_C,
    THERMAL_JITTER_AMPLITUDE,
    THERMAL_RAIN_COOLING,
    THERMAL_SMOOTHING,
    THERMAL_TARGET_BASE,
    THERMAL_TARGET_LOAD_GAIN,
    THERMAL_TARGET_SPEED_GAIN,
)
from truckmon.config.schema import PhysicalState, clamp


def target_temperature(speed_kmh: float, load_tons: float, rain_active: bool) -> float:
    """Temperature the engine settles toward at the given operating point."""
    if speed_kmh < STATIONARY_SPEED_KMH:
        return AMBIENT_TEMP_C

    target = (
        THERMAL_TARGET_BASE
        + THERMAL_TARGET_LOAD_GAIN * (load_tons / LOAD_RANGE_TONS[1])
        + THERMAL_TARGET_SPEED_GAIN * (speed_kmh / SPEED_RANGE_KMH[1])
        - (THERMAL_RAIN_COOLING if rain_active else 0.0)
    )
    return clamp(target, *TEMPERATURE_RANGE_C)


class TemperatureDynamicsModel:
    """Advances engine temperature by one tick."""

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        smoothing: float = THERMAL_SMOOTHING,
        jitter_amplitude: float = THERMAL_JITTER_AMPLITUDE,
    ):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.smoothing = smoothing
        self.jitter_amplitude = jitter_amplitude

    def _jitter(self) -> float:
        if self.jitter_amplitude <= 0:
            return 0.0
        half = self.jitter_amplitude / 2.0
        return float(self.rng.uniform(-half, half))

    def next_temperature(
        self,
        temperature_c: float,
        speed_kmh: float,
        load_tons: float,
        rain_active: bool,
        engine_on: bool,
    ) -> float:
        """Compute the next-tick temperature without touching any state."""
        if not engine_on:
            return AMBIENT_TEMP_C

        target = target_temperature(speed_kmh, load_tons, rain_active)
        current = temperature_c + (target - temperature_c) * self.smoothing
        current += self._jitter()

        # Stationary trucks shed heat faster than the smoothing alone gives
        if speed_kmh < STATIONARY_SPEED_KMH:
            current += (AMBIENT_TEMP_C - current) * STATIONARY_COOLING

        return round(clamp(current, *TEMPERATURE_RANGE_C), 1)

    def apply(self, state: PhysicalState) -> float:
        """Write the next temperature into ``state`` and return it."""
        state.temperature_c = self.next_temperature(
            state.temperature_c,
            state.speed_kmh,
            state.load_tons,
            state.rain_active,
            state.engine_on,
        )
        return state.temperature_c
