"""Dashboard status indicators: per-widget status and engine RPM readout."""

from typing import Dict

from truckmon.config.constants import IDLE_RPM, RPM_PER_KMH
from truckmon.config.schema import PhysicalState


def engine_rpm(speed_kmh: float, engine_on: bool) -> int:
    """Displayed engine RPM (idle plus a linear speed term)."""
    if not engine_on:
        return 0
    return int(round(IDLE_RPM + speed_kmh * RPM_PER_KMH))


def _status(value: float, critical, warning) -> str:
    if critical(value):
        return "critical"
    if warning(value):
        return "warning"
    return "good"


def compute_indicators(state: PhysicalState) -> Dict[str, dict]:
    """Status of each dashboard widget.

    Returns:
        Dict keyed by widget name with 'value' and 'status'
        ("good", "warning" or "critical").
    """
    avg_pressure = round(state.average_tire_pressure)
    return {
        "tire_pressure": {
            "value": avg_pressure,
            "status": _status(avg_pressure, lambda v: v < 30, lambda v: v < 35),
        },
        "fuel": {
            "value": state.fuel_level,
            "status": _status(state.fuel_level, lambda v: v < 20, lambda v: v < 40),
        },
        "load": {
            "value": state.load_tons,
            "status": _status(state.load_tons, lambda v: False, lambda v: v > 25),
        },
        "temperature": {
            "value": state.temperature_c,
            "status": _status(state.temperature_c, lambda v: v > 90, lambda v: v > 75),
        },
        "speed": {
            "value": state.speed_kmh,
            "status": _status(state.speed_kmh, lambda v: False, lambda v: v > 100),
        },
        "weather": {
            "value": "Rainy" if state.rain_active else "Clear",
            "status": "warning" if state.rain_active else "good",
        },
        "engine": {
            "value": engine_rpm(state.speed_kmh, state.engine_on),
            "status": "good" if state.engine_on else "off",
        },
    }
