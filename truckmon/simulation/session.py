"""One truck's simulation session: state, control inputs, ticks, and derived outputs."""

import logging
import math
from typing import Dict, List, Optional

import numpy as np

from truckmon.alerts.advisory import advise_state
from truckmon.alerts.alert_engine import alert_summary, evaluate_alerts
from truckmon.config.constants import TIRE_POSITIONS, TIRE_PRESSURE_RANGE_PSI
from truckmon.config.schema import (
    Alert,
    FuelAnomalyResult,
    FuelEmptyEvent,
    PhysicalState,
    SimulationConfig,
    TireHealthReport,
    clamp,
    limits,
    severity_counts,
)
from truckmon.features.indicators import compute_indicators
from truckmon.health.fuel_anomaly import FuelAnomalyDetector
from truckmon.health.tire_health import score_state
from truckmon.simulation.fuel import FuelConsumptionModel
from truckmon.simulation.scheduler import SimulationScheduler
from truckmon.simulation.thermal import TemperatureDynamicsModel
from truckmon.simulation.trends import TrendRecorder

logger = logging.getLogger(__name__)

# camelCase keys exchanged with the dashboard backend -> PhysicalState fields
SNAPSHOT_FIELDS = {
    "engineOn": "engine_on",
    "speed": "speed_kmh",
    "load": "load_tons",
    "fuelLevel": "fuel_level",
    "temperature": "temperature_c",
    "tirePressures": "tire_pressures_psi",
    "rainActive": "rain_active",
}

_FLAG_FIELDS = {"engine_on", "rain_active"}
_NUMERIC_FIELDS = {"speed_kmh", "load_tons", "fuel_level", "temperature_c"}


def _as_number(name: str, value) -> float:
    if isinstance(value, bool):
        raise TypeError(f"{name} must be a number, got a boolean")
    number = float(value)
    if math.isnan(number):
        raise ValueError(f"{name} must not be NaN")
    return number


class TruckSession:
    """Owns the single PhysicalState of one truck and everything derived from it.

    Control inputs and simulation ticks are the only writers. After each
    write the readers (alerts, tire health, fuel anomaly, trends) run against
    the fully updated state. The advisory runs on its own slower schedule.
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        scheduler: Optional[SimulationScheduler] = None,
        truck_id: int = 1,
    ):
        self.config = config or SimulationConfig()
        self.truck_id = truck_id
        self.scheduler = scheduler or SimulationScheduler()
        self._start_time = self.scheduler.clock.now()

        thermal_seed, trend_seed = np.random.SeedSequence(self.config.seed).spawn(2)
        self.thermal = TemperatureDynamicsModel(
            rng=np.random.default_rng(thermal_seed),
            smoothing=self.config.smoothing,
            jitter_amplitude=self.config.jitter_amplitude,
        )
        self.fuel_model = FuelConsumptionModel()
        self.fuel_detector = FuelAnomalyDetector()
        self.trends = TrendRecorder(rng=np.random.default_rng(trend_seed))

        self.state = PhysicalState.from_profile(self.config.profile)
        self.ticks = 0
        self.notices: List[FuelEmptyEvent] = []
        self.records: List[dict] = []

        self.alerts: List[Alert] = []
        self.tire_health: Optional[TireHealthReport] = None
        self.fuel_anomaly: Optional[FuelAnomalyResult] = None
        self._refresh()
        self.advisory = advise_state(self.state)

    # ------------------------------------------------------------------
    # Control inputs
    # ------------------------------------------------------------------

    def _coerce(self, field: str, value):
        """Validated, clamped value for one state field."""
        if field in _FLAG_FIELDS:
            if not isinstance(value, bool):
                raise TypeError(f"{field} must be a boolean, got {type(value).__name__}")
            return value
        if field in _NUMERIC_FIELDS:
            return clamp(_as_number(field, value), *limits()[field])
        if field == "tire_pressures_psi":
            pressures = list(value)
            if len(pressures) != len(TIRE_POSITIONS):
                raise ValueError(f"Expected {len(TIRE_POSITIONS)} tire pressures, got {len(pressures)}")
            return [clamp(_as_number(field, p), *TIRE_PRESSURE_RANGE_PSI) for p in pressures]
        raise KeyError(f"Unknown state field {field!r}")

    def update(self, **changes) -> PhysicalState:
        """Apply control inputs (snake_case field names), then refresh the readers once.

        Every field is checked before any is written, so a rejected update
        leaves the state untouched.
        """
        coerced = {field: self._coerce(field, value) for field, value in changes.items()}
        for field, value in coerced.items():
            setattr(self.state, field, value)
        self.state.touch()
        logger.debug(f"Truck {self.truck_id:03d} control update: {changes}")
        self._refresh()
        return self.state

    def merge_snapshot(self, partial: Dict[str, object]) -> PhysicalState:
        """Merge a partial camelCase snapshot; unknown keys are ignored."""
        changes = {}
        for key, value in partial.items():
            field = SNAPSHOT_FIELDS.get(key)
            if field is None:
                logger.debug(f"Ignoring unknown snapshot key {key!r}")
                continue
            changes[field] = value
        return self.update(**changes)

    def set_engine(self, on: bool) -> None:
        self.update(engine_on=on)

    def set_rain(self, active: bool) -> None:
        self.update(rain_active=active)

    def set_speed(self, speed_kmh: float) -> None:
        self.update(speed_kmh=speed_kmh)

    def set_load(self, load_tons: float) -> None:
        self.update(load_tons=load_tons)

    def set_temperature(self, temperature_c: float) -> None:
        """Manual override; the thermal model replaces it on the next tick when enabled."""
        self.update(temperature_c=temperature_c)

    def set_fuel_level(self, fuel_level: float) -> None:
        self.update(fuel_level=fuel_level)

    def set_tire_pressures(self, pressures) -> None:
        self.update(tire_pressures_psi=pressures)

    def set_tire_pressure(self, position: str, pressure: float) -> None:
        pressures = list(self.state.tire_pressures_psi)
        pressures[TIRE_POSITIONS.index(position)] = pressure
        self.update(tire_pressures_psi=pressures)

    # ------------------------------------------------------------------
    # Schedules
    # ------------------------------------------------------------------

    def tick(self) -> Optional[FuelEmptyEvent]:
        """Advance the physics by one tick: temperature first, then fuel."""
        state = self.state
        if not state.engine_on and state.speed_kmh > 0:
            # A stopped engine cannot keep the truck moving past one tick
            state.speed_kmh = 0.0

        if self.config.thermal_model_enabled:
            self.thermal.apply(state)
        event = self.fuel_model.apply(state)
        if event is not None:
            self.notices.append(event)

        state.touch()
        self.ticks += 1
        self._refresh()
        self._record_tick()
        return event

    def refresh_advisory(self) -> str:
        self.advisory = advise_state(self.state)
        return self.advisory

    def start(self) -> None:
        self.scheduler.every(self.config.tick_seconds, "simulation", self.tick)
        self.scheduler.every(self.config.advisory_seconds, "advisory", self.refresh_advisory)
        logger.info(
            f"Truck {self.truck_id:03d} session started (profile={self.config.profile}, "
            f"tick={self.config.tick_seconds}s, advisory={self.config.advisory_seconds}s)"
        )

    def run_for(self, seconds: float) -> int:
        return self.scheduler.run_for(seconds)

    def stop(self) -> None:
        """Stop both schedules and discard accrued history."""
        self.scheduler.stop()
        self.fuel_detector.reset()
        self.trends.clear()
        self.notices.clear()
        self.records.clear()
        logger.info(f"Truck {self.truck_id:03d} session stopped after {self.ticks} ticks")

    # ------------------------------------------------------------------
    # Readers
    # ------------------------------------------------------------------

    def _refresh(self) -> None:
        state = self.state
        self.alerts = evaluate_alerts(state)
        self.tire_health = score_state(state)
        self.fuel_anomaly = self.fuel_detector.evaluate_state(state)
        self.trends.record_state(state)

    def _record_tick(self) -> None:
        state = self.state
        counts = severity_counts(self.alerts)
        fl, fr, rl, rr = state.tire_pressures_psi
        self.records.append({
            "timestamp": state.timestamp,
            "sim_time_s": self.scheduler.clock.now() - self._start_time,
            "tick": self.ticks,
            "engine_on": state.engine_on,
            "speed_kmh": state.speed_kmh,
            "load_tons": state.load_tons,
            "fuel_level": state.fuel_level,
            "temperature_c": state.temperature_c,
            "tire_fl_psi": fl,
            "tire_fr_psi": fr,
            "tire_rl_psi": rl,
            "tire_rr_psi": rr,
            "rain_active": state.rain_active,
            "tire_health_score": self.tire_health.score,
            "fuel_anomaly": self.fuel_anomaly.is_anomaly,
            "fuel_anomaly_score": self.fuel_anomaly.score,
            "alerts_critical": counts["critical"],
            "alerts_warning": counts["warning"],
            "alerts_info": counts["info"],
            "advisory": self.advisory,
        })

    def snapshot(self) -> PhysicalState:
        """Detached copy of the current state."""
        return self.state.copy()

    def insights(self) -> dict:
        """Everything the dashboard reads, as plain JSON-ready data."""
        health = self.tire_health
        anomaly = self.fuel_anomaly
        summary = alert_summary(self.alerts)
        return {
            "alerts": summary["alerts"],
            "alert_counts": summary["counts"],
            "tire_health": {
                "score": health.score,
                "condition": health.condition,
                "factors": dict(health.factors),
                "recommendations": list(health.recommendations),
                "estimated_remaining_km": health.estimated_remaining_km,
            },
            "fuel_anomaly": {
                "is_anomaly": anomaly.is_anomaly,
                "score": anomaly.score,
                "history": [
                    {"time": s.timestamp.isoformat(), "fuel": s.fuel_level, "anomaly": s.is_anomaly}
                    for s in self.fuel_detector.recent()
                ],
            },
            "advisory": self.advisory,
            "indicators": compute_indicators(self.state),
            "trends": [
                {"time": s.timestamp.isoformat(), "tirePressure": s.tire_pressure, "fuelLevel": s.fuel_level}
                for s in self.trends.recent()
            ],
            "notices": [n.message for n in self.notices],
        }
