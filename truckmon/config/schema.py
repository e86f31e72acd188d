"""Dataclasses for truck state, engine outputs, and run configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence, Tuple

from truckmon.config.constants import (
    ADVISORY_TICK_SEC,
    DEFAULT_PROFILE,
    DEPLOYMENT_PROFILES,
    FUEL_RANGE_L,
    LOAD_RANGE_TONS,
    SEVERITIES,
    SIMULATION_TICK_SEC,
    SPEED_RANGE_KMH,
    TEMPERATURE_RANGE_C,
    THERMAL_JITTER_AMPLITUDE,
    THERMAL_SMOOTHING,
    TIRE_POSITIONS,
    TIRE_PRESSURE_RANGE_PSI,
)


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp a value into [lo, hi]."""
    return max(lo, min(hi, float(value)))


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class PhysicalState:
    """Mutable snapshot of one truck's simulated sensors.

    Values are stored already clamped; raw control input should go through
    the TruckSession setters.
    """

    engine_on: bool
    speed_kmh: float
    load_tons: float
    fuel_level: float          # litres
    temperature_c: float
    tire_pressures_psi: List[float]  # FL, FR, RL, RR
    rain_active: bool
    timestamp: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        if len(self.tire_pressures_psi) != len(TIRE_POSITIONS):
            raise ValueError(
                f"Expected {len(TIRE_POSITIONS)} tire pressures, got {len(self.tire_pressures_psi)}"
            )
        self.speed_kmh = clamp(self.speed_kmh, *SPEED_RANGE_KMH)
        self.load_tons = clamp(self.load_tons, *LOAD_RANGE_TONS)
        self.fuel_level = clamp(self.fuel_level, *FUEL_RANGE_L)
        self.temperature_c = clamp(self.temperature_c, *TEMPERATURE_RANGE_C)
        self.tire_pressures_psi = [clamp(p, *TIRE_PRESSURE_RANGE_PSI) for p in self.tire_pressures_psi]

    @classmethod
    def from_profile(cls, name: str = DEFAULT_PROFILE) -> PhysicalState:
        defaults = DEPLOYMENT_PROFILES[name]
        return cls(
            engine_on=defaults["engine_on"],
            speed_kmh=defaults["speed_kmh"],
            load_tons=defaults["load_tons"],
            fuel_level=defaults["fuel_level"],
            temperature_c=defaults["temperature_c"],
            tire_pressures_psi=list(defaults["tire_pressures_psi"]),
            rain_active=defaults["rain_active"],
        )

    @property
    def average_tire_pressure(self) -> float:
        return sum(self.tire_pressures_psi) / len(self.tire_pressures_psi)

    def touch(self) -> None:
        self.timestamp = utc_now()

    def copy(self) -> PhysicalState:
        return PhysicalState(
            engine_on=self.engine_on,
            speed_kmh=self.speed_kmh,
            load_tons=self.load_tons,
            fuel_level=self.fuel_level,
            temperature_c=self.temperature_c,
            tire_pressures_psi=list(self.tire_pressures_psi),
            rain_active=self.rain_active,
            timestamp=self.timestamp,
        )

    def to_dict(self) -> dict:
        """Snapshot in the camelCase shape the dashboard backend exchanges."""
        return {
            "engineOn": self.engine_on,
            "speed": self.speed_kmh,
            "load": self.load_tons,
            "fuelLevel": self.fuel_level,
            "temperature": self.temperature_c,
            "tirePressures": list(self.tire_pressures_psi),
            "rainActive": self.rain_active,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class Alert:
    severity: str   # "critical", "warning" or "info"
    message: str


@dataclass(frozen=True)
class TireHealthReport:
    """Tire health prediction from the factor model."""

    score: float                      # 0-100, one decimal
    factors: Dict[str, float]         # pressure, load, speed, temperature in [0, 1]
    recommendations: List[str]
    estimated_remaining_km: int
    condition: str                    # Excellent / Good / Fair / Poor


@dataclass(frozen=True)
class FuelAnomalyResult:
    is_anomaly: bool
    score: float    # 0-100
    delta: float    # litres since previous reading (negative = loss)
    expected_consumption: float


@dataclass(frozen=True)
class FuelHistorySample:
    timestamp: datetime
    fuel_level: float
    is_anomaly: bool


@dataclass(frozen=True)
class TrendSample:
    timestamp: datetime
    tire_pressure: float
    fuel_level: float


@dataclass(frozen=True)
class FuelEmptyEvent:
    """Raised by the fuel model when it forces the engine off."""

    timestamp: datetime
    fuel_level: float
    message: str


@dataclass(frozen=True)
class SimulationConfig:
    """Per-run settings for a truck session."""

    profile: str = DEFAULT_PROFILE
    tick_seconds: float = SIMULATION_TICK_SEC
    advisory_seconds: float = ADVISORY_TICK_SEC
    jitter_amplitude: float = THERMAL_JITTER_AMPLITUDE
    smoothing: float = THERMAL_SMOOTHING
    seed: Optional[int] = None
    thermal_model_enabled: bool = True

    def __post_init__(self):
        if self.profile not in DEPLOYMENT_PROFILES:
            raise ValueError(
                f"Unknown profile {self.profile!r}, expected one of {sorted(DEPLOYMENT_PROFILES)}"
            )
        if self.tick_seconds <= 0 or self.advisory_seconds <= 0:
            raise ValueError("Schedule periods must be positive")
        if not 0.0 < self.smoothing <= 1.0:
            raise ValueError(f"Smoothing factor must be in (0, 1], got {self.smoothing}")
        if self.jitter_amplitude < 0:
            raise ValueError(f"Jitter amplitude must be non-negative, got {self.jitter_amplitude}")


def tire_pressure_map(pressures: Sequence[float]) -> Dict[str, float]:
    """Map FL/FR/RL/RR to their pressures."""
    return dict(zip(TIRE_POSITIONS, pressures))


def severity_counts(alerts: Sequence[Alert]) -> Dict[str, int]:
    counts = {severity: 0 for severity in SEVERITIES}
    for alert in alerts:
        counts[alert.severity] += 1
    return counts


def limits() -> Dict[str, Tuple[float, float]]:
    """Valid ranges for every numeric state field."""
    return {
        "speed_kmh": SPEED_RANGE_KMH,
        "load_tons": LOAD_RANGE_TONS,
        "fuel_level": FUEL_RANGE_L,
        "temperature_c": TEMPERATURE_RANGE_C,
        "tire_pressure_psi": TIRE_PRESSURE_RANGE_PSI,
    }
