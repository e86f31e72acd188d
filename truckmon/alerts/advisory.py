"""Single best-fit advisory message.

Rules are checked in priority order (safety, efficiency warnings,
optimization, idle/off states) and the first one that applies wins.
"""

from typing import Callable, List, Sequence, Tuple

from truckmon.config.constants import ADVISORY_MESSAGES
from truckmon.config.schema import PhysicalState

# (key, predicate(pressures, fuel, temperature, load, speed, engine_on))
AdvisoryRule = Tuple[str, Callable[[Sequence[float], float, float, float, float, bool], bool]]


def _avg(pressures: Sequence[float]) -> float:
    return sum(pressures) / len(pressures)


ADVISORY_RULES: List[AdvisoryRule] = [
    ("fuel_critical", lambda p, f, t, l, s, e: f < 20),
    ("overheating", lambda p, f, t, l, s, e: t > 95),
    ("tire_critical", lambda p, f, t, l, s, e: any(x < 30 for x in p)),
    ("load_speed", lambda p, f, t, l, s, e: l > 25 and s > 80),
    ("fuel_dropping", lambda p, f, t, l, s, e: f < 40),
    ("heat_at_speed", lambda p, f, t, l, s, e: t > 85 and s > 90),
    ("optimal", lambda p, f, t, l, s, e: 35 <= _avg(p) <= 40 and t < 85 and l < 25),
    ("idling", lambda p, f, t, l, s, e: e and s == 0),
    ("engine_off", lambda p, f, t, l, s, e: not e),
]


def advisory_key(
    tire_pressures_psi: Sequence[float],
    fuel_level: float,
    temperature_c: float,
    load_tons: float,
    speed_kmh: float,
    engine_on: bool,
) -> str:
    for key, applies in ADVISORY_RULES:
        if applies(tire_pressures_psi, fuel_level, temperature_c, load_tons, speed_kmh, engine_on):
            return key
    return "monitoring"


def suggest_advisory(
    tire_pressures_psi: Sequence[float],
    fuel_level: float,
    temperature_c: float,
    load_tons: float,
    speed_kmh: float,
    engine_on: bool,
) -> str:
    """Return the highest-priority applicable advisory message."""
    key = advisory_key(tire_pressures_psi, fuel_level, temperature_c, load_tons, speed_kmh, engine_on)
    return ADVISORY_MESSAGES[key]


def advise_state(state: PhysicalState) -> str:
    return suggest_advisory(
        state.tire_pressures_psi,
        state.fuel_level,
        state.temperature_c,
        state.load_tons,
        state.speed_kmh,
        state.engine_on,
    )
