"""Tire health prediction from a weighted bell/inverse-power factor model.

Each operating signal maps to a 0-1 factor:
    pressure:    1 - ((avg - 37.5) / 10)^2
    load:        1 - (load / 25)^1.3
    speed:       1 for <= 40 km/h, else max(0.3, 1 - ((speed - 40) / 40)^1.2)
    temperature: 1 inside 60-75 °C, else 1 - (deviation / 40)^2
The composite score is the weighted sum (0.40 / 0.25 / 0.20 / 0.15) scaled
to 0-100. The coefficients are hand-tuned, not learned.
"""

from typing import Dict, List, Sequence

import numpy as np

from truckmon.config.constants import (
    IDEAL_TIRE_PRESSURE_PSI,
    LOAD_EXPONENT,
    PRESSURE_FALLOFF_PSI,
    RECOMMEND_LOAD_HIGH_TONS,
    RECOMMEND_LOAD_LOW_TONS,
    RECOMMEND_PRESSURE_RANGE_PSI,
    RECOMMEND_SPEED_HIGH_KMH,
    RECOMMEND_SPEED_LOW_KMH,
    SAFE_LOAD_TONS,
    SPEED_EXPONENT,
    SPEED_FACTOR_FLOOR,
    SPEED_FALLOFF_KMH,
    SPEED_FREE_KMH,
    TEMPERATURE_BAND_C,
    TEMPERATURE_FALLOFF_C,
    TIRE_CONDITION_LEVELS,
    TIRE_HEALTH_WEIGHTS,
    TIRE_LIFE_KM,
    TIRE_RECOMMENDATIONS,
)
from truckmon.config.schema import PhysicalState, TireHealthReport, clamp


def pressure_factor(avg_pressure: float) -> float:
    deviation = (avg_pressure - IDEAL_TIRE_PRESSURE_PSI) / PRESSURE_FALLOFF_PSI
    return max(0.0, 1.0 - deviation ** 2)


def load_factor(load_tons: float) -> float:
    ratio = max(0.0, load_tons) / SAFE_LOAD_TONS
    return max(0.0, 1.0 - ratio ** LOAD_EXPONENT)


def speed_factor(speed_kmh: float) -> float:
    if speed_kmh <= SPEED_FREE_KMH:
        return 1.0
    excess = (speed_kmh - SPEED_FREE_KMH) / SPEED_FALLOFF_KMH
    return max(SPEED_FACTOR_FLOOR, 1.0 - excess ** SPEED_EXPONENT)


def temperature_factor(temperature_c: float) -> float:
    lo, hi = TEMPERATURE_BAND_C
    if lo <= temperature_c <= hi:
        return 1.0
    deviation = lo - temperature_c if temperature_c < lo else temperature_c - hi
    return max(0.0, 1.0 - (deviation / TEMPERATURE_FALLOFF_C) ** 2)


def _recommendations(
    avg_pressure: float, load_tons: float, speed_kmh: float, temperature_c: float
) -> List[str]:
    """One message per out-of-band signal, in fixed pressure/load/speed/temperature order."""
    recs = []
    p_lo, p_hi = RECOMMEND_PRESSURE_RANGE_PSI
    if avg_pressure < p_lo:
        recs.append(TIRE_RECOMMENDATIONS["pressure_low"])
    elif avg_pressure > p_hi:
        recs.append(TIRE_RECOMMENDATIONS["pressure_high"])

    if load_tons > RECOMMEND_LOAD_HIGH_TONS:
        recs.append(TIRE_RECOMMENDATIONS["load_high"])
    elif 0 < load_tons < RECOMMEND_LOAD_LOW_TONS:
        recs.append(TIRE_RECOMMENDATIONS["load_low"])

    if speed_kmh > RECOMMEND_SPEED_HIGH_KMH:
        recs.append(TIRE_RECOMMENDATIONS["speed_high"])
    elif 0 < speed_kmh < RECOMMEND_SPEED_LOW_KMH:
        recs.append(TIRE_RECOMMENDATIONS["speed_low"])

    t_lo, t_hi = TEMPERATURE_BAND_C
    if temperature_c > t_hi:
        recs.append(TIRE_RECOMMENDATIONS["temperature_high"])
    elif temperature_c < t_lo:
        recs.append(TIRE_RECOMMENDATIONS["temperature_low"])

    if not recs:
        recs.append(TIRE_RECOMMENDATIONS["optimal"])
    return recs


def condition_label(score: float) -> str:
    for threshold, label in TIRE_CONDITION_LEVELS:
        if score >= threshold:
            return label
    return TIRE_CONDITION_LEVELS[-1][1]


def score_tire_health(
    tire_pressures_psi: Sequence[float],
    load_tons: float,
    speed_kmh: float,
    temperature_c: float,
) -> TireHealthReport:
    """Score tire health from current operating conditions.

    Args:
        tire_pressures_psi: Four wheel pressures (FL, FR, RL, RR).
        load_tons: Cargo load.
        speed_kmh: Vehicle speed.
        temperature_c: Engine temperature.

    Returns:
        TireHealthReport with score, per-factor breakdown, recommendations,
        estimated remaining distance and a condition label.
    """
    avg_pressure = float(np.mean(tire_pressures_psi))

    factors: Dict[str, float] = {
        "pressure": pressure_factor(avg_pressure),
        "load": load_factor(load_tons),
        "speed": speed_factor(speed_kmh),
        "temperature": temperature_factor(temperature_c),
    }
    weighted = sum(TIRE_HEALTH_WEIGHTS[name] * value for name, value in factors.items())
    score = round(100.0 * clamp(weighted, 0.0, 1.0), 1)

    return TireHealthReport(
        score=score,
        factors=factors,
        recommendations=_recommendations(avg_pressure, load_tons, speed_kmh, temperature_c),
        estimated_remaining_km=int(round(score / 100.0 * TIRE_LIFE_KM)),
        condition=condition_label(score),
    )


def score_state(state: PhysicalState) -> TireHealthReport:
    return score_tire_health(
        state.tire_pressures_psi, state.load_tons, state.speed_kmh, state.temperature_c,
    )
