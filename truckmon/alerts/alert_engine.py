"""Threshold alerts per signal.

Signals are evaluated independently, so alerts from different signals
coexist; within one signal a critical alert replaces the warning.
"""

from typing import Dict, List, Sequence

from truckmon.config.constants import ALERT_THRESHOLDS, TIRE_NAMES
from truckmon.config.schema import Alert, PhysicalState, severity_counts, tire_pressure_map


def _fmt(value: float) -> str:
    return f"{value:g}" if float(value).is_integer() else f"{value:.1f}"


def _tire_alerts(state: PhysicalState) -> List[Alert]:
    alerts = []
    for position, pressure in tire_pressure_map(state.tire_pressures_psi).items():
        name = TIRE_NAMES[position]
        if pressure < ALERT_THRESHOLDS["tire_critical_below"]:
            alerts.append(Alert(
                "critical", f"Critical: Low pressure in {name} tire ({_fmt(pressure)} PSI)",
            ))
        elif pressure < ALERT_THRESHOLDS["tire_warning_below"]:
            alerts.append(Alert(
                "warning", f"Warning: {name} tire pressure below optimal ({_fmt(pressure)} PSI)",
            ))
    return alerts


def evaluate_alerts(state: PhysicalState) -> List[Alert]:
    """Evaluate every alert rule against a state snapshot.

    Order: tires (FL, FR, RL, RR), fuel, temperature, load, speed. When no
    rule fires a single info alert is returned.
    """
    alerts = _tire_alerts(state)

    fuel = state.fuel_level
    if fuel < ALERT_THRESHOLDS["fuel_critical_below"]:
        alerts.append(Alert("critical", f"Critical: Fuel level critically low ({_fmt(fuel)} L)"))
    elif fuel < ALERT_THRESHOLDS["fuel_warning_below"]:
        alerts.append(Alert("warning", f"Warning: Fuel level running low ({_fmt(fuel)} L)"))

    temp = state.temperature_c
    if temp > ALERT_THRESHOLDS["temperature_critical_above"]:
        alerts.append(Alert("critical", f"Critical: Engine temperature too high ({_fmt(temp)}°C)"))
    elif temp > ALERT_THRESHOLDS["temperature_warning_above"]:
        alerts.append(Alert("warning", f"Warning: Engine temperature elevated ({_fmt(temp)}°C)"))

    load = state.load_tons
    if load > ALERT_THRESHOLDS["load_critical_above"]:
        alerts.append(Alert("critical", f"Critical: Load exceeds recommended limit ({_fmt(load)} tons)"))
    elif load > ALERT_THRESHOLDS["load_warning_above"]:
        alerts.append(Alert("warning", f"Warning: High load detected ({_fmt(load)} tons)"))

    if state.speed_kmh > ALERT_THRESHOLDS["speed_warning_above"]:
        alerts.append(Alert("warning", f"Warning: High speed detected ({_fmt(state.speed_kmh)} km/h)"))

    if not alerts:
        alerts.append(Alert("info", "All systems operating normally"))
    return alerts


def alert_summary(alerts: Sequence[Alert]) -> Dict[str, object]:
    """Alert list plus per-severity counts, as served to the dashboard."""
    return {
        "alerts": [{"severity": a.severity, "message": a.message} for a in alerts],
        "counts": severity_counts(alerts),
    }
