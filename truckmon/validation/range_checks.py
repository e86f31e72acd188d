"""Range validation of written telemetry logs against the physical state limits."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Tuple

import pandas as pd
import pyarrow.parquet as pq

from truckmon.config.schema import limits
from truckmon.storage.schema_definition import TIRE_COLUMNS

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    column: str
    expected_range: Tuple[float, float]
    actual_range: Tuple[float, float]
    passed: bool
    message: str = ""


@dataclass
class ValidationReport:
    results: List[ValidationResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(r.passed for r in self.results)

    @property
    def n_passed(self) -> int:
        return sum(1 for r in self.results if r.passed)

    @property
    def n_failed(self) -> int:
        return sum(1 for r in self.results if not r.passed)

    def summary(self) -> str:
        lines = [f"Validation: {self.n_passed} passed, {self.n_failed} failed"]
        for r in self.results:
            status = "PASS" if r.passed else "FAIL"
            lines.append(
                f"  [{status}] {r.column}: "
                f"expected {r.expected_range}, got {r.actual_range} {r.message}"
            )
        return "\n".join(lines)


def column_limits() -> Dict[str, Tuple[float, float]]:
    """Hard bounds every telemetry column must respect."""
    state_limits = limits()
    bounds = {
        "speed_kmh": state_limits["speed_kmh"],
        "load_tons": state_limits["load_tons"],
        "fuel_level": state_limits["fuel_level"],
        "temperature_c": state_limits["temperature_c"],
        "tire_health_score": (0.0, 100.0),
        "fuel_anomaly_score": (0.0, 100.0),
    }
    for col in TIRE_COLUMNS:
        bounds[col] = state_limits["tire_pressure_psi"]
    return bounds


def _check_bounds(values: pd.Series, expected: Tuple[float, float], column: str) -> ValidationResult:
    actual_lo = float(values.min())
    actual_hi = float(values.max())
    passed = expected[0] <= actual_lo and actual_hi <= expected[1]
    n_out = int(((values < expected[0]) | (values > expected[1])).sum())
    return ValidationResult(
        column=column,
        expected_range=expected,
        actual_range=(actual_lo, actual_hi),
        passed=passed,
        message=f"{n_out} rows out of range" if not passed else "",
    )


def validate_telemetry_frame(df: pd.DataFrame) -> ValidationReport:
    report = ValidationReport()
    if len(df) == 0:
        return report

    for column, expected in column_limits().items():
        if column in df.columns:
            report.results.append(_check_bounds(df[column], expected, column))

    # Anomaly score must be zero whenever no anomaly was flagged
    if {"fuel_anomaly", "fuel_anomaly_score"} <= set(df.columns):
        normal = df[~df["fuel_anomaly"]]
        if len(normal) > 0:
            report.results.append(_check_bounds(normal["fuel_anomaly_score"], (0.0, 0.0),
                                                "fuel_anomaly_score|normal"))
    return report


def validate_telemetry_dir(data_dir: Path) -> ValidationReport:
    """Validate every truck_XXX/session_XXX.parquet under ``data_dir``."""
    parquet_files = sorted(Path(data_dir).glob("truck_*/session_*.parquet"))
    if not parquet_files:
        logger.warning(f"No telemetry files found in {data_dir}")
        return ValidationReport()

    all_data = pd.concat([pq.read_table(f).to_pandas() for f in parquet_files], ignore_index=True)
    report = validate_telemetry_frame(all_data)
    if not report.passed:
        logger.warning(f"Telemetry validation failed for {data_dir}: {report.n_failed} checks")
    return report


if __name__ == "__main__":
    import sys
    if len(sys.argv) < 2:
        print("Usage: python -m truckmon.validation.range_checks <data_dir>")
        sys.exit(1)

    report = validate_telemetry_dir(Path(sys.argv[1]))
    print(report.summary())
    sys.exit(0 if report.passed else 1)
