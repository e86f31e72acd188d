"""PyArrow schema for per-tick telemetry logs."""

import pyarrow as pa

METADATA_COLUMNS = ["timestamp", "sim_time_s", "tick", "truck_id", "session_index"]

STATE_COLUMNS = [
    "engine_on",
    "speed_kmh",
    "load_tons",
    "fuel_level",
    "temperature_c",
    "tire_fl_psi",
    "tire_fr_psi",
    "tire_rl_psi",
    "tire_rr_psi",
    "rain_active",
]

DERIVED_COLUMNS = [
    "tire_health_score",
    "fuel_anomaly",
    "fuel_anomaly_score",
    "alerts_critical",
    "alerts_warning",
    "alerts_info",
    "advisory",
]

ALL_COLUMNS = METADATA_COLUMNS + STATE_COLUMNS + DERIVED_COLUMNS

TIRE_COLUMNS = ["tire_fl_psi", "tire_fr_psi", "tire_rl_psi", "tire_rr_psi"]


def build_telemetry_schema() -> pa.Schema:
    """Build the Arrow schema for session telemetry files.

    22 columns: 5 metadata, 10 physical state, 7 derived outputs.
    """
    fields = [
        pa.field("timestamp", pa.timestamp("us", tz="UTC")),
        pa.field("sim_time_s", pa.float64()),
        pa.field("tick", pa.int32()),
        pa.field("truck_id", pa.int32()),
        pa.field("session_index", pa.int32()),
    ]

    for col in STATE_COLUMNS:
        if col in ("engine_on", "rain_active"):
            fields.append(pa.field(col, pa.bool_()))
        else:
            fields.append(pa.field(col, pa.float64()))

    fields.append(pa.field("tire_health_score", pa.float64()))
    fields.append(pa.field("fuel_anomaly", pa.bool_()))
    fields.append(pa.field("fuel_anomaly_score", pa.float64()))
    fields.append(pa.field("alerts_critical", pa.int32()))
    fields.append(pa.field("alerts_warning", pa.int32()))
    fields.append(pa.field("alerts_info", pa.int32()))
    fields.append(pa.field("advisory", pa.string()))

    return pa.schema(fields)


TELEMETRY_SCHEMA = build_telemetry_schema()
