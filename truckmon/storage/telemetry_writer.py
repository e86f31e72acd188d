"""Write per-truck-per-session telemetry Parquet files."""

import logging
from pathlib import Path
from typing import Dict, List

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from truckmon.storage.schema_definition import ALL_COLUMNS, TELEMETRY_SCHEMA

logger = logging.getLogger(__name__)


class TelemetryLogWriter:
    """Writes the per-tick records of a session to Parquet."""

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)

    def next_session_index(self, truck_id: int) -> int:
        truck_dir = self.output_dir / f"truck_{truck_id:03d}"
        return len(list(truck_dir.glob("session_*.parquet"))) if truck_dir.exists() else 0

    def write_session(
        self,
        truck_id: int,
        records: List[Dict[str, object]],
        session_index: int = None,
    ) -> Path:
        """Write one Parquet file for a session.

        Args:
            truck_id: Truck identifier.
            records: Per-tick rows as recorded by TruckSession.
            session_index: File index; defaults to the next free index.

        Returns:
            Path to the written Parquet file.
        """
        if session_index is None:
            session_index = self.next_session_index(truck_id)

        rows = []
        for record in records:
            row = dict(record)
            row["truck_id"] = truck_id
            row["session_index"] = session_index
            rows.append(row)

        df = pd.DataFrame(rows, columns=ALL_COLUMNS)

        truck_dir = self.output_dir / f"truck_{truck_id:03d}"
        truck_dir.mkdir(parents=True, exist_ok=True)
        output_path = truck_dir / f"session_{session_index:03d}.parquet"

        table = pa.Table.from_pandas(df, schema=TELEMETRY_SCHEMA, preserve_index=False)
        pq.write_table(table, output_path, compression="snappy")

        logger.info(f"Wrote {len(rows)} ticks to {output_path}")
        return output_path
