import asyncio
import json
import logging
from dataclasses import asdict
from datetime import timezone
from pathlib import Path
from typing import Final, Optional

import pyarrow as pa
import pyarrow.parquet as pq

from ..analysis import AnalysisResult
from ..heatmap import SpatialBinner
from ..models import Snapshot
from ..utils.clock import TimeProbe

logger = logging.getLogger(__name__)


class SnapshotWriter:
    """
    Persists a terminal snapshot: raw samples as Parquet, and the region
    analysis (when given) as JSON next to it.

    Conversion and file IO run in a worker thread so the event loop keeps
    serving other sessions.
    """
    _SCHEMA: Final[pa.Schema] = pa.schema([
        # Unix Epoch
        ("timestamp", pa.timestamp('ms', tz="UTC")),

        # Raw monotonic time as reported by the source
        ("monotonic_s", pa.float64()),

        # Raw gaze point
        ("x", pa.float64()),
        ("y", pa.float64()),

        # Bin the point accumulated into
        ("bin_x", pa.float32()),
        ("bin_y", pa.float32()),
    ])

    def __init__(self, output_dir: Path, radius: float = 40.0) -> None:
        self.output_dir = Path(output_dir)
        self._binner = SpatialBinner(radius)

    def paths_for(self, snapshot: Snapshot) -> tuple[Path, Path]:
        stamp = f"{snapshot.taken_at.astimezone(timezone.utc):%Y%m%d_%H%M%S}"
        return (
            self.output_dir / f"gaze_{stamp}.parquet",
            self.output_dir / f"insights_{stamp}.json",
        )

    async def write(self, snapshot: Snapshot, analysis: Optional[AnalysisResult] = None) -> Optional[Path]:
        """
        Writes the snapshot. Returns the Parquet path, or None if writing failed.
        """
        try:
            path = await asyncio.to_thread(self._write_sync, snapshot, analysis)
        except Exception as e:
            logger.error(f"Snapshot export failed: {e}")
            return None
        logger.info(f"Snapshot with {len(snapshot):,} samples written to {path}")
        return path

    def _write_sync(self, snapshot: Snapshot, analysis: Optional[AnalysisResult]) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        parquet_path, json_path = self.paths_for(snapshot)

        probe = TimeProbe.best_of()
        size = len(snapshot.samples)

        # Pre-allocate flat columns
        epoch_ts, mono_ts = [None] * size, [None] * size
        xs, ys, bxs, bys = [None] * size, [None] * size, [None] * size, [None] * size

        for i, s in enumerate(snapshot.samples):
            epoch_ts[i] = probe.to_utc_ms(s.timestamp)
            mono_ts[i] = s.timestamp
            xs[i], ys[i] = s.x, s.y
            bxs[i], bys[i] = self._binner(s.x, s.y)

        table = pa.Table.from_arrays(
            [
                pa.array(epoch_ts, type=pa.timestamp('ms', tz="UTC")),
                pa.array(mono_ts, type=pa.float64()),
                pa.array(xs, type=pa.float64()),
                pa.array(ys, type=pa.float64()),
                pa.array(bxs, type=pa.float32()),
                pa.array(bys, type=pa.float32()),
            ],
            schema=self._SCHEMA
        )
        pq.write_table(table, parquet_path, compression="zstd")

        if analysis is not None:
            json_path.write_text(json.dumps(asdict(analysis), indent=2), encoding="utf-8")

        return parquet_path

    @classmethod
    def read(cls, path: Path) -> pa.Table:
        """Loads a snapshot file written by this class."""
        return pq.read_table(path)
