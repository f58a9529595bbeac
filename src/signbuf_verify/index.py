"""Parquet index of the frames found in a scanned file."""
from __future__ import annotations

import hashlib
from pathlib import Path

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from signbuf_core.regions import DecodedRegion

INDEX_FILE = "index/regions.parquet"

INDEX_SCHEMA = pa.schema(
    [
        ("record", pa.int32()),
        ("file", pa.string()),
        ("frame_start", pa.int64()),
        ("frame_end", pa.int64()),
        ("payload_start", pa.int64()),
        ("payload_end", pa.int64()),
        ("payload_length", pa.int32()),
        ("status", pa.string()),
        ("content_hash", pa.string()),
    ]
)


def region_rows(regions: list[DecodedRegion], buffer, file_name: str) -> list[dict]:
    rows: list[dict] = []
    for i, region in enumerate(regions):
        payload = region.payload(buffer)
        rows.append(
            {
                "record": i,
                "file": file_name,
                "frame_start": int(region.frame_range.start),
                "frame_end": int(region.frame_range.stop),
                "payload_start": int(region.payload_range.start),
                "payload_end": int(region.payload_range.stop),
                "payload_length": len(payload),
                "status": "VERIFIED",
                "content_hash": hashlib.sha256(payload).hexdigest(),
            }
        )
    return rows


def write_region_index(regions: list[DecodedRegion], buffer, file_name: str, out_path: Path) -> Path:
    """Write ``out_path/index/regions.parquet``. An empty scan still gets a file."""
    target = Path(out_path) / INDEX_FILE
    target.parent.mkdir(parents=True, exist_ok=True)

    df = pd.DataFrame(region_rows(regions, buffer, file_name))
    if df.empty:
        table = INDEX_SCHEMA.empty_table()
    else:
        table = pa.Table.from_pandas(df, schema=INDEX_SCHEMA, preserve_index=False)
    pq.write_table(table, target)
    return target


def read_region_index(path: Path, source=None) -> list[DecodedRegion]:
    """Load regions back from an index file (or the directory holding it)."""
    path = Path(path)
    if path.is_dir():
        path = path / INDEX_FILE

    df = pq.read_table(path).to_pandas().sort_values("record")
    return [
        DecodedRegion(
            payload_range=range(int(row.payload_start), int(row.payload_end)),
            frame_range=range(int(row.frame_start), int(row.frame_end)),
            source=source,
        )
        for row in df.itertuples(index=False)
    ]
