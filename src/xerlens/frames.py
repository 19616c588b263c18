"""Polars DataFrame views of parsed tables and typed records.

Grid consumers and the ``export`` CLI command work on DataFrames.  The
underlying tables and records are never mutated.
"""

from __future__ import annotations

import re
from pathlib import Path

import polars as pl

from xerlens.models import Activity, Relationship
from xerlens.tables import XerTable

EXPORT_FORMATS = ("csv", "parquet")

# Table names become file names; reject anything that could escape out_dir
_SAFE_NAME_RE = re.compile(r"^[A-Za-z0-9_\-]+$")

_ACTIVITY_SCHEMA: dict[str, pl.DataType] = {
    "task_id": pl.Utf8,
    "proj_id": pl.Utf8,
    "wbs_id": pl.Utf8,
    "task_code": pl.Utf8,
    "task_name": pl.Utf8,
    "status_code": pl.Utf8,
    "total_float": pl.Float64,
    "target_start_date": pl.Utf8,
    "target_end_date": pl.Utf8,
    "early_start_date": pl.Utf8,
    "early_end_date": pl.Utf8,
}

_RELATIONSHIP_SCHEMA: dict[str, pl.DataType] = {
    "pred_task_id": pl.Utf8,
    "task_id": pl.Utf8,
    "pred_type": pl.Utf8,
    "lag_hours": pl.Float64,
}


def table_to_frame(table: XerTable) -> pl.DataFrame:
    """Convert a raw table into a DataFrame with one Utf8 column per field.

    Column order follows the ``%F`` declaration.  Duplicate column names
    keep their first occurrence only.
    """
    columns = list(dict.fromkeys(table.columns))
    data = {col: [row.get(col, "") for row in table.rows] for col in columns}
    return pl.DataFrame(data, schema={col: pl.Utf8 for col in columns})


def activities_to_frame(activities: list[Activity]) -> pl.DataFrame:
    """Activities as a typed DataFrame, in list order."""
    return pl.DataFrame(
        [act.model_dump() for act in activities],
        schema=_ACTIVITY_SCHEMA,
    )


def relationships_to_frame(relationships: list[Relationship]) -> pl.DataFrame:
    """Relationships as a typed DataFrame, in list order."""
    return pl.DataFrame(
        [rel.model_dump() for rel in relationships],
        schema=_RELATIONSHIP_SCHEMA,
    )


def write_tables(
    tables: list[XerTable],
    out_dir: Path,
    fmt: str = "csv",
    names: list[str] | None = None,
) -> list[Path]:
    """Write tables to *out_dir*, one file per table.

    Args:
        tables: Parsed tables.
        out_dir: Destination directory (created if missing).
        fmt: ``csv`` or ``parquet``.
        names: Only write tables with these names (all when ``None``).
            A repeated table name keeps its first occurrence.

    Returns:
        Paths of the written files, in table order.
    """
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format: {fmt!r}")
    out_dir.mkdir(parents=True, exist_ok=True)

    written: list[Path] = []
    seen: set[str] = set()
    for table in tables:
        if names is not None and table.name not in names:
            continue
        if table.name in seen or not _SAFE_NAME_RE.match(table.name):
            continue
        seen.add(table.name)
        df = table_to_frame(table)
        path = out_dir / f"{table.name}.{fmt}"
        if fmt == "csv":
            df.write_csv(path)
        else:
            df.write_parquet(path)
        written.append(path)
    return written
