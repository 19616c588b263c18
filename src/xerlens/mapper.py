"""Schema mapper: parsed tables -> typed ``ProjectModel``.

Only ``PROJECT`` is required.  ``PROJWBS``, ``TASK`` and ``TASKPRED`` are
optional and map to empty lists when absent.  Values are trusted strings;
numeric columns that are blank or unparseable become ``0.0``.
"""

from __future__ import annotations

import math

from xerlens.errors import MissingTableError
from xerlens.logging.events import (
    MISSING_PROJECT_TABLE,
    EventType,
    emit_error,
    emit_info,
)
from xerlens.models import (
    Activity,
    ExportHeader,
    ProjectHeader,
    ProjectModel,
    Relationship,
    WbsNode,
)
from xerlens.tables import XerTable, find_table, parse_tables, read_export_header

PROJECT_TABLE = "PROJECT"
WBS_TABLE = "PROJWBS"
TASK_TABLE = "TASK"
RELATIONSHIP_TABLE = "TASKPRED"

# P6 stores relationship types as PR_FS, PR_SS, ...
_PRED_TYPE_PREFIX = "PR_"


def to_number(value: str | None) -> float:
    """Parse a numeric column value; blank or non-numeric input gives 0.0."""
    if value is None:
        return 0.0
    try:
        number = float(value.strip())
    except ValueError:
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def _first_present(row: dict[str, str], *columns: str) -> str:
    """Return the value of the first of *columns* that the row declares."""
    for col in columns:
        if col in row:
            return row[col]
    return ""


def normalize_pred_type(raw: str) -> str:
    """Map ``PR_FS`` style values to ``FS``; other values pass through."""
    if raw.startswith(_PRED_TYPE_PREFIX):
        return raw[len(_PRED_TYPE_PREFIX):]
    return raw


def _project_header(table: XerTable) -> ProjectHeader:
    if not table.rows:
        return ProjectHeader()
    row = table.rows[0]
    return ProjectHeader(
        id=row.get("proj_id", ""),
        short_name=row.get("proj_short_name", ""),
        name=row.get("project_name", ""),
    )


def _wbs_node(row: dict[str, str]) -> WbsNode:
    return WbsNode(
        wbs_id=row.get("wbs_id", ""),
        proj_id=row.get("proj_id", ""),
        short_name=row.get("wbs_short_name", ""),
        name=row.get("wbs_name", ""),
        parent_wbs_id=row.get("parent_wbs_id", ""),
    )


def _activity(row: dict[str, str]) -> Activity:
    return Activity(
        task_id=row.get("task_id", ""),
        proj_id=row.get("proj_id", ""),
        wbs_id=row.get("wbs_id", ""),
        task_code=row.get("task_code", ""),
        task_name=row.get("task_name", ""),
        status_code=row.get("status_code", ""),
        total_float=to_number(_first_present(row, "total_float_hr_cnt", "total_float")),
        target_start_date=row.get("target_start_date", ""),
        target_end_date=row.get("target_end_date", ""),
        early_start_date=row.get("early_start_date", ""),
        early_end_date=row.get("early_end_date", ""),
    )


def _relationship(row: dict[str, str]) -> Relationship:
    return Relationship(
        pred_task_id=row.get("pred_task_id", ""),
        task_id=row.get("task_id", ""),
        pred_type=normalize_pred_type(row.get("pred_type", "")),
        lag_hours=to_number(_first_present(row, "lag_hr_cnt", "lag_hr")),
    )


def map_tables(tables: list[XerTable], header: ExportHeader | None = None) -> ProjectModel:
    """Convert parsed tables into a typed project model.

    Args:
        tables: Output of :func:`~xerlens.tables.parse_tables`.
        header: Optional ``ERMHDR`` metadata to attach to the model.

    Returns:
        The project model.

    Raises:
        MissingTableError: If no table is named exactly ``PROJECT``.
    """
    project_table = find_table(tables, PROJECT_TABLE)
    if project_table is None:
        raise MissingTableError(PROJECT_TABLE, available=[t.name for t in tables])

    wbs_table = find_table(tables, WBS_TABLE)
    task_table = find_table(tables, TASK_TABLE)
    rel_table = find_table(tables, RELATIONSHIP_TABLE)

    return ProjectModel(
        project=_project_header(project_table),
        header=header,
        wbs=[_wbs_node(r) for r in wbs_table.rows] if wbs_table else [],
        activities=[_activity(r) for r in task_table.rows] if task_table else [],
        relationships=[_relationship(r) for r in rel_table.rows] if rel_table else [],
    )


def parse_project(text: str) -> ProjectModel:
    """Parse export text all the way to a project model.

    Raises:
        MissingTableError: If the text holds no ``PROJECT`` table,
            including when it is empty.
    """
    emit_info(EventType.parse_started, "Parsing export", {"chars": len(text)})
    tables = parse_tables(text)
    try:
        model = map_tables(tables, header=read_export_header(text))
    except MissingTableError as exc:
        emit_error(
            EventType.parse_failed,
            str(exc),
            {"tables": [t.name for t in tables]},
            error_code=MISSING_PROJECT_TABLE,
        )
        raise
    emit_info(
        EventType.parse_completed,
        f"Parsed project {model.project.short_name or model.project.id!r}",
        {
            "proj_id": model.project.id,
            "tables": len(tables),
            "wbs_nodes": len(model.wbs),
            "activities": len(model.activities),
            "relationships": len(model.relationships),
        },
    )
    return model
