"""Damaged Export demo runner.

Builds an export containing the anomalies real-world files carry
(stray rows before any table, a cyclic WBS chain, a dangling parent,
blank float values, an activity pointing at an unknown WBS node), runs
the full pipeline, and writes a deterministic summary JSON.

Every anomaly is absorbed; the only fatal case (no PROJECT table) is
shown last.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

_DEMO_DIR = Path(__file__).parent


def _line(*fields: str) -> str:
    return "\t".join(fields)


def build_damaged_export() -> str:
    """Return export text with one of each absorbed anomaly."""
    lines = [
        _line("ERMHDR", "19.12", "2026-03-02", "Project", "planner", "Pat Planner", "PMDB", "Project Management", "USD"),
        _line("%R", "orphan", "row"),
        _line("%T", "PROJECT"),
        _line("%F", "proj_id", "proj_short_name", "project_name"),
        _line("%R", "100", "PLANT", "Plant Expansion"),
        _line("%T", "PROJWBS"),
        _line("%F", "wbs_id", "proj_id", "wbs_short_name", "wbs_name", "parent_wbs_id"),
        _line("%R", "1", "100", "PLANT", "Plant Expansion", ""),
        _line("%R", "2", "100", "CIV", "Civil Works", "1"),
        _line("%R", "3", "100", "MECH", "Mechanical", "1"),
        _line("%R", "4", "100", "LOOP-A", "Loop A", "5"),
        _line("%R", "5", "100", "LOOP-B", "Loop B", "4"),
        _line("%R", "6", "100", "LOST", "Detached Scope", "999"),
        _line("%T", "TASK"),
        _line("%F", "task_id", "proj_id", "wbs_id", "task_code", "task_name", "status_code", "total_float_hr_cnt",
              "target_start_date", "target_end_date", "early_start_date", "early_end_date"),
        _line("%R", "10", "100", "2", "A1000", "Excavation", "TK_Active", "0",
              "2026-03-02 08:00", "2026-03-20 17:00", "2026-03-02 08:00", "2026-03-20 17:00"),
        _line("%R", "11", "100", "3", "A2000", "Pump install", "TK_NotStart", "",
              "2026-03-23 08:00", "2026-04-03 17:00", "2026-03-23 08:00", "2026-04-03 17:00"),
        _line("%R", "12", "100", "77", "A3000", "Commissioning", "TK_NotStart", "40"),
        _line("%T", "TASKPRED"),
        _line("%F", "task_pred_id", "task_id", "pred_task_id", "pred_type", "lag_hr_cnt"),
        _line("%R", "500", "11", "10", "PR_FS", ""),
        _line("%E"),
    ]
    return "\r\n".join(lines) + "\r\n"


def run_demo(output_dir: Path | None = None) -> dict[str, Any]:
    """Execute the damaged export demo end-to-end.

    Args:
        output_dir: Directory to write output files. Defaults to the demo directory.

    Returns:
        Summary dict.
    """
    from xerlens.errors import MissingTableError
    from xerlens.filters import critical_activities, filter_activities
    from xerlens.hierarchy import build_hierarchy, walk_tree
    from xerlens.mapper import parse_project

    out = output_dir or _DEMO_DIR
    text = build_damaged_export()

    # 1. Parse (stray row dropped, blank float -> 0)
    model = parse_project(text)

    # 2. Tree (cycle broken, dangling parent becomes a root)
    roots = build_hierarchy(model.wbs)
    outline = [f"{'  ' * n.level}{n.name}" for n in walk_tree(roots)]

    # 3. Filter (unknown WBS activity excluded)
    under_root = filter_activities("1", model.activities, model.wbs)

    # 4. Fatal case
    try:
        parse_project(text.replace("PROJECT", "PROJ"))
        fatal = "none"
    except MissingTableError as exc:
        fatal = exc.table_name

    summary = {
        "demo": "damaged_export",
        "project": model.project.short_name,
        "export_version": model.header.version if model.header else "",
        "roots": [r.name for r in roots],
        "outline": outline,
        "activities_under_root": [a.task_code for a in under_root],
        "critical": [a.task_code for a in critical_activities(model.activities)],
        "lag_hours": [r.lag_hours for r in model.relationships],
        "missing_table": fatal,
    }

    summary_path = out / "damaged_export_summary.json"
    summary_path.write_text(json.dumps(summary, indent=2, sort_keys=True) + "\n")

    print(f"Project: {summary['project']}")
    for line in outline:
        print(line)
    print(f"Activities under root: {', '.join(summary['activities_under_root'])}")
    print(f"Missing table: {fatal}")

    return summary


if __name__ == "__main__":
    run_demo()
