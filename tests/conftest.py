"""Shared fixtures: a small but complete export."""

from __future__ import annotations

from pathlib import Path

import pytest


def xer_lines(*rows: tuple[str, ...]) -> str:
    """Join tuples of fields into tab-delimited export text."""
    return "".join("\t".join(row) + "\n" for row in rows)


SAMPLE_EXPORT = xer_lines(
    ("ERMHDR", "19.12", "2026-01-15", "Project", "admin", "Site Admin", "PMDB", "Project Management", "USD"),
    ("%T", "CURRTYPE"),
    ("%F", "curr_id", "curr_short_name"),
    ("%R", "1", "USD"),
    ("%T", "PROJECT"),
    ("%F", "proj_id", "proj_short_name", "project_name"),
    ("%R", "1", "DEMO", "Demo Project"),
    ("%T", "PROJWBS"),
    ("%F", "wbs_id", "proj_id", "wbs_short_name", "wbs_name", "parent_wbs_id"),
    ("%R", "A", "1", "DEMO", "Demo Project", ""),
    ("%R", "B", "1", "B", "Beta", "A"),
    ("%R", "C", "1", "C", "Alpha", "A"),
    ("%R", "D", "1", "D", "Delta", "B"),
    ("%T", "TASK"),
    ("%F", "task_id", "proj_id", "wbs_id", "task_code", "task_name", "status_code", "total_float_hr_cnt",
     "target_start_date", "target_end_date", "early_start_date", "early_end_date"),
    ("%R", "1", "1", "B", "A1000", "Design", "TK_Complete", "16",
     "2026-02-02 08:00", "2026-02-13 17:00", "2026-02-02 08:00", "2026-02-13 17:00"),
    ("%R", "2", "1", "C", "A1010", "Procure", "TK_Active", "0",
     "2026-02-16 08:00", "2026-03-06 17:00", "2026-02-16 08:00", "2026-03-06 17:00"),
    ("%R", "3", "1", "X", "A1020", "Unplaced", "TK_NotStart", "-8",
     "2026-03-09 08:00", "2026-03-13 17:00", "2026-03-09 08:00", "2026-03-13 17:00"),
    ("%R", "4", "1", "D", "A1030", "Detail", "TK_NotStart", "",
     "2026-03-16 08:00", "2026-03-20 17:00", "2026-03-16 08:00", "2026-03-20 17:00"),
    ("%T", "TASKPRED"),
    ("%F", "task_pred_id", "task_id", "pred_task_id", "proj_id", "pred_proj_id", "pred_type", "lag_hr_cnt"),
    ("%R", "100", "2", "1", "1", "1", "PR_FS", "0"),
    ("%R", "101", "4", "2", "1", "1", "PR_SS", "8"),
    ("%E",),
)


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_EXPORT


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    path = tmp_path / "demo.xer"
    path.write_text(SAMPLE_EXPORT, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _detach_event_sink():
    """Keep the module-level event sink from leaking between tests."""
    from xerlens.logging import set_log_dir

    set_log_dir(None)
    yield
    set_log_dir(None)
