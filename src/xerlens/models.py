"""Typed records for a parsed schedule export.

Row maps produced by the table parser are converted into these models
exactly once, at the schema-mapper boundary.  Everything downstream
(hierarchy, filters, frames, CLI) works on these types only.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ProjectHeader(BaseModel):
    """Identity of the exported project (first ``PROJECT`` row)."""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    short_name: str = ""
    name: str = ""


class ExportHeader(BaseModel):
    """Metadata from the ``ERMHDR`` line that opens most exports."""

    model_config = ConfigDict(frozen=True)

    version: str = ""
    export_date: str = ""
    user_type: str = ""
    user_name: str = ""
    user_full_name: str = ""
    database: str = ""
    module: str = ""
    currency: str = ""


class WbsNode(BaseModel):
    """A flat WBS record as stored in ``PROJWBS``.

    ``parent_wbs_id`` either names another node or is a sentinel (usually
    empty) marking a root.
    """

    model_config = ConfigDict(frozen=True)

    wbs_id: str
    proj_id: str = ""
    short_name: str = ""
    name: str = ""
    parent_wbs_id: str = ""


class Activity(BaseModel):
    """A schedulable unit of work from ``TASK``.

    Dates are kept verbatim in the export's ``YYYY-MM-DD HH:MM`` form.
    """

    model_config = ConfigDict(frozen=True)

    task_id: str
    proj_id: str = ""
    wbs_id: str = ""
    task_code: str = ""
    task_name: str = ""
    status_code: str = ""
    total_float: float = 0.0
    target_start_date: str = ""
    target_end_date: str = ""
    early_start_date: str = ""
    early_end_date: str = ""

    @property
    def is_critical(self) -> bool:
        return self.total_float <= 0


class Relationship(BaseModel):
    """A precedence edge ``pred_task_id -> task_id`` from ``TASKPRED``."""

    model_config = ConfigDict(frozen=True)

    pred_task_id: str
    task_id: str
    pred_type: str = "FS"
    lag_hours: float = 0.0


class ProjectModel(BaseModel):
    """Everything the pipeline produces for one export file."""

    model_config = ConfigDict(frozen=True)

    project: ProjectHeader
    header: ExportHeader | None = None
    wbs: list[WbsNode] = Field(default_factory=list)
    activities: list[Activity] = Field(default_factory=list)
    relationships: list[Relationship] = Field(default_factory=list)
