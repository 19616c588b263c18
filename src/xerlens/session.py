"""Per-viewer session state: the loaded project and the WBS selection."""

from __future__ import annotations

from xerlens.filters import filter_activities
from xerlens.hierarchy import WbsTreeNode, build_hierarchy
from xerlens.mapper import parse_project
from xerlens.models import Activity, ProjectModel


class ProjectSession:
    """Holds one loaded project plus the currently selected WBS node.

    Loading a new project always resets the selection.  A failed load
    leaves the previous project in place.
    """

    def __init__(self) -> None:
        self.project: ProjectModel | None = None
        self.file_name: str | None = None
        self.selected_wbs_id: str | None = None

    @property
    def is_loaded(self) -> bool:
        return self.project is not None

    def load(self, project: ProjectModel, file_name: str | None = None) -> None:
        self.project = project
        self.file_name = file_name
        self.selected_wbs_id = None

    def load_text(self, text: str, file_name: str | None = None) -> ProjectModel:
        """Parse *text* and load the result.

        Raises:
            MissingTableError: If the text is not a valid export.  The
                session is left unchanged.
        """
        project = parse_project(text)
        self.load(project, file_name)
        return project

    def clear(self) -> None:
        self.project = None
        self.file_name = None
        self.selected_wbs_id = None

    def select_wbs(self, wbs_id: str | None) -> None:
        """Select a WBS subtree; ``None`` clears the selection."""
        self.selected_wbs_id = wbs_id

    def hierarchy(self) -> list[WbsTreeNode]:
        if self.project is None:
            return []
        return build_hierarchy(self.project.wbs)

    def filtered_activities(self) -> list[Activity]:
        """Activities under the selected WBS (all of them without a selection)."""
        if self.project is None:
            return []
        return filter_activities(
            self.selected_wbs_id, self.project.activities, self.project.wbs
        )
