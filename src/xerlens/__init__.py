"""xerlens -- typed project models from tab-delimited schedule exports."""

__version__ = "0.3.0"
__core_api_version__ = 1

from xerlens.errors import ConfigError, MissingTableError, XerError
from xerlens.filters import descendant_wbs_ids, filter_activities
from xerlens.hierarchy import WbsTreeNode, build_hierarchy
from xerlens.mapper import map_tables, parse_project
from xerlens.models import (
    Activity,
    ExportHeader,
    ProjectHeader,
    ProjectModel,
    Relationship,
    WbsNode,
)
from xerlens.tables import XerTable, parse_tables

__all__ = [
    "Activity",
    "ConfigError",
    "ExportHeader",
    "MissingTableError",
    "ProjectHeader",
    "ProjectModel",
    "Relationship",
    "WbsNode",
    "WbsTreeNode",
    "XerError",
    "XerTable",
    "build_hierarchy",
    "descendant_wbs_ids",
    "filter_activities",
    "map_tables",
    "parse_project",
    "parse_tables",
]
