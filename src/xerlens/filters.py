"""Activity views over the flat WBS list.

Used by grid and timeline consumers to answer "which activities lie
under this WBS subtree".  Works directly on the flat records; no tree
object is needed.
"""

from __future__ import annotations

from collections import defaultdict

from xerlens.models import Activity, Relationship, WbsNode


def descendant_wbs_ids(root_id: str, flat_wbs: list[WbsNode]) -> set[str]:
    """Return *root_id* plus the ids of every WBS node below it.

    The traversal keeps a visited set, so cyclic parent references
    terminate.  An unknown *root_id* yields ``{root_id}``.  When an id
    appears more than once, the later record's parent is the one used.
    """
    latest = {node.wbs_id: node for node in flat_wbs}
    children_by_parent: dict[str, list[str]] = defaultdict(list)
    for node in latest.values():
        children_by_parent[node.parent_wbs_id].append(node.wbs_id)

    visited = {root_id}
    stack = [root_id]
    while stack:
        current = stack.pop()
        for child_id in children_by_parent.get(current, ()):
            if child_id not in visited:
                visited.add(child_id)
                stack.append(child_id)
    return visited


def filter_activities(
    selected_wbs_id: str | None,
    activities: list[Activity],
    flat_wbs: list[WbsNode],
) -> list[Activity]:
    """Return the activities attached to the selected WBS subtree.

    Args:
        selected_wbs_id: Subtree root, or ``None`` for no selection.
        activities: All activities, in display order.
        flat_wbs: All WBS records.

    Returns:
        ``activities`` itself (same list object) when nothing is
        selected; otherwise a new list of the activities whose
        ``wbs_id`` lies in the subtree, in their original order.
    """
    if selected_wbs_id is None:
        return activities
    wanted = descendant_wbs_ids(selected_wbs_id, flat_wbs)
    return [act for act in activities if act.wbs_id in wanted]


def critical_activities(activities: list[Activity]) -> list[Activity]:
    """Activities with total float <= 0, in their original order."""
    return [act for act in activities if act.is_critical]


def relationships_for(
    task_id: str,
    relationships: list[Relationship],
) -> tuple[list[Relationship], list[Relationship]]:
    """Split the edges touching *task_id* into (predecessors, successors).

    Predecessors are edges ending at *task_id*; successors start there.
    """
    predecessors = [rel for rel in relationships if rel.task_id == task_id]
    successors = [rel for rel in relationships if rel.pred_task_id == task_id]
    return predecessors, successors
