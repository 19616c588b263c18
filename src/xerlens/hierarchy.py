"""WBS hierarchy builder.

Turns the flat parent-pointer list from ``PROJWBS`` into a multi-root
tree.  The tree is derived fresh on every call: the flat ``WbsNode``
records are never mutated, so rebuilding is always safe.

Parent pointers come from an external file and may be dangling or
cyclic.  Dangling and sentinel parents make a node a root.  A link that
would close a cycle is refused and the node becomes a root as well, so
every input id appears exactly once in the result.
"""

from __future__ import annotations

import unicodedata
from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, Field

from xerlens.logging.events import EventType, emit_warning
from xerlens.models import WbsNode


class WbsTreeNode(BaseModel):
    """A WBS node placed in the tree, with children and depth.

    ``model_dump()`` recurses through ``children`` and is bounded by
    pydantic's serializer depth; use :func:`flatten_tree` for deep trees.
    """

    wbs_id: str
    proj_id: str = ""
    short_name: str = ""
    name: str = ""
    parent_wbs_id: str = ""
    children: list[WbsTreeNode] = Field(default_factory=list)
    level: int = 0

    @classmethod
    def from_wbs_node(cls, node: WbsNode) -> WbsTreeNode:
        return cls(
            wbs_id=node.wbs_id,
            proj_id=node.proj_id,
            short_name=node.short_name,
            name=node.name,
            parent_wbs_id=node.parent_wbs_id,
        )

    def to_wbs_node(self) -> WbsNode:
        """Return the flat record this tree node was built from."""
        return WbsNode(
            wbs_id=self.wbs_id,
            proj_id=self.proj_id,
            short_name=self.short_name,
            name=self.name,
            parent_wbs_id=self.parent_wbs_id,
        )

    @property
    def descendant_count(self) -> int:
        """Number of nodes below this one (excluding itself)."""
        return sum(1 for _ in walk_tree(self.children))


def _base_letters(name: str) -> str:
    """Casefolded *name* with accents stripped ("Électrique" -> "electrique")."""
    decomposed = unicodedata.normalize("NFKD", name)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def _name_key(node: WbsTreeNode) -> tuple[str, str, str]:
    # Base letters, then lowercase before uppercase, then the raw name.
    return (_base_letters(node.name), node.name.swapcase(), node.name)


def _closes_cycle(child_id: str, parent_id: str, attached: dict[str, str]) -> bool:
    """True if linking *child_id* under *parent_id* would create a cycle.

    *attached* maps already-linked child ids to their parent ids.
    """
    seen: set[str] = set()
    current: str | None = parent_id
    while current is not None and current not in seen:
        if current == child_id:
            return True
        seen.add(current)
        current = attached.get(current)
    return False


def build_hierarchy(flat_wbs: list[WbsNode]) -> list[WbsTreeNode]:
    """Build the WBS tree from flat records.

    Args:
        flat_wbs: WBS records in export order.

    Returns:
        Root nodes sorted by name; the rest of the tree hangs off
        ``children``, each sibling group sorted by name and every node
        carrying its depth in ``level``.
    """
    nodes: dict[str, WbsTreeNode] = {}
    duplicates: list[str] = []
    for wbs in flat_wbs:
        if wbs.wbs_id in nodes:
            duplicates.append(wbs.wbs_id)
        nodes[wbs.wbs_id] = WbsTreeNode.from_wbs_node(wbs)

    if duplicates:
        emit_warning(
            EventType.wbs_duplicate_id,
            f"{len(duplicates)} duplicate WBS id(s); later records replace earlier ones",
            {"wbs_ids": sorted(set(duplicates))},
        )

    roots: list[WbsTreeNode] = []
    attached: dict[str, str] = {}
    broken: list[str] = []
    for node in nodes.values():
        parent = nodes.get(node.parent_wbs_id)
        if parent is None:
            roots.append(node)
            continue
        if _closes_cycle(node.wbs_id, parent.wbs_id, attached):
            broken.append(node.wbs_id)
            roots.append(node)
            continue
        attached[node.wbs_id] = parent.wbs_id
        parent.children.append(node)

    if broken:
        emit_warning(
            EventType.wbs_cycle_broken,
            f"Cyclic WBS parent references; {len(broken)} node(s) promoted to root",
            {"wbs_ids": broken},
        )

    roots.sort(key=_name_key)
    stack = [(root, 0) for root in reversed(roots)]
    while stack:
        node, level = stack.pop()
        node.level = level
        node.children.sort(key=_name_key)
        stack.extend((child, level + 1) for child in reversed(node.children))
    return roots


def walk_tree(roots: list[WbsTreeNode], max_depth: int | None = None) -> Iterator[WbsTreeNode]:
    """Yield nodes depth-first in display order (pre-order).

    Args:
        roots: Top-level nodes to start from.
        max_depth: If given, nodes with ``level`` deeper than this are
            skipped along with their subtrees.
    """
    stack = list(reversed(roots))
    while stack:
        node = stack.pop()
        if max_depth is not None and node.level > max_depth:
            continue
        yield node
        stack.extend(reversed(node.children))


def find_node(roots: list[WbsTreeNode], wbs_id: str) -> WbsTreeNode | None:
    """Return the tree node with *wbs_id*, or ``None``."""
    for node in walk_tree(roots):
        if node.wbs_id == wbs_id:
            return node
    return None


def flatten_tree(roots: list[WbsTreeNode]) -> list[dict[str, Any]]:
    """Serialize a tree iteratively, one dict per node in display order.

    Each dict carries the flat WBS fields plus ``level`` and
    ``child_ids``; nesting depth is unbounded.
    """
    return [
        {
            **node.to_wbs_node().model_dump(),
            "level": node.level,
            "child_ids": [child.wbs_id for child in node.children],
        }
        for node in walk_tree(roots)
    ]
