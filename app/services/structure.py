"""Build the building hierarchy from flat parent-pointer rows.

Rows only need ``id``, ``project_id``, ``parent_id``, ``level_type``, ``name``
and ``order_index`` attributes, so ORM instances and plain objects both work.
"""
import logging
from dataclasses import dataclass, field
from typing import Iterable

from app.models.structure import AUDITABLE_LEVELS

logger = logging.getLogger(__name__)


def is_auditable(level_type: str) -> bool:
    return level_type in AUDITABLE_LEVELS


@dataclass
class TreeNode:
    id: str
    project_id: str
    parent_id: str | None
    level_type: str
    name: str
    order_index: int
    is_auditable: bool
    children: list[str] = field(default_factory=list)


@dataclass
class StructureTree:
    """Arena of nodes keyed by id; ``children`` hold ids, never node objects."""

    nodes: dict[str, TreeNode]
    root_id: str | None
    cyclic_ids: frozenset[str] = frozenset()

    @property
    def root(self) -> TreeNode | None:
        return self.nodes.get(self.root_id) if self.root_id else None

    def reachable_ids(self) -> list[str]:
        if self.root_id is None:
            return []
        seen: list[str] = []
        stack = [self.root_id]
        while stack:
            node_id = stack.pop()
            seen.append(node_id)
            stack.extend(reversed(self.nodes[node_id].children))
        return seen

    def orphan_ids(self) -> list[str]:
        reachable = set(self.reachable_ids())
        return [node_id for node_id in self.nodes if node_id not in reachable]

    def __len__(self) -> int:
        return len(self.reachable_ids())

    def to_dict(self, node_id: str | None = None) -> dict | None:
        start = node_id if node_id is not None else self.root_id
        if start is None or start not in self.nodes:
            return None
        node = self.nodes[start]
        return {
            "id": node.id,
            "project_id": node.project_id,
            "parent_id": node.parent_id,
            "level_type": node.level_type,
            "name": node.name,
            "order_index": node.order_index,
            "is_auditable": node.is_auditable,
            "children": [self.to_dict(child_id) for child_id in node.children],
        }


def _find_cycle_members(nodes: dict[str, TreeNode], root_id: str | None) -> set[str]:
    members: set[str] = set()
    done: set[str] = set()
    for start in nodes:
        path: list[str] = []
        position: dict[str, int] = {}
        current = start
        while current is not None and current in nodes and current not in done:
            if current in position:
                members.update(path[position[current]:])
                break
            position[current] = len(path)
            path.append(current)
            if current == root_id:
                break
            current = nodes[current].parent_id
        done.update(path)
    return members


def build_tree(rows: Iterable) -> StructureTree:
    """Assemble a tree in one pass over ``rows``.

    Children keep the order the rows arrive in. A node whose parent is not in
    ``rows`` is left detached. The first PROJECT-level row is the root; with
    none, ``root_id`` is None. Nodes caught in a parent cycle are logged and
    left detached as well.
    """
    nodes: dict[str, TreeNode] = {}
    root_id = None
    for row in rows:
        if row.id in nodes:
            continue
        nodes[row.id] = TreeNode(
            id=row.id,
            project_id=row.project_id,
            parent_id=row.parent_id,
            level_type=row.level_type,
            name=row.name,
            order_index=row.order_index or 0,
            is_auditable=is_auditable(row.level_type),
        )
        if row.level_type == "PROJECT":
            if root_id is None:
                root_id = row.id
            else:
                logger.warning("Ignoring extra PROJECT node %s (root is %s)", row.id, root_id)

    cyclic = _find_cycle_members(nodes, root_id)
    if cyclic:
        logger.warning("Detached %d structure nodes caught in a parent cycle: %s", len(cyclic), sorted(cyclic))

    for node in nodes.values():
        if node.id == root_id or node.parent_id is None or node.id in cyclic:
            continue
        parent = nodes.get(node.parent_id)
        if parent is not None:
            parent.children.append(node.id)

    return StructureTree(nodes=nodes, root_id=root_id, cyclic_ids=frozenset(cyclic))


def build_breadcrumb(rows: Iterable, node_id: str) -> list[dict]:
    """Ancestors of ``node_id`` from the top down, without the PROJECT root."""
    by_id = {row.id: row for row in rows}
    current = by_id.get(node_id)
    if current is None:
        return []

    crumbs = []
    visited = {current.id}
    while current.parent_id:
        parent = by_id.get(current.parent_id)
        if parent is None or parent.id in visited:
            break
        visited.add(parent.id)
        if parent.level_type != "PROJECT":
            crumbs.append({"id": parent.id, "name": parent.name, "level_type": parent.level_type})
        current = parent
    crumbs.reverse()
    return crumbs
