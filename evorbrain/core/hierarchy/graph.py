"""Declarative parent/child edges of the life-area hierarchy.

Cascading archive, cascading restore and the hard-delete guard all walk this
list instead of hand-coding one chain per entity type.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class Edge:
    parent: str
    child: str
    foreign_key: str
    # Notes hang off every level but never prevent a hard delete; the
    # database removes them with their parent.
    blocks_hard_delete: bool = True


HIERARCHY: Tuple[Edge, ...] = (
    Edge("life_areas", "goals", "life_area_id"),
    Edge("life_areas", "notes", "life_area_id", blocks_hard_delete=False),
    Edge("goals", "projects", "goal_id"),
    Edge("goals", "notes", "goal_id", blocks_hard_delete=False),
    Edge("projects", "tasks", "project_id"),
    Edge("projects", "notes", "project_id", blocks_hard_delete=False),
    Edge("tasks", "tasks", "parent_task_id"),
    Edge("tasks", "notes", "task_id", blocks_hard_delete=False),
)

# Tables in the order rows are written during a cascade.
ARCHIVE_ORDER: Tuple[str, ...] = ("life_areas", "goals", "projects", "tasks", "notes")

ENTITY_LABELS: Dict[str, str] = {
    "life_areas": "Life area",
    "goals": "Goal",
    "projects": "Project",
    "tasks": "Task",
    "notes": "Note",
}


def child_edges(table: str) -> Tuple[Edge, ...]:
    return tuple(edge for edge in HIERARCHY if edge.parent == table)


def blocking_edges(table: str) -> Tuple[Edge, ...]:
    return tuple(edge for edge in child_edges(table) if edge.blocks_hard_delete)
