"""
Immutable task snapshots handed to the scheduling engine.

A snapshot carries its dependency and dependent tasks as object references,
already resolved by whoever loaded the data.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable


@dataclass(eq=False)
class TaskSnapshot:
    """One task as supplied by the task store."""
    id: int
    title: str
    due_date: date | None = None
    completed: bool = False
    # Shared references into the same snapshot set; kept out of repr to
    # avoid walking the whole graph.
    dependencies: list["TaskSnapshot"] = field(default_factory=list, repr=False)
    dependents: list["TaskSnapshot"] = field(default_factory=list, repr=False)


def build_snapshots(
    tasks: Iterable[Any],
    edges: Iterable[tuple[int, int]],
) -> list[TaskSnapshot]:
    """
    Build linked snapshots from flat rows.

    Args:
        tasks: Objects with ``id``, ``title``, ``due_date`` and ``completed``
            attributes, in the order the engine should see them.
        edges: ``(predecessor_id, successor_id)`` pairs, meaning the successor
            depends on the predecessor.

    Returns:
        Snapshots whose ``dependencies`` and ``dependents`` lists are exact
        inverses of each other. Edges that touch an unknown task, or point a
        task at itself, are dropped.
    """
    snapshots = [
        TaskSnapshot(
            id=task.id,
            title=task.title,
            due_date=task.due_date,
            completed=bool(task.completed),
        )
        for task in tasks
    ]
    by_id = {snap.id: snap for snap in snapshots}

    seen = set()
    for predecessor_id, successor_id in edges:
        if predecessor_id == successor_id or (predecessor_id, successor_id) in seen:
            continue
        predecessor = by_id.get(predecessor_id)
        successor = by_id.get(successor_id)
        if predecessor is None or successor is None:
            continue
        seen.add((predecessor_id, successor_id))
        successor.dependencies.append(predecessor)
        predecessor.dependents.append(successor)

    return snapshots
