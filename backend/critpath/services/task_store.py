"""
Task store queries.

Loads tasks and dependency edges from the database, returns them
denormalized (each task with its dependency and dependent lists), and
applies dependency-list replacements behind the cycle guard.
"""

from typing import Iterable

import networkx as nx
from sqlalchemy import delete, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from critpath.exceptions import CycleDetectedError, NotFoundError
from critpath.logging_config import get_logger
from critpath.models import Task, Dependency
from critpath.schemas import TaskRead, TaskRef
from critpath.services.graph import build_dependency_graph, find_cycle_creating_dependency
from critpath.services.snapshot import TaskSnapshot, build_snapshots

logger = get_logger(__name__)

# Per-successor list order; created_at only breaks ties between legacy rows
EDGE_ORDER = (Dependency.position, Dependency.created_at, Dependency.predecessor_id)


async def fetch_tasks(session: AsyncSession) -> list[Task]:
    """All tasks, newest first."""
    result = await session.execute(
        select(Task).order_by(Task.created_at.desc(), Task.id.desc())
    )
    return list(result.scalars().all())


async def fetch_edges(
    session: AsyncSession,
    task_ids: Iterable[int] | None = None,
) -> list[Dependency]:
    """
    Dependency edges, each task's dependencies in list order.

    With ``task_ids``, only edges touching one of those tasks are returned.
    """
    query = select(Dependency).order_by(*EDGE_ORDER)
    if task_ids is not None:
        ids = list(task_ids)
        query = query.where(
            or_(Dependency.predecessor_id.in_(ids), Dependency.successor_id.in_(ids))
        )
    result = await session.execute(query)
    return list(result.scalars().all())


async def load_snapshots(session: AsyncSession) -> list[TaskSnapshot]:
    """The whole store as linked snapshots, ready for the scheduler."""
    tasks = await fetch_tasks(session)
    edges = await fetch_edges(session)
    return build_snapshots(
        tasks,
        ((edge.predecessor_id, edge.successor_id) for edge in edges),
    )


async def build_task_graph(session: AsyncSession) -> nx.DiGraph:
    """Build the dependency DAG for every task in the store."""
    return build_dependency_graph(await load_snapshots(session))


async def get_task_or_404(session: AsyncSession, task_id: int) -> Task:
    task = await session.get(Task, task_id)
    if not task:
        raise NotFoundError("Task", task_id)
    return task


async def clean_dependency_ids(
    session: AsyncSession,
    dependency_ids: Iterable[int],
    task_id: int | None = None,
) -> list[int]:
    """
    Normalize a proposed dependency list.

    Drops the task's own id and duplicates (first occurrence wins), then
    checks that every remaining id exists and that none of them would
    create a cycle.

    Raises:
        NotFoundError: A dependency id does not match any task.
        CycleDetectedError: A dependency already depends on the task.
    """
    cleaned: list[int] = []
    for dep_id in dependency_ids:
        if dep_id == task_id:
            logger.debug(f"Ignoring self-dependency on task {task_id}")
            continue
        if dep_id not in cleaned:
            cleaned.append(dep_id)

    if not cleaned:
        return cleaned

    result = await session.execute(select(Task.id).where(Task.id.in_(cleaned)))
    existing = {row[0] for row in result.all()}
    for dep_id in cleaned:
        if dep_id not in existing:
            raise NotFoundError("Dependency task", dep_id)

    # A brand-new task has no dependents yet, so it cannot close a cycle
    if task_id is not None:
        graph = await build_task_graph(session)
        offending = find_cycle_creating_dependency(graph, task_id, cleaned)
        if offending is not None:
            logger.warning(
                f"Cycle detected: task {task_id} depending on {offending} "
                f"would create a cycle"
            )
            raise CycleDetectedError(task_id, offending)

    return cleaned


async def replace_dependencies(
    session: AsyncSession,
    task_id: int,
    dependency_ids: list[int],
) -> None:
    """Clear the task's dependency list and re-link it to ``dependency_ids``."""
    await session.execute(
        delete(Dependency).where(Dependency.successor_id == task_id)
    )
    for position, dep_id in enumerate(dependency_ids):
        session.add(Dependency(predecessor_id=dep_id, successor_id=task_id, position=position))
    await session.flush()


async def next_dependency_position(session: AsyncSession, task_id: int) -> int:
    """Position that appends a new dependency to the end of the task's list."""
    result = await session.execute(
        select(func.max(Dependency.position)).where(Dependency.successor_id == task_id)
    )
    last = result.scalar()
    return 0 if last is None else last + 1


async def delete_task_edges(session: AsyncSession, task_id: int) -> None:
    """Remove every edge in which the task takes part."""
    await session.execute(
        delete(Dependency).where(
            or_(Dependency.predecessor_id == task_id, Dependency.successor_id == task_id)
        )
    )


async def serialize_tasks(session: AsyncSession, tasks: list[Task]) -> list[TaskRead]:
    """Attach dependency and dependent references to each task."""
    if not tasks:
        return []

    edges = await fetch_edges(session, [task.id for task in tasks])

    titles = {task.id: task.title for task in tasks}
    missing = {
        task_id
        for edge in edges
        for task_id in (edge.predecessor_id, edge.successor_id)
        if task_id not in titles
    }
    if missing:
        result = await session.execute(
            select(Task.id, Task.title).where(Task.id.in_(missing))
        )
        titles.update({row[0]: row[1] for row in result.all()})

    dependencies: dict[int, list[TaskRef]] = {task.id: [] for task in tasks}
    dependents: dict[int, list[TaskRef]] = {task.id: [] for task in tasks}
    for edge in edges:
        if edge.successor_id in dependencies:
            dependencies[edge.successor_id].append(
                TaskRef(id=edge.predecessor_id, title=titles.get(edge.predecessor_id, ""))
            )
        if edge.predecessor_id in dependents:
            dependents[edge.predecessor_id].append(
                TaskRef(id=edge.successor_id, title=titles.get(edge.successor_id, ""))
            )

    return [
        TaskRead(
            id=task.id,
            title=task.title,
            due_date=task.due_date,
            completed=task.completed,
            image_url=task.image_url,
            created_at=task.created_at,
            updated_at=task.updated_at,
            dependencies=dependencies[task.id],
            dependents=dependents[task.id],
        )
        for task in tasks
    ]
