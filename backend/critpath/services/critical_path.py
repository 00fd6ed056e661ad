"""
Critical Path Method (CPM) implementation.

Calculates:
- Forward pass: Earliest Start (ES), Earliest Finish (EF)
- Backward pass: Latest Start (LS), Latest Finish (LF)
- Slack/Float: max(0, LS - ES)
- Critical Path: one representative zero-slack chain, traced back from
  the first zero-slack sink

Durations are whole days (see ``duration.resolve_duration``) and finish
dates are exclusive: a 3-day task starting on the 1st finishes on the 4th,
which is also the earliest start of anything that depends on it.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Sequence

import networkx as nx

from critpath.logging_config import get_logger
from critpath.services.duration import resolve_duration, to_calendar_date
from critpath.services.graph import (
    build_dependency_graph,
    find_cyclic_nodes,
    topological_order,
)

logger = get_logger(__name__)


@dataclass
class ScheduledTask:
    """Schedule results for a single task."""
    id: int
    title: str
    due_date: date | None
    completed: bool
    duration: int
    # Resolved ids only, in the order the task lists them
    dependency_ids: list[int] = field(default_factory=list)
    dependent_ids: list[int] = field(default_factory=list)
    # Forward pass results
    earliest_start: date | None = None
    earliest_finish: date | None = None
    # Backward pass results
    latest_start: date | None = None
    latest_finish: date | None = None
    # Slack in days (0 = no float)
    slack: float = 0.0
    # Membership in the reported critical path
    is_critical: bool = False
    critical_path: list[int] = field(default_factory=list)

    @property
    def zero_slack(self) -> bool:
        """True for every scheduled task with no float, on the traced path or not."""
        return (
            self.earliest_start is not None
            and self.latest_start is not None
            and self.slack == 0
        )


@dataclass
class ProjectSchedule:
    """Complete CPM analysis for one task snapshot."""
    reference_date: date
    project_end_date: date
    tasks: dict[int, ScheduledTask]
    critical_path: list[int]
    # Tasks left unscheduled because they sit on a dependency cycle
    cyclic_task_ids: list[int] = field(default_factory=list)


def analyze_critical_path(
    tasks: Sequence[Any],
    reference_date: date | None = None,
) -> ProjectSchedule:
    """
    Perform complete CPM analysis on a task snapshot.

    Args:
        tasks: Task snapshots in display order. Each needs ``id``, ``title``,
            ``due_date``, ``completed`` and a ``dependencies`` list.
        reference_date: The "now" of this run. Defaults to today.

    Returns:
        ProjectSchedule with per-task times, slack and the critical path.
        Never raises for dangling references or cycles; affected tasks are
        skipped or left unscheduled instead.
    """
    reference_date = to_calendar_date(reference_date) or date.today()

    graph = build_dependency_graph(tasks)
    records = _init_records(tasks, graph, reference_date)
    if not records:
        return ProjectSchedule(
            reference_date=reference_date,
            project_end_date=reference_date,
            tasks={},
            critical_path=[],
        )

    return _calculate_cpm(graph, records, reference_date)


def _init_records(
    tasks: Sequence[Any],
    graph: nx.DiGraph,
    reference_date: date,
) -> dict[int, ScheduledTask]:
    """One ScheduledTask per graph node, computed fields unset."""
    records: dict[int, ScheduledTask] = {}
    for task in tasks:
        if task.id in records:
            continue
        due_date = to_calendar_date(task.due_date)
        records[task.id] = ScheduledTask(
            id=task.id,
            title=task.title,
            due_date=due_date,
            completed=bool(task.completed),
            duration=resolve_duration(due_date, reference_date),
            dependency_ids=list(graph.predecessors(task.id)),
            dependent_ids=list(graph.successors(task.id)),
        )
    return records


def _calculate_cpm(
    graph: nx.DiGraph,
    records: dict[int, ScheduledTask],
    reference_date: date,
) -> ProjectSchedule:
    """
    Calculate CPM forward and backward passes.

    Both passes walk one topological order: forward in order, backward in
    reverse. Tasks on a cycle are excluded from the order, which is what
    keeps a corrupted graph from looping.
    """
    cyclic = find_cyclic_nodes(graph)
    if cyclic:
        logger.warning(
            f"Dependency cycle detected among tasks {sorted(cyclic)}; "
            f"they will be left unscheduled"
        )
    order = topological_order(graph, exclude=cyclic)

    project_end_date = _forward_pass(records, order, reference_date)
    _backward_pass(records, order, project_end_date)

    task_order = [task_id for task_id in records if task_id not in cyclic]
    critical_path = _find_critical_path(records, task_order)
    for task_id in critical_path:
        record = records[task_id]
        record.is_critical = True
        record.critical_path = list(critical_path)

    logger.debug(
        f"Scheduled {len(order)} tasks: project end {project_end_date}, "
        f"critical path {critical_path}"
    )

    return ProjectSchedule(
        reference_date=reference_date,
        project_end_date=project_end_date,
        tasks=records,
        critical_path=critical_path,
        cyclic_task_ids=sorted(cyclic),
    )


def _forward_pass(
    records: dict[int, ScheduledTask],
    order: list[int],
    reference_date: date,
) -> date:
    """Fill ES/EF and return the project end date (max EF)."""
    for task_id in order:
        record = records[task_id]
        dependency_finishes = [
            records[dep_id].earliest_finish
            for dep_id in record.dependency_ids
            if records[dep_id].earliest_finish is not None
        ]

        if dependency_finishes:
            # ES = max(EF of all dependencies)
            record.earliest_start = max(dependency_finishes)
        else:
            # No dependencies - can start immediately
            record.earliest_start = reference_date

        record.earliest_finish = record.earliest_start + timedelta(days=record.duration)

    return max(
        (records[task_id].earliest_finish for task_id in order),
        default=reference_date,
    )


def _backward_pass(
    records: dict[int, ScheduledTask],
    order: list[int],
    project_end_date: date,
) -> None:
    """Fill LF/LS and slack, walking dependents before dependencies."""
    for task_id in reversed(order):
        record = records[task_id]

        if not record.dependent_ids:
            # Sink - anchored to its own due date, else the project end
            record.latest_finish = record.due_date or project_end_date
        else:
            # LF = min(LS of all dependents)
            dependent_starts = [
                records[succ_id].latest_start
                for succ_id in record.dependent_ids
                if records[succ_id].latest_start is not None
            ]
            record.latest_finish = min(dependent_starts, default=project_end_date)

        record.latest_start = record.latest_finish - timedelta(days=record.duration)

        # A due date tighter than the chain allows would go negative; clamp it.
        record.slack = max(0.0, float((record.latest_start - record.earliest_start).days))


def _find_critical_path(
    records: dict[int, ScheduledTask],
    task_order: list[int],
) -> list[int]:
    """
    Trace one zero-slack chain.

    Starts from the first zero-slack sink in task order and repeatedly steps
    to the first zero-slack dependency until a source is reached. Other
    chains tied at zero slack are not reported here; ``zero_slack`` on each
    ScheduledTask covers those.
    """
    sinks = [
        task_id
        for task_id in task_order
        if not records[task_id].dependent_ids and records[task_id].zero_slack
    ]
    if not sinks:
        return []

    path: list[int] = []
    current: int | None = sinks[0]
    while current is not None:
        path.insert(0, current)
        current = next(
            (dep_id for dep_id in records[current].dependency_ids if records[dep_id].zero_slack),
            None,
        )
    return path
