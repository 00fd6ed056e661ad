"""
Graph operations using NetworkX.

This module handles:
- Building the dependency DAG from task snapshots
- Cycle detection for dependency validation (the edge admission guard)
- Filtering dependency candidates for the editing surface
- Topological ordering for the scheduling passes

Nodes are task IDs. Edges go from dependency -> dependent
(predecessor -> successor).
"""

from typing import Any, Iterable, Sequence

import networkx as nx

from critpath.logging_config import get_logger

logger = get_logger(__name__)


def _dependency_id(dependency: Any) -> int:
    # Snapshots carry object references; plain ids are accepted too.
    return getattr(dependency, "id", dependency)


def build_dependency_graph(tasks: Iterable[Any]) -> nx.DiGraph:
    """
    Build a NetworkX DiGraph from tasks and their dependency lists.

    Nodes are added in task order and each task's incoming edges in
    dependency-list order, so iteration over the graph is deterministic.
    Dependencies that point at an unknown task or at the task itself are
    skipped.
    """
    unique = []
    graph = nx.DiGraph()

    for task in tasks:
        if task.id in graph:
            logger.warning(f"Duplicate task id {task.id} ignored")
            continue
        graph.add_node(task.id)
        unique.append(task)

    for task in unique:
        for dependency in task.dependencies:
            dep_id = _dependency_id(dependency)
            if dep_id == task.id:
                logger.warning(f"Task {task.id} lists itself as a dependency, skipping")
                continue
            if dep_id not in graph:
                logger.warning(f"Task {task.id} depends on unknown task {dep_id}, skipping")
                continue
            graph.add_edge(dep_id, task.id)

    return graph


def would_create_cycle(graph: nx.DiGraph, task_id: int, dependency_id: int) -> bool:
    """
    Check if making ``task_id`` depend on ``dependency_id`` would create a cycle.

    The new edge would run dependency_id -> task_id, so a cycle appears
    exactly when task_id already reaches dependency_id, i.e. the proposed
    dependency already depends on the task, directly or through any number
    of intermediate tasks.

    Returns True if a cycle would be created, False otherwise.
    """
    if task_id == dependency_id:
        return True
    if task_id not in graph or dependency_id not in graph:
        return False
    return nx.has_path(graph, task_id, dependency_id)


def available_dependencies(tasks: Sequence[Any], task_id: int) -> list[Any]:
    """
    Tasks that may be offered as dependencies of ``task_id``.

    Keeps input order. Excludes the task itself and every candidate whose
    selection would close a cycle. Existing dependencies stay in the list so
    they can be deselected.
    """
    graph = build_dependency_graph(tasks)
    return [
        candidate
        for candidate in tasks
        if candidate.id != task_id
        and not would_create_cycle(graph, task_id, candidate.id)
    ]


def find_cycle_creating_dependency(
    graph: nx.DiGraph,
    task_id: int,
    dependency_ids: Iterable[int],
) -> int | None:
    """
    Validate a full replacement of ``task_id``'s dependency list.

    The task's current incoming edges are ignored (they are about to be
    cleared). Returns the first id that would create a cycle, or None if the
    whole list can be admitted.
    """
    candidate = graph.copy()
    if task_id in candidate:
        candidate.remove_edges_from(list(candidate.in_edges(task_id)))

    for dep_id in dependency_ids:
        if would_create_cycle(candidate, task_id, dep_id):
            return dep_id
        candidate.add_edge(dep_id, task_id)
    return None


def find_cyclic_nodes(graph: nx.DiGraph) -> set[int]:
    """Task IDs that sit on a cycle (should be empty for a valid graph)."""
    cyclic = set(nx.nodes_with_selfloops(graph))
    for component in nx.strongly_connected_components(graph):
        if len(component) > 1:
            cyclic.update(component)
    return cyclic


def topological_order(graph: nx.DiGraph, exclude: Iterable[int] = ()) -> list[int]:
    """
    Perform topological sort on the graph.

    Returns tasks in order such that for every edge (u, v), u comes before v.
    Computed as the reverse of a depth-first postorder; nodes in ``exclude``
    (typically the cyclic ones) are left out so the order always exists.
    """
    excluded = set(exclude)
    acyclic = graph.subgraph(n for n in graph if n not in excluded)
    return list(reversed(list(nx.dfs_postorder_nodes(acyclic))))
