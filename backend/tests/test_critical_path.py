"""
Tests for the Critical Path Method calculation.

All runs use a fixed reference date so results do not depend on the day the
suite runs.
"""

from datetime import date, timedelta
from types import SimpleNamespace

from critpath.services.critical_path import analyze_critical_path
from critpath.services.snapshot import TaskSnapshot, build_snapshots


REF = date(2026, 1, 1)


def days(n: int) -> date:
    return REF + timedelta(days=n)


def make_tasks(rows, edges):
    """
    Build linked snapshots.

    rows: (id, title, due_date) tuples in task-list order
    edges: (dependency_id, dependent_id) pairs
    """
    records = [
        SimpleNamespace(id=i, title=title, due_date=due, completed=False)
        for i, title, due in rows
    ]
    return build_snapshots(records, edges)


class TestCPMCalculation:
    """Forward pass, backward pass and path tracing on small graphs."""

    def test_simple_chain(self):
        """
        A (due in 3 days) -> B (due in 5 days) -> C (no due date)

        A: 3 days, REF .. REF+3
        B: 5 days, REF+3 .. REF+8
        C: 1 day,  REF+8 .. REF+9
        """
        tasks = make_tasks(
            [(1, "A", days(3)), (2, "B", days(5)), (3, "C", None)],
            [(1, 2), (2, 3)],
        )

        schedule = analyze_critical_path(tasks, REF)
        a, b, c = (schedule.tasks[i] for i in (1, 2, 3))

        assert (a.duration, b.duration, c.duration) == (3, 5, 1)
        assert a.earliest_finish == days(3)
        assert b.earliest_start == days(3)
        assert c.earliest_finish == days(9)
        assert schedule.project_end_date == days(9)

        assert schedule.critical_path == [1, 2, 3]
        for task in (a, b, c):
            assert task.is_critical
            assert task.slack == 0
            assert task.critical_path == [1, 2, 3]

    def test_diamond_dependency(self):
        """
        Diamond pattern:

            A (1 day)
           / \\
          B   C  (B: 3 days via due date, C: 1 day)
           \\ /
            D (1 day, waits for both)

        D waits for B (the longer branch); C has 2 days of slack.
        """
        tasks = make_tasks(
            [(1, "A", None), (2, "B", days(3)), (3, "C", None), (4, "D", None)],
            [(1, 2), (1, 3), (2, 4), (3, 4)],
        )

        schedule = analyze_critical_path(tasks, REF)
        c = schedule.tasks[3]
        d = schedule.tasks[4]

        assert d.earliest_start == days(4)
        assert c.earliest_start == days(1)
        assert c.latest_start == days(3)
        assert c.slack == 2.0
        assert not c.is_critical
        assert schedule.critical_path == [1, 2, 4]

    def test_multiple_dependencies_max_wins(self):
        """ES is the latest finish among all dependencies."""
        tasks = make_tasks(
            [(1, "A", days(2)), (2, "B", days(6)), (3, "C", None)],
            [(1, 3), (2, 3)],
        )

        schedule = analyze_critical_path(tasks, REF)

        assert schedule.tasks[3].earliest_start == days(6)

    def test_first_zero_slack_dependency_wins_the_trace(self):
        """
        Two equal branches B and C into D, D lists C first.
        Both have zero slack; only the traced one is critical.
        """
        a = TaskSnapshot(id=1, title="A")
        b = TaskSnapshot(id=2, title="B", dependencies=[a])
        c = TaskSnapshot(id=3, title="C", dependencies=[a])
        d = TaskSnapshot(id=4, title="D", dependencies=[c, b])
        a.dependents = [b, c]
        b.dependents = [d]
        c.dependents = [d]

        schedule = analyze_critical_path([a, b, c, d], REF)

        assert schedule.critical_path == [1, 3, 4]
        assert schedule.tasks[2].zero_slack
        assert not schedule.tasks[2].is_critical
        assert schedule.tasks[2].critical_path == []

    def test_first_zero_slack_sink_in_task_order(self):
        """Two independent one-day tasks: only the first is reported."""
        tasks = make_tasks([(1, "P", None), (2, "Q", None)], [])

        schedule = analyze_critical_path(tasks, REF)

        assert schedule.critical_path == [1]
        assert schedule.tasks[2].zero_slack
        assert not schedule.tasks[2].is_critical

    def test_long_chain_propagation(self):
        """T0 -> T1 -> ... -> T9, one day each."""
        num_tasks = 10
        tasks = make_tasks(
            [(i, f"T{i}", None) for i in range(num_tasks)],
            [(i, i + 1) for i in range(num_tasks - 1)],
        )

        schedule = analyze_critical_path(tasks, REF)

        for i in range(num_tasks):
            assert schedule.tasks[i].earliest_start == days(i)
        assert schedule.project_end_date == days(num_tasks)
        assert schedule.critical_path == list(range(num_tasks))

    def test_dependency_order_from_store_is_kept(self):
        tasks = make_tasks(
            [(1, "A", None), (2, "B", None), (3, "C", None)],
            [(2, 3), (1, 3)],
        )

        schedule = analyze_critical_path(tasks, REF)

        assert schedule.tasks[3].dependency_ids == [2, 1]
        assert schedule.tasks[1].dependent_ids == [3]


class TestDegenerateInput:

    def test_empty_task_set(self):
        schedule = analyze_critical_path([], REF)

        assert schedule.tasks == {}
        assert schedule.project_end_date == REF
        assert schedule.critical_path == []

    def test_single_isolated_task(self):
        tasks = make_tasks([(7, "Solo", None)], [])

        schedule = analyze_critical_path(tasks, REF)
        solo = schedule.tasks[7]

        assert solo.earliest_start == REF
        assert solo.latest_finish == days(1)
        assert schedule.critical_path == [7]
        assert solo.is_critical

    def test_past_due_isolated_task(self):
        """
        D has no dependencies or dependents and was due five days ago.
        Duration floors at 1; LF is the due date; negative slack clamps to 0.
        """
        due = days(-5)
        tasks = make_tasks([(4, "D", due)], [])

        schedule = analyze_critical_path(tasks, REF)
        d = schedule.tasks[4]

        assert d.duration == 1
        assert d.latest_finish == due
        assert d.latest_start == due - timedelta(days=1)
        assert d.earliest_start > d.latest_start
        assert d.slack == 0

    def test_missing_reference_is_skipped(self):
        ghost = TaskSnapshot(id=99, title="Deleted")
        a = TaskSnapshot(id=1, title="A", dependencies=[ghost])

        schedule = analyze_critical_path([a], REF)

        assert schedule.tasks[1].dependency_ids == []
        assert schedule.tasks[1].earliest_start == REF
        assert 99 not in schedule.tasks

    def test_cycle_terminates_and_leaves_cycle_unscheduled(self):
        """
        A and B depend on each other; C depends on A; D is unrelated.
        The call returns; A and B keep unset fields; the rest is scheduled.
        """
        a = TaskSnapshot(id=1, title="A")
        b = TaskSnapshot(id=2, title="B")
        c = TaskSnapshot(id=3, title="C")
        d = TaskSnapshot(id=4, title="D")
        a.dependencies, a.dependents = [b], [b, c]
        b.dependencies, b.dependents = [a], [a]
        c.dependencies = [a]

        schedule = analyze_critical_path([a, b, c, d], REF)

        assert schedule.cyclic_task_ids == [1, 2]
        for task_id in (1, 2):
            task = schedule.tasks[task_id]
            assert task.earliest_start is None
            assert task.latest_finish is None
            assert not task.zero_slack
            assert not task.is_critical
        assert schedule.tasks[3].earliest_start == REF
        assert schedule.tasks[4].earliest_finish == days(1)
        # C is not a source, but its only dependency is unscheduled
        assert schedule.tasks[3].dependency_ids == [1]
        assert schedule.critical_path == [3]

    def test_fully_cyclic_graph_has_no_critical_path(self):
        a = TaskSnapshot(id=1, title="A")
        b = TaskSnapshot(id=2, title="B")
        a.dependencies, a.dependents = [b], [b]
        b.dependencies, b.dependents = [a], [a]

        schedule = analyze_critical_path([a, b], REF)

        assert schedule.critical_path == []
        assert schedule.project_end_date == REF
        assert not any(t.is_critical for t in schedule.tasks.values())


class TestScheduleProperties:
    """Invariants checked over a mixed graph with due dates."""

    EDGES = [(1, 3), (2, 3), (2, 4), (3, 5), (4, 5), (4, 6), (7, 6), (5, 8)]

    def build(self):
        rows = [
            (1, "Design", days(4)),
            (2, "Specs", None),
            (3, "Build", days(10)),
            (4, "Procure", days(2)),
            (5, "Integrate", None),
            (6, "Docs", days(30)),
            (7, "Hire", days(-3)),
            (8, "Launch", None),
        ]
        return make_tasks(rows, self.EDGES)

    def test_pass_identities(self):
        schedule = analyze_critical_path(self.build(), REF)
        for task in schedule.tasks.values():
            assert task.duration >= 1
            assert task.earliest_finish == task.earliest_start + timedelta(days=task.duration)
            assert task.latest_start == task.latest_finish - timedelta(days=task.duration)
            assert task.slack >= 0
            assert task.slack == max(0, (task.latest_start - task.earliest_start).days)

    def test_edge_constraints(self):
        schedule = analyze_critical_path(self.build(), REF)
        for dep_id, task_id in self.EDGES:
            dependency = schedule.tasks[dep_id]
            dependent = schedule.tasks[task_id]
            assert dependent.earliest_start >= dependency.earliest_finish
            assert dependency.latest_finish <= dependent.latest_start

    def test_sources_and_sinks(self):
        schedule = analyze_critical_path(self.build(), REF)
        for task in schedule.tasks.values():
            if not task.dependency_ids:
                assert task.earliest_start == REF
            if not task.dependent_ids:
                assert task.latest_finish == (task.due_date or schedule.project_end_date)

    def test_project_end_is_latest_finish(self):
        schedule = analyze_critical_path(self.build(), REF)
        assert schedule.project_end_date == max(
            t.earliest_finish for t in schedule.tasks.values()
        )

    def test_critical_path_is_a_zero_slack_chain(self):
        schedule = analyze_critical_path(self.build(), REF)
        path = schedule.critical_path

        assert path
        for task_id in path:
            assert schedule.tasks[task_id].slack == 0
            assert schedule.tasks[task_id].is_critical
        for dep_id, task_id in zip(path, path[1:]):
            assert (dep_id, task_id) in self.EDGES
        # Ends at a sink; the trace stops where no dependency has zero slack
        first = schedule.tasks[path[0]]
        assert not any(schedule.tasks[d].zero_slack for d in first.dependency_ids)
        assert not schedule.tasks[path[-1]].dependent_ids

    def test_only_path_members_are_critical(self):
        schedule = analyze_critical_path(self.build(), REF)
        critical = {t.id for t in schedule.tasks.values() if t.is_critical}
        assert critical == set(schedule.critical_path)

    def test_idempotent_for_same_reference_date(self):
        first = analyze_critical_path(self.build(), REF)
        second = analyze_critical_path(self.build(), REF)

        assert first.tasks == second.tasks
        assert first.critical_path == second.critical_path
        assert first.project_end_date == second.project_end_date

    def test_input_snapshots_are_not_modified(self):
        tasks = self.build()
        analyze_critical_path(tasks, REF)
        assert not hasattr(tasks[0], "earliest_start")
