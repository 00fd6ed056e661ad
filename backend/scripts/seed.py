#!/usr/bin/env python3
"""
Seed script to generate a sample task graph and print its schedule.

Generates a layered DAG:
- Tasks are created in "waves" (levels)
- Each task after the first wave depends on 1-3 tasks from recent waves
- About a third of the tasks have a due date

Usage:
    python -m scripts.seed [--tasks 40] [--clear] [--seed 7]

Options:
    --tasks N    Number of tasks to generate (default: 40)
    --clear      Clear existing data before seeding
    --seed N     Random seed for a reproducible graph
"""

import argparse
import asyncio
import random
import time
from datetime import date, timedelta
from typing import Dict, List, Tuple

from sqlalchemy import delete

from critpath.database import async_session_maker, init_db
from critpath.models import Task, Dependency
from critpath.services.critical_path import analyze_critical_path
from critpath.services.task_store import load_snapshots


async def clear_data():
    """Clear all existing data."""
    print("Clearing existing data...")
    async with async_session_maker() as session:
        await session.execute(delete(Dependency))
        await session.execute(delete(Task))
        await session.commit()
    print("Data cleared.")


def generate_tasks(num_tasks: int) -> Tuple[List[Task], List[List[Task]]]:
    """
    Generate tasks grouped in waves.

    Returns:
        Tuple of (all tasks, tasks per wave)
    """
    num_waves = max(3, num_tasks // 8)
    tasks_per_wave = max(1, num_tasks // num_waves)
    today = date.today()

    tasks: List[Task] = []
    waves: List[List[Task]] = []

    for wave in range(num_waves):
        wave_size = tasks_per_wave
        # Last wave gets remaining tasks
        if wave == num_waves - 1:
            wave_size = num_tasks - len(tasks)
        if wave_size <= 0:
            break

        wave_tasks = []
        for i in range(wave_size):
            due_date = None
            if random.random() < 0.33:
                due_date = today + timedelta(days=random.randint(1, 30))
            task = Task(title=f"Task W{wave:02d}-{i:02d}", due_date=due_date)
            tasks.append(task)
            wave_tasks.append(task)
        waves.append(wave_tasks)

    return tasks, waves


def generate_dependencies(waves: List[List[Task]]) -> List[Tuple[int, int]]:
    """Link each task to 1-3 tasks from the previous three waves."""
    edges: List[Tuple[int, int]] = []
    for wave in range(1, len(waves)):
        available_waves = list(range(max(0, wave - 3), wave))
        for task in waves[wave]:
            num_deps = random.randint(1, min(3, len(waves[wave - 1])))
            for _ in range(num_deps):
                dep_task = random.choice(waves[random.choice(available_waves)])
                if (dep_task.id, task.id) not in edges:
                    edges.append((dep_task.id, task.id))
    return edges


async def seed(num_tasks: int) -> None:
    """Insert a generated graph."""
    tasks, waves = generate_tasks(num_tasks)

    async with async_session_maker() as session:
        print(f"Inserting {len(tasks)} tasks...")
        session.add_all(tasks)
        await session.flush()
        for task in tasks:
            await session.refresh(task)

        edges = generate_dependencies(waves)
        print(f"Inserting {len(edges)} dependencies...")
        positions: Dict[int, int] = {}
        for pred_id, succ_id in edges:
            position = positions.get(succ_id, 0)
            positions[succ_id] = position + 1
            session.add(
                Dependency(predecessor_id=pred_id, successor_id=succ_id, position=position)
            )
        await session.commit()


async def print_schedule() -> None:
    """Run the scheduler over the store and print a summary."""
    async with async_session_maker() as session:
        snapshots = await load_snapshots(session)

    start_time = time.time()
    schedule = analyze_critical_path(snapshots)
    elapsed = time.time() - start_time

    titles = {task.id: task.title for task in schedule.tasks.values()}
    zero_slack = sum(1 for task in schedule.tasks.values() if task.zero_slack)

    print("\n=== Schedule ===")
    print(f"Tasks:            {len(schedule.tasks)}")
    print(f"Project end:      {schedule.project_end_date}")
    print(f"Zero-slack tasks: {zero_slack}")
    print(f"Critical path:    {' -> '.join(titles[i] for i in schedule.critical_path)}")
    print(f"Compute time:     {elapsed * 1000:.2f}ms")


async def main():
    parser = argparse.ArgumentParser(description="Seed the database with a sample task graph")
    parser.add_argument("--tasks", type=int, default=40, help="Number of tasks to create")
    parser.add_argument("--clear", action="store_true", help="Clear existing data first")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")

    args = parser.parse_args()
    if args.seed is not None:
        random.seed(args.seed)

    print("=== Critpath Seed Script ===")

    await init_db()

    if args.clear:
        await clear_data()

    await seed(args.tasks)
    await print_schedule()

    print("\n=== Seeding Complete ===")


if __name__ == "__main__":
    asyncio.run(main())
