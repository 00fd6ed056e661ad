"""
Task routes for the Critpath API.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from critpath.database import get_session
from critpath.models import Task, utc_now
from critpath.schemas import TaskCreate, TaskUpdate, TaskImageUpdate, TaskRead, TaskRef
from critpath.exceptions import ValidationError
from critpath.services.graph import available_dependencies
from critpath.services.task_store import (
    clean_dependency_ids,
    delete_task_edges,
    get_task_or_404,
    load_snapshots,
    replace_dependencies,
    fetch_tasks,
    serialize_tasks,
)
from critpath.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()


def _require_title(title: str) -> str:
    if not title or not title.strip():
        raise ValidationError(
            "Title is required",
            details=[{"loc": ["body", "title"], "msg": "Title is required", "type": "value_error"}],
        )
    return title.strip()


async def _read(session: AsyncSession, task: Task) -> TaskRead:
    return (await serialize_tasks(session, [task]))[0]


@router.get("/", response_model=list[TaskRead])
async def list_tasks(
    session: AsyncSession = Depends(get_session),
) -> list[TaskRead]:
    """List all tasks, newest first, with their dependencies and dependents."""
    tasks = await fetch_tasks(session)
    logger.debug(f"Listed {len(tasks)} tasks")
    return await serialize_tasks(session, tasks)


@router.post("/", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_in: TaskCreate,
    session: AsyncSession = Depends(get_session),
) -> TaskRead:
    """
    Create a new task.

    dependency_ids links the new task to existing tasks it depends on.
    """
    title = _require_title(task_in.title)
    dependency_ids = await clean_dependency_ids(session, task_in.dependency_ids)

    task = Task(title=title, due_date=task_in.due_date)
    session.add(task)
    await session.flush()
    await session.refresh(task)

    if dependency_ids:
        await replace_dependencies(session, task.id, dependency_ids)

    logger.info(f"Created task: id={task.id} title='{task.title}' dependencies={dependency_ids}")

    return await _read(session, task)


@router.get("/{task_id}", response_model=TaskRead)
async def get_task(
    task_id: int,
    session: AsyncSession = Depends(get_session),
) -> TaskRead:
    """Get a task by ID."""
    task = await get_task_or_404(session, task_id)
    return await _read(session, task)


@router.put("/{task_id}", response_model=TaskRead)
async def update_task(
    task_id: int,
    task_in: TaskUpdate,
    session: AsyncSession = Depends(get_session),
) -> TaskRead:
    """
    Update a task.

    Only the fields present in the body change. dependency_ids replaces the
    task's whole dependency list; the task's own id is ignored and ids that
    would create a cycle are rejected.
    """
    task = await get_task_or_404(session, task_id)

    update_data = task_in.model_dump(exclude_unset=True)
    logger.info(f"Updating task {task_id}: {update_data}")

    dependency_ids = update_data.pop("dependency_ids", None)
    if dependency_ids is not None:
        dependency_ids = await clean_dependency_ids(session, dependency_ids, task_id=task_id)

    if "title" in update_data:
        update_data["title"] = _require_title(update_data["title"])
    if update_data.get("completed") is None:
        update_data.pop("completed", None)

    for field, value in update_data.items():
        setattr(task, field, value)
    task.updated_at = utc_now()

    if dependency_ids is not None:
        await replace_dependencies(session, task_id, dependency_ids)

    await session.flush()
    await session.refresh(task)

    return await _read(session, task)


@router.put("/{task_id}/image", response_model=TaskRead)
async def set_task_image(
    task_id: int,
    image_in: TaskImageUpdate,
    session: AsyncSession = Depends(get_session),
) -> TaskRead:
    """Attach (or clear) the task's image URL."""
    task = await get_task_or_404(session, task_id)
    task.image_url = image_in.image_url
    task.updated_at = utc_now()
    await session.flush()
    await session.refresh(task)

    logger.info(f"Set image for task {task_id}")

    return await _read(session, task)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: int,
    session: AsyncSession = Depends(get_session),
) -> None:
    """
    Delete a task.

    Also deletes every dependency involving this task, so its dependents
    simply lose that dependency.
    """
    task = await get_task_or_404(session, task_id)

    logger.info(f"Deleting task {task_id}: '{task.title}'")

    await delete_task_edges(session, task_id)
    await session.delete(task)
    await session.flush()


@router.get("/{task_id}/available-dependencies", response_model=list[TaskRef])
async def list_available_dependencies(
    task_id: int,
    session: AsyncSession = Depends(get_session),
) -> list[TaskRef]:
    """
    Tasks that can be offered as dependencies of this task.

    Excludes the task itself and any task that already depends on it,
    directly or transitively.
    """
    await get_task_or_404(session, task_id)
    snapshots = await load_snapshots(session)
    candidates = available_dependencies(snapshots, task_id)

    logger.debug(f"{len(candidates)} dependency candidates for task {task_id}")

    return [TaskRef(id=c.id, title=c.title) for c in candidates]
