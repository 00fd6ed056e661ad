"""
Dependency routes for the Critpath API.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from critpath.database import get_session
from critpath.models import Dependency
from critpath.schemas import DependencyCreate, DependencyRead
from critpath.services.graph import would_create_cycle
from critpath.services.task_store import (
    EDGE_ORDER,
    build_task_graph,
    get_task_or_404,
    next_dependency_position,
)
from critpath.exceptions import (
    NotFoundError,
    CycleDetectedError,
    DuplicateDependencyError,
    SelfDependencyError,
)
from critpath.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/", response_model=DependencyRead, status_code=status.HTTP_201_CREATED)
async def create_dependency(
    dep_in: DependencyCreate,
    session: AsyncSession = Depends(get_session),
) -> Dependency:
    """
    Create a new dependency (edge in the task DAG).

    Performs cycle detection before creating the dependency.
    If adding this edge would create a cycle, returns 400 Bad Request.
    """
    logger.info(f"Creating dependency: {dep_in.predecessor_id} -> {dep_in.successor_id}")

    # Prevent self-loops
    if dep_in.predecessor_id == dep_in.successor_id:
        logger.warning(f"Self-dependency rejected: {dep_in.predecessor_id}")
        raise SelfDependencyError(dep_in.predecessor_id)

    predecessor = await get_task_or_404(session, dep_in.predecessor_id)
    successor = await get_task_or_404(session, dep_in.successor_id)

    # Check if dependency already exists
    existing = await session.get(
        Dependency,
        (dep_in.predecessor_id, dep_in.successor_id)
    )
    if existing:
        logger.warning(f"Duplicate dependency rejected: {dep_in.predecessor_id} -> {dep_in.successor_id}")
        raise DuplicateDependencyError(dep_in.predecessor_id, dep_in.successor_id)

    # Cycle detection
    logger.debug(f"Running cycle detection for {dep_in.predecessor_id} -> {dep_in.successor_id}")
    graph = await build_task_graph(session)
    if would_create_cycle(graph, dep_in.successor_id, dep_in.predecessor_id):
        logger.warning(
            f"Cycle detected: {dep_in.predecessor_id} -> {dep_in.successor_id} "
            f"would create a cycle"
        )
        raise CycleDetectedError(dep_in.successor_id, dep_in.predecessor_id)

    dependency = Dependency(
        predecessor_id=dep_in.predecessor_id,
        successor_id=dep_in.successor_id,
        position=await next_dependency_position(session, dep_in.successor_id),
    )
    session.add(dependency)
    await session.flush()
    await session.refresh(dependency)

    logger.info(f"Created dependency: {predecessor.title} -> {successor.title}")

    return dependency


@router.get("/", response_model=list[DependencyRead])
async def list_dependencies(
    task_id: int | None = None,
    session: AsyncSession = Depends(get_session),
) -> list[Dependency]:
    """
    List dependencies.

    Optionally filter by task_id: dependencies where the task is
    predecessor OR successor.
    """
    query = select(Dependency).order_by(*EDGE_ORDER)
    if task_id is not None:
        query = query.where(
            (Dependency.predecessor_id == task_id) |
            (Dependency.successor_id == task_id)
        )

    result = await session.execute(query)
    dependencies = list(result.scalars().all())

    logger.debug(f"Listed {len(dependencies)} dependencies")

    return dependencies


@router.delete(
    "/{predecessor_id}/{successor_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_dependency(
    predecessor_id: int,
    successor_id: int,
    session: AsyncSession = Depends(get_session),
) -> None:
    """Delete a dependency."""
    dependency = await session.get(Dependency, (predecessor_id, successor_id))
    if not dependency:
        raise NotFoundError("Dependency", f"{predecessor_id}/{successor_id}")

    logger.info(f"Deleting dependency: {predecessor_id} -> {successor_id}")

    await session.delete(dependency)
    await session.flush()
