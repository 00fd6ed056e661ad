"""
Schedule routes for the Critpath API.
"""

from datetime import date
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from critpath.database import get_session
from critpath.schemas import ScheduleRead, ScheduledTaskRead
from critpath.services.critical_path import analyze_critical_path
from critpath.services.task_store import load_snapshots
from critpath.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/", response_model=ScheduleRead)
async def get_schedule(
    reference_date: date | None = None,
    session: AsyncSession = Depends(get_session),
) -> ScheduleRead:
    """
    Run the Critical Path Method over every task in the store.

    reference_date is the "now" the schedule starts from (defaults to today).
    Tasks are returned in store order, newest first.
    """
    snapshots = await load_snapshots(session)
    schedule = analyze_critical_path(snapshots, reference_date)

    logger.info(
        f"Computed schedule for {len(schedule.tasks)} tasks: "
        f"end={schedule.project_end_date} critical_path={schedule.critical_path}"
    )

    return ScheduleRead(
        reference_date=schedule.reference_date,
        project_end_date=schedule.project_end_date,
        critical_path=schedule.critical_path,
        cyclic_task_ids=schedule.cyclic_task_ids,
        tasks=[
            ScheduledTaskRead.model_validate(task)
            for task in schedule.tasks.values()
        ],
    )
