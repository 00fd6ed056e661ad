from datetime import date
from pydantic import BaseModel


class ScheduledTaskRead(BaseModel):
    """CPM results for one task."""
    id: int
    title: str
    due_date: date | None
    completed: bool
    duration: int
    dependency_ids: list[int]
    dependent_ids: list[int]
    earliest_start: date | None
    earliest_finish: date | None
    latest_start: date | None
    latest_finish: date | None
    slack: float
    is_critical: bool
    zero_slack: bool
    critical_path: list[int]

    model_config = {"from_attributes": True}


class ScheduleRead(BaseModel):
    """CPM results for the whole task set."""
    reference_date: date
    project_end_date: date
    critical_path: list[int]
    cyclic_task_ids: list[int]
    tasks: list[ScheduledTaskRead]
