from datetime import date, datetime
from typing import Annotated
from pydantic import BaseModel, BeforeValidator


def _blank_to_none(value):
    # Date inputs from forms arrive as "" when cleared
    if isinstance(value, str) and not value.strip():
        return None
    return value


OptionalDate = Annotated[date | None, BeforeValidator(_blank_to_none)]


class TaskCreate(BaseModel):
    """Schema for creating a new task."""
    title: str
    due_date: OptionalDate = None
    dependency_ids: list[int] = []


class TaskUpdate(BaseModel):
    """
    Schema for updating a task.

    dependency_ids, when present, replaces the whole dependency list.
    """
    title: str | None = None
    completed: bool | None = None
    due_date: OptionalDate = None
    image_url: str | None = None
    dependency_ids: list[int] | None = None


class TaskImageUpdate(BaseModel):
    """Schema for attaching an image to a task."""
    image_url: str | None


class TaskRef(BaseModel):
    """Compact reference to a related task."""
    id: int
    title: str

    model_config = {"from_attributes": True}


class TaskRead(BaseModel):
    """Schema for reading a task with its dependency and dependent lists."""
    id: int
    title: str
    due_date: date | None
    completed: bool
    image_url: str | None
    created_at: datetime
    updated_at: datetime
    dependencies: list[TaskRef] = []
    dependents: list[TaskRef] = []

    model_config = {"from_attributes": True}
