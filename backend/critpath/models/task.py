from datetime import date, datetime, timezone
from sqlmodel import SQLModel, Field


def utc_now() -> datetime:
    """Timezone-aware current time; the store rejects naive datetimes."""
    return datetime.now(timezone.utc)


class Task(SQLModel, table=True):
    """
    Task model as persisted by the store.

    Key fields:
    - due_date: Optional calendar day the task should be done by; the
      scheduler derives the task's duration from it
    - completed: Display flag only, it does not affect scheduling

    Dependency edges live in the ``dependencies`` table (see Dependency).
    """

    __tablename__ = "tasks"

    id: int | None = Field(default=None, primary_key=True)
    title: str = Field(index=True)
    due_date: date | None = Field(default=None)
    completed: bool = Field(default=False)
    image_url: str | None = Field(default=None)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)
