from datetime import datetime
from sqlmodel import SQLModel, Field

from critpath.models.task import utc_now


class Dependency(SQLModel, table=True):
    """
    Dependency model representing a directed edge in the task DAG.

    predecessor_id -> successor_id means:
    "The successor depends on the predecessor, which must finish first"

    Example: If Task B depends on Task A:
    - predecessor_id = A.id (the dependency)
    - successor_id = B.id (the dependent)

    A task's dependencies keep the order they were listed in via position.
    """

    __tablename__ = "dependencies"

    # Composite primary key
    predecessor_id: int = Field(
        foreign_key="tasks.id",
        primary_key=True,
    )
    successor_id: int = Field(
        foreign_key="tasks.id",
        primary_key=True,
    )

    # Index in the successor's dependency list
    position: int = Field(default=0)

    created_at: datetime = Field(default_factory=utc_now)
