from datetime import datetime
from pydantic import BaseModel


class DependencyCreate(BaseModel):
    """Schema for creating a new dependency."""
    predecessor_id: int  # The task that must finish first
    successor_id: int    # The task that depends on it


class DependencyRead(BaseModel):
    """Schema for reading a dependency."""
    predecessor_id: int
    successor_id: int
    position: int
    created_at: datetime

    model_config = {"from_attributes": True}
