from critpath.schemas.task import TaskCreate, TaskUpdate, TaskImageUpdate, TaskRef, TaskRead
from critpath.schemas.dependency import DependencyCreate, DependencyRead
from critpath.schemas.schedule import ScheduledTaskRead, ScheduleRead
from critpath.schemas.image import ImageSearchRead

__all__ = [
    "TaskCreate",
    "TaskUpdate",
    "TaskImageUpdate",
    "TaskRef",
    "TaskRead",
    "DependencyCreate",
    "DependencyRead",
    "ScheduledTaskRead",
    "ScheduleRead",
    "ImageSearchRead",
]
