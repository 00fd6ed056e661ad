from critpath.models.task import Task, utc_now
from critpath.models.dependency import Dependency

__all__ = ["Task", "Dependency", "utc_now"]
