from .auth import IdentityManager
from .filters import TaskView, view
from .tasks import TaskRepository

__all__ = ["IdentityManager", "TaskRepository", "TaskView", "view"]
