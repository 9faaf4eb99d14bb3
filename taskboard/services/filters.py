from typing import Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel

from ..schemas.task import Task, TaskStatus


class TaskStats(BaseModel):
    total: int
    pending: int
    in_progress: int
    completed: int
    unfiltered_total: int

    class Config:
        frozen = True


class TaskView(BaseModel):
    """Filtered tasks, grouped by status in Pending, InProgress, Completed order."""
    tasks: Tuple[Task, ...]
    groups: Dict[TaskStatus, Tuple[Task, ...]]
    stats: TaskStats

    class Config:
        frozen = True

    def group(self, status: TaskStatus) -> Tuple[Task, ...]:
        return self.groups.get(TaskStatus(status), ())

    def visible_groups(self) -> List[Tuple[TaskStatus, Tuple[Task, ...]]]:
        """Groups worth rendering: empty ones are left out."""
        return [(status, tasks) for status, tasks in self.groups.items() if tasks]


def matches(
    task: Task,
    search_text: str = "",
    status_filter: Optional[str] = "",
    priority_filter: Optional[str] = "",
) -> bool:
    if search_text:
        needle = search_text.lower()
        if needle not in task.title.lower() and needle not in task.description.lower():
            return False
    if status_filter and task.status != status_filter:
        return False
    if priority_filter and task.priority != priority_filter:
        return False
    return True


def view(
    tasks: Iterable[Task],
    search_text: str = "",
    status_filter: Optional[str] = "",
    priority_filter: Optional[str] = "",
) -> TaskView:
    """Filter and group ``tasks`` without touching them.

    An empty filter value means "any". Statistics cover the filtered tasks;
    ``unfiltered_total`` tells an empty board apart from a search with no hits.
    """
    tasks = tuple(tasks)
    selected = tuple(t for t in tasks if matches(t, search_text, status_filter, priority_filter))
    groups = {status: tuple(t for t in selected if t.status == status) for status in TaskStatus}

    stats = TaskStats(
        total=len(selected),
        pending=len(groups[TaskStatus.PENDING]),
        in_progress=len(groups[TaskStatus.IN_PROGRESS]),
        completed=len(groups[TaskStatus.COMPLETED]),
        unfiltered_total=len(tasks),
    )
    return TaskView(tasks=selected, groups=groups, stats=stats)
