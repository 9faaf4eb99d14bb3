import enum
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel


class Priority(str, enum.Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class TaskStatus(str, enum.Enum):
    PENDING = "Pending"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"

    def next(self) -> "TaskStatus":
        """Pending -> InProgress -> Completed -> Pending."""
        order = list(TaskStatus)
        return order[(order.index(self) + 1) % len(order)]


def _clean_title(value):
    if value is None:
        return value
    value = str(value).strip()
    if not value:
        raise ValueError("Title is required")
    return value


def _clean_text(value):
    return "" if value is None else str(value).strip()


def _clean_due_date(value):
    value = _clean_text(value)
    if value:
        try:
            date.fromisoformat(value)
        except ValueError:
            raise ValueError("Due date must be an ISO date (YYYY-MM-DD)") from None
    return value


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True


class TaskBase(CamelModel):
    """Fields a user fills in on the task form."""
    title: str = Field(default="", validate_default=True)
    description: str = ""
    due_date: str = ""
    priority: Priority = Priority.MEDIUM

    @field_validator("title", mode="before")
    @classmethod
    def clean_title(cls, value):
        return _clean_title(value)

    @field_validator("description", mode="before")
    @classmethod
    def clean_description(cls, value):
        return _clean_text(value)

    @field_validator("due_date", mode="before")
    @classmethod
    def clean_due_date(cls, value):
        return _clean_due_date(value)

    @field_validator("priority", mode="before")
    @classmethod
    def default_priority(cls, value):
        return value or Priority.MEDIUM


class TaskCreate(TaskBase):
    """Schema for creating new tasks."""
    pass


class TaskUpdate(CamelModel):
    """Partial update; fields left unset keep their current value."""
    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[str] = None
    priority: Optional[Priority] = None
    status: Optional[TaskStatus] = None

    @field_validator("title", mode="before")
    @classmethod
    def clean_title(cls, value):
        return _clean_title(value)

    @field_validator("description", mode="before")
    @classmethod
    def clean_description(cls, value):
        return None if value is None else _clean_text(value)

    @field_validator("due_date", mode="before")
    @classmethod
    def clean_due_date(cls, value):
        return None if value is None else _clean_due_date(value)

    class Config:
        extra = "forbid"


class Task(TaskBase):
    """Complete task record as persisted under ``tasks_<ownerId>``."""
    id: str
    owner_id: str
    status: TaskStatus = TaskStatus.PENDING
    created_at: int
