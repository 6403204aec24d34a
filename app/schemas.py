from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import Priority, TaskStatus


class TaskBase(BaseModel):
    # Serialize enums as their values (e.g., "pending")
    model_config = ConfigDict(use_enum_values=True, str_strip_whitespace=True)

    task_name: str = Field(..., min_length=1, max_length=200)
    assignee: str = Field("", max_length=100)
    due_date: datetime
    priority: Priority = Priority.P3
    status: TaskStatus = TaskStatus.pending
    description: str | None = Field(None, max_length=1000)
    tags: list[str] | None = None

    @field_validator("tags")
    @classmethod
    def _check_tags(cls, v: list[str] | None) -> list[str] | None:
        return _clean_tags(v)


class TaskCreate(TaskBase):
    pass


class TaskUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, str_strip_whitespace=True)

    task_name: str | None = Field(None, min_length=1, max_length=200)
    assignee: str | None = Field(None, max_length=100)
    due_date: datetime | None = None
    priority: Priority | None = None
    status: TaskStatus | None = None
    description: str | None = Field(None, max_length=1000)
    tags: list[str] | None = None

    @field_validator("due_date")
    @classmethod
    def _due_in_future(cls, v: datetime | None) -> datetime | None:
        if v is None:
            return v
        now = datetime.now(v.tzinfo) if v.tzinfo else datetime.now()
        if v <= now:
            raise ValueError("Due date must be in the future")
        return v

    @field_validator("tags")
    @classmethod
    def _check_tags(cls, v: list[str] | None) -> list[str] | None:
        return _clean_tags(v)


class TaskOut(TaskBase):
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)
    id: int
    created_at: datetime
    updated_at: datetime


class ParseIn(BaseModel):
    input: str | None = None


class StatusIn(BaseModel):
    status: str | None = None


def _clean_tags(tags: list[str] | None) -> list[str] | None:
    if tags is None:
        return None
    cleaned = [t.strip() for t in tags]
    for t in cleaned:
        if not t or len(t) > 50:
            raise ValueError("Tags must be 1-50 characters")
    return cleaned
