from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from tasker.models.task import TITLE_MAX_LENGTH, TaskPriority, TaskStatus


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


class TaskCreate(BaseModel):
    title: str = Field("", max_length=TITLE_MAX_LENGTH)
    status: Optional[TaskStatus] = None
    due_date: Optional[datetime] = None
    priority: Optional[TaskPriority] = None

    @field_validator("status", "priority", "due_date", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return _blank_to_none(v)


class TaskUpdate(BaseModel):
    # PUT은 전체 덮어쓰기: 빠진 status는 todo, 빠진 due_date는 비워진다
    title: str = Field("", max_length=TITLE_MAX_LENGTH)
    status: Optional[TaskStatus] = None
    due_date: Optional[datetime] = None

    @field_validator("status", "due_date", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return _blank_to_none(v)


class TaskRead(BaseModel):
    id: int
    user_id: int
    title: str
    status: str
    priority: str
    due_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class TaskListResponse(BaseModel):
    tasks: List[TaskRead]
    total: int
    page: int
    limit: int
    total_pages: int


class TaskStats(BaseModel):
    total_tasks: int
    completed: int
    pending: int


class TaskHistoryRead(BaseModel):
    id: int
    task_id: int
    changed_by: int
    field: str
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    change_time: datetime
