from enum import Enum
from sqlmodel import SQLModel, Field
from datetime import datetime
from typing import Optional


class TaskStatus(str, Enum):
    todo = "todo"
    in_progress = "in_progress"
    done = "done"


class TaskPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


TITLE_MAX_LENGTH = 255


class Task(SQLModel, table=True):
    __tablename__ = "tasks"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    title: str = Field(max_length=TITLE_MAX_LENGTH)
    status: str = Field(default=TaskStatus.todo.value, max_length=20, index=True)
    priority: str = Field(default=TaskPriority.medium.value, max_length=10)
    due_date: Optional[datetime] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
    deleted_at: Optional[datetime] = Field(default=None, index=True)
