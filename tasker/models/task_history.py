from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field


class TaskHistory(SQLModel, table=True):
    """
    One row per field changed by an update.
    - changed_by: the authenticated owner who made the change
    - old_value/new_value: string renderings (None when the field was empty)
    """
    __tablename__ = "task_history"

    id: Optional[int] = Field(default=None, primary_key=True)
    task_id: int = Field(foreign_key="tasks.id", index=True)
    changed_by: int = Field(foreign_key="users.id")
    field: str = Field(max_length=50)
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    change_time: datetime = Field(default_factory=datetime.utcnow)
