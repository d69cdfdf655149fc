from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Session

from tasker.core.errors import ValidationError
from tasker.dependencies.auth import Identity
from tasker.models.task import Task, TaskPriority, TaskStatus
from tasker.models.task_history import TaskHistory
from tasker.repositories import tasks as repo
from tasker.repositories.tasks import Pagination, TaskFilters
from tasker.schemas.task import (
    TaskCreate,
    TaskHistoryRead,
    TaskListResponse,
    TaskRead,
    TaskStats,
    TaskUpdate,
)

log = logging.getLogger(__name__)

TRACKED_FIELDS = ("title", "status", "due_date")


def _as_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Stored timestamps are naive UTC; convert aware inputs before they hit the store."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _require_title(title: str) -> str:
    title = (title or "").strip()
    if not title:
        raise ValidationError("title is required")
    return title


def _read(task: Task) -> TaskRead:
    return TaskRead.model_validate(task, from_attributes=True)


def _render(value) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def create_task(db: Session, identity: Identity, payload: TaskCreate) -> TaskRead:
    title = _require_title(payload.title)
    task = repo.create_task(
        db,
        identity.user_id,
        title=title,
        status=(payload.status or TaskStatus.todo).value,
        due_date=_as_naive_utc(payload.due_date),
        priority=(payload.priority or TaskPriority.medium).value,
    )
    log.info("task created id=%s user=%s", task.id, identity.user_id)
    return _read(task)


def list_tasks(
    db: Session,
    identity: Identity,
    *,
    filters: TaskFilters,
    pagination: Pagination,
) -> TaskListResponse:
    items, total = repo.list_tasks(db, identity.user_id, filters=filters, pagination=pagination)
    return TaskListResponse(
        tasks=[_read(t) for t in items],
        total=total,
        page=pagination.page,
        limit=pagination.limit,
        total_pages=pagination.total_pages(total),
    )


def get_task(db: Session, identity: Identity, task_id: int) -> TaskRead:
    return _read(repo.find_owned(db, task_id, identity.user_id))


def update_task(db: Session, identity: Identity, task_id: int, payload: TaskUpdate) -> TaskRead:
    task = repo.find_owned(db, task_id, identity.user_id)
    title = _require_title(payload.title)

    new_values = {
        "title": title,
        "status": (payload.status or TaskStatus.todo).value,
        "due_date": _as_naive_utc(payload.due_date),
    }
    history = []
    for field in TRACKED_FIELDS:
        old = getattr(task, field)
        new = new_values[field]
        if old != new:
            history.append(
                TaskHistory(
                    task_id=task.id,
                    changed_by=identity.user_id,
                    field=field,
                    old_value=_render(old),
                    new_value=_render(new),
                )
            )
            setattr(task, field, new)

    task = repo.update_task(db, task, history)
    log.info("task updated id=%s user=%s changed=%s", task.id, identity.user_id, [h.field for h in history])
    return _read(task)


def delete_task(db: Session, identity: Identity, task_id: int) -> dict:
    task = repo.find_owned(db, task_id, identity.user_id)
    repo.soft_delete(db, task)
    log.info("task deleted id=%s user=%s", task_id, identity.user_id)
    return {"message": "task deleted"}


def due_soon(db: Session, identity: Identity, *, now: Optional[datetime] = None) -> list[TaskRead]:
    now = _as_naive_utc(now) if now is not None else datetime.utcnow()
    return [_read(t) for t in repo.due_soon(db, identity.user_id, now=now)]


def stats(db: Session, identity: Identity) -> TaskStats:
    completed = repo.count_by_status(db, identity.user_id, TaskStatus.done.value)
    pending = sum(
        repo.count_by_status(db, identity.user_id, s.value)
        for s in (TaskStatus.todo, TaskStatus.in_progress)
    )
    return TaskStats(
        total_tasks=repo.count_active(db, identity.user_id),
        completed=completed,
        pending=pending,
    )


def task_history(db: Session, identity: Identity, task_id: int) -> list[TaskHistoryRead]:
    task = repo.find_owned(db, task_id, identity.user_id)
    return [
        TaskHistoryRead.model_validate(row, from_attributes=True)
        for row in repo.list_history(db, task)
    ]
