from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from sqlalchemy import func
from sqlmodel import Session, select

from tasker.core.errors import NotFoundError
from tasker.models.task import Task
from tasker.models.task_history import TaskHistory

log = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
MAX_PAGE = 1_000_000_000
# ids and offsets are bound as signed 64-bit integers
MAX_ID = 2**63 - 1
DUE_SOON_HORIZON = timedelta(hours=72)


def _utcnow() -> datetime:
    return datetime.utcnow()


def _to_positive_int(raw, default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value >= 1 else default


@dataclass(frozen=True)
class Pagination:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @classmethod
    def from_raw(cls, page, limit) -> "Pagination":
        """Normalise raw query values; never yields a negative offset or a zero limit."""
        return cls(
            page=min(_to_positive_int(page, DEFAULT_PAGE), MAX_PAGE),
            limit=min(_to_positive_int(limit, DEFAULT_LIMIT), MAX_LIMIT),
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def total_pages(self, total: int) -> int:
        return (total + self.limit - 1) // self.limit


def parse_due_day(raw: Optional[str]) -> Optional[date]:
    if not raw:
        return None
    try:
        return datetime.strptime(raw.strip(), "%Y-%m-%d").date()
    except ValueError:
        # 잘못된 날짜 필터는 에러 없이 무시
        log.debug("ignoring unparsable due filter %r", raw)
        return None


@dataclass(frozen=True)
class TaskFilters:
    search: Optional[str] = None
    status: Optional[str] = None
    due: Optional[date] = None
    sort: str = "desc"

    @classmethod
    def from_query(
        cls,
        *,
        search: Optional[str] = None,
        status: Optional[str] = None,
        due: Optional[str] = None,
        sort: Optional[str] = None,
    ) -> "TaskFilters":
        sort_dir = (sort or "").strip().lower()
        return cls(
            search=search or None,
            status=status or None,
            due=parse_due_day(due),
            sort=sort_dir if sort_dir in ("asc", "desc") else "desc",
        )


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _scoped(stmt, owner_id: int):
    return stmt.where(Task.user_id == owner_id).where(Task.deleted_at.is_(None))


def _apply_filters(stmt, filters: TaskFilters):
    if filters.search:
        stmt = stmt.where(Task.title.ilike(f"%{_escape_like(filters.search)}%", escape="\\"))
    if filters.status:
        stmt = stmt.where(Task.status == filters.status)
    if filters.due is not None:
        day_start = datetime.combine(filters.due, datetime.min.time())
        stmt = stmt.where(Task.due_date >= day_start).where(Task.due_date < day_start + timedelta(days=1))
    return stmt


def list_tasks(
    db: Session,
    owner_id: int,
    *,
    filters: TaskFilters,
    pagination: Pagination,
) -> tuple[list[Task], int]:
    count_stmt = _apply_filters(_scoped(select(func.count(Task.id)), owner_id), filters)
    total = db.exec(count_stmt).one()

    if filters.sort == "asc":
        ordering = (Task.created_at.asc(), Task.id.asc())
    else:
        ordering = (Task.created_at.desc(), Task.id.desc())

    stmt = (
        _apply_filters(_scoped(select(Task), owner_id), filters)
        .order_by(*ordering)
        .offset(pagination.offset)
        .limit(pagination.limit)
    )
    return list(db.exec(stmt).all()), total


def create_task(
    db: Session,
    owner_id: int,
    *,
    title: str,
    status: str,
    due_date: Optional[datetime],
    priority: str,
) -> Task:
    task = Task(user_id=owner_id, title=title, status=status, due_date=due_date, priority=priority)
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def find_owned(db: Session, task_id: int, owner_id: int) -> Task:
    if not 0 < task_id <= MAX_ID:
        raise NotFoundError("task not found")
    stmt = _scoped(select(Task), owner_id).where(Task.id == task_id)
    task = db.exec(stmt).first()
    if task is None:
        # 존재하지 않는 것과 남의 것은 구분하지 않는다
        raise NotFoundError("task not found")
    return task


def update_task(db: Session, task: Task, history: list[TaskHistory] | None = None) -> Task:
    task.updated_at = _utcnow()
    db.add(task)
    for row in history or []:
        db.add(row)
    db.commit()
    db.refresh(task)
    return task


def soft_delete(db: Session, task: Task) -> None:
    task.deleted_at = _utcnow()
    db.add(task)
    db.commit()


def count_by_status(db: Session, owner_id: int, status: str) -> int:
    stmt = _scoped(select(func.count(Task.id)), owner_id).where(Task.status == status)
    return db.exec(stmt).one()


def count_active(db: Session, owner_id: int) -> int:
    return db.exec(_scoped(select(func.count(Task.id)), owner_id)).one()


def due_soon(
    db: Session,
    owner_id: int,
    *,
    now: datetime,
    horizon: timedelta = DUE_SOON_HORIZON,
) -> list[Task]:
    stmt = (
        _scoped(select(Task), owner_id)
        .where(Task.due_date.is_not(None))
        .where(Task.due_date >= now)
        .where(Task.due_date <= now + horizon)
        .order_by(Task.due_date.asc(), Task.id.asc())
    )
    return list(db.exec(stmt).all())


def list_history(db: Session, task: Task) -> list[TaskHistory]:
    stmt = (
        select(TaskHistory)
        .where(TaskHistory.task_id == task.id)
        .order_by(TaskHistory.change_time.asc(), TaskHistory.id.asc())
    )
    return list(db.exec(stmt).all())
