# tasker/routers/task.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from tasker.db.session import get_session
from tasker.dependencies.auth import Identity, get_current_identity
from tasker.repositories.tasks import Pagination, TaskFilters
from tasker.schemas.task import (
    TaskCreate,
    TaskHistoryRead,
    TaskListResponse,
    TaskRead,
    TaskStats,
    TaskUpdate,
)
from tasker.schemas.user import MessageResponse
from tasker.services import task_service

router = APIRouter(prefix="/tasks", tags=["Tasks"])


@router.post("", response_model=TaskRead)
def create_task(
    body: TaskCreate,
    db: Session = Depends(get_session),
    identity: Identity = Depends(get_current_identity),
):
    return task_service.create_task(db, identity, body)


@router.get("", response_model=TaskListResponse)
def list_tasks(
    # page/limit은 문자열로 받아서 직접 보정 (잘못된 값은 기본값으로)
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="case-insensitive title substring"),
    sort: Optional[str] = Query(None, description="asc | desc on created_at"),
    status: Optional[str] = Query(None),
    due: Optional[str] = Query(None, description="YYYY-MM-DD"),
    db: Session = Depends(get_session),
    identity: Identity = Depends(get_current_identity),
):
    return task_service.list_tasks(
        db,
        identity,
        filters=TaskFilters.from_query(search=search, status=status, due=due, sort=sort),
        pagination=Pagination.from_raw(page, limit),
    )


@router.get("/due-soon", response_model=list[TaskRead])
def get_due_soon_tasks(
    db: Session = Depends(get_session),
    identity: Identity = Depends(get_current_identity),
):
    return task_service.due_soon(db, identity)


@router.get("/stats", response_model=TaskStats)
def get_task_stats(
    db: Session = Depends(get_session),
    identity: Identity = Depends(get_current_identity),
):
    return task_service.stats(db, identity)


@router.get("/{task_id}", response_model=TaskRead)
def get_task(
    task_id: int,
    db: Session = Depends(get_session),
    identity: Identity = Depends(get_current_identity),
):
    return task_service.get_task(db, identity, task_id)


@router.get("/{task_id}/history", response_model=list[TaskHistoryRead])
def get_task_history(
    task_id: int,
    db: Session = Depends(get_session),
    identity: Identity = Depends(get_current_identity),
):
    return task_service.task_history(db, identity, task_id)


@router.put("/{task_id}", response_model=TaskRead)
def update_task(
    task_id: int,
    body: TaskUpdate,
    db: Session = Depends(get_session),
    identity: Identity = Depends(get_current_identity),
):
    return task_service.update_task(db, identity, task_id, body)


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(
    task_id: int,
    db: Session = Depends(get_session),
    identity: Identity = Depends(get_current_identity),
):
    return task_service.delete_task(db, identity, task_id)
