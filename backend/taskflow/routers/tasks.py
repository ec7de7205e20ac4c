"""Task API routes: delegates to task_service for access checks."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from taskflow.database import get_db
from taskflow.dependencies import get_current_user
from taskflow.models.task import TaskPriority, TaskStatus
from taskflow.models.user import User
from taskflow.schemas.group import MessageResponse
from taskflow.schemas.task import (
    TaskCreate,
    TaskListResponse,
    TaskResponse,
    TaskStatsResponse,
    TaskStatusUpdate,
    TaskUpdate,
)
from taskflow.services import task_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    payload: TaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    task = task_service.create_task(db, current_user, payload.model_dump())
    return {"message": "Task created successfully", "task": task}


@router.get("", response_model=TaskListResponse)
def list_tasks(
    status_filter: Optional[TaskStatus] = Query(None, alias="status"),
    priority: Optional[TaskPriority] = Query(None),
    group_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List tasks created by or assigned to the caller, with optional filters."""
    tasks = task_service.list_tasks(db, current_user, status_filter, priority, group_id)
    return {"tasks": tasks, "count": len(tasks)}


@router.get("/stats", response_model=TaskStatsResponse)
def task_stats(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return {"stats": task_service.task_stats(db, current_user)}


@router.get("/group/{group_id}", response_model=TaskListResponse)
def list_group_tasks(
    group_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List every task in a group the caller belongs to."""
    tasks = task_service.list_group_tasks(db, current_user, group_id)
    return {"tasks": tasks, "count": len(tasks)}


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(task_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return {"task": task_service.get_task(db, current_user, task_id)}


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: str,
    payload: TaskUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update a task (creator or group admin, partial update)."""
    task = task_service.update_task(db, current_user, task_id, payload.model_dump(exclude_unset=True))
    return {"message": "Task updated successfully", "task": task}


@router.put("/{task_id}/status", response_model=TaskResponse)
def update_task_status(
    task_id: str,
    payload: TaskStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Change only the status (creator, assignee or group admin)."""
    task = task_service.update_task_status(db, current_user, task_id, payload.status)
    return {"message": "Task status updated successfully", "task": task}


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(task_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """Delete a task (creator only)."""
    task_service.delete_task(db, current_user, task_id)
    return {"message": "Task deleted successfully"}
