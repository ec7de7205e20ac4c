"""Pydantic schemas for Tasks."""
from __future__ import annotations
from datetime import datetime, timezone
from typing import Annotated, Optional
from pydantic import AfterValidator, BaseModel, Field

from taskflow.models.task import TaskPriority, TaskStatus
from taskflow.schemas.user import UserBrief


def _strip_title(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("Please add a task title")
    if len(v) > 100:
        raise ValueError("Title cannot be more than 100 characters")
    return v


def _strip_description(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if len(v) > 500:
        raise ValueError("Description cannot be more than 500 characters")
    return v


def _to_utc(v: Optional[datetime]) -> Optional[datetime]:
    # Stored as UTC; naive input is taken to already be UTC.
    if v is None or v.tzinfo is None:
        return v
    return v.astimezone(timezone.utc)


Title = Annotated[str, AfterValidator(_strip_title)]
Description = Annotated[str, AfterValidator(_strip_description)]
DueDate = Annotated[datetime, AfterValidator(_to_utc)]


class TaskCreate(BaseModel):
    title: Title
    description: Description = ""
    priority: TaskPriority = TaskPriority.medium
    status: TaskStatus = TaskStatus.pending
    due_date: Optional[DueDate] = None
    assigned_to: Optional[str] = None
    group_id: Optional[str] = None


class TaskUpdate(BaseModel):
    title: Optional[Title] = None
    description: Optional[Description] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None
    due_date: Optional[DueDate] = None
    assigned_to: Optional[str] = None
    group_id: Optional[str] = None


class TaskStatusUpdate(BaseModel):
    status: TaskStatus


class TaskOut(BaseModel):
    task_id: str
    title: str
    description: str
    priority: TaskPriority
    status: TaskStatus
    due_date: Optional[datetime] = None
    created_by: UserBrief = Field(validation_alias="creator")
    assigned_to: Optional[UserBrief] = Field(default=None, validation_alias="assignee")
    group_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TaskResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    task: TaskOut


class TaskListResponse(BaseModel):
    success: bool = True
    tasks: list[TaskOut]
    count: int


class TaskStats(BaseModel):
    total: int
    by_status: dict[str, int]
    by_priority: dict[str, int]
    overdue: int


class TaskStatsResponse(BaseModel):
    success: bool = True
    stats: TaskStats
