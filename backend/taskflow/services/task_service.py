"""Task service: personal and group tasks.

A task is visible to its creator, its assignee and the members of its group.
The creator or an admin of the task's group may edit it; the assignee may
additionally change its status. Only the creator may delete it.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from taskflow.errors import NotFoundError, ValidationError
from taskflow.models.group import Group
from taskflow.models.task import Task, TaskPriority, TaskStatus
from taskflow.models.user import User
from taskflow.services.authorization import GroupAction, can_act
from taskflow.services.group_service import load_group_for
from taskflow.services.transactions import commit

logger = logging.getLogger(__name__)

TASK_NOT_FOUND = "Task not found or access denied"


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they were stored as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _group_of(db: Session, task: Task) -> Optional[Group]:
    if not task.group_id:
        return None
    return db.query(Group).filter(Group.group_id == task.group_id).first()


def _can_view(db: Session, user: User, task: Task) -> bool:
    if user.user_id in (task.created_by, task.assigned_to):
        return True
    group = _group_of(db, task)
    return group is not None and bool(can_act(user.user_id, group, GroupAction.view_tasks))


def _can_edit(db: Session, user: User, task: Task) -> bool:
    if task.created_by == user.user_id:
        return True
    group = _group_of(db, task)
    return group is not None and bool(can_act(user.user_id, group, GroupAction.manage_tasks))


def _validate_assignee(creator_id: str, assigned_to: Optional[str], group: Optional[Group]) -> None:
    if assigned_to is None or assigned_to == creator_id:
        return
    if group is None:
        raise ValidationError("Tasks without a group can only be assigned to their creator")
    if group.find_member(assigned_to) is None:
        raise ValidationError("Assignee must be a member of the task's group")


def _load_visible(db: Session, user: User, task_id: str) -> Task:
    task = db.query(Task).filter(Task.task_id == task_id).first()
    if task is None or not _can_view(db, user, task):
        raise NotFoundError(TASK_NOT_FOUND)
    return task


def _own_tasks_query(db: Session, user: User):
    return db.query(Task).filter(
        or_(Task.created_by == user.user_id, Task.assigned_to == user.user_id)
    )


def create_task(db: Session, user: User, fields: dict[str, Any]) -> Task:
    """Create a task owned by ``user``, optionally inside one of their groups."""
    fields = dict(fields)
    fields["group_id"] = fields.get("group_id") or None
    fields["assigned_to"] = fields.get("assigned_to") or None

    group = None
    if fields.get("group_id"):
        group = load_group_for(db, user, fields["group_id"], GroupAction.view_tasks)
    _validate_assignee(user.user_id, fields.get("assigned_to"), group)

    task = Task(created_by=user.user_id, **fields)
    db.add(task)
    commit(db)
    db.refresh(task)
    logger.info("Created task '%s' (%s) by user %s", task.title, task.task_id, user.user_id)
    return task


def list_tasks(
    db: Session,
    user: User,
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    group_id: Optional[str] = None,
) -> list[Task]:
    """Tasks created by or assigned to ``user``, newest first."""
    query = _own_tasks_query(db, user)
    if status:
        query = query.filter(Task.status == status)
    if priority:
        query = query.filter(Task.priority == priority)
    if group_id:
        query = query.filter(Task.group_id == group_id)
    return query.order_by(Task.created_at.desc()).all()


def list_group_tasks(db: Session, user: User, group_id: str) -> list[Task]:
    load_group_for(db, user, group_id, GroupAction.view_tasks)
    return (
        db.query(Task)
        .filter(Task.group_id == group_id)
        .order_by(Task.created_at.desc())
        .all()
    )


def task_stats(db: Session, user: User) -> dict[str, Any]:
    """Counts by status and priority, plus overdue, over the user's tasks."""
    tasks = _own_tasks_query(db, user).all()
    now = datetime.now(timezone.utc)

    by_status = {s.value: 0 for s in TaskStatus}
    by_priority = {p.value: 0 for p in TaskPriority}
    overdue = 0
    for task in tasks:
        by_status[task.status.value] += 1
        by_priority[task.priority.value] += 1
        if (
            task.due_date is not None
            and task.status != TaskStatus.completed
            and _as_utc(task.due_date) < now
        ):
            overdue += 1

    return {
        "total": len(tasks),
        "by_status": by_status,
        "by_priority": by_priority,
        "overdue": overdue,
    }


def get_task(db: Session, user: User, task_id: str) -> Task:
    return _load_visible(db, user, task_id)


def update_task(db: Session, user: User, task_id: str, changes: dict[str, Any]) -> Task:
    """Partial update; ``changes`` holds only the fields the client sent."""
    task = _load_visible(db, user, task_id)
    if not _can_edit(db, user, task):
        raise NotFoundError(TASK_NOT_FOUND)

    for required in ("title", "priority", "status"):
        if required in changes and changes[required] is None:
            raise ValidationError(f"Task {required} cannot be empty")
    changes = dict(changes)
    if "description" in changes and changes["description"] is None:
        changes["description"] = ""
    for optional in ("group_id", "assigned_to"):
        if optional in changes:
            changes[optional] = changes[optional] or None

    group = _group_of(db, task)
    if "group_id" in changes and changes["group_id"] != task.group_id:
        group = None
        if changes["group_id"]:
            group = load_group_for(db, user, changes["group_id"], GroupAction.view_tasks)
    assigned_to = changes.get("assigned_to", task.assigned_to)
    if "assigned_to" in changes or "group_id" in changes:
        _validate_assignee(task.created_by, assigned_to, group)

    for field, value in changes.items():
        setattr(task, field, value)
    commit(db)
    db.refresh(task)
    logger.info("Updated task %s by user %s", task_id, user.user_id)
    return task


def update_task_status(db: Session, user: User, task_id: str, status: TaskStatus) -> Task:
    task = _load_visible(db, user, task_id)
    if task.assigned_to != user.user_id and not _can_edit(db, user, task):
        raise NotFoundError(TASK_NOT_FOUND)

    task.status = status
    commit(db)
    db.refresh(task)
    logger.info("Task %s status set to %s by user %s", task_id, status.value, user.user_id)
    return task


def delete_task(db: Session, user: User, task_id: str) -> None:
    task = _load_visible(db, user, task_id)
    if task.created_by != user.user_id:
        raise NotFoundError(TASK_NOT_FOUND)

    db.delete(task)
    commit(db)
    logger.info("Deleted task %s by user %s", task_id, user.user_id)
