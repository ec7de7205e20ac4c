"""Task ORM model.

``group_id`` and ``assigned_to`` are lookups only; deleting a group
detaches its tasks rather than deleting them.
"""
import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import relationship

from taskflow.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TaskPriority(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"


class TaskStatus(str, enum.Enum):
    pending = "pending"
    in_progress = "in-progress"
    completed = "completed"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Task(Base):
    __tablename__ = "tasks"

    task_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(100), nullable=False)
    description = Column(String(500), nullable=False, default="")
    priority = Column(
        SAEnum(TaskPriority, values_callable=_enum_values),
        nullable=False,
        default=TaskPriority.medium,
    )
    status = Column(
        SAEnum(TaskStatus, values_callable=_enum_values),
        nullable=False,
        default=TaskStatus.pending,
    )
    due_date = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(String(36), ForeignKey("users.user_id"), nullable=False, index=True)
    assigned_to = Column(String(36), ForeignKey("users.user_id"), nullable=True, index=True)
    group_id = Column(String(36), ForeignKey("groups.group_id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    creator = relationship("User", foreign_keys=[created_by], lazy="joined")
    assignee = relationship("User", foreign_keys=[assigned_to], lazy="joined")
