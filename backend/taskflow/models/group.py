"""Group and GroupMember ORM models.

A Group owns its ordered membership list; GroupMember rows have no life
outside their group and are removed with it.
"""
import enum
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, String, DateTime, Integer, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import relationship

from taskflow.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GroupRole(str, enum.Enum):
    admin = "admin"
    member = "member"


class Group(Base):
    __tablename__ = "groups"

    group_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(50), nullable=False)
    description = Column(String(200), nullable=False, default="")
    invitation_code = Column(String(8), nullable=False, unique=True, index=True)
    created_by = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)
    version = Column(Integer, nullable=False)

    creator = relationship("User", lazy="joined")
    members = relationship(
        "GroupMember",
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="GroupMember.joined_at",
    )

    # Membership changes bump the version; a concurrent writer gets StaleDataError.
    __mapper_args__ = {"version_id_col": version}

    def find_member(self, user_id: str) -> Optional["GroupMember"]:
        for m in self.members:
            if m.user_id == user_id:
                return m
        return None

    def admin_count(self) -> int:
        return sum(1 for m in self.members if m.role == GroupRole.admin)

    def touch(self) -> None:
        """Mark the group row dirty so the version check runs on flush."""
        self.updated_at = _utcnow()


class GroupMember(Base):
    __tablename__ = "group_members"

    group_id = Column(String(36), ForeignKey("groups.group_id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), primary_key=True)
    role = Column(SAEnum(GroupRole), nullable=False, default=GroupRole.member)
    joined_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    group = relationship("Group", back_populates="members")
    user = relationship("User", lazy="joined")
