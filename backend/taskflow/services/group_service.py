"""Group service: creation, membership and admin operations.

Every operation loads the group, asks ``authorization.enforce`` whether the
requester may act, mutates, and commits through ``transactions.commit``.
Missing groups and groups the requester may not touch raise the same
NotFoundOrForbiddenError, so group existence is never disclosed.

Membership changes call ``Group.touch()`` so the row's version is checked
on flush; two requests racing on the same group cannot both win.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy.orm import Session

from taskflow.errors import (
    AlreadyMemberError,
    DuplicateError,
    NotFoundError,
    NotFoundOrForbiddenError,
    ValidationError,
)
from taskflow.models.group import Group, GroupMember, GroupRole
from taskflow.models.task import Task
from taskflow.models.user import User
from taskflow.services import invitation_codes
from taskflow.services.authorization import GroupAction, enforce
from taskflow.services.transactions import commit

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 200


def _clean_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Group name is required")
    if len(name) > NAME_MAX_LENGTH:
        raise ValidationError(f"Group name cannot be more than {NAME_MAX_LENGTH} characters")
    return name


def _clean_description(description: Optional[str]) -> str:
    description = (description or "").strip()
    if len(description) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(
            f"Description cannot be more than {DESCRIPTION_MAX_LENGTH} characters"
        )
    return description


def _member_has_group_named(
    db: Session, user_id: str, name: str, exclude_group_id: Optional[str] = None
) -> bool:
    """Group names are unique among the groups a user belongs to."""
    query = (
        db.query(Group.group_id)
        .join(GroupMember, GroupMember.group_id == Group.group_id)
        .filter(GroupMember.user_id == user_id, Group.name == name)
    )
    if exclude_group_id:
        query = query.filter(Group.group_id != exclude_group_id)
    return query.first() is not None


def _load_group(db: Session, group_id: str) -> Optional[Group]:
    return db.query(Group).filter(Group.group_id == group_id).first()


def load_group_for(db: Session, user: User, group_id: str, action: GroupAction,
                   target_id: Optional[str] = None) -> Group:
    """Load a group and check ``action`` is allowed for ``user``."""
    group = _load_group(db, group_id)
    if group is None:
        if action == GroupAction.leave:
            raise NotFoundError("Group not found")
        if action in (GroupAction.view, GroupAction.view_tasks):
            raise NotFoundOrForbiddenError("Group not found or access denied")
        raise NotFoundOrForbiddenError()
    enforce(user.user_id, group, action, target_id)
    return group


def create_group(db: Session, user: User, name: Optional[str], description: Optional[str] = None) -> Group:
    """Create a group whose sole member is ``user`` as admin."""
    name = _clean_name(name)
    description = _clean_description(description)

    if _member_has_group_named(db, user.user_id, name):
        raise DuplicateError("You already have a group with this name")

    group = Group(
        name=name,
        description=description,
        invitation_code=invitation_codes.unique_code(db),
        created_by=user.user_id,
    )
    group.members.append(
        GroupMember(user_id=user.user_id, role=GroupRole.admin, joined_at=datetime.now(timezone.utc))
    )
    db.add(group)
    commit(db)
    db.refresh(group)
    logger.info("Created group '%s' (%s) by user %s", group.name, group.group_id, user.user_id)
    return group


def list_groups(db: Session, user: User) -> list[Group]:
    """Groups ``user`` belongs to, newest first."""
    return (
        db.query(Group)
        .join(GroupMember, GroupMember.group_id == Group.group_id)
        .filter(GroupMember.user_id == user.user_id)
        .order_by(Group.created_at.desc())
        .all()
    )


def get_group(db: Session, user: User, group_id: str) -> Group:
    return load_group_for(db, user, group_id, GroupAction.view)


def join_group(db: Session, user: User, invitation_code: Optional[str]) -> Group:
    """Join the group holding ``invitation_code`` as a regular member."""
    if not invitation_code or not invitation_code.strip():
        raise ValidationError("Invitation code is required")

    code = invitation_codes.normalize_code(invitation_code)
    group = None
    if invitation_codes.is_valid_code(code):
        group = db.query(Group).filter(Group.invitation_code == code).first()
    if group is None:
        raise NotFoundError("Invalid invitation code")

    enforce(user.user_id, group, GroupAction.join)

    group.members.append(
        GroupMember(user_id=user.user_id, role=GroupRole.member, joined_at=datetime.now(timezone.utc))
    )
    group.touch()
    commit(db, on_integrity_error=AlreadyMemberError)
    db.refresh(group)
    logger.info("User %s joined group %s", user.user_id, group.group_id)
    return group


def update_group(db: Session, user: User, group_id: str, changes: dict[str, Any]) -> Group:
    """Rename and/or re-describe a group.

    ``changes`` holds only the fields the client sent: a blank ``name`` is
    ignored, while ``description`` (even "") replaces the current one.
    """
    group = load_group_for(db, user, group_id, GroupAction.update)

    name = changes.get("name")
    if name is not None and name.strip():
        name = _clean_name(name)
        if _member_has_group_named(db, user.user_id, name, exclude_group_id=group.group_id):
            raise DuplicateError("You already have another group with this name")
        group.name = name

    if "description" in changes:
        group.description = _clean_description(changes["description"])

    group.touch()
    commit(db)
    db.refresh(group)
    logger.info("Updated group %s by user %s", group_id, user.user_id)
    return group


def delete_group(db: Session, user: User, group_id: str) -> str:
    """Delete a group; its tasks stay with their owners, detached from it."""
    group = load_group_for(db, user, group_id, GroupAction.delete)
    name = group.name

    detached = (
        db.query(Task)
        .filter(Task.group_id == group_id)
        .update({Task.group_id: None}, synchronize_session=False)
    )
    db.delete(group)
    commit(db)
    logger.info("Deleted group %s by user %s (%d tasks detached)", group_id, user.user_id, detached)
    return name


def leave_group(db: Session, user: User, group_id: str) -> str:
    """Remove ``user`` from a group unless they are its only admin."""
    group = load_group_for(db, user, group_id, GroupAction.leave)
    name = group.name

    group.members.remove(group.find_member(user.user_id))
    group.touch()
    commit(db)
    logger.info("User %s left group %s", user.user_id, group_id)
    return name


def promote_member(db: Session, user: User, group_id: str, member_id: str) -> Group:
    group = load_group_for(db, user, group_id, GroupAction.promote, target_id=member_id)

    group.find_member(member_id).role = GroupRole.admin
    group.touch()
    commit(db)
    db.refresh(group)
    logger.info("User %s promoted %s to admin in group %s", user.user_id, member_id, group_id)
    return group


def remove_member(db: Session, user: User, group_id: str, member_id: str) -> Group:
    group = load_group_for(db, user, group_id, GroupAction.remove, target_id=member_id)

    group.members.remove(group.find_member(member_id))
    group.touch()
    commit(db)
    db.refresh(group)
    logger.info("User %s removed %s from group %s", user.user_id, member_id, group_id)
    return group


def refresh_invitation_code(db: Session, user: User, group_id: str) -> str:
    group = load_group_for(db, user, group_id, GroupAction.refresh_code)

    group.invitation_code = invitation_codes.unique_code(db)
    commit(db)
    logger.info("Refreshed invitation code for group %s", group_id)
    return group.invitation_code
