"""Group authorization and membership rules.

``can_act`` answers "may this user do this to this group?" from the group's
in-memory membership list alone, so it is testable without a database.
``enforce`` turns a refusal into the matching TaskFlowError.

Rules:
    view, view_tasks       requester is a member
    leave                  requester is a member; sole admin may not leave
    join                   requester is not yet a member
    update, delete,
    refresh_code,
    manage_tasks           requester is an admin
    promote                requester is an admin; target is a member, not an admin
    remove                 requester is an admin; target is not the requester
                           and is a member
"""
import enum
from dataclasses import dataclass
from typing import Optional

from taskflow.errors import (
    AlreadyAdminError,
    AlreadyMemberError,
    InvalidOperationError,
    LastAdminError,
    NotFoundError,
    NotFoundOrForbiddenError,
    TaskFlowError,
)
from taskflow.models.group import Group, GroupRole


class GroupAction(str, enum.Enum):
    view = "view"
    update = "update"
    delete = "delete"
    promote = "promote"
    remove = "remove"
    leave = "leave"
    refresh_code = "refresh_code"
    join = "join"
    view_tasks = "view_tasks"
    manage_tasks = "manage_tasks"


class DenialReason(str, enum.Enum):
    not_member = "not_member"
    not_admin = "not_admin"
    already_member = "already_member"
    target_not_member = "target_not_member"
    target_already_admin = "target_already_admin"
    self_removal = "self_removal"
    last_admin = "last_admin"


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[DenialReason] = None

    def __bool__(self) -> bool:
        return self.allowed


ALLOW = Decision(True)

MEMBER_ACTIONS = {GroupAction.view, GroupAction.view_tasks, GroupAction.leave}
ADMIN_ACTIONS = {
    GroupAction.update,
    GroupAction.delete,
    GroupAction.promote,
    GroupAction.remove,
    GroupAction.refresh_code,
    GroupAction.manage_tasks,
}


def _deny(reason: DenialReason) -> Decision:
    return Decision(False, reason)


def can_act(
    user_id: str,
    group: Group,
    action: GroupAction,
    target_id: Optional[str] = None,
) -> Decision:
    """Decide whether ``user_id`` may perform ``action`` on ``group``."""
    membership = group.find_member(user_id)

    if action == GroupAction.join:
        return _deny(DenialReason.already_member) if membership else ALLOW

    if membership is None:
        return _deny(DenialReason.not_member)

    if action in MEMBER_ACTIONS:
        if action == GroupAction.leave:
            if membership.role == GroupRole.admin and group.admin_count() == 1:
                return _deny(DenialReason.last_admin)
        return ALLOW

    if action not in ADMIN_ACTIONS:
        raise ValueError(f"Unknown group action: {action!r}")

    if membership.role != GroupRole.admin:
        return _deny(DenialReason.not_admin)

    if action == GroupAction.promote:
        target = group.find_member(target_id)
        if target is None:
            return _deny(DenialReason.target_not_member)
        if target.role == GroupRole.admin:
            return _deny(DenialReason.target_already_admin)

    if action == GroupAction.remove:
        if target_id == user_id:
            return _deny(DenialReason.self_removal)
        if group.find_member(target_id) is None:
            return _deny(DenialReason.target_not_member)

    return ALLOW


def _error_for(action: GroupAction, reason: DenialReason) -> TaskFlowError:
    if reason == DenialReason.not_member:
        if action == GroupAction.leave:
            return NotFoundError("Group not found")
        if action in (GroupAction.view, GroupAction.view_tasks):
            return NotFoundOrForbiddenError("Group not found or access denied")
        return NotFoundOrForbiddenError()
    if reason == DenialReason.not_admin:
        return NotFoundOrForbiddenError()
    if reason == DenialReason.already_member:
        return AlreadyMemberError()
    if reason == DenialReason.target_not_member:
        return NotFoundError("Member not found in group")
    if reason == DenialReason.target_already_admin:
        return AlreadyAdminError()
    if reason == DenialReason.self_removal:
        return InvalidOperationError("Cannot remove yourself. Use leave group instead.")
    if reason == DenialReason.last_admin:
        return LastAdminError()
    raise ValueError(f"Unknown denial reason: {reason!r}")


def enforce(
    user_id: str,
    group: Group,
    action: GroupAction,
    target_id: Optional[str] = None,
) -> None:
    """Raise the matching TaskFlowError unless ``can_act`` allows the action."""
    decision = can_act(user_id, group, action, target_id)
    if not decision.allowed:
        raise _error_for(action, decision.reason)
