"""Group management API routes.

All routes require a bearer token. Admin-only routes answer 404 both when the
group does not exist and when the caller is not one of its admins.
"""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from taskflow.database import get_db
from taskflow.dependencies import get_current_user
from taskflow.models.user import User
from taskflow.schemas.group import (
    GroupCreate,
    GroupJoin,
    GroupListResponse,
    GroupResponse,
    GroupUpdate,
    InvitationCodeResponse,
    MessageResponse,
)
from taskflow.services import group_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
def create_group(
    payload: GroupCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Create a new group. Creator is automatically added as admin."""
    group = group_service.create_group(db, current_user, payload.name, payload.description)
    return {"message": "Group created successfully", "group": group}


@router.get("", response_model=GroupListResponse)
def list_groups(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """List the caller's groups, newest first."""
    groups = group_service.list_groups(db, current_user)
    return {"groups": groups, "count": len(groups)}


@router.post("/join", response_model=GroupResponse)
def join_group(
    payload: GroupJoin,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Join a group with its invitation code."""
    group = group_service.join_group(db, current_user, payload.invitation_code)
    return {"message": f"Successfully joined {group.name}", "group": group}


@router.get("/{group_id}", response_model=GroupResponse)
def get_group(group_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """Fetch a single group the caller belongs to."""
    return {"group": group_service.get_group(db, current_user, group_id)}


@router.put("/{group_id}", response_model=GroupResponse)
def update_group(
    group_id: str,
    payload: GroupUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Rename or re-describe a group (admin only, partial update)."""
    group = group_service.update_group(
        db, current_user, group_id, payload.model_dump(exclude_unset=True)
    )
    return {"message": "Group updated successfully", "group": group}


@router.delete("/{group_id}", response_model=MessageResponse)
def delete_group(group_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """Delete a group (admin only)."""
    group_service.delete_group(db, current_user, group_id)
    return {"message": "Group deleted successfully"}


@router.delete("/{group_id}/leave", response_model=MessageResponse)
def leave_group(group_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """Leave a group; the only admin must transfer ownership or delete it first."""
    name = group_service.leave_group(db, current_user, group_id)
    return {"message": f"You have left {name}"}


@router.put("/{group_id}/refresh-code", response_model=InvitationCodeResponse)
def refresh_invitation_code(
    group_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Rotate the group's invitation code (admin only)."""
    code = group_service.refresh_invitation_code(db, current_user, group_id)
    return {"message": "Invitation code refreshed successfully", "invitation_code": code}


@router.put("/{group_id}/promote/{member_id}", response_model=GroupResponse)
def promote_member(
    group_id: str,
    member_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Promote a member to admin (admin only)."""
    group = group_service.promote_member(db, current_user, group_id, member_id)
    return {"message": "Member promoted to admin successfully", "group": group}


@router.delete("/{group_id}/remove/{member_id}", response_model=GroupResponse)
def remove_member(
    group_id: str,
    member_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Remove another member from a group (admin only)."""
    group = group_service.remove_member(db, current_user, group_id, member_id)
    return {"message": "Member removed from group successfully", "group": group}
