"""Pydantic schemas for Groups."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import AliasChoices, BaseModel, Field

from taskflow.models.group import GroupRole
from taskflow.schemas.user import UserBrief


class GroupCreate(BaseModel):
    # Presence and length are checked after trimming, in the service
    name: Optional[str] = None
    description: Optional[str] = None


class GroupUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


class GroupJoin(BaseModel):
    invitation_code: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("invitation_code", "invitationCode"),
    )


class GroupMemberOut(BaseModel):
    user: UserBrief
    role: GroupRole
    joined_at: datetime

    model_config = {"from_attributes": True}


class GroupOut(BaseModel):
    group_id: str
    name: str
    description: str
    invitation_code: str
    created_by: UserBrief = Field(validation_alias="creator")
    created_at: datetime
    updated_at: datetime
    members: list[GroupMemberOut] = []

    model_config = {"from_attributes": True}


class GroupResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    group: GroupOut


class GroupListResponse(BaseModel):
    success: bool = True
    groups: list[GroupOut]
    count: int


class InvitationCodeResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    invitation_code: str


class MessageResponse(BaseModel):
    success: bool = True
    message: str
