"""Pydantic schemas for Users and authentication."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from taskflow.security import MAX_PASSWORD_BYTES

MIN_PASSWORD_LENGTH = 6


class RegisterRequest(BaseModel):
    name: Optional[str] = Field(default=None, max_length=100)
    fullname: Optional[str] = Field(default=None, max_length=100)
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return v

    @model_validator(mode="after")
    def require_name(self) -> "RegisterRequest":
        # ``fullname`` wins when both are sent
        chosen = (self.fullname or self.name or "").strip()
        if not chosen:
            raise ValueError("Please provide name, email, and password")
        self.name = chosen
        return self


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserBrief(BaseModel):
    """Public view of a user: never includes the password hash."""
    user_id: str
    name: str
    email: str

    model_config = {"from_attributes": True}


class UserOut(UserBrief):
    created_at: datetime


class AuthResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    user: UserOut
    token: str


class MeResponse(BaseModel):
    success: bool = True
    user: UserOut
