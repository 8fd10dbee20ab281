"""
Pydantic schemas for auth and user endpoints.

Presence of required fields is checked by the services so that missing
credentials map onto MissingCredentials / MissingFields rather than a
generic 422.
"""

from datetime import datetime
from typing import Optional, Union
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


# ── Login ────────────────────────────────────────────────

class AdminLogin(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserLogin(BaseModel):
    user_name: Optional[str] = None
    password: Optional[str] = None


# ── Registration / update ────────────────────────────────

class UserCreate(BaseModel):
    full_name: Optional[str] = Field(default=None, max_length=120)
    user_name: Optional[str] = Field(default=None, max_length=50)
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    phone: Optional[str] = Field(default=None, max_length=30)
    location: Optional[str] = Field(default=None, max_length=120)
    role: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_none(cls, value):
        return _blank_to_none(value)


class UserUpdate(BaseModel):
    full_name: Optional[str] = Field(default=None, max_length=120)
    user_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = Field(default=None, max_length=30)
    location: Optional[str] = Field(default=None, max_length=120)
    role: Optional[str] = None
    active: Optional[bool] = None

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_none(cls, value):
        return _blank_to_none(value)


# ── Responses ────────────────────────────────────────────

class UserOut(BaseModel):
    """Sanitized user view; the password hash is never part of it."""

    id: Union[UUID, str]
    full_name: str
    user_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    role: str
    is_local: bool = False
    active: bool = True
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class LoginResponse(BaseModel):
    success: bool = True
    message: str = "Login successful"
    access_token: str
    token_type: str = "bearer"
    user: UserOut


class UserResponse(BaseModel):
    success: bool = True
    message: str
    user: UserOut


class UserListResponse(BaseModel):
    success: bool = True
    users: list[UserOut]


class MessageResponse(BaseModel):
    success: bool = True
    message: str
