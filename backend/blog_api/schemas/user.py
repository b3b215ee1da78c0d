# blog_api/schemas/user.py
"""
Pydantic schemas for user management endpoints.
"""
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field, ValidationInfo, field_validator


class UserUpdateIn(BaseModel):
    """
    Request model for a user updating their own profile.
    All fields are optional - only provided fields will be updated.
    """
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None  # Must stay unique


class AdminUserUpdateIn(UserUpdateIn):
    """Admin variant: may also change role and password."""
    role: Optional[Literal["user", "admin"]] = None  # Cannot demote the last admin
    password: Optional[str] = Field(default=None, min_length=8)


class AdminUserCreateIn(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=8)
    password_confirmation: str
    role: Literal["user", "admin"] = "user"

    @field_validator("password_confirmation")
    @classmethod
    def passwords_match(cls, v: str, info: ValidationInfo) -> str:
        if "password" in info.data and v != info.data["password"]:
            raise ValueError("The password confirmation does not match.")
        return v
