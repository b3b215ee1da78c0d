# blog_api/schemas/auth.py
"""
Pydantic schemas for authentication endpoints.
Defines request models for registration and login.
"""
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, ValidationInfo, field_validator

from blog_api.config import settings

# Token lifetime requested by the client, in minutes (None = server default)
ExpiresIn = Optional[int]


class RegisterIn(BaseModel):
    """
    Request model for user registration.
    The password must be repeated in `password_confirmation`.
    """
    name: str = Field(min_length=1, max_length=255)  # Display name
    email: EmailStr  # Login identifier, must be unique
    password: str = Field(min_length=8)  # Plain text, hashed server-side
    password_confirmation: str  # Must equal `password`
    expires_in: ExpiresIn = Field(
        default=None,
        ge=settings.token_ttl_min_minutes,
        le=settings.token_ttl_max_minutes,
    )  # Token lifetime in minutes

    @field_validator("password_confirmation")
    @classmethod
    def passwords_match(cls, v: str, info: ValidationInfo) -> str:
        if "password" in info.data and v != info.data["password"]:
            raise ValueError("The password confirmation does not match.")
        return v


class LoginIn(BaseModel):
    """
    Request model for user login endpoint.
    Contains credentials for authentication.
    """
    email: EmailStr  # User login email
    password: str = Field(min_length=1)  # User password (plain text, verified against the stored hash)
    expires_in: ExpiresIn = Field(
        default=None,
        ge=settings.token_ttl_min_minutes,
        le=settings.token_ttl_max_minutes,
    )
