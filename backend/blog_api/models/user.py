# blog_api/models/user.py
"""
Database model for users.
Represents a user account in the system, containing authentication credentials,
profile information, and role-based access control.
"""
from tortoise import fields, models

ROLE_USER = "user"
ROLE_ADMIN = "admin"

class User(models.Model):
    """
    User database model.

    Represents an author/reader account. Each user can own posts, comments,
    likes and issued access tokens, and is associated with a role
    (regular user or administrator).

    Relationships:
    - Has many Posts (related_name="posts")
    - Has many Comments (related_name="comments")
    - Has many Likes (related_name="likes")
    - Has many AccessTokens (related_name="tokens")

    Security:
    - Password is stored as a hash (never store plain text passwords)
    - Email must be unique across all users
    - Role determines access level (user vs admin)
    """
    id = fields.IntField(pk=True)  # Primary key: opaque integer identifier
    name = fields.CharField(max_length=255)  # Display name
    email = fields.CharField(
        max_length=255,
        unique=True,
        index=True
    )  # Login identifier (must be unique, indexed for fast lookups)
    password_hash = fields.CharField(max_length=255)  # Hashed password (argon2, never store plain text)
    role = fields.CharField(max_length=16, default=ROLE_USER)  # User role: "user" (default) or "admin"
    created_at = fields.DatetimeField(auto_now_add=True)  # Timestamp when account was created
    updated_at = fields.DatetimeField(auto_now=True)  # Timestamp of the last profile change

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"  # Database table name

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
