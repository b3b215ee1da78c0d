# blog_api/core/bootstrap.py
"""
Bootstrap module for application initialization.
Handles initial setup tasks such as creating default admin user on first startup.
"""
import os
import logging
from blog_api.models.user import ROLE_ADMIN, User
from blog_api.core.security import hash_password

logger = logging.getLogger("uvicorn.error")

async def ensure_default_admin() -> User | None:
    """
    If no admin exists in the database, create a default admin based on environment variables.
    Only takes effect under the following conditions:
      - Currently no user with role="admin"
      - And ADMIN_PASSWORD is set (to avoid using default weak password)
    Environment variables:
      ADMIN_NAME     (default: "Administrator")
      ADMIN_EMAIL    (default: "admin@example.com")
      ADMIN_PASSWORD (required, otherwise won't create)

    If a regular account already uses ADMIN_EMAIL, that account is promoted
    instead of creating a duplicate (emails are unique).
    """
    # Check if any admin user already exists
    if await User.filter(role=ROLE_ADMIN).exists():
        return None  # Skip creation if admin already exists

    # Get admin password from environment (required for security)
    admin_password = os.getenv("ADMIN_PASSWORD")
    if not admin_password:
        logger.warning("[bootstrap] No admin present, but ADMIN_PASSWORD not set -> skip creating default admin.")
        return None

    admin_name = os.getenv("ADMIN_NAME", "Administrator")
    admin_email = os.getenv("ADMIN_EMAIL", "admin@example.com")

    existing = await User.get_or_none(email=admin_email)
    if existing:
        existing.role = ROLE_ADMIN
        await existing.save()
        logger.warning("[bootstrap] Promoted existing user to admin -> email=%s id=%s",
                       existing.email, existing.id)
        return existing

    u = await User.create(
        name=admin_name,
        email=admin_email,
        password_hash=hash_password(admin_password),  # Hash password before storing
        role=ROLE_ADMIN,
    )
    logger.warning("[bootstrap] Created default admin -> name=%s email=%s id=%s",
                   u.name, u.email, u.id)
    return u
