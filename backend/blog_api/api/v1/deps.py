# blog_api/api/v1/deps.py
from typing import Optional

from fastapi import Depends, Header

from blog_api.core import tokens
from blog_api.core.errors import Forbidden, Unauthenticated
from blog_api.core.identity import ABILITY_WRITE, Identity
from blog_api.core.tokens import AuthSession


async def resolve_bearer(
    authorization: str | None = Header(default=None),
) -> tuple[Optional[AuthSession], Optional[Unauthenticated]]:
    """
    Resolve the ``Authorization: Bearer <token>`` header once per request.

    Returns ``(session, None)`` for a valid token, ``(None, error)`` otherwise.
    Validation runs at most once per request (FastAPI caches dependencies), so
    an expired token is purged exactly once even when several dependencies ask.
    """
    token = None
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
    if not token:
        return None, Unauthenticated()
    try:
        return await tokens.validate(token), None
    except Unauthenticated as exc:
        return None, exc


async def get_current_session(
    resolved: tuple = Depends(resolve_bearer),
) -> AuthSession:
    """
    FastAPI dependency for routes that require authentication.

    Returns:
        AuthSession: The token record and the user it belongs to

    Raises:
        Unauthenticated (401, AUTH_REQUIRED): No bearer token was sent
        TokenNotFound (401, AUTH_INVALID_TOKEN): Unknown, revoked or tampered token
        TokenExpired (401, AUTH_TOKEN_EXPIRED): Token lifetime is over; the
            token record has been deleted as a side effect
    """
    session, error = resolved
    if session is None:
        raise error
    return session


async def get_optional_session(
    resolved: tuple = Depends(resolve_bearer),
) -> Optional[AuthSession]:
    """
    Public routes: a missing, invalid or expired token means anonymous.
    """
    return resolved[0]


async def get_identity(session: AuthSession = Depends(get_current_session)) -> Identity:
    return session.identity


async def get_optional_identity(
    session: Optional[AuthSession] = Depends(get_optional_session),
) -> Optional[Identity]:
    return session.identity if session else None


async def require_write(identity: Identity = Depends(get_identity)) -> Identity:
    """
    Identity of a caller whose token carries the ``write`` ability.

    Raises:
        Forbidden (403, FORBIDDEN_ABILITY): Token scope does not allow writes
    """
    if not identity.has_ability(ABILITY_WRITE):
        raise Forbidden("Token does not have the required ability.", code="FORBIDDEN_ABILITY")
    return identity


async def require_admin(identity: Identity = Depends(get_identity)) -> Identity:
    """
    FastAPI dependency to ensure the current user is an administrator.

    This dependency builds on top of `get_identity` and adds the role check.
    Use it for the whole admin route group.

    Raises:
        Forbidden (403, FORBIDDEN_ADMIN_ONLY): If user is not an admin
        Unauthenticated (401): If user is not authenticated
    """
    if not identity.is_admin:
        raise Forbidden("Admin access required.", code="FORBIDDEN_ADMIN_ONLY")
    return identity
