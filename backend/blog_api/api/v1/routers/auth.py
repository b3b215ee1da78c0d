# blog_api/api/v1/routers/auth.py
import logging

from fastapi import APIRouter, Depends, status

from blog_api.api.v1.deps import get_current_session
from blog_api.api.v1.routers.users import ensure_email_available
from blog_api.api.v1.serializers import user_to_dict
from blog_api.core import tokens
from blog_api.core.errors import ValidationFailed, unique_violation
from blog_api.core.security import hash_password, verify_password
from blog_api.core.tokens import AuthSession, IssuedToken
from blog_api.models.user import ROLE_USER, User
from blog_api.schemas.auth import LoginIn, RegisterIn

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger("uvicorn.error")


def _token_payload(user: User, issued: IssuedToken) -> dict:
    expires_at = issued.record.expires_at
    return {
        "user": user_to_dict(user),
        "token": issued.plain_text,  # Only time the plain text bearer is exposed
        "abilities": issued.record.abilities,
        "expires_at": expires_at.isoformat() if expires_at else None,
        "exp": int(expires_at.timestamp()) if expires_at else None,
    }


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(body: RegisterIn):
    """
    Register a new user account and issue a full-scope token.

    Args:
        body: Request body containing:
            - name: str
            - email: str (must be unique)
            - password / password_confirmation: str (min 8, must match)
            - expires_in: int | None (token lifetime in minutes, 1..525600, default 43200)

    Returns:
        dict: success flag and data with user, token, abilities, expires_at, exp

    Raises:
        ValidationFailed (422): Invalid body or email already registered
    """
    await ensure_email_available(body.email)
    with unique_violation("email"):
        user = await User.create(
            name=body.name,
            email=body.email,
            password_hash=hash_password(body.password),
            role=ROLE_USER,
        )
    issued = await tokens.issue(user, body.expires_in, tokens.REGISTRATION_ABILITIES)
    logger.info("[auth] registered user=%s", user.id)
    return {"success": True, "data": _token_payload(user, issued)}


@router.post("/login")
async def login(body: LoginIn):
    """
    Authenticate user and issue an access token.

    Admins receive a "*" token; regular users receive "read" + "write".

    Raises:
        ValidationFailed (422): Credentials do not match, or expires_in out of range
    """
    user = await User.get_or_none(email=body.email)
    if not user or not verify_password(body.password, user.password_hash):
        raise ValidationFailed.for_field("email", "The provided credentials are incorrect.")
    issued = await tokens.issue(user, body.expires_in, tokens.login_abilities(user))
    return {"success": True, "data": _token_payload(user, issued)}


@router.post("/logout")
async def logout(session: AuthSession = Depends(get_current_session)):
    """
    Revoke the token used to authenticate this request.

    Other tokens of the same user stay valid.
    """
    await tokens.revoke(session.token)
    return {"success": True, "message": "Successfully logged out"}


@router.get("/user")
async def me(session: AuthSession = Depends(get_current_session)):
    """Return the authenticated user."""
    return {"success": True, "data": user_to_dict(session.user)}
