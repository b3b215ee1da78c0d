# blog_api/core/tokens.py
"""
Token issuer: creates, validates and revokes bearer tokens.

Each issued token is a row in ``personal_access_tokens`` plus a signed bearer
string handed to the client exactly once. Only ``sha256(bearer)`` is kept.

Expiry is checked lazily: the first request that presents an expired bearer
deletes its row and fails with ``TokenExpired``; any later attempt with the
same bearer finds nothing and fails with ``TokenNotFound``.
"""
import datetime as dt
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

import jwt
from tortoise.transactions import in_transaction

from blog_api.config import settings
from blog_api.core.errors import TokenExpired, TokenNotFound, ValidationFailed
from blog_api.core.identity import ABILITY_READ, ABILITY_WRITE, WILDCARD, Identity
from blog_api.core.security import create_access_token, decode_access_token, sha256_hex
from blog_api.models.access_token import AccessToken
from blog_api.models.user import User

logger = logging.getLogger("uvicorn.error")

REGISTRATION_ABILITIES = (WILDCARD,)
ADMIN_ABILITIES = (WILDCARD,)
USER_ABILITIES = (ABILITY_READ, ABILITY_WRITE)


def utc_now() -> dt.datetime:
    """Current UTC datetime with timezone information."""
    return dt.datetime.now(dt.timezone.utc)


def resolve_ttl(ttl_minutes: Optional[int]) -> int:
    """
    Apply the default lifetime and enforce the allowed range.

    Out-of-range values are rejected, never clamped.
    """
    if ttl_minutes is None:
        return settings.token_ttl_minutes
    low, high = settings.token_ttl_min_minutes, settings.token_ttl_max_minutes
    if ttl_minutes < low or ttl_minutes > high:
        raise ValidationFailed.for_field(
            "expires_in", f"The expires in must be between {low} and {high}."
        )
    return ttl_minutes


def login_abilities(user: User) -> tuple[str, ...]:
    """Admins log in with full scope, everyone else with read + write."""
    return ADMIN_ABILITIES if user.is_admin else USER_ABILITIES


def is_expired(token: AccessToken, now: Optional[dt.datetime] = None) -> bool:
    if token.expires_at is None:
        return False
    return token.expires_at <= (now or utc_now())


@dataclass(frozen=True)
class IssuedToken:
    plain_text: str  # Only ever returned here
    record: AccessToken


@dataclass(frozen=True)
class AuthSession:
    """A validated bearer: the owning user and the token record it came from."""
    user: User
    token: AccessToken

    @property
    def identity(self) -> Identity:
        return Identity.from_user(self.user, self.token.abilities or ())


async def issue(
    user: User,
    ttl_minutes: Optional[int] = None,
    abilities: Iterable[str] = REGISTRATION_ABILITIES,
    name: str = "auth_token",
) -> IssuedToken:
    """
    Create a token record for ``user`` and return its bearer string.

    Raises:
        ValidationFailed: ``ttl_minutes`` outside the allowed range
    """
    minutes = resolve_ttl(ttl_minutes)
    expires_at = utc_now() + dt.timedelta(minutes=minutes)
    scopes = list(abilities)

    async with in_transaction():
        record = await AccessToken.create(
            user=user, name=name, abilities=scopes, expires_at=expires_at
        )
        plain = create_access_token(user.id, record.id, scopes)
        record.token_hash = sha256_hex(plain)
        await record.save(update_fields=["token_hash"])

    logger.info("[tokens] issued token=%s user=%s abilities=%s expires_at=%s",
                record.id, user.id, scopes, expires_at.isoformat())
    return IssuedToken(plain_text=plain, record=record)


async def validate(plain: str) -> AuthSession:
    """
    Resolve a bearer string to its user.

    Raises:
        TokenNotFound: unknown, tampered, revoked or already-purged bearer
        TokenExpired: the token's lifetime is over (its record is deleted)
    """
    try:
        payload = decode_access_token(plain)
        token_id = int(payload["jti"])
    except (jwt.InvalidTokenError, KeyError, TypeError, ValueError):
        raise TokenNotFound()

    record = await (
        AccessToken.filter(id=token_id, token_hash=sha256_hex(plain))
        .select_related("user")
        .first()
    )
    if record is None:
        raise TokenNotFound()

    if is_expired(record):
        # Only the request that actually removes the row reports expiry
        deleted = await AccessToken.filter(id=record.id).delete()
        if not deleted:
            raise TokenNotFound()
        logger.info("[tokens] purged expired token=%s user=%s", record.id, record.user_id)
        raise TokenExpired()

    now = utc_now()
    await AccessToken.filter(id=record.id).update(last_used_at=now)
    record.last_used_at = now
    return AuthSession(user=record.user, token=record)


async def revoke(record: AccessToken) -> None:
    await AccessToken.filter(id=record.id).delete()
    logger.info("[tokens] revoked token=%s user=%s", record.id, record.user_id)
