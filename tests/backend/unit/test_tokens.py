"""
Unit tests for core.tokens: lifetime rules and the issue / validate / revoke cycle.
"""
import datetime as dt
from types import SimpleNamespace

import pytest

from blog_api.config import settings
from blog_api.core import tokens
from blog_api.core.errors import TokenExpired, TokenNotFound, ValidationFailed
from blog_api.core.security import sha256_hex
from blog_api.models import AccessToken


class TestResolveTtl:
    def test_default_when_missing(self):
        assert tokens.resolve_ttl(None) == settings.token_ttl_minutes

    def test_bounds_are_inclusive(self):
        assert tokens.resolve_ttl(settings.token_ttl_min_minutes) == settings.token_ttl_min_minutes
        assert tokens.resolve_ttl(settings.token_ttl_max_minutes) == settings.token_ttl_max_minutes

    @pytest.mark.parametrize("ttl", [0, -5, 525601])
    def test_out_of_range_is_rejected(self, ttl):
        with pytest.raises(ValidationFailed) as exc:
            tokens.resolve_ttl(ttl)
        assert "expires_in" in exc.value.errors


class TestAbilities:
    def test_admin_logs_in_with_wildcard(self):
        assert tokens.login_abilities(SimpleNamespace(is_admin=True)) == ("*",)

    def test_user_logs_in_with_read_write(self):
        assert tokens.login_abilities(SimpleNamespace(is_admin=False)) == ("read", "write")


class TestIsExpired:
    def test_no_expiry_never_expires(self):
        assert tokens.is_expired(SimpleNamespace(expires_at=None)) is False

    def test_past_and_future(self):
        now = tokens.utc_now()
        assert tokens.is_expired(SimpleNamespace(expires_at=now - dt.timedelta(seconds=1)), now)
        assert not tokens.is_expired(SimpleNamespace(expires_at=now + dt.timedelta(minutes=1)), now)


@pytest.mark.asyncio
async def test_issue_stores_only_the_hash(db, create_user):
    user, _ = await create_user()
    issued = await tokens.issue(user, 60)

    record = await AccessToken.get(id=issued.record.id)
    assert record.token_hash == sha256_hex(issued.plain_text)
    assert record.token_hash != issued.plain_text
    assert record.abilities == ["*"]
    delta = record.expires_at - tokens.utc_now()
    assert dt.timedelta(minutes=59) < delta <= dt.timedelta(minutes=60)


@pytest.mark.asyncio
async def test_issue_rejects_out_of_range_ttl(db, create_user):
    user, _ = await create_user()
    with pytest.raises(ValidationFailed):
        await tokens.issue(user, 0)
    assert await AccessToken.filter(user_id=user.id).count() == 0


@pytest.mark.asyncio
async def test_validate_resolves_user_and_stamps_last_used(db, create_user):
    user, _ = await create_user()
    issued = await tokens.issue(user, abilities=tokens.USER_ABILITIES)

    session = await tokens.validate(issued.plain_text)
    assert session.user.id == user.id
    assert session.identity.abilities == ("read", "write")
    assert session.identity.has_ability("write")

    record = await AccessToken.get(id=issued.record.id)
    assert record.last_used_at is not None


@pytest.mark.asyncio
async def test_validate_unknown_bearer(db):
    with pytest.raises(TokenNotFound):
        await tokens.validate("garbage")


@pytest.mark.asyncio
async def test_expired_token_is_purged_then_unknown(db, create_user):
    user, _ = await create_user()
    issued = await tokens.issue(user, 5)
    await AccessToken.filter(id=issued.record.id).update(
        expires_at=tokens.utc_now() - dt.timedelta(minutes=1)
    )

    with pytest.raises(TokenExpired):
        await tokens.validate(issued.plain_text)
    assert not await AccessToken.filter(id=issued.record.id).exists()

    with pytest.raises(TokenNotFound):
        await tokens.validate(issued.plain_text)


@pytest.mark.asyncio
async def test_revoke_only_affects_one_token(db, create_user):
    user, _ = await create_user()
    first = await tokens.issue(user)
    second = await tokens.issue(user)

    await tokens.revoke(first.record)

    with pytest.raises(TokenNotFound):
        await tokens.validate(first.plain_text)
    session = await tokens.validate(second.plain_text)
    assert session.user.id == user.id
