# blog_api/models/access_token.py
from tortoise import fields, models


class AccessToken(models.Model):
    """
    Issued bearer credential.
    - token_hash: sha256(plain text bearer) 64-character hexadecimal string, unique (plain text not stored)
    - abilities: list of scope strings, "*" means unrestricted
    - expires_at: Expiration time (null = never expires)
    - last_used_at: Stamped on every successful validation
    - created_at: Issue time
    """
    id = fields.IntField(pk=True)
    user: fields.ForeignKeyRelation["User"] = fields.ForeignKeyField(
        "models.User", related_name="tokens", on_delete=fields.CASCADE
    )
    name = fields.CharField(max_length=255, default="auth_token")
    # Filled right after the row exists, because the bearer embeds the row id
    token_hash = fields.CharField(max_length=64, unique=True, null=True)
    abilities = fields.JSONField(default=list)

    expires_at = fields.DatetimeField(null=True)
    last_used_at = fields.DatetimeField(null=True)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "personal_access_tokens"
