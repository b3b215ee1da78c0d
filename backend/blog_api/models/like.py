# blog_api/models/like.py
from tortoise import fields, models

class Like(models.Model):
    """
    A user's like on a post. At most one row per (user, post) pair; the
    unique constraint keeps that true under concurrent requests.
    """
    id = fields.IntField(pk=True)
    post = fields.ForeignKeyField("models.Post", related_name="likes", on_delete=fields.CASCADE)
    user = fields.ForeignKeyField("models.User", related_name="likes", on_delete=fields.CASCADE)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "likes"
        unique_together = (("user", "post"),)
