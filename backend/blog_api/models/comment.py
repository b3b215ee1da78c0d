# blog_api/models/comment.py
from tortoise import fields, models

class Comment(models.Model):
    id = fields.IntField(pk=True)
    post = fields.ForeignKeyField("models.Post", related_name="comments", on_delete=fields.CASCADE)
    user = fields.ForeignKeyField("models.User", related_name="comments", on_delete=fields.CASCADE)  # Author

    content = fields.TextField()

    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "comments"
