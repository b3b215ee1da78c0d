# blog_api/models/tag.py
from tortoise import fields, models

class Tag(models.Model):
    id = fields.IntField(pk=True)
    name = fields.CharField(max_length=255, unique=True)
    slug = fields.CharField(max_length=255, index=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    # Reverse side of Post.tags is exposed as `tag.posts`

    class Meta:
        table = "tags"
