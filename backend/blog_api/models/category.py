# blog_api/models/category.py
from tortoise import fields, models

class Category(models.Model):
    """
    Blog category. One category has many posts (via Post.category).
    Only administrators may create, rename or delete categories.
    """
    id = fields.IntField(pk=True)
    name = fields.CharField(max_length=255, unique=True)  # Unique display name
    slug = fields.CharField(max_length=255, index=True)  # URL-friendly name derived from `name`
    description = fields.TextField(null=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "categories"
