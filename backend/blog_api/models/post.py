# blog_api/models/post.py
"""
Database model for blog posts.
A post belongs to an author and a category, carries any number of tags, and
moves through the draft -> published -> archived statuses.
"""
from tortoise import fields, models

STATUS_DRAFT = "draft"
STATUS_PUBLISHED = "published"
STATUS_ARCHIVED = "archived"
POST_STATUSES = (STATUS_DRAFT, STATUS_PUBLISHED, STATUS_ARCHIVED)

class Post(models.Model):
    """
    Post database model.

    Relationships:
    - Belongs to a User (many-to-one, the author)
    - Belongs to a Category (many-to-one)
    - Has many Tags (many-to-many through the `post_tag` table)
    - Has many Comments and Likes (one-to-many, via related_name in those models)

    `published_at` is stamped the first time the post becomes published and
    is never cleared afterwards, even if the post goes back to draft.
    """
    id = fields.IntField(pk=True)
    user = fields.ForeignKeyField(
        "models.User",
        related_name="posts",
        on_delete=fields.CASCADE
    )  # Author; cascade delete (if user is deleted, posts are deleted)
    category = fields.ForeignKeyField(
        "models.Category",
        related_name="posts",
        on_delete=fields.CASCADE
    )
    tags = fields.ManyToManyField(
        "models.Tag",
        related_name="posts",
        through="post_tag",
        forward_key="tag_id",
        backward_key="post_id",
    )
    title = fields.CharField(max_length=255)
    slug = fields.CharField(max_length=255, index=True)  # Derived from title, not unique
    content = fields.TextField()
    excerpt = fields.TextField(null=True)
    featured_image = fields.CharField(max_length=1024, null=True)
    status = fields.CharField(max_length=16, default=STATUS_DRAFT, index=True)  # draft / published / archived
    published_at = fields.DatetimeField(null=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "posts"
