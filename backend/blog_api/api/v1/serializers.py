# blog_api/api/v1/serializers.py
"""
Model -> dict converters shared by the routers.

Relations are only rendered when they were prefetched; optional
``*_count`` attributes (see ``blog_api.core.relations``) are rendered when set.
"""
import datetime as dt
from typing import Optional

from tortoise.models import Model

from blog_api.models import Category, Comment, Post, Tag, User


def iso(value: Optional[dt.datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _fetched(instance: Model, name: str, model: type):
    """Return a prefetched foreign key, or None when it was not loaded."""
    value = getattr(instance, name)
    return value if isinstance(value, model) else None


def _fetched_many(instance: Model, name: str):
    relation = getattr(instance, name)
    return list(relation) if relation._fetched else None


def _with_counts(data: dict, instance: Model, *relations: str) -> dict:
    for rel in relations:
        attr = f"{rel}_count"
        if hasattr(instance, attr):
            data[attr] = getattr(instance, attr)
    return data


def user_brief(u: User) -> dict:
    return {"id": u.id, "name": u.name}


def user_to_dict(u: User) -> dict:
    data = {
        "id": u.id,
        "name": u.name,
        "email": u.email,
        "role": u.role,
        "created_at": iso(u.created_at),
        "updated_at": iso(u.updated_at),
    }
    return _with_counts(data, u, "posts", "comments", "likes")


def category_to_dict(c: Category) -> dict:
    data = {
        "id": c.id,
        "name": c.name,
        "slug": c.slug,
        "description": c.description,
        "created_at": iso(c.created_at),
        "updated_at": iso(c.updated_at),
    }
    return _with_counts(data, c, "posts")


def tag_to_dict(t: Tag) -> dict:
    data = {
        "id": t.id,
        "name": t.name,
        "slug": t.slug,
        "created_at": iso(t.created_at),
        "updated_at": iso(t.updated_at),
    }
    return _with_counts(data, t, "posts")


def post_brief(p: Post) -> dict:
    return {"id": p.id, "title": p.title, "slug": p.slug}


def post_to_dict(p: Post) -> dict:
    data = {
        "id": p.id,
        "title": p.title,
        "slug": p.slug,
        "content": p.content,
        "excerpt": p.excerpt,
        "featured_image": p.featured_image,
        "status": p.status,
        "published_at": iso(p.published_at),
        "user_id": p.user_id,
        "category_id": p.category_id,
        "created_at": iso(p.created_at),
        "updated_at": iso(p.updated_at),
    }
    user = _fetched(p, "user", User)
    if user is not None:
        data["user"] = user_brief(user)
    category = _fetched(p, "category", Category)
    if category is not None:
        data["category"] = {"id": category.id, "name": category.name, "slug": category.slug}
    tags = _fetched_many(p, "tags")
    if tags is not None:
        data["tags"] = [{"id": t.id, "name": t.name, "slug": t.slug} for t in tags]
    return _with_counts(data, p, "likes", "comments")


def comment_to_dict(c: Comment) -> dict:
    data = {
        "id": c.id,
        "content": c.content,
        "post_id": c.post_id,
        "user_id": c.user_id,
        "created_at": iso(c.created_at),
        "updated_at": iso(c.updated_at),
    }
    user = _fetched(c, "user", User)
    if user is not None:
        data["user"] = user_brief(user)
    post = _fetched(c, "post", Post)
    if post is not None:
        data["post"] = post_brief(post)
    return data
