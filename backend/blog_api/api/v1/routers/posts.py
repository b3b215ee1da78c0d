# blog_api/api/v1/routers/posts.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from slugify import slugify

from blog_api.api.v1.deps import get_optional_identity, require_write
from blog_api.api.v1.serializers import post_to_dict
from blog_api.core.errors import NotFound, ValidationFailed
from blog_api.core.identity import Identity
from blog_api.core.pagination import PageParams, page_params, paginate
from blog_api.core.policy import CREATE, DELETE, UPDATE, PostRef, authorize
from blog_api.core.relations import attach_counts
from blog_api.core.tokens import utc_now
from blog_api.core.visibility import ensure_visible, scope_posts
from blog_api.models import Category, Like, Post, Tag
from blog_api.models.post import STATUS_PUBLISHED
from blog_api.schemas.post import PostCreateIn, PostUpdateIn

router = APIRouter(prefix="/posts", tags=["posts"])

# Relations rendered with every post
POST_RELATIONS = ("user", "category", "tags")
# Fields that may be explicitly cleared with null on update
_NULLABLE = {"excerpt", "featured_image"}


def post_query():
    """All posts, newest first, with author / category / tags prefetched."""
    return Post.all().prefetch_related(*POST_RELATIONS).order_by("-created_at", "-id")


async def load_post(post_id: int) -> Post:
    post = await Post.get_or_none(id=post_id)
    if not post:
        raise NotFound.resource("post")
    return post


async def _resolve_relations(category_id: Optional[int], tag_ids: Optional[list[int]]) -> list[Tag]:
    """
    Check that referenced category / tags exist.

    Returns:
        list[Tag]: The tags to attach (empty when tag_ids is None or empty)

    Raises:
        ValidationFailed (422): Unknown category_id or tag id
    """
    errors: dict[str, list[str]] = {}
    if category_id is not None and not await Category.filter(id=category_id).exists():
        errors["category_id"] = ["The selected category id is invalid."]
    tags: list[Tag] = []
    if tag_ids:
        wanted = set(tag_ids)
        tags = await Tag.filter(id__in=wanted)
        if len(tags) != len(wanted):
            errors["tag_ids"] = ["The selected tag ids is invalid."]
    if errors:
        raise ValidationFailed(errors=errors)
    return tags


async def _render(post: Post, with_counts: bool = False) -> dict:
    await post.fetch_related(*POST_RELATIONS)
    if with_counts:
        await attach_counts([post], "likes", "comments")
    return post_to_dict(post)


@router.get("")
async def list_posts(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    params: PageParams = Depends(page_params),
    viewer: Optional[Identity] = Depends(get_optional_identity),
):
    """
    Paginated post listing, scoped to what the caller may see.

    Guests see published posts, users also see their own posts, admins see
    everything. A `status` filter is intersected with that scope; an empty
    value means no filter and an unknown value yields an empty page.

    Raises:
        Forbidden (403): Guest asked for a status other than "published"
    """
    qs = scope_posts(post_query(), viewer, status_filter)
    return await paginate(qs, params, post_to_dict)


@router.get("/{post_id}")
async def show_post(post_id: int, viewer: Optional[Identity] = Depends(get_optional_identity)):
    """
    Single post with likes_count and comments_count.

    Raises:
        NotFound (404): Post does not exist, or is not published and the
            caller is neither its author nor an admin
    """
    post = await Post.get_or_none(id=post_id)
    ensure_visible(viewer, post)
    return {"success": True, "data": await _render(post, with_counts=True)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_post(body: PostCreateIn, identity: Identity = Depends(require_write)):
    """
    Create a post owned by the caller.

    `published_at` is stamped when the post is created as published.
    """
    authorize(identity, CREATE, PostRef(id=None, owner_id=identity.user_id))
    tags = await _resolve_relations(body.category_id, body.tag_ids)

    post = await Post.create(
        user_id=identity.user_id,
        category_id=body.category_id,
        title=body.title,
        slug=slugify(body.title),
        content=body.content,
        excerpt=body.excerpt,
        featured_image=body.featured_image,
        status=body.status,
        published_at=utc_now() if body.status == STATUS_PUBLISHED else None,
    )
    if tags:
        await post.tags.add(*tags)
    return {"success": True, "data": await _render(post)}


@router.api_route("/{post_id}", methods=["PUT", "PATCH"])
async def update_post(post_id: int, body: PostUpdateIn, identity: Identity = Depends(require_write)):
    """
    Update a post (author or admin).

    Only provided fields change. A new title regenerates the slug; the first
    transition into "published" stamps `published_at`, which is never cleared.
    `tag_ids` replaces the tag set when present ([] removes all tags).

    Raises:
        NotFound (404): Post does not exist
        Forbidden (403): Caller is not the author and not an admin
    """
    post = await load_post(post_id)
    authorize(identity, UPDATE, PostRef(id=post.id, owner_id=post.user_id))

    data = body.model_dump(exclude_unset=True)
    tag_ids = data.pop("tag_ids", None)
    data = {k: v for k, v in data.items() if v is not None or k in _NULLABLE}
    tags = await _resolve_relations(data.get("category_id"), tag_ids)

    if "title" in data:
        data["slug"] = slugify(data["title"])
    if data.get("status") == STATUS_PUBLISHED and post.published_at is None:
        data["published_at"] = utc_now()

    if data:
        post.update_from_dict(data)
        await post.save()
    if tag_ids is not None:
        await post.tags.clear()
        if tags:
            await post.tags.add(*tags)
    return {"success": True, "data": await _render(post)}


@router.delete("/{post_id}")
async def delete_post(post_id: int, identity: Identity = Depends(require_write)):
    post = await load_post(post_id)
    authorize(identity, DELETE, PostRef(id=post.id, owner_id=post.user_id))
    await post.delete()
    return {"success": True, "message": "Post deleted successfully."}


@router.post("/{post_id}/like")
async def like_post(post_id: int, identity: Identity = Depends(require_write)):
    """
    Like a post. Idempotent: liking twice keeps a single like.

    Raises:
        NotFound (404): Post does not exist or is hidden from the caller
    """
    post = await Post.get_or_none(id=post_id)
    ensure_visible(identity, post)
    await Like.get_or_create(user_id=identity.user_id, post_id=post.id)
    likes_count = await Like.filter(post_id=post.id).count()
    return {"success": True, "message": "Post liked successfully", "likes_count": likes_count}


@router.delete("/{post_id}/like")
async def unlike_post(post_id: int, identity: Identity = Depends(require_write)):
    """Remove the caller's like, if any."""
    post = await Post.get_or_none(id=post_id)
    ensure_visible(identity, post)
    await Like.filter(user_id=identity.user_id, post_id=post.id).delete()
    likes_count = await Like.filter(post_id=post.id).count()
    return {"success": True, "message": "Post unliked successfully", "likes_count": likes_count}
