# blog_api/api/v1/routers/comments.py
from fastapi import APIRouter, Depends, status

from blog_api.api.v1.deps import get_identity, require_write
from blog_api.api.v1.routers.posts import load_post
from blog_api.api.v1.serializers import comment_to_dict
from blog_api.core.errors import NotFound, ValidationFailed
from blog_api.core.identity import Identity
from blog_api.core.pagination import PageParams, page_params, paginate
from blog_api.core.policy import CREATE, DELETE, UPDATE, CommentRef, authorize
from blog_api.core.visibility import can_view
from blog_api.models import Comment, Post
from blog_api.schemas.comment import CommentCreateIn, CommentIn, CommentUpdateIn

router = APIRouter(tags=["comments"])


def comment_query():
    return Comment.all().prefetch_related("user", "post").order_by("-created_at", "-id")


async def load_comment(comment_id: int) -> Comment:
    comment = await Comment.get_or_none(id=comment_id)
    if not comment:
        raise NotFound.resource("comment")
    return comment


async def load_post_comment(post_id: int, comment_id: int) -> Comment:
    """A comment addressed through its post; a comment of another post is missing."""
    post = await load_post(post_id)
    comment = await Comment.get_or_none(id=comment_id, post_id=post.id)
    if not comment:
        raise NotFound.resource("comment")
    return comment


def render_comment(comment: Comment, viewer: Identity) -> dict:
    """Serialize a comment, leaving out the summary of a post the viewer may not read."""
    data = comment_to_dict(comment)
    if "post" in data and not can_view(viewer, comment.post):
        del data["post"]
    return data


async def _create(post_id: int, content: str, identity: Identity) -> dict:
    authorize(identity, CREATE, CommentRef(id=None, owner_id=identity.user_id))
    comment = await Comment.create(post_id=post_id, user_id=identity.user_id, content=content)
    await comment.fetch_related("user", "post")
    return {"success": True, "data": render_comment(comment, identity)}


async def _show(comment: Comment, identity: Identity) -> dict:
    await comment.fetch_related("user", "post")
    return {"success": True, "data": render_comment(comment, identity)}


async def _update(comment: Comment, content: str, identity: Identity) -> dict:
    authorize(identity, UPDATE, CommentRef(id=comment.id, owner_id=comment.user_id))
    comment.content = content
    await comment.save()
    await comment.fetch_related("user", "post")
    return {"success": True, "data": render_comment(comment, identity)}


async def _delete(comment: Comment, identity: Identity) -> dict:
    authorize(identity, DELETE, CommentRef(id=comment.id, owner_id=comment.user_id))
    await comment.delete()
    return {"success": True, "message": "Comment deleted successfully."}


async def list_comments(params: PageParams = Depends(page_params)):
    """All comments, newest first (admin listing)."""
    return await paginate(comment_query(), params, comment_to_dict)


@router.get("/posts/{post_id}/comments")
async def list_post_comments(post_id: int, params: PageParams = Depends(page_params)):
    """
    Comments of a post, newest first.

    The parent post's status is not checked: comments of an existing post are
    listed for every caller.

    Raises:
        NotFound (404): Post does not exist
    """
    post = await load_post(post_id)
    qs = Comment.filter(post_id=post.id).prefetch_related("user").order_by("-created_at", "-id")
    return await paginate(qs, params, comment_to_dict)


@router.post("/posts/{post_id}/comments", status_code=status.HTTP_201_CREATED)
async def create_post_comment(post_id: int, body: CommentIn, identity: Identity = Depends(require_write)):
    post = await load_post(post_id)
    return await _create(post.id, body.content, identity)


@router.get("/posts/{post_id}/comments/{comment_id}")
async def show_post_comment(post_id: int, comment_id: int, identity: Identity = Depends(get_identity)):
    return await _show(await load_post_comment(post_id, comment_id), identity)


@router.api_route("/posts/{post_id}/comments/{comment_id}", methods=["PUT", "PATCH"])
async def update_post_comment(
    post_id: int,
    comment_id: int,
    body: CommentUpdateIn,
    identity: Identity = Depends(require_write),
):
    return await _update(await load_post_comment(post_id, comment_id), body.content, identity)


@router.delete("/posts/{post_id}/comments/{comment_id}")
async def delete_post_comment(post_id: int, comment_id: int, identity: Identity = Depends(require_write)):
    return await _delete(await load_post_comment(post_id, comment_id), identity)


@router.post("/comments", status_code=status.HTTP_201_CREATED)
async def create_comment(body: CommentCreateIn, identity: Identity = Depends(require_write)):
    """
    Create a comment on `post_id` authored by the caller.

    Raises:
        ValidationFailed (422): post_id does not exist
    """
    if not await Post.filter(id=body.post_id).exists():
        raise ValidationFailed.for_field("post_id", "The selected post id is invalid.")
    return await _create(body.post_id, body.content, identity)


@router.get("/comments/{comment_id}")
async def show_comment(comment_id: int, identity: Identity = Depends(get_identity)):
    """
    Single comment (authenticated callers only).

    The parent post summary is omitted when the caller may not read that post.
    """
    return await _show(await load_comment(comment_id), identity)


@router.api_route("/comments/{comment_id}", methods=["PUT", "PATCH"])
async def update_comment(
    comment_id: int,
    body: CommentUpdateIn,
    identity: Identity = Depends(require_write),
):
    """
    Edit a comment (author or admin).

    Raises:
        NotFound (404): Comment does not exist
        Forbidden (403): Caller is not the author and not an admin
    """
    return await _update(await load_comment(comment_id), body.content, identity)


@router.delete("/comments/{comment_id}")
async def delete_comment(comment_id: int, identity: Identity = Depends(require_write)):
    return await _delete(await load_comment(comment_id), identity)
