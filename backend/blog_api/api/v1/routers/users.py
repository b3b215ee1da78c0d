# blog_api/api/v1/routers/users.py
from fastapi import APIRouter, Depends

from blog_api.api.v1.deps import get_identity, require_write
from blog_api.api.v1.routers.comments import render_comment
from blog_api.api.v1.serializers import post_to_dict, user_to_dict
from blog_api.core.errors import NotFound, ValidationFailed, unique_violation
from blog_api.core.identity import Identity
from blog_api.core.pagination import PageParams, page_params, paginate
from blog_api.core.policy import DELETE, UPDATE, UserRef, authorize
from blog_api.models import Comment, Like, User
from blog_api.models.user import ROLE_ADMIN
from blog_api.schemas.user import UserUpdateIn

router = APIRouter(tags=["users"])


async def load_user(user_id: int) -> User:
    user = await User.get_or_none(id=user_id)
    if not user:
        raise NotFound.resource("user")
    return user


async def ensure_email_available(email: str, exclude_id: int | None = None) -> None:
    qs = User.filter(email=email)
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    if await qs.exists():
        raise ValidationFailed.for_field("email", "The email has already been taken.")


async def ensure_not_last_admin(user: User, message: str) -> None:
    """
    Refuse to remove admin rights from the only remaining admin.

    Raises:
        ValidationFailed (422, LAST_ADMIN_FORBIDDEN)
    """
    if user.role == ROLE_ADMIN and await User.filter(role=ROLE_ADMIN).count() <= 1:
        raise ValidationFailed(message, code="LAST_ADMIN_FORBIDDEN")


async def apply_profile_update(user: User, body: UserUpdateIn) -> None:
    if body.name:
        user.name = body.name
    if body.email and body.email != user.email:
        await ensure_email_available(body.email, exclude_id=user.id)
        user.email = body.email


@router.api_route("/users/{user_id}", methods=["PUT", "PATCH"])
async def update_user(user_id: int, body: UserUpdateIn, identity: Identity = Depends(require_write)):
    """
    Update a profile (the user themself or an admin).

    Raises:
        NotFound (404): User does not exist
        Forbidden (403): Caller is someone else and not an admin
        ValidationFailed (422): Email already taken
    """
    user = await load_user(user_id)
    authorize(identity, UPDATE, UserRef(id=user.id))
    await apply_profile_update(user, body)
    with unique_violation("email"):
        await user.save()
    return {"success": True, "data": user_to_dict(user)}


@router.delete("/users/{user_id}")
async def delete_user(user_id: int, identity: Identity = Depends(require_write)):
    """
    Delete an account together with its tokens, posts, comments and likes.

    Raises:
        NotFound (404): User does not exist
        Forbidden (403): Caller is someone else and not an admin
        ValidationFailed (422): Target is the last remaining admin
    """
    user = await load_user(user_id)
    authorize(identity, DELETE, UserRef(id=user.id))
    await ensure_not_last_admin(user, "Cannot delete the last admin")
    await user.delete()
    return {"success": True, "message": "User deleted successfully."}


@router.get("/user/liked-posts")
async def liked_posts(params: PageParams = Depends(page_params), identity: Identity = Depends(get_identity)):
    """Posts the caller has liked, most recent like first."""
    qs = (
        Like.filter(user_id=identity.user_id)
        .prefetch_related("post__user", "post__category", "post__tags")
        .order_by("-created_at", "-id")
    )
    return await paginate(qs, params, lambda like: post_to_dict(like.post))


@router.get("/user/comments")
async def my_comments(params: PageParams = Depends(page_params), identity: Identity = Depends(get_identity)):
    """The caller's comments with a short summary of each post."""
    qs = Comment.filter(user_id=identity.user_id).prefetch_related("post").order_by("-created_at", "-id")
    return await paginate(qs, params, lambda c: render_comment(c, identity))
