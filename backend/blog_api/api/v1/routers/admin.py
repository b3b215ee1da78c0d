# blog_api/api/v1/routers/admin.py
"""
Admin route group (/api/v1/admin/*).

Every route here requires role == "admin". Apart from the user management
endpoints below, the handlers are the same ones the public/protected routers
use; the policy lets admins through on every resource.
"""
from fastapi import APIRouter, Depends, status

from blog_api.api.v1.deps import require_admin, require_write
from blog_api.api.v1.routers import categories, comments, posts, tags, users
from blog_api.api.v1.serializers import user_to_dict
from blog_api.core.identity import Identity
from blog_api.core.pagination import PageParams, page_params, paginate
from blog_api.core.errors import unique_violation
from blog_api.core.policy import CREATE, UPDATE, UserRef, authorize
from blog_api.core.relations import attach_counts
from blog_api.core.security import hash_password
from blog_api.models import User
from blog_api.schemas.user import AdminUserCreateIn, AdminUserUpdateIn

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])

_UPDATE = ["PUT", "PATCH"]
_CREATED = status.HTTP_201_CREATED


# ==============================================================================
# I. Content resources (shared handlers)
# ==============================================================================
router.add_api_route("/posts", posts.list_posts, methods=["GET"])
router.add_api_route("/posts", posts.create_post, methods=["POST"], status_code=_CREATED)
router.add_api_route("/posts/{post_id}", posts.show_post, methods=["GET"])
router.add_api_route("/posts/{post_id}", posts.update_post, methods=_UPDATE)
router.add_api_route("/posts/{post_id}", posts.delete_post, methods=["DELETE"])

router.add_api_route("/categories", categories.list_categories, methods=["GET"])
router.add_api_route("/categories", categories.create_category, methods=["POST"], status_code=_CREATED)
router.add_api_route("/categories/{category_id}", categories.show_category, methods=["GET"])
router.add_api_route("/categories/{category_id}", categories.update_category, methods=_UPDATE)
router.add_api_route("/categories/{category_id}", categories.delete_category, methods=["DELETE"])

router.add_api_route("/tags", tags.list_tags, methods=["GET"])
router.add_api_route("/tags", tags.create_tag, methods=["POST"], status_code=_CREATED)
router.add_api_route("/tags/{tag_id}", tags.show_tag, methods=["GET"])
router.add_api_route("/tags/{tag_id}", tags.update_tag, methods=_UPDATE)
router.add_api_route("/tags/{tag_id}", tags.delete_tag, methods=["DELETE"])

router.add_api_route("/comments", comments.list_comments, methods=["GET"])
router.add_api_route("/comments", comments.create_comment, methods=["POST"], status_code=_CREATED)
router.add_api_route("/comments/{comment_id}", comments.show_comment, methods=["GET"])
router.add_api_route("/comments/{comment_id}", comments.update_comment, methods=_UPDATE)
router.add_api_route("/comments/{comment_id}", comments.delete_comment, methods=["DELETE"])


# ==============================================================================
# II. User management
# ==============================================================================
@router.get("/users")
async def list_users(params: PageParams = Depends(page_params)):
    """
    Paginated list of all users with posts_count and comments_count.
    """
    return await paginate(
        User.all().order_by("id"),
        params,
        user_to_dict,
        load=lambda rows: attach_counts(rows, "posts", "comments"),
    )


@router.post("/users", status_code=_CREATED)
async def create_user(body: AdminUserCreateIn, identity: Identity = Depends(require_write)):
    """
    Create an account directly (no token is issued).

    Raises:
        ValidationFailed (422): Email already registered
    """
    authorize(identity, CREATE, UserRef(id=None))
    await users.ensure_email_available(body.email)
    with unique_violation("email"):
        user = await User.create(
            name=body.name,
            email=body.email,
            password_hash=hash_password(body.password),
            role=body.role,
        )
    return {"success": True, "data": user_to_dict(user)}


@router.get("/users/{user_id}")
async def get_user_detail(user_id: int):
    """User detail with posts_count, comments_count and likes_count."""
    user = await users.load_user(user_id)
    await attach_counts([user], "posts", "comments", "likes")
    return {"success": True, "data": user_to_dict(user)}


@router.api_route("/users/{user_id}", methods=_UPDATE)
async def update_user(user_id: int, body: AdminUserUpdateIn, identity: Identity = Depends(require_write)):
    """
    Update any user's profile, role or password.

    Raises:
        NotFound (404): User does not exist
        ValidationFailed (422): Email taken, or demoting the last admin
    """
    user = await users.load_user(user_id)
    authorize(identity, UPDATE, UserRef(id=user.id))
    await users.apply_profile_update(user, body)

    if body.role and body.role != user.role:
        await users.ensure_not_last_admin(user, "Cannot demote the last admin")
        user.role = body.role
    if body.password:
        user.password_hash = hash_password(body.password)

    with unique_violation("email"):
        await user.save()
    return {"success": True, "data": user_to_dict(user)}


router.add_api_route("/users/{user_id}", users.delete_user, methods=["DELETE"])
