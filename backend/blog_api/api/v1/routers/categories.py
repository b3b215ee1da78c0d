# blog_api/api/v1/routers/categories.py
from fastapi import APIRouter, Depends
from slugify import slugify

from blog_api.api.v1.deps import require_write
from blog_api.api.v1.routers.posts import post_query
from blog_api.api.v1.serializers import category_to_dict, post_to_dict
from blog_api.core.errors import NotFound, ValidationFailed, unique_violation
from blog_api.core.identity import Identity
from blog_api.core.pagination import PageParams, page_params, paginate
from blog_api.core.policy import CREATE, DELETE, UPDATE, CategoryRef, authorize
from blog_api.core.relations import attach_counts
from blog_api.models import Category
from blog_api.models.post import STATUS_PUBLISHED
from blog_api.schemas.taxonomy import CategoryIn, CategoryUpdateIn

# Public read routes; writes are mounted under the admin group
router = APIRouter(prefix="/categories", tags=["categories"])


async def load_category(category_id: int) -> Category:
    category = await Category.get_or_none(id=category_id)
    if not category:
        raise NotFound.resource("category")
    return category


async def _ensure_unique_name(name: str, exclude_id: int | None = None) -> None:
    qs = Category.filter(name=name)
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    if await qs.exists():
        raise ValidationFailed.for_field("name", "The name has already been taken.")


@router.get("")
async def list_categories(params: PageParams = Depends(page_params)):
    """Paginated categories with posts_count."""
    return await paginate(
        Category.all().order_by("id"),
        params,
        category_to_dict,
        load=lambda rows: attach_counts(rows, "posts"),
    )


@router.get("/{category_id}")
async def show_category(category_id: int):
    category = await load_category(category_id)
    await attach_counts([category], "posts")
    return {"success": True, "data": category_to_dict(category)}


@router.get("/{category_id}/posts")
async def list_category_posts(category_id: int, params: PageParams = Depends(page_params)):
    """Published posts of a category, newest first."""
    category = await load_category(category_id)
    qs = post_query().filter(category_id=category.id, status=STATUS_PUBLISHED)
    return await paginate(qs, params, post_to_dict)


async def create_category(body: CategoryIn, identity: Identity = Depends(require_write)):
    """
    Create a category (admin only through the policy).

    Raises:
        Forbidden (403): Caller is not an admin
        ValidationFailed (422): Name already taken
    """
    authorize(identity, CREATE, CategoryRef())
    await _ensure_unique_name(body.name)
    with unique_violation("name"):
        category = await Category.create(
            name=body.name, slug=slugify(body.name), description=body.description
        )
    return {"success": True, "data": category_to_dict(category)}


async def update_category(
    category_id: int,
    body: CategoryUpdateIn,
    identity: Identity = Depends(require_write),
):
    category = await load_category(category_id)
    authorize(identity, UPDATE, CategoryRef(id=category.id))
    data = body.model_dump(exclude_unset=True)
    if data.get("name"):
        await _ensure_unique_name(data["name"], exclude_id=category.id)
        category.name = data["name"]
        category.slug = slugify(data["name"])
    if "description" in data:
        category.description = data["description"]
    with unique_violation("name"):
        await category.save()
    return {"success": True, "data": category_to_dict(category)}


async def delete_category(category_id: int, identity: Identity = Depends(require_write)):
    """Delete a category; its posts are removed with it."""
    category = await load_category(category_id)
    authorize(identity, DELETE, CategoryRef(id=category.id))
    await category.delete()
    return {"success": True, "message": "Category deleted successfully."}
