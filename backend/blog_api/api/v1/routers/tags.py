# blog_api/api/v1/routers/tags.py
from fastapi import APIRouter, Depends
from slugify import slugify

from blog_api.api.v1.deps import require_write
from blog_api.api.v1.routers.posts import post_query
from blog_api.api.v1.serializers import post_to_dict, tag_to_dict
from blog_api.core.errors import NotFound, ValidationFailed, unique_violation
from blog_api.core.identity import Identity
from blog_api.core.pagination import PageParams, page_params, paginate
from blog_api.core.policy import CREATE, DELETE, UPDATE, TagRef, authorize
from blog_api.core.relations import attach_counts
from blog_api.models import Tag
from blog_api.models.post import STATUS_PUBLISHED
from blog_api.schemas.taxonomy import TagIn, TagUpdateIn

# Public read routes; writes are mounted under the admin group
router = APIRouter(prefix="/tags", tags=["tags"])


async def load_tag(tag_id: int) -> Tag:
    tag = await Tag.get_or_none(id=tag_id)
    if not tag:
        raise NotFound.resource("tag")
    return tag


async def _ensure_unique_name(name: str, exclude_id: int | None = None) -> None:
    qs = Tag.filter(name=name)
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    if await qs.exists():
        raise ValidationFailed.for_field("name", "The name has already been taken.")


@router.get("")
async def list_tags(params: PageParams = Depends(page_params)):
    return await paginate(
        Tag.all().order_by("id"),
        params,
        tag_to_dict,
        load=lambda rows: attach_counts(rows, "posts"),
    )


@router.get("/{tag_id}")
async def show_tag(tag_id: int):
    tag = await load_tag(tag_id)
    await attach_counts([tag], "posts")
    return {"success": True, "data": tag_to_dict(tag)}


@router.get("/{tag_id}/posts")
async def list_tag_posts(tag_id: int, params: PageParams = Depends(page_params)):
    """Published posts carrying this tag, newest first."""
    tag = await load_tag(tag_id)
    qs = post_query().filter(tags__id=tag.id, status=STATUS_PUBLISHED)
    return await paginate(qs, params, post_to_dict)


async def create_tag(body: TagIn, identity: Identity = Depends(require_write)):
    authorize(identity, CREATE, TagRef())
    await _ensure_unique_name(body.name)
    with unique_violation("name"):
        tag = await Tag.create(name=body.name, slug=slugify(body.name))
    return {"success": True, "data": tag_to_dict(tag)}


async def update_tag(tag_id: int, body: TagUpdateIn, identity: Identity = Depends(require_write)):
    tag = await load_tag(tag_id)
    authorize(identity, UPDATE, TagRef(id=tag.id))
    if body.name:
        await _ensure_unique_name(body.name, exclude_id=tag.id)
        tag.name = body.name
        tag.slug = slugify(body.name)
        with unique_violation("name"):
            await tag.save()
    return {"success": True, "data": tag_to_dict(tag)}


async def delete_tag(tag_id: int, identity: Identity = Depends(require_write)):
    """Delete a tag; posts only lose the association."""
    tag = await load_tag(tag_id)
    authorize(identity, DELETE, TagRef(id=tag.id))
    await tag.delete()
    return {"success": True, "message": "Tag deleted successfully."}
