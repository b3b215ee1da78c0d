# blog_api/core/pagination.py
"""
Page-number pagination over Tortoise querysets.

Envelope: ``{"success", "data", "current_page", "per_page", "total", "last_page"}``.
"""
import math
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from fastapi import Query
from tortoise.queryset import QuerySet

from blog_api.config import settings


@dataclass
class PageParams:
    page: int
    per_page: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


def page_params(
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.per_page, ge=1, le=settings.per_page_max),
) -> PageParams:
    """FastAPI dependency reading ``page`` / ``per_page`` from the query string."""
    return PageParams(page=page, per_page=per_page)


async def paginate(
    qs: QuerySet,
    params: PageParams,
    serialize: Callable,
    load: Optional[Callable[[list], Awaitable]] = None,
) -> dict:
    """
    Fetch one page of ``qs``.

    ``load`` receives the page rows before serialization, for batched
    relation counts that cannot be expressed on the counted queryset.
    """
    total = await qs.count()
    rows = await qs.offset(params.offset).limit(params.per_page)
    if load is not None and rows:
        await load(rows)
    return {
        "success": True,
        "data": [serialize(r) for r in rows],
        "current_page": params.page,
        "per_page": params.per_page,
        "total": total,
        "last_page": max(1, math.ceil(total / params.per_page)),
    }
