# blog_api/core/visibility.py
"""
Read-path visibility for posts.

Guests see published posts only, authenticated users additionally see their
own posts in any status, admins see everything. A post the viewer may not see
is reported as missing (404), never as forbidden.
"""
from typing import Optional

from tortoise.expressions import Q
from tortoise.queryset import QuerySet

from blog_api.core.errors import Forbidden, NotFound
from blog_api.core.identity import Identity
from blog_api.models.post import STATUS_PUBLISHED


def visible_posts(viewer: Optional[Identity]) -> Optional[Q]:
    """
    Predicate restricting a post query to what ``viewer`` may list.

    Returns None when no restriction applies (admins).
    """
    if viewer is None:
        return Q(status=STATUS_PUBLISHED)
    if viewer.is_admin:
        return None
    return Q(status=STATUS_PUBLISHED) | Q(user_id=viewer.user_id)


def can_view(viewer: Optional[Identity], post) -> bool:
    if post.status == STATUS_PUBLISHED:
        return True
    if viewer is None:
        return False
    return viewer.is_admin or post.user_id == viewer.user_id


def ensure_visible(viewer: Optional[Identity], post) -> None:
    """Raise ``NotFound`` for a post the viewer is not allowed to read."""
    if post is None or not can_view(viewer, post):
        raise NotFound.resource("post")


def scope_posts(qs: QuerySet, viewer: Optional[Identity], status: Optional[str] = None) -> QuerySet:
    """
    Apply the visibility predicate and an optional caller-requested status.

    The requested status is intersected with the predicate. A guest asking for
    anything but published content is refused outright rather than handed an
    empty page, so non-published content cannot be discovered that way.

    Raises:
        Forbidden: guest requested a non-published status
    """
    if status and viewer is None and status != STATUS_PUBLISHED:
        raise Forbidden("Access denied")

    predicate = visible_posts(viewer)
    if predicate is not None:
        qs = qs.filter(predicate)
    if status:
        qs = qs.filter(status=status)
    return qs
