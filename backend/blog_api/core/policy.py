# blog_api/core/policy.py
"""
Write-path authorization.

One function, ``can(actor, action, resource)``, decides every create / update /
delete in the API. Resources are passed as small typed references rather than
ORM rows so the decision never touches the database:

    can(identity, UPDATE, PostRef(id=post.id, owner_id=post.user_id))

Precedence:
  1. anonymous actors may not write anything
  2. admins may do everything
  3. otherwise ownership decides (posts, comments, users); categories and
     tags have no owner, so only admins get past rule 2 for them

Callers must resolve the resource (and raise ``NotFound``) *before* asking, so
that a denial is never confused with a missing row.
"""
import logging
from dataclasses import dataclass
from typing import Literal, Optional, Union

from blog_api.core.errors import Forbidden, Unauthenticated
from blog_api.core.identity import Identity

logger = logging.getLogger("uvicorn.error")

CREATE = "create"
UPDATE = "update"
DELETE = "delete"
Action = Literal["create", "update", "delete"]


@dataclass(frozen=True)
class PostRef:
    id: Optional[int]
    owner_id: Optional[int]
    kind = "post"


@dataclass(frozen=True)
class CommentRef:
    id: Optional[int]
    owner_id: Optional[int]
    kind = "comment"


@dataclass(frozen=True)
class UserRef:
    id: Optional[int]
    kind = "user"

    @property
    def owner_id(self) -> Optional[int]:
        # A user record is owned by itself
        return self.id


@dataclass(frozen=True)
class CategoryRef:
    id: Optional[int] = None
    kind = "category"


@dataclass(frozen=True)
class TagRef:
    id: Optional[int] = None
    kind = "tag"


ResourceRef = Union[PostRef, CommentRef, UserRef, CategoryRef, TagRef]

# Resource kinds any authenticated actor may create
_OPEN_CREATE = (PostRef, CommentRef)
# Resource kinds whose update/delete is decided by ownership
_OWNED = (PostRef, CommentRef, UserRef)


def can(actor: Optional[Identity], action: Action, resource: ResourceRef) -> bool:
    if actor is None:
        return False
    if actor.is_admin:
        return True

    if action == CREATE:
        return isinstance(resource, _OPEN_CREATE)
    if action in (UPDATE, DELETE):
        if isinstance(resource, _OWNED):
            return resource.owner_id is not None and resource.owner_id == actor.user_id
        return False
    return False


def authorize(actor: Optional[Identity], action: Action, resource: ResourceRef) -> None:
    """
    Raise instead of returning False.

    Raises:
        Unauthenticated: no actor at all
        Forbidden: the actor is known but the policy denies the action
    """
    if actor is None:
        raise Unauthenticated()
    if not can(actor, action, resource):
        logger.info("[policy] denied user=%s action=%s resource=%s:%s",
                    actor.user_id, action, resource.kind, resource.id)
        raise Forbidden()
