# blog_api/schemas/post.py
"""
Pydantic schemas for post endpoints.
Existence of `category_id` / `tag_ids` is checked by the router against the store.
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

PostStatus = Literal["draft", "published", "archived"]


class PostCreateIn(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    excerpt: Optional[str] = None
    featured_image: Optional[str] = Field(default=None, max_length=1024)
    category_id: int
    tag_ids: Optional[List[int]] = None  # Replaces the post's tag set when given
    status: PostStatus = "draft"


class PostUpdateIn(BaseModel):
    """All fields optional - only provided fields are updated."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    content: Optional[str] = Field(default=None, min_length=1)
    excerpt: Optional[str] = None
    featured_image: Optional[str] = Field(default=None, max_length=1024)
    category_id: Optional[int] = None
    tag_ids: Optional[List[int]] = None
    status: Optional[PostStatus] = None
