# blog_api/schemas/taxonomy.py
"""
Pydantic schemas for categories and tags.
Name uniqueness is checked by the router.
"""
from typing import Optional

from pydantic import BaseModel, Field


class CategoryIn(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None


class CategoryUpdateIn(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None


class TagIn(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class TagUpdateIn(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
