# blog_api/schemas/comment.py
from pydantic import BaseModel, Field


class CommentIn(BaseModel):
    """Body of POST /posts/{id}/comments (the post comes from the path)."""
    content: str = Field(min_length=1)


class CommentCreateIn(CommentIn):
    """Body of POST /comments."""
    post_id: int


class CommentUpdateIn(BaseModel):
    content: str = Field(min_length=1)
