# blog_api/models/__init__.py
"""
Database models module initialization.
Exports all database models for convenient imports throughout the application.

Models exported:
- User: User account and authentication model
- AccessToken: Issued bearer token records
- Category, Tag: Post classification
- Post: Blog post (author, category, tags)
- Comment: Comment on a post
- Like: (user, post) like association
"""
from .user import User
from .access_token import AccessToken
from .category import Category
from .tag import Tag
from .post import Post
from .comment import Comment
from .like import Like
