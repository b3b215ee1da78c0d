# blog_api/schemas/__init__.py
"""
Schema module initialization.
Exports all schema classes from submodules for convenient imports.
"""
from .auth import *
from .post import *
from .taxonomy import *
from .comment import *
from .user import *
