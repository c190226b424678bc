"""API endpoint modules for version 1."""

from .content import router as content_router
from .forum import router as forum_router
from .system import router as system_router

__all__ = [
    "content_router",
    "forum_router",
    "system_router",
]
