"""Route modules."""

from .auth import router as auth_router
from .posts import private_posts_router, public_posts_router

__all__ = ["auth_router", "private_posts_router", "public_posts_router"]
