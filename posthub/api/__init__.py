from .routes_comments import router as comment_router
from .routes_posts import router as post_router
from .routes_users import router as user_router


def register_routes(app):
    """Mount every API router on ``app``."""
    app.include_router(post_router)
    app.include_router(comment_router)
    app.include_router(user_router)
