from __future__ import annotations

from typing import Optional

from fastapi import Header, Request

from posthub.core.errors import UnauthorizedError
from posthub.core.logging import set_log_context
from posthub.core.security import bearer_token
from posthub.db.store import User
from posthub.services.comments import CommentService
from posthub.services.posts import PostService
from posthub.services.users import UserService


def post_service(request: Request) -> PostService:
    return PostService(request.app.state.store)


def comment_service(request: Request) -> CommentService:
    return CommentService(request.app.state.store)


def user_service(request: Request) -> UserService:
    settings = request.app.state.settings
    return UserService(
        request.app.state.store,
        token_ttl_s=settings.TOKEN_TTL_MINUTES * 60,
        hash_iterations=settings.PASSWORD_HASH_ITERATIONS,
    )


async def require_user(
    request: Request, authorization: Optional[str] = Header(default=None)
) -> User:
    token = bearer_token(authorization)
    if token is None:
        raise UnauthorizedError("Missing bearer token")
    user = await user_service(request).authenticate(token)
    request.state.user = user
    set_log_context(user_id=str(user.id))
    return user
