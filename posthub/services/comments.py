from __future__ import annotations

import time

from posthub.core.logging import get_logger
from posthub.core.queries import get_or_raise
from posthub.db.store import Comment, Store
from posthub.schemas import CreateCommentDto, EditCommentDto, ReadCommentDto
from posthub.services.posts import read_comment

log = get_logger("posthub.services.comments")


class CommentService:
    def __init__(self, store: Store) -> None:
        self.store = store

    async def get(self, comment_id: int) -> ReadCommentDto:
        comment = await get_or_raise(
            self.store.comments, lambda c: c.id == comment_id, "Comment not found!"
        )
        return read_comment(comment)

    async def create(self, post_id: int, dto: CreateCommentDto) -> int:
        post = await get_or_raise(self.store.posts, lambda p: p.id == post_id, "Post not found!")
        comment = await self.store.comments.add(
            Comment(body=dto.body, post_id=post.id, created_at=time.time())
        )
        log.info("comment created id=%s post_id=%s", comment.id, post.id)
        return comment.id

    async def edit(self, comment_id: int, dto: EditCommentDto) -> ReadCommentDto:
        comment = await get_or_raise(
            self.store.comments, lambda c: c.id == comment_id, "Comment not found!"
        )
        comment.body = dto.body
        await self.store.comments.update(comment)
        log.info("comment edited id=%s", comment.id)
        return read_comment(comment)

    async def delete(self, comment_id: int) -> None:
        comment = await get_or_raise(
            self.store.comments, lambda c: c.id == comment_id, "Comment not found!"
        )
        await self.store.comments.delete(comment)
        log.info("comment deleted id=%s", comment.id)
