from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import List

from posthub.core.logging import get_logger
from posthub.core.queries import get_or_raise
from posthub.db.store import Comment, Post, Store
from posthub.schemas import CreatePostDto, EditPostDto, ReadCommentDto, ReadPostDto

log = get_logger("posthub.services.posts")


def to_datetime(ts: float) -> datetime:
    return datetime.fromtimestamp(ts, tz=timezone.utc)


def read_comment(comment: Comment) -> ReadCommentDto:
    return ReadCommentDto(
        id=comment.id,
        body=comment.body,
        post_id=comment.post_id,
        creation_time=to_datetime(comment.created_at),
    )


def read_post(post: Post, comments: List[Comment]) -> ReadPostDto:
    return ReadPostDto(
        id=post.id,
        title=post.title,
        body=post.body,
        creation_time=to_datetime(post.created_at),
        comments=[read_comment(c) for c in comments if c.post_id == post.id],
    )


class PostService:
    def __init__(self, store: Store) -> None:
        self.store = store

    async def get_all(self) -> List[ReadPostDto]:
        posts = await self.store.posts.all()
        comments = await self.store.comments.all()
        return [read_post(p, comments) for p in posts]

    async def get_by_id(self, post_id: int) -> ReadPostDto:
        post = await get_or_raise(self.store.posts, lambda p: p.id == post_id, "Post not found!")
        comments = await self.store.comments.all()
        return read_post(post, comments)

    async def create(self, dto: CreatePostDto) -> int:
        post = await self.store.posts.add(Post(title=dto.title, body=dto.body, created_at=time.time()))
        log.info("post created id=%s", post.id)
        return post.id

    async def edit(self, post_id: int, dto: EditPostDto) -> ReadPostDto:
        post = await get_or_raise(self.store.posts, lambda p: p.id == post_id, "Post not found!")
        post.title = dto.title
        post.body = dto.body
        await self.store.posts.update(post)
        log.info("post edited id=%s", post.id)
        comments = await self.store.comments.all()
        return read_post(post, comments)

    async def delete(self, post_id: int) -> None:
        post = await get_or_raise(self.store.posts, lambda p: p.id == post_id, "Post not found!")
        for comment in await self.store.comments.all():
            if comment.post_id == post.id:
                await self.store.comments.delete(comment)
        await self.store.posts.delete(post)
        log.info("post deleted id=%s", post.id)
