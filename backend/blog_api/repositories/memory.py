"""
Blog API - In-Memory Post Repository
======================================

What:  PostRepository backed by a plain dict, selected with POST_STORE=memory.
How:   Records are stored as PostResponse copies keyed by UUID; insertion order
       is the listing order. Nothing survives a restart.

Single-process only: the dict is not shared between workers.
"""

import uuid
from typing import Dict, List, Optional

from blog_api.repositories.base import PostRepository
from blog_api.schemas.post import PostFields, PostResponse


class MemoryPostRepository(PostRepository):
    """Dict-backed post store."""

    def __init__(self):
        self._posts: Dict[uuid.UUID, PostResponse] = {}

    async def find_by_id(self, post_id: str) -> Optional[PostResponse]:
        post = self._posts.get(uuid.UUID(post_id))
        return post.model_copy() if post else None

    async def find_all(self) -> List[PostResponse]:
        return [post.model_copy() for post in self._posts.values()]

    async def insert(self, fields: PostFields) -> PostResponse:
        post = PostResponse(id=uuid.uuid4(), **fields.model_dump())
        self._posts[post.id] = post
        return post.model_copy()

    async def update_by_id(self, post_id: str, fields: PostFields) -> Optional[PostResponse]:
        key = uuid.UUID(post_id)
        if key not in self._posts:
            return None
        post = PostResponse(id=key, **fields.model_dump())
        self._posts[key] = post
        return post.model_copy()

    async def delete_by_id(self, post_id: str) -> Optional[PostResponse]:
        return self._posts.pop(uuid.UUID(post_id), None)

    async def ping(self) -> bool:
        return True
