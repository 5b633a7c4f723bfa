"""
Blog API - Post Service
=========================

What:  The five post operations exposed to the routes.
How:   Each method is one call on the injected PostRepository. Empty results
       are returned as None; translating them to 404 happens in the routes.

    get_post(id)          → PostResponse | None
    get_posts()           → List[PostResponse]
    add_post(fields)      → PostResponse
    edit_post(id, fields) → PostResponse | None   (full replace)
    delete_post(id)       → PostResponse | None

Identifiers are expected to have passed validate_post_id() already.
"""

import logging
from typing import List, Optional

from blog_api.repositories.base import PostRepository
from blog_api.schemas.post import PostFields, PostResponse

logger = logging.getLogger(__name__)


class PostService:
    """
    Post access layer over a PostRepository.

    Holds no state besides the repository reference; one instance serves
    every request.
    """

    def __init__(self, repository: PostRepository):
        self.repository = repository

    async def get_post(self, post_id: str) -> Optional[PostResponse]:
        post = await self.repository.find_by_id(post_id)
        logger.debug("get_post %s: %s", post_id, "found" if post else "absent")
        return post

    async def get_posts(self) -> List[PostResponse]:
        posts = await self.repository.find_all()
        logger.debug("get_posts returned %d posts", len(posts))
        return posts

    async def add_post(self, fields: PostFields) -> PostResponse:
        post = await self.repository.insert(fields)
        logger.info("Post created: %s (author=%s)", post.id, post.author)
        return post

    async def edit_post(self, post_id: str, fields: PostFields) -> Optional[PostResponse]:
        """
        Replace every field of the post matching post_id.

        Returns:
            The updated post, or None if no post matches.
        """
        post = await self.repository.update_by_id(post_id, fields)
        if post is None:
            logger.info("Edit skipped, post %s does not exist", post_id)
        else:
            logger.info("Post updated: %s", post_id)
        return post

    async def delete_post(self, post_id: str) -> Optional[PostResponse]:
        """
        Remove the post matching post_id.

        Returns:
            The removed post, or None if no post matches. Deleting the same
            id twice therefore yields the post, then None.
        """
        post = await self.repository.delete_by_id(post_id)
        if post is None:
            logger.info("Delete skipped, post %s does not exist", post_id)
        else:
            logger.info("Post deleted: %s", post_id)
        return post
