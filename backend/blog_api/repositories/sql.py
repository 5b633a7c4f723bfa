"""
Blog API - SQLAlchemy Post Repository
=======================================

What:  PostRepository backed by the `posts` table.
How:   Each operation opens its own AsyncSession from the session factory,
       commits on success and rolls back on failure. SQLAlchemy errors are
       wrapped in DatabaseError so the client receives a generic 500.

Query plans:
    find_by_id / update_by_id / delete_by_id → primary key lookup
    find_all                                → full table scan, no ORDER BY
"""

import logging
import uuid
from typing import List, NoReturn, Optional

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from blog_api.database import dispose_engine
from blog_api.exceptions import DatabaseError
from blog_api.models.post import Post
from blog_api.repositories.base import PostRepository
from blog_api.schemas.post import PostFields, PostResponse

logger = logging.getLogger(__name__)


class SqlPostRepository(PostRepository):
    """
    Post store on an async SQLAlchemy engine.

    Args:
        session_factory: async_sessionmaker bound to the engine
        engine: disposed on close() when given
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        engine: Optional[AsyncEngine] = None,
    ):
        self.session_factory = session_factory
        self.engine = engine

    def _handle_db_error(self, error: SQLAlchemyError, operation: str, post_id: Optional[str] = None) -> NoReturn:
        context = {"operation": operation, "error_type": type(error).__name__}
        if post_id is not None:
            context["post_id"] = post_id
        logger.error("Database error during %s: %s", operation, str(error))
        raise DatabaseError(context=context) from error

    async def find_by_id(self, post_id: str) -> Optional[PostResponse]:
        async with self.session_factory() as session:
            try:
                post = await session.get(Post, uuid.UUID(post_id))
            except SQLAlchemyError as e:
                self._handle_db_error(e, "find_by_id", post_id)
            return PostResponse.model_validate(post) if post else None

    async def find_all(self) -> List[PostResponse]:
        async with self.session_factory() as session:
            try:
                result = await session.execute(select(Post))
                posts = result.scalars().all()
            except SQLAlchemyError as e:
                self._handle_db_error(e, "find_all")
            return [PostResponse.model_validate(post) for post in posts]

    async def insert(self, fields: PostFields) -> PostResponse:
        async with self.session_factory() as session:
            try:
                post = Post(**fields.model_dump())
                session.add(post)
                await session.commit()
                await session.refresh(post)
            except SQLAlchemyError as e:
                await session.rollback()
                self._handle_db_error(e, "insert")
            return PostResponse.model_validate(post)

    async def update_by_id(self, post_id: str, fields: PostFields) -> Optional[PostResponse]:
        async with self.session_factory() as session:
            try:
                post = await session.get(Post, uuid.UUID(post_id))
                if post is None:
                    return None

                # Full replace: every editable column is overwritten
                for key, value in fields.model_dump().items():
                    setattr(post, key, value)

                await session.commit()
                await session.refresh(post)
            except SQLAlchemyError as e:
                await session.rollback()
                self._handle_db_error(e, "update_by_id", post_id)
            return PostResponse.model_validate(post)

    async def delete_by_id(self, post_id: str) -> Optional[PostResponse]:
        async with self.session_factory() as session:
            try:
                post = await session.get(Post, uuid.UUID(post_id))
                if post is None:
                    return None

                # Snapshot before the row goes away
                removed = PostResponse.model_validate(post)
                await session.delete(post)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                self._handle_db_error(e, "delete_by_id", post_id)
            return removed

    async def ping(self) -> bool:
        try:
            async with self.session_factory() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Post store unreachable: %s", str(e))
            return False

    async def close(self) -> None:
        if self.engine is not None:
            await dispose_engine(self.engine)
