"""
Blog API - Post Stores
========================

What:  Persistence layer behind the PostService.

Store Inventory:
    - PostRepository (abstract): find_by_id, find_all, insert, update_by_id, delete_by_id
    - SqlPostRepository:         async SQLAlchemy `posts` table
    - MemoryPostRepository:      in-process dict

The service depends only on PostRepository, so the concrete store is chosen
once in create_app() from settings.post_store.
"""

from blog_api.repositories.base import PostRepository
from blog_api.repositories.memory import MemoryPostRepository
from blog_api.repositories.sql import SqlPostRepository

__all__ = ["PostRepository", "MemoryPostRepository", "SqlPostRepository"]
