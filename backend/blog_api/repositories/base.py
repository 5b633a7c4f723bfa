"""
Blog API - Abstract Post Repository Interface
===============================================

What:  The narrow contract every post store implements.
How:   Concrete stores inherit from PostRepository and implement the five
       record operations plus a connectivity probe.

Implementations:
    - SqlPostRepository:    async SQLAlchemy table (PostgreSQL / SQLite)
    - MemoryPostRepository: dict keyed by UUID, for local runs and tests

Identifiers arrive as strings already accepted by validate_post_id(). Every
"absent" outcome is None, never an exception; deciding that None means 404 is
the route's job.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from blog_api.schemas.post import PostFields, PostResponse


class PostRepository(ABC):
    """
    Abstract store for post records.

    Contract:
        - find_by_id / update_by_id / delete_by_id return None when no record matches
        - insert assigns the id; callers never choose it
        - update_by_id replaces every editable field (full replace)
        - store failures raise DatabaseError
    """

    @abstractmethod
    async def find_by_id(self, post_id: str) -> Optional[PostResponse]:
        ...

    @abstractmethod
    async def find_all(self) -> List[PostResponse]:
        """All posts, in whatever order the store returns them."""
        ...

    @abstractmethod
    async def insert(self, fields: PostFields) -> PostResponse:
        ...

    @abstractmethod
    async def update_by_id(self, post_id: str, fields: PostFields) -> Optional[PostResponse]:
        """Replace all fields of the matching post and return the new state."""
        ...

    @abstractmethod
    async def delete_by_id(self, post_id: str) -> Optional[PostResponse]:
        """Remove the matching post and return it as it was before removal."""
        ...

    @abstractmethod
    async def ping(self) -> bool:
        """
        Lightweight connectivity probe for the health check.

        Returns True if the store answered, False otherwise. Never raises.
        """
        ...

    async def close(self) -> None:
        """Release store resources. Called once on shutdown."""
        return None
