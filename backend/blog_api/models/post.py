"""
Blog API - Post SQLAlchemy Model
==================================

What:  ORM model for the `posts` table.
How:   Inherits from the declarative Base; created at startup by create_tables().

Table Design:
    - id: UUID primary key, assigned on insert, never updated
    - title, description, body, author: caller-supplied text
    - date_posted: caller-supplied timestamp text, stored as given so the
      UTC offset (if any) survives every backend

Only the primary key is indexed. Posts are never filtered or sorted server-side.
"""

import uuid

from sqlalchemy import String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from blog_api.database import Base


class Post(Base):
    """A blog post row."""

    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    description: Mapped[str] = mapped_column(Text, nullable=False)

    body: Mapped[str] = mapped_column(Text, nullable=False)

    author: Mapped[str] = mapped_column(String(255), nullable=False)

    # YYYY-MM-DD or ISO 8601, checked by PostFields
    date_posted: Mapped[str] = mapped_column(String(64), nullable=False)

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, title='{self.title}', author='{self.author}')>"
