"""
Blog API - Post Repository Tests
==================================

What:  Tests for SqlPostRepository and MemoryPostRepository.
How:   The SQL store runs on a throwaway SQLite file (aiosqlite) with the
       `posts` table created by create_tables(); no PostgreSQL needed.
"""

import uuid

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine

from blog_api.database import build_session_factory, create_tables
from blog_api.exceptions import DatabaseError
from blog_api.repositories.memory import MemoryPostRepository
from blog_api.repositories.sql import SqlPostRepository
from blog_api.schemas.post import PostFields


def make_fields(**overrides) -> PostFields:
    data = {
        "title": "A",
        "description": "d",
        "body": "b",
        "author": "me",
        "date_posted": "2024-01-01",
    }
    data.update(overrides)
    return PostFields(**data)


@pytest_asyncio.fixture(params=["sql", "memory"])
async def any_repository(request, tmp_path):
    """Runs a test once per store implementation."""
    if request.param == "memory":
        yield MemoryPostRepository()
        return

    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'posts.db'}")
    await create_tables(engine)
    repository = SqlPostRepository(build_session_factory(engine), engine=engine)
    yield repository
    await repository.close()


class TestRepositoryContract:

    @pytest.mark.asyncio
    async def test_insert_assigns_id(self, any_repository):
        post = await any_repository.insert(make_fields())

        assert isinstance(post.id, uuid.UUID)
        assert post.title == "A"
        assert post.author == "me"

    @pytest.mark.asyncio
    async def test_find_by_id_round_trip(self, any_repository):
        created = await any_repository.insert(make_fields())

        found = await any_repository.find_by_id(str(created.id))

        assert found.id == created.id
        assert found.body == "b"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("date_posted", ["2024-01-01", "2024-01-01T09:30:00+02:00"])
    async def test_round_trip_keeps_every_field(self, any_repository, date_posted):
        """A stored post reads back as submitted, UTC offset included."""
        fields = make_fields(date_posted=date_posted)
        created = await any_repository.insert(fields)

        found = await any_repository.find_by_id(str(created.id))

        assert found.model_dump(exclude={"id"}) == fields.model_dump()
        assert found.date_posted == date_posted

    @pytest.mark.asyncio
    async def test_find_by_id_absent(self, any_repository):
        assert await any_repository.find_by_id(str(uuid.uuid4())) is None

    @pytest.mark.asyncio
    async def test_find_all(self, any_repository):
        assert await any_repository.find_all() == []

        await any_repository.insert(make_fields(title="one"))
        await any_repository.insert(make_fields(title="two"))

        titles = sorted(p.title for p in await any_repository.find_all())
        assert titles == ["one", "two"]

    @pytest.mark.asyncio
    async def test_update_replaces_fields(self, any_repository):
        created = await any_repository.insert(make_fields())

        updated = await any_repository.update_by_id(
            str(created.id), make_fields(title="B", body="new body")
        )

        assert updated.id == created.id
        assert updated.title == "B"
        assert updated.body == "new body"
        assert (await any_repository.find_by_id(str(created.id))).title == "B"

    @pytest.mark.asyncio
    async def test_update_absent_returns_none(self, any_repository):
        assert await any_repository.update_by_id(str(uuid.uuid4()), make_fields()) is None

    @pytest.mark.asyncio
    async def test_delete_returns_removed_post_once(self, any_repository):
        created = await any_repository.insert(make_fields())

        removed = await any_repository.delete_by_id(str(created.id))

        assert removed.id == created.id
        assert removed.title == "A"
        assert await any_repository.delete_by_id(str(created.id)) is None
        assert await any_repository.find_by_id(str(created.id)) is None

    @pytest.mark.asyncio
    async def test_ping(self, any_repository):
        assert await any_repository.ping() is True


class TestSqlRepositoryFailures:

    @pytest.mark.asyncio
    async def test_sql_error_becomes_database_error(self, tmp_path):
        """A missing table surfaces as DatabaseError, not a raw SQLAlchemy error."""
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
        repository = SqlPostRepository(build_session_factory(engine), engine=engine)

        try:
            with pytest.raises(DatabaseError) as exc_info:
                await repository.find_all()
        finally:
            await repository.close()

        assert exc_info.value.context["operation"] == "find_all"
        assert "posts" not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_insert_error_becomes_database_error(self, tmp_path):
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
        repository = SqlPostRepository(build_session_factory(engine), engine=engine)

        try:
            with pytest.raises(DatabaseError) as exc_info:
                await repository.insert(make_fields())
        finally:
            await repository.close()

        assert exc_info.value.context["operation"] == "insert"
