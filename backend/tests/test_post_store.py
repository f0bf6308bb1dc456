"""
Quill Backend — Post Store Contract Tests
==========================================

What:  Behaviour every PostStore engine must share.
How:   The `store` fixture is parametrized, so each test runs against both
       InMemoryPostStore and SQLAlchemyPostStore (SQLite).

What we test:
    ✅ Create-then-read, defaults, and store-assigned id/created_at
    ✅ Newest-first listing, in creation order even within one clock tick
    ✅ Partial updates keep id, created_at and untouched fields
    ✅ Not-found on unknown, deleted and malformed ids
    ✅ Validation failures persist nothing
"""

import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from app.exceptions import NotFoundError, ValidationError
from app.models.post import next_created_at


class TestInsertAndRead:
    """insert() followed by get_by_id()."""

    @pytest.mark.asyncio
    async def test_create_then_read(self, store):
        before = datetime.now(timezone.utc)
        created = await store.insert({"title": "T", "content": "C"})

        fetched = await store.get_by_id(created.id)

        assert fetched.id == created.id
        assert fetched.title == "T"
        assert fetched.content == "C"
        assert fetched.author == ""
        assert fetched.created_at >= before.replace(microsecond=0)
        assert fetched.created_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_read_accepts_string_id(self, store, sample_post_data):
        created = await store.insert(sample_post_data)

        fetched = await store.get_by_id(str(created.id))

        assert fetched.author == "Ada"

    @pytest.mark.asyncio
    async def test_ids_are_unique(self, store):
        first = await store.insert({"title": "A", "content": "a"})
        second = await store.insert({"title": "A", "content": "a"})

        assert first.id != second.id

    @pytest.mark.asyncio
    async def test_caller_cannot_set_id_or_created_at(self, store):
        forced_id = uuid.uuid4()
        forced_time = datetime(2000, 1, 1, tzinfo=timezone.utc)

        created = await store.insert(
            {"title": "T", "content": "C", "id": forced_id, "created_at": forced_time}
        )

        assert created.id != forced_id
        assert created.created_at != forced_time

    @pytest.mark.asyncio
    async def test_none_author_stored_as_empty(self, store):
        created = await store.insert({"title": "T", "content": "C", "author": None})

        assert (await store.get_by_id(created.id)).author == ""


class TestInsertValidation:
    """Rejected inserts must leave the store untouched."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "fields, bad_field",
        [
            ({"title": "", "content": "C"}, "title"),
            ({"title": "   ", "content": "C"}, "title"),
            ({"content": "C"}, "title"),
            ({"title": "T"}, "content"),
            ({"title": "T", "content": ""}, "content"),
            ({"title": 5, "content": "C"}, "title"),
        ],
    )
    async def test_invalid_insert_raises_and_persists_nothing(self, store, fields, bad_field):
        with pytest.raises(ValidationError) as excinfo:
            await store.insert(fields)

        assert excinfo.value.field == bad_field
        assert bad_field in excinfo.value.message
        assert await store.list_all() == []


class TestListAll:
    """Newest-first ordering."""

    @pytest.mark.asyncio
    async def test_empty_store_lists_nothing(self, store):
        assert await store.list_all() == []

    @pytest.mark.asyncio
    async def test_lists_newest_first(self, store):
        p1 = await store.insert({"title": "P1", "content": "one"})
        p2 = await store.insert({"title": "P2", "content": "two"})
        p3 = await store.insert({"title": "P3", "content": "three"})

        listed = await store.list_all()

        assert [post.id for post in listed] == [p3.id, p2.id, p1.id]

    @pytest.mark.asyncio
    async def test_order_is_stable_between_calls(self, store):
        for i in range(5):
            await store.insert({"title": f"P{i}", "content": "x"})

        first = [post.id for post in await store.list_all()]
        second = [post.id for post in await store.list_all()]

        assert first == second

    @pytest.mark.asyncio
    async def test_same_clock_tick_keeps_creation_order(self, store):
        frozen = datetime.now(timezone.utc)
        with patch("app.models.post.datetime") as clock:
            clock.now.return_value = frozen
            created = [
                await store.insert({"title": f"P{i}", "content": "x"}) for i in range(5)
            ]

        listed = await store.list_all()

        assert [post.id for post in listed] == [post.id for post in reversed(created)]
        assert len({post.created_at for post in created}) == 5
        assert created[0].created_at >= frozen


class TestCreatedAtClock:

    def test_strictly_increasing_when_clock_stalls(self):
        frozen = datetime.now(timezone.utc)
        with patch("app.models.post.datetime") as clock:
            clock.now.return_value = frozen
            first = next_created_at()
            second = next_created_at()

        assert second - first == timedelta(microseconds=1)
        assert first >= frozen

    def test_never_moves_backwards(self):
        latest = next_created_at()
        with patch("app.models.post.datetime") as clock:
            clock.now.return_value = latest - timedelta(hours=1)
            later = next_created_at()

        assert later > latest


class TestUpdate:
    """update_by_id() merges, validates, and never upserts."""

    @pytest.mark.asyncio
    async def test_title_only_update_preserves_everything_else(self, store, sample_post_data):
        created = await store.insert(sample_post_data)

        updated = await store.update_by_id(created.id, {"title": "New title"})

        assert updated.title == "New title"
        assert updated.content == created.content
        assert updated.author == created.author
        assert updated.id == created.id
        assert updated.created_at == created.created_at

        fetched = await store.get_by_id(created.id)
        assert fetched.title == "New title"
        assert fetched.created_at == created.created_at

    @pytest.mark.asyncio
    async def test_update_ignores_unknown_and_immutable_fields(self, store, sample_post_data):
        created = await store.insert(sample_post_data)

        updated = await store.update_by_id(
            created.id,
            {
                "id": str(uuid.uuid4()),
                "created_at": "2000-01-01T00:00:00Z",
                "category": "news",
                "author": "Grace",
            },
        )

        assert updated.id == created.id
        assert updated.created_at == created.created_at
        assert updated.author == "Grace"

    @pytest.mark.asyncio
    async def test_empty_update_returns_record_unchanged(self, store, sample_post_data):
        created = await store.insert(sample_post_data)

        updated = await store.update_by_id(created.id, {})

        assert updated == created

    @pytest.mark.asyncio
    async def test_update_missing_id_does_not_upsert(self, store):
        with pytest.raises(NotFoundError):
            await store.update_by_id(uuid.uuid4(), {"title": "T", "content": "C"})

        assert await store.list_all() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "changes, bad_field",
        [
            ({"title": ""}, "title"),
            ({"content": "  "}, "content"),
            ({"title": None}, "title"),
        ],
    )
    async def test_invalid_update_leaves_record_untouched(
        self, store, sample_post_data, changes, bad_field
    ):
        created = await store.insert(sample_post_data)

        with pytest.raises(ValidationError) as excinfo:
            await store.update_by_id(created.id, {**changes, "author": "Someone else"})

        assert excinfo.value.field == bad_field
        fetched = await store.get_by_id(created.id)
        assert fetched.title == sample_post_data["title"]
        assert fetched.content == sample_post_data["content"]
        assert fetched.author == sample_post_data["author"]


class TestDelete:
    """Hard delete; second delete is not-found."""

    @pytest.mark.asyncio
    async def test_delete_then_read_and_update_are_not_found(self, store, sample_post_data):
        created = await store.insert(sample_post_data)

        await store.delete_by_id(created.id)

        with pytest.raises(NotFoundError):
            await store.get_by_id(created.id)
        with pytest.raises(NotFoundError):
            await store.update_by_id(created.id, {"title": "Back?"})
        assert await store.list_all() == []

    @pytest.mark.asyncio
    async def test_second_delete_is_not_found(self, store, sample_post_data):
        created = await store.insert(sample_post_data)
        await store.delete_by_id(created.id)

        with pytest.raises(NotFoundError):
            await store.delete_by_id(created.id)

    @pytest.mark.asyncio
    async def test_delete_only_removes_target(self, store):
        keep = await store.insert({"title": "Keep", "content": "k"})
        drop = await store.insert({"title": "Drop", "content": "d"})

        await store.delete_by_id(drop.id)

        assert [post.id for post in await store.list_all()] == [keep.id]


class TestNotFound:
    """Lookups by ids that never resolve."""

    @pytest.mark.asyncio
    async def test_unknown_id(self, store):
        with pytest.raises(NotFoundError) as excinfo:
            await store.get_by_id(uuid.uuid4())

        assert excinfo.value.message == "Post not found"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad_id", ["not-a-uuid", "", "123"])
    async def test_malformed_id_is_not_found(self, store, bad_id):
        with pytest.raises(NotFoundError):
            await store.get_by_id(bad_id)
        with pytest.raises(NotFoundError):
            await store.update_by_id(bad_id, {"title": "T"})
        with pytest.raises(NotFoundError):
            await store.delete_by_id(bad_id)


class TestPing:

    @pytest.mark.asyncio
    async def test_ping_reports_reachable(self, store):
        assert await store.ping() is True
