"""
Quill Backend — In-Memory Post Store
=====================================

What:  PostStore implementation backed by a process-local dict.
Why:   Runs the API with no database at all (DATABASE_URL=memory://), and
       gives the test-suite a second engine to hold to the same contract.
How:   Records live in a dict keyed by UUID. Every operation completes without
       awaiting, so on the single asyncio loop each one is atomic.

Limitations:
    Data is lost on restart and not shared between worker processes.
"""

import logging
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, List, Mapping

from app.exceptions import NotFoundError
from app.models.post import next_created_at
from app.schemas.post import PostResponse
from app.services.post_store import PostStore, parse_post_id, snapshot, to_response

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _StoredPost:
    id: uuid.UUID
    title: str
    content: str
    author: str
    created_at: datetime


class InMemoryPostStore(PostStore):
    """Dictionary-backed post persistence. Ids are never reused."""

    engine_name = "memory"

    def __init__(self) -> None:
        self._posts: Dict[uuid.UUID, _StoredPost] = {}

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        self._posts.clear()

    async def insert(self, fields: Mapping[str, Any]) -> PostResponse:
        values = self._prepare_insert(fields)
        post_id = uuid.uuid4()
        while post_id in self._posts:
            post_id = uuid.uuid4()
        record = _StoredPost(
            id=post_id,
            created_at=next_created_at(),
            **values,
        )
        self._posts[post_id] = record
        logger.info("Post %s created", post_id)
        return to_response(record)

    async def get_by_id(self, post_id: Any) -> PostResponse:
        return to_response(self._lookup(post_id))

    async def list_all(self) -> List[PostResponse]:
        ordered = sorted(
            self._posts.values(),
            key=lambda p: p.created_at,
            reverse=True,
        )
        return [to_response(record) for record in ordered]

    async def update_by_id(
        self, post_id: Any, fields: Mapping[str, Any]
    ) -> PostResponse:
        record = self._lookup(post_id)
        changes = self._prepare_update(snapshot(record), fields)
        updated = replace(record, **changes)
        self._posts[record.id] = updated
        logger.info("Post %s updated (%s)", record.id, ", ".join(changes) or "no changes")
        return to_response(updated)

    async def delete_by_id(self, post_id: Any) -> None:
        record = self._lookup(post_id)
        del self._posts[record.id]
        logger.info("Post %s deleted", record.id)

    def _lookup(self, post_id: Any) -> _StoredPost:
        key = parse_post_id(post_id)
        record = self._posts.get(key)
        if record is None:
            raise NotFoundError(resource="post", resource_id=str(key))
        return record
