"""
Quill Backend — Abstract Post Store Interface
==============================================

What:  Abstract base class defining the persistence contract for posts.
Why:   The route handlers only depend on these operations, so the engine
       behind them (SQL database, process memory) is a configuration choice.
How:   Concrete stores inherit from PostStore and implement the five record
       operations plus the lifecycle hooks. Field rules shared by every
       engine live here as concrete helpers.
Who:   Implemented by SQLAlchemyPostStore and InMemoryPostStore; called by
       the /api/posts route handlers through app.dependencies.get_post_store.

Outcome signalling:
    - Success returns a PostResponse (or None for delete)
    - Unknown id raises NotFoundError (never upserts, never returns None)
    - Blank or missing title/content raises ValidationError before anything
      is written
    - Any engine fault raises DatabaseError
"""

import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional

from app.exceptions import NotFoundError, ValidationError
from app.schemas.post import PostResponse

# Fields a caller may write; everything else in an update payload is ignored
WRITABLE_FIELDS = ("title", "content", "author")
REQUIRED_FIELDS = ("title", "content")


def parse_post_id(post_id: Any) -> uuid.UUID:
    """
    Converts an incoming id to a UUID.

    Ids are opaque to clients, so a malformed id simply does not resolve:
    it raises NotFoundError rather than ValidationError.
    """
    if isinstance(post_id, uuid.UUID):
        return post_id
    try:
        return uuid.UUID(str(post_id))
    except (TypeError, ValueError):
        raise NotFoundError(resource="post", resource_id=str(post_id))


def writable_fields(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """Keeps only title/content/author; None author becomes ''."""
    picked = {key: fields[key] for key in WRITABLE_FIELDS if key in fields}
    if "author" in picked and picked["author"] is None:
        picked["author"] = ""
    return picked


def validate_post_fields(fields: Mapping[str, Any]) -> None:
    """
    Checks the merged record a store is about to write.

    Raises:
        ValidationError: title or content missing, not a string, or blank;
            author present but not a string.
    """
    for name in REQUIRED_FIELDS:
        value = fields.get(name)
        if value is None:
            raise ValidationError(message=f"{name} is required", field=name)
        if not isinstance(value, str):
            raise ValidationError(message=f"{name} must be a string", field=name)
        if not value.strip():
            raise ValidationError(message=f"{name} must not be empty", field=name)

    author = fields.get("author", "")
    if not isinstance(author, str):
        raise ValidationError(message="author must be a string", field="author")


class PostStore(ABC):
    """
    Abstract interface for post persistence.

    Contract:
        - insert() assigns id and created_at; callers never supply them
        - list_all() is newest-first with a stable tie-break
        - update_by_id() merges only the writable fields that were supplied
          and never touches id or created_at
        - delete_by_id() is a hard delete; a second delete is NotFoundError
    """

    #: Short engine name reported by the health check
    engine_name: str = "abstract"

    async def initialize(self) -> None:
        """Prepares the backing engine. Default: nothing to do."""

    async def close(self) -> None:
        """Releases the backing engine. Default: nothing to do."""

    @abstractmethod
    async def ping(self) -> bool:
        """Lightweight connectivity probe. Returns False when unreachable."""
        ...

    @abstractmethod
    async def insert(self, fields: Mapping[str, Any]) -> PostResponse:
        """
        Persist a new post.

        Args:
            fields: title, content and optionally author. Other keys are ignored.

        Returns:
            The stored record including its new id and created_at.

        Raises:
            ValidationError: title or content missing or blank. Nothing is written.
            DatabaseError: the engine failed.
        """
        ...

    @abstractmethod
    async def get_by_id(self, post_id: Any) -> PostResponse:
        """
        Exact lookup by id.

        Raises:
            NotFoundError: no live record has that id.
        """
        ...

    @abstractmethod
    async def list_all(self) -> List[PostResponse]:
        """All records ordered by created_at descending."""
        ...

    @abstractmethod
    async def update_by_id(
        self, post_id: Any, fields: Mapping[str, Any]
    ) -> PostResponse:
        """
        Merge supplied fields into an existing post.

        Raises:
            NotFoundError: no live record has that id.
            ValidationError: the merged title or content would be blank.
        """
        ...

    @abstractmethod
    async def delete_by_id(self, post_id: Any) -> None:
        """
        Permanently remove a post.

        Raises:
            NotFoundError: no live record has that id.
        """
        ...

    # ── Shared helpers ────────────────────────────────────────────────────

    @staticmethod
    def _prepare_insert(fields: Mapping[str, Any]) -> Dict[str, Any]:
        values = writable_fields(fields)
        values.setdefault("author", "")
        validate_post_fields(values)
        return values

    @staticmethod
    def _prepare_update(
        current: Mapping[str, Any], fields: Mapping[str, Any]
    ) -> Dict[str, Any]:
        """Returns only the changes, after validating the merged record."""
        changes = writable_fields(fields)
        merged: Dict[str, Any] = {**current, **changes}
        validate_post_fields(merged)
        return changes


def snapshot(post: Any) -> Dict[str, Optional[str]]:
    """Current writable values of a record, for merge validation."""
    return {name: getattr(post, name) for name in WRITABLE_FIELDS}


def to_response(post: Any) -> PostResponse:
    """Builds the API representation from any object with the Post attributes."""
    return PostResponse(
        id=post.id,
        title=post.title,
        content=post.content,
        author=post.author,
        created_at=post.created_at,
    )
