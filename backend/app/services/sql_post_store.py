"""
Quill Backend — SQLAlchemy Post Store
======================================

What:  PostStore implementation over an async SQLAlchemy engine.
Why:   Durable storage on PostgreSQL (asyncpg) in production and SQLite
       (aiosqlite) for local development and tests, through one code path.
How:   Each operation opens its own session via Database.session(), which
       commits on success and rolls back on error. One operation touches one
       row, so every insert/update/delete is atomic per record.
Who:   Built by app.dependencies.create_post_store() during app startup.

Error Handling Strategy:
    NotFoundError and ValidationError propagate as-is. Anything else raised
    by the driver or ORM is logged in full and wrapped in DatabaseError, whose
    message names the failing operation and the driver's one-line fault.
    Statement text and bound parameters never leave the server log.
"""

import logging
from typing import Any, List, Mapping

from sqlalchemy import desc, select
from sqlalchemy.exc import DBAPIError

from app.database import Database
from app.exceptions import BlogError, DatabaseError, NotFoundError
from app.models.post import Post
from app.schemas.post import PostResponse
from app.services.post_store import PostStore, parse_post_id, snapshot, to_response

logger = logging.getLogger(__name__)


class SQLAlchemyPostStore(PostStore):
    """
    Post persistence in a relational database.

    Query plans:
        get/update/delete: SELECT ... WHERE id = :uuid  (primary key)
        list:              SELECT ... ORDER BY created_at DESC, id DESC
                           (idx_posts_created_at; created_at is strictly
                           increasing per process, id only orders ties
                           between processes)
    """

    engine_name = "sqlalchemy"

    def __init__(self, database: Database, create_tables: bool = False):
        self.database = database
        self.create_tables = create_tables

    async def initialize(self) -> None:
        if self.create_tables:
            try:
                await self.database.create_tables()
            except Exception as e:
                raise self._wrap("initialize", e)

    async def close(self) -> None:
        await self.database.dispose()

    async def ping(self) -> bool:
        return await self.database.ping()

    async def insert(self, fields: Mapping[str, Any]) -> PostResponse:
        values = self._prepare_insert(fields)
        try:
            async with self.database.session() as session:
                post = Post(**values)
                session.add(post)
                # Flush assigns id and created_at defaults before we read them
                await session.flush()
                result = to_response(post)
            logger.info("Post %s created", result.id)
            return result
        except Exception as e:
            raise self._wrap("insert", e)

    async def get_by_id(self, post_id: Any) -> PostResponse:
        key = parse_post_id(post_id)
        try:
            async with self.database.session() as session:
                post = await session.get(Post, key)
                if post is None:
                    raise NotFoundError(resource="post", resource_id=str(key))
                return to_response(post)
        except Exception as e:
            raise self._wrap("get", e)

    async def list_all(self) -> List[PostResponse]:
        try:
            async with self.database.session() as session:
                result = await session.execute(
                    select(Post).order_by(desc(Post.created_at), desc(Post.id))
                )
                return [to_response(post) for post in result.scalars().all()]
        except Exception as e:
            raise self._wrap("list", e)

    async def update_by_id(
        self, post_id: Any, fields: Mapping[str, Any]
    ) -> PostResponse:
        key = parse_post_id(post_id)
        try:
            async with self.database.session() as session:
                post = await session.get(Post, key)
                if post is None:
                    raise NotFoundError(resource="post", resource_id=str(key))
                # Validation failure raises inside the session, so nothing is written
                changes = self._prepare_update(snapshot(post), fields)
                for name, value in changes.items():
                    setattr(post, name, value)
                await session.flush()
                result = to_response(post)
            logger.info("Post %s updated (%s)", key, ", ".join(changes) or "no changes")
            return result
        except Exception as e:
            raise self._wrap("update", e)

    async def delete_by_id(self, post_id: Any) -> None:
        key = parse_post_id(post_id)
        try:
            async with self.database.session() as session:
                post = await session.get(Post, key)
                if post is None:
                    raise NotFoundError(resource="post", resource_id=str(key))
                await session.delete(post)
            logger.info("Post %s deleted", key)
        except Exception as e:
            raise self._wrap("delete", e)

    @staticmethod
    def _wrap(operation: str, error: Exception) -> BlogError:
        """Passes our own exceptions through; wraps everything else."""
        if isinstance(error, BlogError):
            return error
        logger.error(
            "Database error during post %s: %s", operation, str(error), exc_info=True
        )
        return DatabaseError(
            message=f"Post {operation} failed: {describe_fault(error)}",
            context={"operation": operation, "error_type": type(error).__name__},
        )


def describe_fault(error: Exception) -> str:
    """
    One-line description of an engine fault, safe to return to clients.

    str() of a DBAPIError appends the SQL statement, its parameters (post
    titles and bodies) and a docs link; only the driver's own message is kept.
    """
    if isinstance(error, DBAPIError) and error.orig is not None:
        error = error.orig
    lines = str(error).strip().splitlines()
    return lines[0] if lines else type(error).__name__
