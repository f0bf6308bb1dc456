"""
Quill Backend — Store Construction & Request Dependencies
==========================================================

What:  Builds the post store from settings and exposes it to route handlers.
Why:   The store handle is created once in the app lifespan and threaded into
       each request through FastAPI's dependency injection, instead of being
       a module-level global.
How:   create_post_store() picks the engine from DATABASE_URL. The lifespan
       stores the result on app.state.post_store; get_post_store() reads it
       back for every request.
"""

import logging

from fastapi import Request

from app.config import Settings
from app.database import Database, engine_options
from app.exceptions import DatabaseError
from app.services.memory_post_store import InMemoryPostStore
from app.services.post_store import PostStore
from app.services.sql_post_store import SQLAlchemyPostStore

logger = logging.getLogger(__name__)


def create_post_store(settings: Settings) -> PostStore:
    """
    Instantiate the configured store engine.

    memory://           → InMemoryPostStore
    anything else       → SQLAlchemyPostStore on an async engine
    """
    if settings.uses_memory_store:
        logger.info("Using in-memory post store")
        return InMemoryPostStore()

    database = Database(
        settings.database_url,
        **engine_options(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            echo=settings.log_level == "DEBUG",
        ),
    )
    logger.info("Using SQLAlchemy post store (%s)", database.engine.url.render_as_string(hide_password=True))
    return SQLAlchemyPostStore(database, create_tables=settings.db_create_tables)


def get_post_store(request: Request) -> PostStore:
    """
    FastAPI dependency returning the store opened at startup.

    Raises:
        DatabaseError: the lifespan has not run (app served without startup).
    """
    store = getattr(request.app.state, "post_store", None)
    if store is None:
        raise DatabaseError(message="Post store is not initialized")
    return store
