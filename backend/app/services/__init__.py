# Services package init
"""
Quill Backend — Services Layer
===============================

Persistence layer sitting between routes (HTTP) and the storage engine.

Service Inventory:
    - PostStore (abstract): the five post operations plus lifecycle hooks
    - SQLAlchemyPostStore: async SQLAlchemy engine (PostgreSQL, SQLite)
    - InMemoryPostStore: process-local dict, selected with DATABASE_URL=memory://

Routes receive a store through app.dependencies.get_post_store and never
import a concrete engine.
"""
