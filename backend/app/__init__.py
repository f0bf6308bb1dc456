"""
Quill Backend — Application Package Initializer
================================================

A minimal blogging API: posts are created, listed, read, edited and deleted
over HTTP/JSON.

Architecture Note:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │       PostStore (interface)         │  ← validation, identity, timestamps
    ├──────────────────┬──────────────────┤
    │ SQLAlchemy store │  In-memory store │  ← engine chosen by DATABASE_URL
    └──────────────────┴──────────────────┘

    Routes never touch the engine; they receive a PostStore through
    FastAPI dependency injection.
"""

__version__ = "1.0.0"
