"""
Quill Backend — Pydantic Request/Response Schemas
==================================================

What:  Pydantic models defining the API contract between client and backend.
Why:   Type validation of request bodies, camelCase serialization of responses,
       and OpenAPI doc generation.
How:   FastAPI validates PostCreate/PostUpdate bodies and serializes
       PostResponse by alias (createdAt, not created_at).

Design Decision:
    Schemas only check types. The non-empty rules for title and content live
    in the post stores, so every engine enforces them the same way regardless
    of which layer called it.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# ══════════════════════════════════════════════════════════════════════════
# Request Models: what the client sends
# ══════════════════════════════════════════════════════════════════════════


class PostCreate(BaseModel):
    """
    Body of POST /api/posts.

    Unknown keys are dropped. Blank title/content pass type validation here
    and are rejected by the store with a 400.
    """
    title: str = Field(description="Post headline (required, non-empty)")
    content: str = Field(description="Post body (required, non-empty)")
    author: Optional[str] = Field(default="", description="Display name of the writer")


class PostUpdate(BaseModel):
    """
    Body of PUT /api/posts/{id}: any subset of the writable fields.

    Only keys actually present in the body are applied (see
    model_dump(exclude_unset=True) in the route), so omitted fields keep
    their stored values. An explicit null for title or content is passed
    through and rejected by the store.
    """
    title: Optional[str] = Field(default=None, description="New headline")
    content: Optional[str] = Field(default=None, description="New body")
    author: Optional[str] = Field(default=None, description="New author name")


# ══════════════════════════════════════════════════════════════════════════
# Response Models: what the API returns
# ══════════════════════════════════════════════════════════════════════════


class PostResponse(BaseModel):
    """
    Full representation of a stored post.

    Returned by every store operation and serialized as:
        {"id": "...", "title": "...", "content": "...",
         "author": "...", "createdAt": "2024-01-15T12:00:00Z"}
    """
    id: uuid.UUID = Field(description="Unique post identifier")
    title: str = Field(description="Post headline")
    content: str = Field(description="Post body")
    author: str = Field(default="", description="Display name of the writer")
    created_at: datetime = Field(description="When the post was created (UTC ISO 8601)")

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_validator("created_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """SQLite hands back naive datetimes; they were written as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    @field_validator("author", mode="before")
    @classmethod
    def default_author(cls, v: Optional[str]) -> str:
        return v or ""


class MessageResponse(BaseModel):
    """Confirmation body, e.g. {"message": "Post removed successfully"}."""
    message: str = Field(description="Human-readable confirmation")


# ══════════════════════════════════════════════════════════════════════════
# Error & Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Error body for every non-2xx response.

    Example:
        {
            "error": "not_found",
            "message": "Post not found",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer probes."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Post store connectivity: connected, disconnected")
    store: str = Field(description="Post store engine in use: sqlalchemy, memory")
    uptime_seconds: float = Field(description="Seconds since service started")
