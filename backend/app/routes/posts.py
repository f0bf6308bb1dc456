"""
Quill Backend — Posts Route Handlers
=====================================

What:  The five /api/posts endpoints: list, create, read, update, delete.
Why:   The HTTP face of the post store.
How:   Each handler receives the store through Depends(get_post_store), calls
       one store operation, and returns its result. NotFoundError,
       ValidationError and DatabaseError are turned into 404/400/500 by the
       global handlers in main.py; handlers contain no try/except.

Status codes:
    GET    /api/posts        200
    POST   /api/posts        201 | 400
    GET    /api/posts/{id}   200 | 404
    PUT    /api/posts/{id}   200 | 404 | 400
    DELETE /api/posts/{id}   200 | 404
    any store fault          500
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status

from app.dependencies import get_post_store
from app.schemas.post import (
    ErrorResponse,
    MessageResponse,
    PostCreate,
    PostResponse,
    PostUpdate,
)
from app.services.post_store import PostStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/posts", tags=["Posts"])

DELETED_MESSAGE = "Post removed successfully"

_server_error = {500: {"description": "Post store failure", "model": ErrorResponse}}
_not_found = {404: {"description": "Post not found", "model": ErrorResponse}}
_invalid = {400: {"description": "Invalid post fields", "model": ErrorResponse}}


@router.get(
    "",
    response_model=List[PostResponse],
    responses={**_server_error},
    summary="List all posts, newest first",
)
async def list_posts(
    store: PostStore = Depends(get_post_store),
) -> List[PostResponse]:
    return await store.list_all()


@router.post(
    "",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**_invalid, **_server_error},
    summary="Create a post",
    description="title and content are required and must not be blank; author is optional.",
)
async def create_post(
    body: PostCreate,
    store: PostStore = Depends(get_post_store),
) -> PostResponse:
    return await store.insert(body.model_dump())


@router.get(
    "/{post_id}",
    response_model=PostResponse,
    responses={**_not_found, **_server_error},
    summary="Get a single post by ID",
)
async def get_post(
    post_id: str,
    store: PostStore = Depends(get_post_store),
) -> PostResponse:
    """
    Ids are taken as plain strings: a malformed id is just another id that
    does not exist, so it yields 404 rather than FastAPI's 422.
    """
    return await store.get_by_id(post_id)


@router.put(
    "/{post_id}",
    response_model=PostResponse,
    responses={**_invalid, **_not_found, **_server_error},
    summary="Update some or all fields of a post",
    description=(
        "Only fields present in the body are changed. id and createdAt are "
        "never modified; unknown fields are ignored."
    ),
)
async def update_post(
    post_id: str,
    body: PostUpdate,
    store: PostStore = Depends(get_post_store),
) -> PostResponse:
    # exclude_unset: omitted keys keep their stored values
    return await store.update_by_id(post_id, body.model_dump(exclude_unset=True))


@router.delete(
    "/{post_id}",
    response_model=MessageResponse,
    responses={**_not_found, **_server_error},
    summary="Delete a post permanently",
)
async def delete_post(
    post_id: str,
    store: PostStore = Depends(get_post_store),
) -> MessageResponse:
    await store.delete_by_id(post_id)
    return MessageResponse(message=DELETED_MESSAGE)
