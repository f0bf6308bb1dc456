"""
Quill Backend — Posts API Client
=================================

What:  Async Python client for the /api/posts endpoints.
Why:   Scripts, seeders and other services talk to the API through one place
       that knows the contract: JSON bodies in, Post dicts out, and any
       non-2xx status treated as a failure carrying the server's message.
How:   Thin wrapper over httpx.AsyncClient. Pass `transport=` to talk to an
       in-process app (httpx.ASGITransport) instead of the network.

Example:
    async with PostsClient("http://localhost:8000") as client:
        post = await client.create_post("Hello", "First post", author="Ada")
        await client.update_post(post["id"], title="Hello again")
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

POSTS_PATH = "/api/posts"


class PostsAPIError(Exception):
    """
    A request to the posts API came back with a non-2xx status.

    Attributes:
        status_code: HTTP status of the response
        message:     The server's `message` field, or the raw body when the
                     response was not a JSON error body
        request_id:  X-Request-ID of the failed call, for log correlation
    """

    def __init__(self, status_code: int, message: str, request_id: Optional[str] = None):
        self.status_code = status_code
        self.message = message
        self.request_id = request_id
        super().__init__(f"{status_code}: {message}")

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_validation_error(self) -> bool:
        return self.status_code == 400


class PostsClient:
    """Async client for list/create/get/update/delete of posts."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> "PostsClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def list_posts(self) -> List[Dict[str, Any]]:
        return await self._request("GET", POSTS_PATH)

    async def create_post(
        self, title: str, content: str, author: Optional[str] = None
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {"title": title, "content": content}
        if author is not None:
            body["author"] = author
        return await self._request("POST", POSTS_PATH, json=body)

    async def get_post(self, post_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"{POSTS_PATH}/{post_id}")

    async def update_post(self, post_id: str, **fields: Any) -> Dict[str, Any]:
        """Sends only the keyword arguments given; others stay unchanged."""
        return await self._request("PUT", f"{POSTS_PATH}/{post_id}", json=fields)

    async def delete_post(self, post_id: str) -> str:
        """Returns the server's confirmation message."""
        body = await self._request("DELETE", f"{POSTS_PATH}/{post_id}")
        return body["message"]

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self._client.request(method, path, **kwargs)
        if response.is_success:
            return response.json()

        request_id = response.headers.get("X-Request-ID")
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            message = body["message"]
        else:
            message = response.text or response.reason_phrase
        logger.debug("%s %s failed: %d %s [%s]", method, path, response.status_code, message, request_id)
        raise PostsAPIError(response.status_code, message, request_id=request_id)
