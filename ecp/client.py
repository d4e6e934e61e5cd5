from __future__ import annotations

from typing import Optional, TypedDict, cast

import httpx

from ecp.config import get_api_url
from ecp.constants import (
    COMMENTS_QUERY,
    HTTP_CONNECT_TIMEOUT,
    HTTP_HEADERS,
    HTTP_READ_TIMEOUT,
)
from ecp.logging_config import get_logger
from ecp.models import CommentRecord, CommentRecordDict

logger = get_logger(__name__)


class GraphQLErrorDict(TypedDict, total=False):
    message: str


class CommentsPage(TypedDict, total=False):
    items: Optional[list[CommentRecordDict]]


class CommentsData(TypedDict, total=False):
    comments: Optional[CommentsPage]


class GraphQLResponse(TypedDict, total=False):
    data: Optional[CommentsData]
    errors: list[GraphQLErrorDict]


class FetchError(Exception):
    """Base class for failures while loading comments."""


class TransportError(FetchError):
    """The request did not complete or came back with a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class QueryError(FetchError):
    """The indexer answered but reported GraphQL errors."""

    def __init__(self, messages: list[str]) -> None:
        super().__init__(f"GraphQL error: {', '.join(messages)}")
        self.messages = messages


class ECPClient:
    def __init__(self, api_url: Optional[str] = None) -> None:
        self.api_url: str = api_url or get_api_url()
        self.client: httpx.AsyncClient = httpx.AsyncClient(
            follow_redirects=True,
            headers=HTTP_HEADERS,
            timeout=httpx.Timeout(HTTP_READ_TIMEOUT, connect=HTTP_CONNECT_TIMEOUT),
        )

    async def fetch_comments(self) -> list[CommentRecord]:
        """Run the comments query once and return the flat record list.

        Raises TransportError on network or status failures and QueryError
        when the response carries GraphQL errors. An absent or empty item
        list is a normal, empty result.
        """
        logger.debug("fetching comments", url=self.api_url)
        try:
            resp: httpx.Response = await self.client.post(
                self.api_url, json={"query": COMMENTS_QUERY}
            )
        except httpx.HTTPError as e:
            logger.error("comment request failed", url=self.api_url, error=str(e))
            raise TransportError(f"Network error: {e}") from e

        if not resp.is_success:
            logger.error("comment request rejected", status=resp.status_code)
            raise TransportError(
                f"HTTP error! status: {resp.status_code}", status_code=resp.status_code
            )

        try:
            result = cast(GraphQLResponse, resp.json())
        except ValueError as e:
            logger.error("comment response is not JSON", status=resp.status_code)
            raise TransportError(
                "Invalid JSON in response", status_code=resp.status_code
            ) from e

        if not isinstance(result, dict):
            raise TransportError("Unexpected response shape", status_code=resp.status_code)

        errors = result.get("errors")
        if errors:
            messages = [
                str(e.get("message", "")) if isinstance(e, dict) else str(e)
                for e in errors
            ]
            logger.error("graphql errors", errors=messages)
            raise QueryError(messages)

        items = ((result.get("data") or {}).get("comments") or {}).get("items") or []
        records: list[CommentRecord] = []
        for item in items:
            if not isinstance(item, dict):
                logger.warning("skipping malformed comment item", item=repr(item))
                continue
            records.append(CommentRecord.from_dict(item))

        logger.info("fetched comments", count=len(records))
        return records

    async def close(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> ECPClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()


async def fetch_comments(api_url: Optional[str] = None) -> list[CommentRecord]:
    """Open a client, fetch the full comment set once and close it."""
    async with ECPClient(api_url) as ecp:
        return await ecp.fetch_comments()
