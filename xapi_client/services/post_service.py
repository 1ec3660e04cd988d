"""
Profile and post workflows built on top of the HTTP dispatcher.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Protocol, Sequence

from xapi_client.auth import QueryParams
from xapi_client.models import Post, PostDraft, User
from xapi_client.responses import ApiOutcome


class PostClient(Protocol):
    """Protocol subset consumed by the service."""

    def api_url(self, path: str) -> str:
        ...

    async def _request(
        self, method: str, url: str, query: QueryParams | None = None
    ) -> ApiOutcome:
        ...

    async def _json_request(
        self,
        method: str,
        url: str,
        body: Mapping[str, Any],
        query: QueryParams | None = None,
    ) -> ApiOutcome:
        ...


@dataclass(slots=True)
class PostService:
    """High level orchestration for the authenticated account and its posts."""

    client: PostClient

    async def me(self, fields: Sequence[str] | None = None) -> User:
        """
        Fetch the authenticated user.

        Args:
            fields: extra ``user.fields`` to request, e.g. ``["description"]``

        Raises:
            RateLimitExceeded: when the API answers "Too Many Requests"
            ApiResponseError: for any other reported error
        """

        query = [("user.fields", ",".join(fields or ()))]
        outcome = await self.client._request("GET", self.client.api_url("users/me"), query)
        return outcome.unwrap(User)

    async def create_post(self, draft: PostDraft) -> Post:
        outcome = await self.client._json_request(
            "POST", self.client.api_url("tweets"), draft.to_payload()
        )
        return outcome.unwrap(Post)

    async def post_text(
        self,
        text: str,
        *,
        media_ids: Iterable[str] | None = None,
        in_reply_to: str | None = None,
        quote_post_id: str | None = None,
    ) -> Post:
        draft = PostDraft(
            text=text,
            media_ids=list(media_ids or ()),
            in_reply_to=in_reply_to,
            quote_post_id=quote_post_id,
        )
        return await self.create_post(draft)
