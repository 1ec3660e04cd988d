"""Shared test fixtures.

Provides:
  - A mock httpx transport that replays queued responses and records requests
  - A deterministic OAuth 1.0a signer
"""

from __future__ import annotations

from typing import Callable

import httpx
import pytest

from xapi_client.auth import OAuth1Credentials, OAuth1UserContext

Handler = Callable[[httpx.Request], httpx.Response]


class MockTransport(httpx.AsyncBaseTransport):
    """Mock HTTP transport that returns preconfigured responses.

    Each request pops the next queued response, or is passed to ``handler``
    when one is given. If the queue is exhausted, returns a 500 error.
    """

    def __init__(
        self,
        responses: list[httpx.Response] | None = None,
        *,
        handler: Handler | None = None,
    ) -> None:
        self.responses = list(responses or [])
        self.handler = handler
        self.requests: list[httpx.Request] = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        await request.aread()
        self.requests.append(request)
        if self.handler is not None:
            return self.handler(request)
        if self.responses:
            response = self.responses.pop(0)
            response.stream = httpx.ByteStream(response.content)
            return response
        return httpx.Response(500, json={"error": "No more mock responses"})


@pytest.fixture
def oauth_signer() -> OAuth1UserContext:
    return OAuth1UserContext(
        OAuth1Credentials(
            consumer_key="consumer-key",
            consumer_secret="consumer-secret",
            access_token="access-token",
            access_token_secret="access-token-secret",
        ),
        nonce_factory=lambda: "n" * 42,
        clock=lambda: "1700000000",
    )
