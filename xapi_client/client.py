"""
Async HTTP dispatcher: authorizes each request and classifies each response.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from xapi_client.auth import QueryParams, RequestSigner, normalize_query
from xapi_client.config import ClientSettings
from xapi_client.exceptions import RateLimitExceeded, TransportError, UnknownResponseError
from xapi_client.responses import TOO_MANY_REQUESTS, ApiOutcome, classify, rate_limit_reset

logger = logging.getLogger(__name__)


class XClient:
    """
    Thin wrapper around ``httpx.AsyncClient`` that signs every call.

    The signer only sees the query string; JSON and multipart bodies are not
    part of the OAuth 1.0a signature base.
    """

    def __init__(
        self,
        auth: RequestSigner,
        *,
        settings: ClientSettings | None = None,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self.auth = auth
        self.settings = settings or ClientSettings()
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(
            timeout=self.settings.timeout,
            headers={"User-Agent": self.settings.user_agent},
        )

    async def __aenter__(self) -> "XClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    def api_url(self, path: str) -> str:
        return f"{self.settings.api_base_url}/{path.lstrip('/')}"

    async def send(
        self,
        method: str,
        url: str,
        *,
        params: QueryParams | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Sign and issue one request.

        Raises:
            TransportError: on any connection, TLS or protocol failure.
        """

        method = method.upper()
        query = normalize_query(params)
        url, _, raw_query = url.partition("?")
        if raw_query:
            # A query embedded in the URL must be signed like any other parameter.
            query = tuple(httpx.QueryParams(raw_query).multi_items()) + query
        headers = {"Authorization": self.auth.sign(method, url, query)}
        try:
            response = await self._http.request(
                method, url, params=query or None, headers=headers, **kwargs
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        logger.debug("%s %s -> %s", method, url, response.status_code)
        return response

    async def download(self, url: str) -> httpx.Response:
        """Unsigned GET, used to pull remote media before uploading it."""

        try:
            response = await self._http.get(url, follow_redirects=True)
        except httpx.HTTPError as exc:
            raise TransportError(f"GET {url} failed: {exc}") from exc
        logger.debug("GET %s -> %s", url, response.status_code)
        return response

    async def _request(
        self,
        method: str,
        url: str,
        query: QueryParams | None = None,
    ) -> ApiOutcome:
        response = await self.send(method, url, params=query)
        return self.classify_response(response)

    async def _json_request(
        self,
        method: str,
        url: str,
        body: Mapping[str, Any],
        query: QueryParams | None = None,
    ) -> ApiOutcome:
        response = await self.send(method, url, params=query, json=dict(body))
        return self.classify_response(response)

    @staticmethod
    def classify_response(response: httpx.Response) -> ApiOutcome:
        reset_at = rate_limit_reset(response.headers)
        try:
            payload = response.json()
        except ValueError as exc:
            if response.status_code == 429:
                return ApiOutcome(error=RateLimitExceeded(TOO_MANY_REQUESTS, reset_at=reset_at))
            raise TransportError(
                f"Could not decode response body (HTTP {response.status_code})."
            ) from exc

        outcome = classify(payload, reset_at=reset_at)
        if response.status_code == 429 and isinstance(outcome.error, UnknownResponseError):
            return ApiOutcome(error=RateLimitExceeded(TOO_MANY_REQUESTS, reset_at=reset_at))
        if outcome.error is not None:
            logger.debug("API error (HTTP %s): %s", response.status_code, outcome.error)
        return outcome
