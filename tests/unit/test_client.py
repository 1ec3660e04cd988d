from __future__ import annotations

import httpx
import pytest

from xapi_client.auth import BearerToken
from xapi_client.client import XClient
from xapi_client.config import ClientSettings
from xapi_client.exceptions import TransportError

from ..conftest import MockTransport


async def test_send_signs_base_url_and_query_separately(oauth_signer) -> None:
    transport = MockTransport([httpx.Response(200, json={})])
    client = XClient(oauth_signer, http=httpx.AsyncClient(transport=transport))

    await client.send("get", "https://upload.twitter.com/1.1/media/upload.json", params={"command": "STATUS", "media_id": "5"})

    request = transport.requests[0]
    assert request.method == "GET"
    assert request.url.params["command"] == "STATUS"
    assert request.headers["Authorization"] == oauth_signer.sign(
        "GET",
        "https://upload.twitter.com/1.1/media/upload.json",
        [("command", "STATUS"), ("media_id", "5")],
    )


async def test_send_signs_query_embedded_in_url(oauth_signer) -> None:
    transport = MockTransport([httpx.Response(200, json={})])
    client = XClient(oauth_signer, http=httpx.AsyncClient(transport=transport))

    await client.send("GET", client.api_url("users/me?user.fields=description"), params={"expansions": "pinned_tweet_id"})

    request = transport.requests[0]
    assert request.url.params["user.fields"] == "description"
    assert request.url.params["expansions"] == "pinned_tweet_id"
    assert request.headers["Authorization"] == oauth_signer.sign(
        "GET",
        "https://api.twitter.com/2/users/me",
        [("user.fields", "description"), ("expansions", "pinned_tweet_id")],
    )


async def test_send_uses_bearer_strategy() -> None:
    transport = MockTransport([httpx.Response(200, json={})])
    client = XClient(BearerToken("app-token"), http=httpx.AsyncClient(transport=transport))

    await client.send("GET", client.api_url("users/me"))

    assert transport.requests[0].headers["Authorization"] == "Bearer app-token"


async def test_send_wraps_transport_failures(oauth_signer) -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = XClient(oauth_signer, http=httpx.AsyncClient(transport=MockTransport(handler=refuse)))

    with pytest.raises(TransportError) as exc:
        await client.send("GET", client.api_url("users/me"))

    assert isinstance(exc.value.__cause__, httpx.ConnectError)


async def test_api_url_joins_base_and_path(oauth_signer) -> None:
    client = XClient(oauth_signer, settings=ClientSettings(api_base_url="https://api.x.com/2/"))

    assert client.api_url("/tweets") == "https://api.x.com/2/tweets"
    await client.aclose()


async def test_owned_http_client_is_closed_on_exit(oauth_signer) -> None:
    async with XClient(oauth_signer) as client:
        http = client._http

    assert http.is_closed


async def test_injected_http_client_is_left_open(oauth_signer) -> None:
    http = httpx.AsyncClient(transport=MockTransport())

    async with XClient(oauth_signer, http=http):
        pass

    assert not http.is_closed
    await http.aclose()
