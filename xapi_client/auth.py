"""
Request signing strategies for the X API.

Every strategy exposes ``sign(method, url, query=None)`` and returns the value
of the ``Authorization`` header for a single request. ``OAuth1UserContext``
implements the HMAC-SHA1 user-context scheme used by the v1.1 media endpoints
and the v2 write endpoints; ``BearerToken`` covers app-only access.

The OAuth 1.0a signing key is built from the raw consumer secret and access
token secret joined by ``&``; the secrets are not percent-encoded first.
Credentials issued by the API only contain unreserved characters, so this
matches the canonical key for them, and the construction is kept as-is for
interoperability.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
import string
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, Mapping, Protocol, Sequence, Union
from urllib.parse import quote, unquote

from xapi_client.exceptions import ConfigurationError

NONCE_LENGTH = 42
SIGNATURE_METHOD = "HMAC-SHA1"
OAUTH_VERSION = "1.0"
_NONCE_ALPHABET = string.ascii_letters + string.digits

QueryParams = Union[Mapping[str, str], Sequence[tuple[str, str]]]


def percent_encode(value: str) -> str:
    """RFC 3986 encoding: everything but ``A-Z a-z 0-9 - . _ ~`` is escaped."""

    return quote(value, safe="")


def generate_nonce(length: int = NONCE_LENGTH) -> str:
    return "".join(secrets.choice(_NONCE_ALPHABET) for _ in range(length))


def unix_timestamp() -> str:
    return str(int(time.time()))


def normalize_query(query: QueryParams | None) -> tuple[tuple[str, str], ...]:
    if not query:
        return ()
    items: Iterable[tuple[str, str]]
    items = query.items() if isinstance(query, Mapping) else query
    # None-valued pairs are omitted rather than sent as the string "None".
    return tuple((str(key), str(value)) for key, value in items if value is not None)


class RequestSigner(Protocol):
    """Anything able to authorize a single HTTP request."""

    def sign(self, method: str, url: str, query: QueryParams | None = None) -> str:
        ...


@dataclass(frozen=True, slots=True)
class OAuth1Credentials:
    """The four user-context secrets. Immutable once constructed."""

    consumer_key: str
    consumer_secret: str = field(repr=False)
    access_token: str
    access_token_secret: str = field(repr=False)

    def __post_init__(self) -> None:
        missing = [
            name
            for name in ("consumer_key", "consumer_secret", "access_token", "access_token_secret")
            if not getattr(self, name)
        ]
        if missing:
            raise ConfigurationError(
                f"OAuth 1.0a credentials are incomplete: missing {', '.join(missing)}."
            )


@dataclass(frozen=True, slots=True)
class SignatureContext:
    """Per-request signing input. Built fresh for every call, never reused."""

    method: str
    url: str
    nonce: str
    timestamp: str
    query: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True, slots=True)
class OAuth1UserContext:
    """OAuth 1.0a HMAC-SHA1 signer bound to one set of user credentials."""

    credentials: OAuth1Credentials
    nonce_factory: Callable[[], str] = field(default=generate_nonce, repr=False, compare=False)
    clock: Callable[[], str] = field(default=unix_timestamp, repr=False, compare=False)

    def sign(self, method: str, url: str, query: QueryParams | None = None) -> str:
        return self.header(self.context(method, url, query))

    def context(self, method: str, url: str, query: QueryParams | None = None) -> SignatureContext:
        return SignatureContext(
            method=method.upper(),
            url=url,
            nonce=self.nonce_factory(),
            timestamp=self.clock(),
            query=normalize_query(query),
        )

    def base_parameters(self, context: SignatureContext) -> str:
        creds = self.credentials
        return (
            f"oauth_consumer_key={creds.consumer_key}"
            f"&oauth_nonce={context.nonce}"
            f"&oauth_signature_method={SIGNATURE_METHOD}"
            f"&oauth_timestamp={context.timestamp}"
            f"&oauth_token={creds.access_token}"
            f"&oauth_version={OAUTH_VERSION}"
        )

    def parameter_string(self, context: SignatureContext) -> str:
        """
        Join the encoded query pairs and the OAuth base parameters.

        Entries are sorted as whole ``key=value`` strings, with the OAuth
        parameter block treated as one opaque entry.
        """

        base = self.base_parameters(context)
        if not context.query:
            return base

        entries = [f"{percent_encode(key)}={percent_encode(value)}" for key, value in context.query]
        entries.append(base)
        entries.sort()
        return "&".join(entries)

    def base_string(self, context: SignatureContext) -> str:
        return "&".join(
            (
                context.method,
                percent_encode(context.url),
                percent_encode(self.parameter_string(context)),
            )
        )

    def signature(self, context: SignatureContext) -> str:
        creds = self.credentials
        key = f"{creds.consumer_secret}&{creds.access_token_secret}".encode("utf-8")
        digest = hmac.new(key, self.base_string(context).encode("utf-8"), hashlib.sha1).digest()
        return percent_encode(base64.b64encode(digest).decode("ascii"))

    def header(self, context: SignatureContext) -> str:
        creds = self.credentials
        return (
            f'OAuth oauth_consumer_key="{creds.consumer_key}",'
            f'oauth_nonce="{context.nonce}",'
            f'oauth_signature="{self.signature(context)}",'
            f'oauth_signature_method="{SIGNATURE_METHOD}",'
            f'oauth_timestamp="{context.timestamp}",'
            f'oauth_token="{creds.access_token}",'
            f'oauth_version="{OAUTH_VERSION}"'
        )


@dataclass(frozen=True, slots=True)
class BearerToken:
    """OAuth 2.0 app-only token; the same header for every request."""

    token: str = field(repr=False)

    def __post_init__(self) -> None:
        if not self.token:
            raise ConfigurationError("Bearer token must not be empty.")

    def sign(self, method: str, url: str, query: QueryParams | None = None) -> str:
        return f"Bearer {self.token}"


AuthStrategy = Union[OAuth1UserContext, BearerToken]


def parse_authorization_header(header: str) -> dict[str, str]:
    """Decode the quoted ``key="value"`` fields of an OAuth header."""

    scheme, _, params = header.partition(" ")
    if scheme != "OAuth":
        raise ValueError(f"Not an OAuth authorization header: {scheme!r}.")

    fields: dict[str, str] = {}
    for item in params.split(","):
        key, sep, value = item.strip().partition("=")
        if not sep:
            raise ValueError(f"Malformed OAuth header field: {item!r}.")
        fields[key] = unquote(value.strip('"'))
    return fields
