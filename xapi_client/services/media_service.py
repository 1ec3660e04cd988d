"""
Media upload workflows wrapping the v1.1 simple and chunked upload protocols.
"""

from __future__ import annotations

import asyncio
import logging
import mimetypes
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Awaitable, Callable, Iterator, Protocol

import httpx
from pydantic import ValidationError

from xapi_client.auth import QueryParams
from xapi_client.config import ClientSettings
from xapi_client.exceptions import (
    BadMediaError,
    MediaProcessingFailed,
    MediaProcessingTimeout,
    MediaValidationError,
    RateLimitExceeded,
)
from xapi_client.models import (
    Failed,
    InProgress,
    MediaUploadResult,
    ProcessingStatus,
    Succeeded,
)
from xapi_client.responses import TOO_MANY_REQUESTS, classify, rate_limit_reset

logger = logging.getLogger(__name__)

# Marks a timeout left to the client settings; an explicit None disables it.
_UNSET: Any = object()

# Leading bytes of the media containers the upload endpoint accepts.
_MAGIC_NUMBERS: tuple[tuple[int, bytes, str], ...] = (
    (0, b"\xff\xd8\xff", "image/jpeg"),
    (0, b"\x89PNG\r\n\x1a\n", "image/png"),
    (0, b"GIF87a", "image/gif"),
    (0, b"GIF89a", "image/gif"),
    (4, b"ftyp", "video/mp4"),
)


class MediaClient(Protocol):
    """Protocol capturing the dispatcher behaviour the pipeline relies on."""

    settings: ClientSettings

    async def send(
        self,
        method: str,
        url: str,
        *,
        params: QueryParams | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        ...

    async def download(self, url: str) -> httpx.Response:
        ...


@dataclass(slots=True)
class UploadSession:
    """One in-flight chunked upload; chunks go out strictly in index order."""

    total_bytes: int
    mime_type: str
    media_id: str | None = None
    next_index: int = 0


def sniff_mime_type(data: bytes) -> str | None:
    for offset, magic, mime_type in _MAGIC_NUMBERS:
        if data[offset : offset + len(magic)] == magic:
            return mime_type
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return None


def resolve_mime_type(data: bytes, declared: str | None = None, filename: str | None = None) -> str:
    """
    Declared type first, then the file name, then the content itself.

    Raises:
        MediaValidationError: when no source yields a MIME type.
    """

    if declared:
        return declared
    if filename:
        guessed, _ = mimetypes.guess_type(filename)
        if guessed:
            return guessed
    sniffed = sniff_mime_type(data)
    if sniffed:
        return sniffed
    raise MediaValidationError("Unable to determine the media MIME type; pass mime_type explicitly.")


def iter_chunks(data: bytes, chunk_size: int) -> Iterator[tuple[int, bytes]]:
    for index, start in enumerate(range(0, len(data), chunk_size)):
        yield index, data[start : start + chunk_size]


@dataclass(slots=True)
class MediaService:
    """High level media upload orchestration with chunking and status polling."""

    client: MediaClient
    timeout: float | None = _UNSET
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep)

    def __post_init__(self) -> None:
        if self.timeout is _UNSET:
            self.timeout = self.client.settings.processing_timeout

    @property
    def chunk_size(self) -> int:
        return self.client.settings.chunk_size

    @property
    def upload_url(self) -> str:
        return self.client.settings.upload_url

    async def upload(
        self,
        data: bytes,
        mime_type: str | None = None,
        *,
        filename: str | None = None,
    ) -> MediaUploadResult:
        """
        Upload a payload, choosing the simple or chunked protocol by size.

        Payloads up to one chunk go out as a single multipart request; larger
        ones run INIT, APPEND for every chunk, FINALIZE and, when the server
        reports asynchronous processing, STATUS polling.

        Raises:
            MediaValidationError: if a chunked upload has no resolvable MIME type
            BadMediaError: on unexpected statuses or unparseable responses
            MediaProcessingFailed: if server-side processing fails
            MediaProcessingTimeout: if processing outlives ``timeout``
        """

        if len(data) <= self.chunk_size:
            return await self._simple_upload(data, mime_type=mime_type, filename=filename)

        session = UploadSession(
            total_bytes=len(data),
            mime_type=resolve_mime_type(data, mime_type, filename),
        )
        await self._init(session)
        await self._append_all(session, data)
        result = await self._finalize(session)
        if result.processing_info is not None:
            result = await self._await_processing(session)

        logger.info("Uploaded media %s (%d bytes, chunked)", session.media_id, session.total_bytes)
        return result

    async def upload_file(self, source: str | Path, mime_type: str | None = None) -> MediaUploadResult:
        """Upload a local file or an ``http(s)`` URL."""

        if isinstance(source, str) and source.startswith(("http://", "https://")):
            response = await self.client.download(source)
            if not response.is_success:
                raise BadMediaError(
                    f"Downloading '{source}' failed with HTTP {response.status_code}.",
                    status_code=response.status_code,
                )
            content_type = response.headers.get("content-type", "").split(";")[0].strip()
            declared = mime_type or (content_type if "/" in content_type else None)
            name = httpx.URL(source).path.rsplit("/", 1)[-1] or None
            return await self.upload(response.content, declared, filename=name)

        path = Path(source).expanduser()
        if not path.exists() or not path.is_file():
            raise MediaValidationError(f"Media file '{source}' does not exist or is not a file.")
        return await self.upload(path.read_bytes(), mime_type, filename=path.name)

    async def _simple_upload(
        self,
        data: bytes,
        *,
        mime_type: str | None,
        filename: str | None,
    ) -> MediaUploadResult:
        part_type = mime_type or (mimetypes.guess_type(filename)[0] if filename else None)
        part_type = part_type or sniff_mime_type(data) or "application/octet-stream"
        response = await self.client.send(
            "POST",
            self.upload_url,
            files={"media": (filename or "media", data, part_type)},
        )
        result = _parse_media_response(response)
        logger.info("Uploaded media %s (%d bytes)", result.media_id, len(data))
        return result

    async def _init(self, session: UploadSession) -> MediaUploadResult:
        response = await self.client.send(
            "POST",
            self.upload_url,
            params={
                "command": "INIT",
                "total_bytes": str(session.total_bytes),
                "media_type": session.mime_type,
            },
        )
        result = _parse_media_response(response)
        session.media_id = result.media_id
        logger.debug("INIT media %s (%s, %d bytes)", session.media_id, session.mime_type, session.total_bytes)
        return result

    async def _append_all(self, session: UploadSession, data: bytes) -> None:
        for index, chunk in iter_chunks(data, self.chunk_size):
            response = await self.client.send(
                "POST",
                self.upload_url,
                data={
                    "command": "APPEND",
                    "media_id": session.media_id,
                    "segment_index": str(index),
                },
                files={"media": ("blob", chunk, "application/octet-stream")},
            )
            if response.status_code != 204:
                raise BadMediaError(
                    f"APPEND of segment {index} for media {session.media_id} "
                    f"returned HTTP {response.status_code}.",
                    status_code=response.status_code,
                )
            session.next_index = index + 1
            logger.debug("APPEND media %s segment %d (%d bytes)", session.media_id, index, len(chunk))

    async def _finalize(self, session: UploadSession) -> MediaUploadResult:
        response = await self.client.send(
            "POST",
            self.upload_url,
            params={"command": "FINALIZE", "media_id": session.media_id, "allow_async": "true"},
        )
        result = _parse_media_response(response)
        logger.debug(
            "FINALIZE media %s, processing=%s",
            session.media_id,
            result.processing_info.state if result.processing_info else None,
        )
        return result

    async def _check_status(self, session: UploadSession) -> tuple[MediaUploadResult, ProcessingStatus]:
        response = await self.client.send(
            "GET",
            self.upload_url,
            params={"command": "STATUS", "media_id": session.media_id},
        )
        result = _parse_media_response(response)
        if result.processing_info is None:
            raise BadMediaError(
                f"STATUS for media {session.media_id} carried no processing_info.",
                status_code=response.status_code,
            )
        return result, result.processing_info.status()

    async def _await_processing(self, session: UploadSession) -> MediaUploadResult:
        deadline = None if self.timeout is None else time.monotonic() + self.timeout
        while True:
            result, status = await self._check_status(session)
            if isinstance(status, Succeeded):
                return result
            if isinstance(status, Failed):
                error = status.error
                raise MediaProcessingFailed(
                    error.message if error and error.message else "Media processing failed.",
                    code=error.code if error else None,
                )
            if not isinstance(status, InProgress):
                raise MediaProcessingFailed(
                    f"Media processing reported unrecognized state '{status.state}'."
                )

            if deadline is not None and time.monotonic() + status.wait > deadline:
                raise MediaProcessingTimeout("Timed out waiting for media processing to complete.")
            logger.debug("Media %s still processing, checking again in %ss", session.media_id, status.wait)
            await self.sleep(status.wait)


def _parse_media_response(response: httpx.Response) -> MediaUploadResult:
    reset_at = rate_limit_reset(response.headers)
    try:
        payload = response.json()
    except ValueError as exc:
        if response.status_code == 429:
            raise RateLimitExceeded(TOO_MANY_REQUESTS, reset_at=reset_at) from exc
        raise BadMediaError(
            f"Media endpoint returned a non-JSON body (HTTP {response.status_code}).",
            status_code=response.status_code,
        ) from exc

    if isinstance(payload, dict) and (payload.get("errors") or payload.get("detail")):
        outcome = classify(payload, reset_at=reset_at)
        if outcome.error is not None:
            raise outcome.error

    if response.status_code == 429:
        raise RateLimitExceeded(TOO_MANY_REQUESTS, reset_at=reset_at)
    if not response.is_success:
        raise BadMediaError(
            f"Media endpoint returned HTTP {response.status_code}.",
            status_code=response.status_code,
        )

    if not isinstance(payload, dict):
        raise BadMediaError(
            "Media endpoint response was not a JSON object.",
            status_code=response.status_code,
        )
    try:
        return MediaUploadResult.from_api(payload)
    except ValidationError as exc:
        raise BadMediaError(
            "Media endpoint response did not contain a media id.",
            status_code=response.status_code,
        ) from exc
