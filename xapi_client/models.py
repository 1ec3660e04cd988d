"""
Pydantic models for X (Twitter) API payloads used by xapi_client.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CHECK_AFTER_SECS = 1


class User(BaseModel):
    """The authenticated account as returned by ``/users/me``."""

    id: str
    name: str
    username: str
    description: str | None = None
    created_at: datetime | None = None

    model_config = ConfigDict(extra="allow")


class Post(BaseModel):
    """Normalized representation of a post."""

    id: str
    text: str | None = None

    model_config = ConfigDict(extra="allow")


class PostDraft(BaseModel):
    """Everything needed to publish a post, assembled before the request is sent."""

    text: str
    media_ids: list[str] = Field(default_factory=list, max_length=4)
    in_reply_to: str | None = None
    quote_post_id: str | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("media_ids", mode="before")
    @classmethod
    def coerce_media_ids(cls, value: Any) -> list[str]:
        return [str(item) for item in value or ()]

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"text": self.text}
        if self.media_ids:
            payload["media"] = {"media_ids": list(self.media_ids)}
        if self.in_reply_to:
            payload["reply"] = {"in_reply_to_tweet_id": self.in_reply_to}
        if self.quote_post_id:
            payload["quote_tweet_id"] = self.quote_post_id
        return payload


class MediaProcessingError(BaseModel):
    code: int | None = None
    name: str | None = None
    message: str | None = None


class MediaProcessingInfo(BaseModel):
    state: str
    check_after_secs: int | None = None
    progress_percent: int | None = None
    error: MediaProcessingError | None = None

    model_config = ConfigDict(extra="allow")

    def status(self) -> "ProcessingStatus":
        state = self.state.lower()
        if state in {"pending", "in_progress"}:
            wait = self.check_after_secs
            return InProgress(wait=DEFAULT_CHECK_AFTER_SECS if wait is None else wait)
        if state in {"succeeded", "success"}:
            return Succeeded()
        if state == "failed":
            return Failed(error=self.error)
        return Unrecognized(state=self.state)


class MediaUploadResult(BaseModel):
    """Normalized response from the media upload endpoints."""

    media_id: str
    media_id_string: str | None = None
    media_key: str | None = None
    expires_after_secs: int | None = None
    processing_info: MediaProcessingInfo | None = None

    model_config = ConfigDict(extra="allow")

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "MediaUploadResult":
        data = dict(payload)
        # media_id is a 64-bit integer; prefer the exact string form when present.
        if data.get("media_id_string"):
            data["media_id"] = data["media_id_string"]
        return cls.model_validate(data)

    @field_validator("media_id", mode="before")
    @classmethod
    def coerce_media_id(cls, value: Any) -> str:
        if isinstance(value, bool):
            raise ValueError("media_id must be serializable to str.")
        if isinstance(value, int):
            return str(value)
        if isinstance(value, str) and value:
            return value
        raise ValueError("media_id must be serializable to str.")


@dataclass(frozen=True, slots=True)
class InProgress:
    wait: float = DEFAULT_CHECK_AFTER_SECS


@dataclass(frozen=True, slots=True)
class Succeeded:
    pass


@dataclass(frozen=True, slots=True)
class Failed:
    error: MediaProcessingError | None = None


@dataclass(frozen=True, slots=True)
class Unrecognized:
    state: str


ProcessingStatus = Union[InProgress, Succeeded, Failed, Unrecognized]
