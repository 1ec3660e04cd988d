"""
Classification of decoded API envelopes into payloads or domain errors.

v2 endpoints answer with ``{"data": ..., "errors": [...], "detail": "..."}``.
``classify`` turns such an envelope into an ``ApiOutcome``; callers unwrap it
to either get the payload or raise the matching ``XClientError``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, TypeVar

from pydantic import BaseModel

from xapi_client.exceptions import (
    ApiResponseError,
    RateLimitExceeded,
    UnknownResponseError,
    XClientError,
)

TOO_MANY_REQUESTS = "Too Many Requests"

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True, slots=True)
class ApiOutcome:
    """Either a successful ``data`` payload or the error it classified as."""

    data: Any = None
    error: XClientError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self, model: type[ModelT] | None = None) -> Any:
        """
        Return the payload, validated into ``model`` when one is given.

        Raises:
            XClientError: the classified error for unsuccessful outcomes.
            pydantic.ValidationError: when the payload does not fit ``model``.
        """

        if self.error is not None:
            raise self.error
        if model is None:
            return self.data
        return model.model_validate(self.data)


def collect_messages(payload: Mapping[str, Any]) -> list[str]:
    """Gather ``errors[*].message`` followed by ``detail``, in order."""

    messages: list[str] = []
    for entry in payload.get("errors") or ():
        if isinstance(entry, Mapping):
            message = entry.get("message") or entry.get("detail")
            if message:
                messages.append(str(message))
        elif entry:
            messages.append(str(entry))

    detail = payload.get("detail")
    if detail:
        messages.append(str(detail))
    return messages


def classify(payload: Any, *, reset_at: int | None = None) -> ApiOutcome:
    if not isinstance(payload, Mapping):
        return ApiOutcome(error=UnknownResponseError("Response body was not a JSON object."))

    if payload.get("data") is not None:
        return ApiOutcome(data=payload["data"])

    messages = collect_messages(payload)
    if TOO_MANY_REQUESTS in messages:
        return ApiOutcome(
            error=RateLimitExceeded(TOO_MANY_REQUESTS, reset_at=reset_at, messages=messages)
        )
    if messages:
        code = _first_error_code(payload)
        return ApiOutcome(error=ApiResponseError(" ".join(messages), code=code, messages=messages))
    return ApiOutcome(error=UnknownResponseError("Response carried no data and no error information."))


def _first_error_code(payload: Mapping[str, Any]) -> int | None:
    for entry in payload.get("errors") or ():
        if isinstance(entry, Mapping) and isinstance(entry.get("code"), int):
            return entry["code"]
    return None


def rate_limit_reset(headers: Mapping[str, str]) -> int | None:
    """Epoch seconds from ``x-rate-limit-reset``, or ``None`` when absent or malformed."""

    value = headers.get("x-rate-limit-reset")
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None
