"""Core request/response models."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Any, TypedDict

ResponseType = str
RequestTransformer = Callable[[Any, dict[str, str]], Any]

RESPONSE_TYPES = ("json", "text", "bytes")


class User(TypedDict, total=False):
    username: str
    email: str
    password: str
    firstName: str
    middleName: str
    lastName: str
    creationTime: str
    bio: str
    pictureURL: str


@dataclass(slots=True, frozen=True)
class Envelope:
    status: str
    data: Any = None
    message: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Envelope":
        message = payload.get("message")
        return cls(
            status=str(payload.get("status")),
            data=payload.get("data"),
            message=str(message) if message is not None else None,
        )

    @property
    def error_reason(self) -> str | None:
        return _data_field(self.data, "errorReason")

    @property
    def error_message(self) -> str | None:
        return _data_field(self.data, "errorMessage")

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"status": self.status}
        if self.data is not None:
            payload["data"] = self.data
        if self.message is not None:
            payload["message"] = self.message
        return payload


@dataclass(slots=True, frozen=True)
class ImageFragment:
    """Multipart body plus the headers it needs, mergeable into a descriptor."""

    data: Any
    headers: Mapping[str, str]


@dataclass(slots=True, frozen=True)
class RequestDescriptor:
    method: str = "GET"
    headers: Mapping[str, str] | None = None
    data: Any = None
    params: Mapping[str, Any] | None = None
    response_type: ResponseType = "json"
    transform_request: Sequence[RequestTransformer] = field(default=(), repr=False)
    timeout: float | None = None

    def __post_init__(self) -> None:
        if self.response_type not in RESPONSE_TYPES:
            raise ValueError(f"response_type must be one of {', '.join(RESPONSE_TYPES)}")
        object.__setattr__(self, "method", self.method.upper())

    def with_fragment(self, fragment: ImageFragment) -> "RequestDescriptor":
        return replace(self, data=fragment.data, headers=fragment.headers)


@dataclass(slots=True, frozen=True)
class RequestInfo:
    """Outgoing request as seen by the transport."""

    url: str
    method: str
    headers: Mapping[str, str]
    data: Any = None
    timeout: float | None = None
    response_type: ResponseType = "json"


@dataclass(slots=True, frozen=True)
class ResponseInfo:
    """Settled response with its decoded body."""

    status: int
    status_text: str
    headers: Mapping[str, str]
    data: Any = None

    @property
    def is_success(self) -> bool:
        return 200 <= self.status < 300


def _data_field(data: Any, key: str) -> str | None:
    if not isinstance(data, Mapping):
        return None
    value = data.get(key)
    return str(value) if value is not None else None


__all__ = [
    "RESPONSE_TYPES",
    "RequestTransformer",
    "User",
    "Envelope",
    "ImageFragment",
    "RequestDescriptor",
    "RequestInfo",
    "ResponseInfo",
]
