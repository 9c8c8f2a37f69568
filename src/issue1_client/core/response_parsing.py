"""Response body decoding and envelope helpers."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from .models import ResponseType

SUCCESS_STATUS = "success"
FAIL_STATUS = "fail"
ERROR_STATUS = "error"

FAILURE_STATUSES = frozenset({FAIL_STATUS, ERROR_STATUS})


def decode_body(
    content: bytes,
    *,
    response_type: ResponseType,
    encoding: str | None = None,
) -> Any:
    """Decode a raw body according to ``response_type``.

    Raises ``json.JSONDecodeError`` on malformed JSON and
    ``UnicodeDecodeError`` when the body does not match its charset.
    """

    if response_type == "bytes":
        return content
    text = content.decode(encoding or "utf-8")
    if response_type == "text":
        return text
    if not text.strip():
        return None
    return json.loads(text)


def is_envelope(payload: object) -> bool:
    return isinstance(payload, Mapping) and bool(payload.get("status"))


def is_failure_envelope(payload: object) -> bool:
    return is_envelope(payload) and payload.get("status") in FAILURE_STATUSES  # type: ignore[union-attr]


def unwrap_success(payload: object) -> Any:
    """Return ``data`` of a success envelope; other bodies pass through."""

    if isinstance(payload, Mapping) and payload.get("status") == SUCCESS_STATUS:
        return payload.get("data")
    return payload


__all__ = [
    "SUCCESS_STATUS",
    "FAIL_STATUS",
    "ERROR_STATUS",
    "FAILURE_STATUSES",
    "decode_body",
    "is_envelope",
    "is_failure_envelope",
    "unwrap_success",
]
