"""Auth header and query parameter builders."""

from __future__ import annotations

import re
from collections.abc import MutableMapping
from typing import Any

from .errors import InvalidTokenError

_WHITESPACE = re.compile(r"\s")


def attach_auth_token_to_header(
    auth_token: str | None,
    headers: MutableMapping[str, str] | None = None,
) -> MutableMapping[str, str] | None:
    """Set ``Authorization: Bearer <token>`` on ``headers`` (or a new dict).

    Returns ``None`` when no token is given so callers can omit headers
    entirely. A token with whitespace is most likely a full header value
    ("Bearer abc") rather than the raw token and is rejected.
    """

    if not auth_token:
        return None
    if _WHITESPACE.search(auth_token):
        raise InvalidTokenError("invalid auth token: must not contain whitespace")
    if headers is None:
        headers = {}
    headers["Authorization"] = "Bearer " + auth_token
    return headers


def generate_query_params(
    *,
    pattern: str | None = None,
    limit: int | None = None,
    offset: int | None = None,
    sorting_order: str | None = None,
    sort_parameter: str | None = None,
    only_ids: bool = False,
) -> dict[str, Any]:
    params: dict[str, Any] = {}
    if limit is not None or offset is not None:
        params["limit"] = limit
        params["offset"] = offset
    if sort_parameter:
        sort = str(sort_parameter)
        if sorting_order:
            sort += f"_{sorting_order}"
        params["sort"] = sort
    if pattern:
        params["pattern"] = pattern
    if only_ids:
        params["onlyPKeys"] = True
    return params


def calculate_limit_offset(page: int = 1, per_page: int = 25) -> dict[str, int]:
    """Translate a 1-based page number into limit/offset."""

    return {"limit": per_page, "offset": (page - 1) * per_page}


def build_url(base_url: str, path: str) -> str:
    return base_url.rstrip("/") + "/" + path.lstrip("/")


__all__ = [
    "attach_auth_token_to_header",
    "generate_query_params",
    "calculate_limit_offset",
    "build_url",
]
