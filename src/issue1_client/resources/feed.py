"""Feed service endpoints."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..core.builders import attach_auth_token_to_header, build_url, generate_query_params
from ..core.dispatcher import Transport, make_request
from ..core.models import RequestDescriptor

Post = Mapping[str, Any]


async def get_feed_posts(
    base_url: str,
    username: str,
    auth_token: str | None,
    *,
    limit: int | None = None,
    offset: int | None = None,
    sorting: str | None = None,
    only_ids: bool = False,
    transport: Transport | None = None,
) -> list[Post]:
    """Get the posts of the channels ``username`` is subscribed to.

    ``sorting`` is sent verbatim as the ``sort`` query parameter, e.g.
    ``"top"`` or ``"new"``.
    """

    return await make_request(
        build_url(base_url, f"/users/{username}/feed/posts"),
        RequestDescriptor(
            headers=attach_auth_token_to_header(auth_token),
            params=generate_query_params(
                limit=limit,
                offset=offset,
                sort_parameter=sorting,
                only_ids=only_ids,
            ),
        ),
        transport=transport,
    )


async def subscribe_to_channel(
    base_url: str,
    username: str,
    channelname: str,
    auth_token: str | None,
    *,
    transport: Transport | None = None,
) -> Any:
    return await make_request(
        build_url(base_url, f"/users/{username}/feed/channels"),
        RequestDescriptor(
            method="POST",
            headers=attach_auth_token_to_header(auth_token),
            data={"channelname": channelname},
        ),
        transport=transport,
    )


class FeedServiceClient:
    """Feed endpoints bound to a fixed base URL."""

    def __init__(self, base_url: str, *, transport: Transport | None = None) -> None:
        self.base_url = base_url
        self._transport = transport

    async def get_feed_posts(
        self,
        username: str,
        auth_token: str | None,
        *,
        limit: int | None = None,
        offset: int | None = None,
        sorting: str | None = None,
        only_ids: bool = False,
    ) -> list[Post]:
        return await get_feed_posts(
            self.base_url,
            username,
            auth_token,
            limit=limit,
            offset=offset,
            sorting=sorting,
            only_ids=only_ids,
            transport=self._transport,
        )

    async def subscribe_to_channel(
        self, username: str, channelname: str, auth_token: str | None
    ) -> Any:
        return await subscribe_to_channel(
            self.base_url, username, channelname, auth_token, transport=self._transport
        )


def new_feed_service_client(
    base_url: str,
    *,
    transport: Transport | None = None,
) -> FeedServiceClient:
    return FeedServiceClient(base_url, transport=transport)


__all__ = [
    "Post",
    "get_feed_posts",
    "subscribe_to_channel",
    "FeedServiceClient",
    "new_feed_service_client",
]
