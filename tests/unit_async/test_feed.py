from __future__ import annotations

import pytest

from issue1_client.core.errors import ServerError
from issue1_client.resources import feed
from issue1_client.resources.feed import new_feed_service_client
from tests.shared.transport import BASE_URL, build_transport, envelope, json_response

POSTS = [{"id": 1, "title": "hello"}, {"id": 2, "title": "world"}]


@pytest.mark.asyncio
async def test_get_feed_posts_without_paging_sends_no_params():
    transport, handler = build_transport([json_response(200, envelope(POSTS))])
    result = await feed.get_feed_posts(BASE_URL, "alice", "tok", transport=transport)
    assert result == POSTS
    request = handler.last_request
    assert str(request.url) == f"{BASE_URL}/users/alice/feed/posts"
    assert request.headers["authorization"] == "Bearer tok"


@pytest.mark.asyncio
async def test_get_feed_posts_sends_paging_sorting_and_only_ids():
    transport, handler = build_transport([json_response(200, envelope([1, 2]))])
    await feed.get_feed_posts(
        BASE_URL,
        "alice",
        "tok",
        limit=2,
        offset=4,
        sorting="top",
        only_ids=True,
        transport=transport,
    )
    assert dict(handler.last_request.url.params) == {
        "limit": "2",
        "offset": "4",
        "sort": "top",
        "onlyPKeys": "true",
    }


@pytest.mark.asyncio
async def test_subscribe_to_channel_posts_channelname():
    transport, handler = build_transport([json_response(200, envelope())])
    assert await feed.subscribe_to_channel(BASE_URL, "alice", "news", "tok", transport=transport) is None
    request = handler.last_request
    assert request.method == "POST"
    assert str(request.url) == f"{BASE_URL}/users/alice/feed/channels"
    assert handler.last_json == {"channelname": "news"}


@pytest.mark.asyncio
async def test_feed_server_error_is_classified():
    transport, _ = build_transport([json_response(500, {"detail": "crash"})])
    with pytest.raises(ServerError) as exc_info:
        await feed.get_feed_posts(BASE_URL, "alice", "tok", transport=transport)
    assert exc_info.value.body == {"detail": "crash"}


@pytest.mark.asyncio
async def test_feed_service_client_forwards_options():
    transport, handler = build_transport(
        [json_response(200, envelope(POSTS)), json_response(200, envelope())]
    )
    client = new_feed_service_client(BASE_URL, transport=transport)
    assert await client.get_feed_posts("alice", "tok", only_ids=True) == POSTS
    await client.subscribe_to_channel("alice", "news", "tok")
    assert dict(handler.requests[0].url.params) == {"onlyPKeys": "true"}
    assert handler.requests[1].method == "POST"
