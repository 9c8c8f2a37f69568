from __future__ import annotations

import httpx
import pytest

from issue1_client.core.dispatcher import CONNECTION_ERROR, INVALID_INPUT_MESSAGE, make_request
from issue1_client.core.errors import (
    ApplicationFailure,
    NoResponse,
    ParseFailure,
    RequestFailure,
    ServerError,
    SetupFailure,
    TransportRejection,
)
from issue1_client.core.models import Envelope, RequestDescriptor
from tests.shared.transport import (
    BASE_URL,
    build_transport,
    dns_failure,
    envelope,
    json_response,
    refused_failure,
)

URL = f"{BASE_URL}/users/alice"


@pytest.mark.asyncio
async def test_success_envelope_resolves_to_data():
    transport, _ = build_transport([json_response(200, envelope({"username": "alice"}))])
    assert await make_request(URL, transport=transport) == {"username": "alice"}


@pytest.mark.asyncio
async def test_non_envelope_body_is_returned_as_decoded():
    transport, _ = build_transport([json_response(200, ["a", "b"])])
    assert await make_request(URL, transport=transport) == ["a", "b"]


@pytest.mark.asyncio
async def test_empty_body_resolves_to_none():
    transport, _ = build_transport([httpx.Response(204)])
    assert await make_request(URL, RequestDescriptor(method="DELETE"), transport=transport) is None


@pytest.mark.asyncio
async def test_text_response_type_is_returned_verbatim():
    transport, _ = build_transport([httpx.Response(200, text="plain")])
    result = await make_request(URL, RequestDescriptor(response_type="text"), transport=transport)
    assert result == "plain"


@pytest.mark.asyncio
async def test_fail_envelope_with_success_status_is_raised():
    body = envelope({"errorReason": "X", "errorMessage": "Y"}, status="fail")
    transport, _ = build_transport([json_response(200, body)])
    with pytest.raises(ApplicationFailure) as exc_info:
        await make_request(URL, transport=transport)
    assert exc_info.value.data == {"errorReason": "X", "errorMessage": "Y"}
    assert exc_info.value.error_code == 200


@pytest.mark.asyncio
async def test_error_envelope_with_success_status_is_raised():
    transport, _ = build_transport([json_response(200, envelope(status="error", message="boom"))])
    with pytest.raises(ApplicationFailure) as exc_info:
        await make_request(URL, transport=transport)
    assert exc_info.value.status == "error"


@pytest.mark.asyncio
async def test_fail_envelope_with_400_carries_error_code():
    body = envelope({"errorReason": "X", "errorMessage": "Y"}, status="fail")
    transport, _ = build_transport([json_response(400, body)])
    with pytest.raises(ApplicationFailure) as exc_info:
        await make_request(URL, transport=transport)
    err = exc_info.value
    assert err.error_code == 400
    assert err.data == body["data"]
    assert err.error_reason == "X"
    assert isinstance(err.__cause__, TransportRejection)


@pytest.mark.asyncio
async def test_non_envelope_error_body_raises_server_error():
    transport, _ = build_transport([httpx.Response(503, text="unavailable")])
    with pytest.raises(ServerError) as exc_info:
        await make_request(URL, transport=transport)
    err = exc_info.value
    assert err.status == 503
    assert err.status_text == "Service Unavailable"
    assert err.body == "unavailable"


@pytest.mark.asyncio
async def test_malformed_json_raises_parse_failure():
    transport, _ = build_transport([httpx.Response(200, content=b"{oops")])
    with pytest.raises(ParseFailure, match="Invalid input: unable to parse input."):
        await make_request(URL, transport=transport)


@pytest.mark.asyncio
async def test_charset_failure_raises_parse_failure_with_original():
    transport, _ = build_transport(
        [httpx.Response(200, content=b"\xff", headers={"Content-Type": "application/json; charset=utf-8"})]
    )
    with pytest.raises(ParseFailure) as exc_info:
        await make_request(URL, transport=transport)
    assert str(exc_info.value) != INVALID_INPUT_MESSAGE
    assert isinstance(exc_info.value.decode_error, UnicodeDecodeError)


@pytest.mark.asyncio
async def test_dns_failure_raises_connection_singleton():
    transport, _ = build_transport([dns_failure()])
    with pytest.raises(NoResponse) as exc_info:
        await make_request(URL, transport=transport)
    assert exc_info.value is CONNECTION_ERROR


@pytest.mark.asyncio
async def test_repeated_dns_failures_raise_the_same_value():
    transport, _ = build_transport([dns_failure(), dns_failure()])
    raised = []
    for _ in range(2):
        with pytest.raises(NoResponse) as exc_info:
            await make_request(URL, transport=transport)
        raised.append(exc_info.value)
    assert raised[0] is raised[1] is CONNECTION_ERROR


@pytest.mark.asyncio
async def test_refused_connection_raises_no_response_with_request_info():
    transport, _ = build_transport([refused_failure()])
    with pytest.raises(NoResponse) as exc_info:
        await make_request(
            URL,
            RequestDescriptor(method="PUT", headers={"Authorization": "Bearer t"}, data={"bio": "x"}),
            transport=transport,
        )
    err = exc_info.value
    assert err is not CONNECTION_ERROR
    assert err.description.startswith("no response was received; ")
    assert err.code == "ECONNREFUSED"
    assert err.request.method == "PUT"
    assert err.request.url == URL
    assert err.request.data == {"bio": "x"}
    assert err.request.headers["authorization"] == "Bearer t"


@pytest.mark.asyncio
async def test_unsupported_scheme_raises_setup_failure():
    with pytest.raises(SetupFailure) as exc_info:
        await make_request("ftp://issue1.test/users")
    assert exc_info.value.description.startswith("setting up request failed; ")
    assert exc_info.value.request is None


@pytest.mark.asyncio
async def test_every_failure_is_a_request_failure():
    transport, _ = build_transport(
        [
            httpx.Response(500, text="x"),
            httpx.Response(200, content=b"{"),
            refused_failure(),
            json_response(422, envelope(status="fail")),
        ]
    )
    for _ in range(4):
        with pytest.raises(RequestFailure):
            await make_request(URL, transport=transport)


@pytest.mark.asyncio
async def test_application_failure_from_transport_passes_through_unchanged():
    original = ApplicationFailure(Envelope(status="fail", data={"errorReason": "X"}), error_code=409)

    class _RaisingTransport:
        async def request(self, url, descriptor):
            raise original

    with pytest.raises(ApplicationFailure) as exc_info:
        await make_request(URL, transport=_RaisingTransport())
    assert exc_info.value is original


@pytest.mark.asyncio
async def test_dns_failure_singleton_keeps_no_call_context():
    transport, _ = build_transport([dns_failure(), refused_failure(), dns_failure()])
    with pytest.raises(NoResponse):
        await make_request(URL, transport=transport)
    with pytest.raises(NoResponse):
        await make_request(URL, transport=transport)
    with pytest.raises(NoResponse) as exc_info:
        await make_request(URL, transport=transport)
    assert exc_info.value is CONNECTION_ERROR
    assert CONNECTION_ERROR.__context__ is None
    assert CONNECTION_ERROR.__cause__ is None


@pytest.mark.asyncio
async def test_unserializable_body_raises_setup_failure():
    transport, handler = build_transport([json_response(200, envelope())])
    with pytest.raises(SetupFailure) as exc_info:
        await make_request(URL, RequestDescriptor(method="POST", data={"x": object()}), transport=transport)
    err = exc_info.value
    assert err.description == "setting up request failed; request could not be built"
    assert err.request is None
    assert handler.requests == []


@pytest.mark.asyncio
async def test_raising_transformer_raises_setup_failure():
    def _explode(data, headers):
        raise TypeError("boom")

    transport, handler = build_transport([json_response(200, envelope())])
    with pytest.raises(SetupFailure) as exc_info:
        await make_request(
            URL,
            RequestDescriptor(method="POST", data={"a": 1}, transform_request=(_explode,)),
            transport=transport,
        )
    err = exc_info.value
    assert str(err) == "boom"
    assert err.name == "TypeError"
    assert err.description == "setting up request failed; request transform failed"
    assert isinstance(err.__cause__, TransportRejection)
    assert handler.requests == []
