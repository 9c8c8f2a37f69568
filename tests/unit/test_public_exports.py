from __future__ import annotations

import issue1_client
import issue1_client.resources as resources


def test_package_exports_client_operations_and_errors():
    expected = {
        "Issue1Client",
        "Issue1ClientConfig",
        "make_request",
        "attach_auth_token_to_header",
        "generate_query_params",
        "calculate_limit_offset",
        "attach_image_to_request",
        "CONNECTION_ERROR",
        "ApplicationFailure",
        "ServerError",
        "NoResponse",
        "SetupFailure",
        "ParseFailure",
        "InvalidTokenError",
        "UnsupportedPayloadError",
        "EmptyPayloadError",
        "MissingImageFieldError",
    }
    assert expected.issubset(set(issue1_client.__all__))
    for name in issue1_client.__all__:
        assert hasattr(issue1_client, name)


def test_package_does_not_export_transport_signals():
    assert "TransportRejection" not in issue1_client.__all__
    assert "DecodeRejection" not in issue1_client.__all__


def test_resources_package_exports_service_clients_only():
    assert set(resources.__all__) == {
        "FeedServiceClient",
        "UserServiceClient",
        "new_feed_service_client",
        "new_user_service_client",
    }
