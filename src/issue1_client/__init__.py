"""Public package exports for the issue#1 REST client."""

from .client import Issue1Client
from .config import Issue1ClientConfig, TransportConfig
from .core.async_transport import AsyncTransport
from .core.builders import attach_auth_token_to_header, calculate_limit_offset, generate_query_params
from .core.dispatcher import CONNECTION_ERROR, make_request
from .core.errors import (
    ApplicationFailure,
    ClientClosedError,
    ConfigurationError,
    EmptyPayloadError,
    InvalidTokenError,
    Issue1Error,
    LocalValidationError,
    MissingImageFieldError,
    NoResponse,
    ParseFailure,
    RequestFailure,
    ServerError,
    SetupFailure,
    TransportFailure,
    UnsupportedPayloadError,
)
from .core.models import Envelope, RequestDescriptor, User
from .core.multipart import BrowserFormEncoder, FormData, ServerFormEncoder, attach_image_to_request
from .resources.feed import FeedServiceClient, new_feed_service_client
from .resources.users import UserServiceClient, new_user_service_client

__all__ = [
    "Issue1Client",
    "Issue1ClientConfig",
    "TransportConfig",
    "AsyncTransport",
    "attach_auth_token_to_header",
    "calculate_limit_offset",
    "generate_query_params",
    "make_request",
    "CONNECTION_ERROR",
    "attach_image_to_request",
    "FormData",
    "ServerFormEncoder",
    "BrowserFormEncoder",
    "Envelope",
    "RequestDescriptor",
    "User",
    "UserServiceClient",
    "FeedServiceClient",
    "new_user_service_client",
    "new_feed_service_client",
    "Issue1Error",
    "ConfigurationError",
    "ClientClosedError",
    "LocalValidationError",
    "InvalidTokenError",
    "UnsupportedPayloadError",
    "EmptyPayloadError",
    "MissingImageFieldError",
    "RequestFailure",
    "ApplicationFailure",
    "ServerError",
    "TransportFailure",
    "NoResponse",
    "SetupFailure",
    "ParseFailure",
]
