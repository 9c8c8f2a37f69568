"""Error taxonomy.

Two families reach callers:

* local validation errors, raised before any network I/O;
* classified request errors, raised by ``make_request`` once a request was
  attempted.

``TransportRejection`` and ``DecodeRejection`` are the transport's own
signals and are always converted into a classified error by the dispatcher.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from .models import Envelope, RequestInfo, ResponseInfo


class Issue1Error(Exception):
    """Base exception for this package."""


class ConfigurationError(Issue1Error):
    """Invalid client configuration."""


class ClientClosedError(Issue1Error):
    """Raised when a client or transport is used after close."""


class LocalValidationError(Issue1Error):
    """Input rejected before any request was issued."""


class InvalidTokenError(LocalValidationError):
    """Auth token contains whitespace."""


class UnsupportedPayloadError(LocalValidationError):
    """Image payload type is not supported by the selected form encoder."""


class EmptyPayloadError(LocalValidationError):
    """Image stream was drained and held no data."""


class MissingImageFieldError(LocalValidationError):
    """A prepared form has no entry under the ``image`` key."""


class RequestFailure(Issue1Error):
    """Base for errors classified by the request dispatcher."""

    kind: ClassVar[str] = "request_failure"


class ApplicationFailure(RequestFailure):
    """The server answered with a ``fail``/``error`` envelope."""

    kind: ClassVar[str] = "application_failure"

    def __init__(self, envelope: "Envelope", *, error_code: int | None = None) -> None:
        super().__init__(_application_message(envelope, error_code))
        self.envelope = envelope
        self.error_code = error_code

    @property
    def status(self) -> str:
        return self.envelope.status

    @property
    def data(self) -> Any:
        return self.envelope.data

    @property
    def error_reason(self) -> str | None:
        return self.envelope.error_reason

    @property
    def error_message(self) -> str | None:
        return self.envelope.error_message

    def to_payload(self) -> dict[str, Any]:
        payload = self.envelope.to_payload()
        if self.error_code is not None:
            payload["errorCode"] = self.error_code
        return payload


class ServerError(RequestFailure):
    """Non-2xx response without a recognizable envelope."""

    kind: ClassVar[str] = "server_error"

    def __init__(
        self,
        *,
        status: int,
        status_text: str,
        headers: Mapping[str, str],
        body: Any,
    ) -> None:
        super().__init__(f"server responded with status {status} {status_text}".rstrip())
        self.status = status
        self.status_text = status_text
        self.headers = dict(headers)
        self.body = body


class TransportFailure(RequestFailure):
    """Request could not be completed at the transport level."""

    kind: ClassVar[str] = "transport_failure"

    def __init__(
        self,
        message: str,
        *,
        name: str | None = None,
        description: str = "",
        response: "ResponseInfo | None" = None,
        request: "RequestInfo | None" = None,
        number: int | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.name = name or type(self).__name__
        self.description = description
        self.response = response
        self.request = request
        self.number = number
        self.code = code


class NoResponse(TransportFailure):
    """Request left the client but no response arrived."""

    kind: ClassVar[str] = "no_response"


class SetupFailure(TransportFailure):
    """Request never left the client."""

    kind: ClassVar[str] = "setup_failure"


class ParseFailure(RequestFailure):
    """Response body could not be decoded."""

    kind: ClassVar[str] = "parse_failure"

    def __init__(self, message: str, *, decode_error: BaseException | None = None) -> None:
        super().__init__(message)
        self.decode_error = decode_error


class TransportRejection(Exception):
    """Normalized transport failure: ``{response?, request?, code?, message}``."""

    def __init__(
        self,
        message: str,
        *,
        name: str | None = None,
        code: str | None = None,
        number: int | None = None,
        description: str | None = None,
        request: "RequestInfo | None" = None,
        response: "ResponseInfo | None" = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.name = name or type(self).__name__
        self.code = code
        self.number = number
        self.description = description
        self.request = request
        self.response = response


class DecodeRejection(Exception):
    """Response body could not be decoded by the transport."""

    def __init__(self, original: BaseException, *, syntax: bool) -> None:
        super().__init__(str(original))
        self.original = original
        self.syntax = syntax


def _application_message(envelope: "Envelope", error_code: int | None) -> str:
    message = envelope.error_message or envelope.message
    if message is None:
        message = f"request failed with envelope status {envelope.status!r}"
    if error_code is not None:
        return f"{message} (HTTP {error_code})"
    return message


__all__ = [
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
    "TransportRejection",
    "DecodeRejection",
]
