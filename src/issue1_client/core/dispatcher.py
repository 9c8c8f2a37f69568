"""Request dispatch and outcome classification.

``make_request`` is the single place where transport outcomes are turned
into results: it returns the ``data`` of a success envelope, or raises one
of the ``RequestFailure`` variants. An application failure reported with a
2xx status is raised exactly like one reported with a 4xx/5xx status.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from .async_transport import DNS_NOT_FOUND_CODE, AsyncTransport
from .errors import (
    ApplicationFailure,
    DecodeRejection,
    NoResponse,
    ParseFailure,
    RequestFailure,
    ServerError,
    SetupFailure,
    TransportRejection,
)
from .models import Envelope, RequestDescriptor, ResponseInfo
from .response_parsing import is_envelope, is_failure_envelope, unwrap_success

logger = logging.getLogger("issue1_client")

INVALID_INPUT_MESSAGE = "Invalid input: unable to parse input."
DECODE_FAILURE_MESSAGE = (
    "unexpected failure while decoding the response body;"
    " the original error is attached as decode_error"
)

CONNECTION_ERROR = NoResponse(
    "connection could not be made",
    name="ConnectionError",
    code=DNS_NOT_FOUND_CODE,
)


class Transport(Protocol):
    async def request(self, url: str, descriptor: RequestDescriptor) -> ResponseInfo: ...


async def make_request(
    url: str,
    descriptor: RequestDescriptor | None = None,
    *,
    transport: Transport | None = None,
) -> Any:
    """Send one request and normalize its outcome.

    Without ``transport`` a one-shot ``AsyncTransport`` is opened for the
    call and closed afterwards.
    """

    descriptor = descriptor or RequestDescriptor()
    if transport is None:
        async with AsyncTransport() as owned:
            return await _dispatch(owned, url, descriptor)
    return await _dispatch(transport, url, descriptor)


async def _dispatch(transport: Transport, url: str, descriptor: RequestDescriptor) -> Any:
    try:
        response = await transport.request(url, descriptor)
    except DecodeRejection as exc:
        logger.debug("response decode failed url=%s syntax=%s", url, exc.syntax)
        raise classify_decode_rejection(exc) from exc
    except TransportRejection as exc:
        error = classify_rejection(exc)
        logger.debug("request failed url=%s kind=%s", url, error.kind)
        if error is not CONNECTION_ERROR:
            raise error from exc
    else:
        if is_failure_envelope(response.data):
            raise ApplicationFailure(
                Envelope.from_payload(response.data),
                error_code=response.status,
            )
        return unwrap_success(response.data)

    # The shared instance is raised outside the handler so it never
    # captures a per-call exception as its context.
    raise CONNECTION_ERROR.with_traceback(None)


def classify_decode_rejection(rejection: DecodeRejection) -> ParseFailure:
    if rejection.syntax:
        return ParseFailure(INVALID_INPUT_MESSAGE)
    return ParseFailure(DECODE_FAILURE_MESSAGE, decode_error=rejection.original)


def classify_rejection(rejection: TransportRejection) -> RequestFailure:
    """Turn a transport rejection into exactly one classified error."""

    description = ""
    if rejection.response is not None:
        response = rejection.response
        if is_envelope(response.data):
            return ApplicationFailure(
                Envelope.from_payload(response.data),
                error_code=response.status,
            )
        return ServerError(
            status=response.status,
            status_text=response.status_text,
            headers=response.headers,
            body=response.data,
        )

    failure_type: type[NoResponse] | type[SetupFailure]
    if rejection.request is not None:
        if rejection.code == DNS_NOT_FOUND_CODE:
            return CONNECTION_ERROR
        description += "no response was received; "
        failure_type = NoResponse
    else:
        description += "setting up request failed; "
        failure_type = SetupFailure

    if rejection.description:
        description += rejection.description

    return failure_type(
        rejection.message,
        name=rejection.name,
        description=description,
        response=rejection.response,
        request=rejection.request,
        number=rejection.number,
        code=rejection.code,
    )


__all__ = [
    "CONNECTION_ERROR",
    "INVALID_INPUT_MESSAGE",
    "Transport",
    "make_request",
    "classify_rejection",
    "classify_decode_rejection",
]
