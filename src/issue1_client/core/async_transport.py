"""Async HTTP transport on top of httpx.

The transport sends one request per call and reports every failure through
the normalized ``TransportRejection``/``DecodeRejection`` signals, so the
dispatcher never has to inspect httpx exception types.
"""

from __future__ import annotations

import errno
import json
import logging
import socket
from collections.abc import Iterator, Mapping
from types import TracebackType
from typing import Any

import httpx

from ..config import Issue1ClientConfig
from .errors import ClientClosedError, DecodeRejection, TransportRejection
from .models import RequestDescriptor, RequestInfo, ResponseInfo
from .multipart import FormData
from .response_parsing import decode_body

logger = logging.getLogger("issue1_client")

DNS_NOT_FOUND_CODE = "ENOTFOUND"
TIMEOUT_CODE = "ETIMEDOUT"
BAD_REQUEST_CODE = "ERR_BAD_REQUEST"
BAD_RESPONSE_CODE = "ERR_BAD_RESPONSE"


def build_default_headers(config: Issue1ClientConfig) -> Mapping[str, str]:
    return {
        "Accept": "application/json",
        "User-Agent": config.user_agent,
    }


def build_default_timeout(config: Issue1ClientConfig) -> httpx.Timeout:
    return httpx.Timeout(
        connect=config.transport.timeout_connect_seconds,
        read=config.transport.timeout_read_seconds,
        write=config.transport.timeout_write_seconds,
        pool=config.transport.timeout_pool_seconds,
    )


class AsyncTransport:
    """Asynchronous transport for the issue#1 REST API."""

    def __init__(
        self,
        config: Issue1ClientConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config or Issue1ClientConfig()
        self._closed = False
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            headers=build_default_headers(self._config),
            timeout=build_default_timeout(self._config),
        )

    @property
    def closed(self) -> bool:
        return self._closed

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "AsyncTransport":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        await self.close()
        return False

    async def request(self, url: str, descriptor: RequestDescriptor) -> ResponseInfo:
        if self._closed:
            raise ClientClosedError("transport is already closed")

        headers = dict(descriptor.headers or {})
        data = descriptor.data
        try:
            for transform in descriptor.transform_request:
                data = transform(data, headers)
        except Exception as exc:
            raise TransportRejection(
                str(exc),
                name=type(exc).__name__,
                description="request transform failed",
            ) from exc

        timeout = descriptor.timeout if descriptor.timeout is not None else httpx.USE_CLIENT_DEFAULT
        try:
            request = self._client.build_request(
                descriptor.method,
                url,
                params=_drop_none(descriptor.params),
                headers=headers,
                timeout=timeout,
                **_body_kwargs(data),
            )
        except (TypeError, ValueError, httpx.InvalidURL) as exc:
            raise TransportRejection(
                str(exc),
                name=type(exc).__name__,
                description="request could not be built",
            ) from exc

        info = RequestInfo(
            url=str(request.url),
            method=request.method,
            headers=dict(request.headers),
            data=data,
            timeout=descriptor.timeout,
            response_type=descriptor.response_type,
        )
        logger.debug("request start method=%s url=%s", info.method, info.url)

        try:
            response = await self._client.send(request)
        except httpx.UnsupportedProtocol as exc:
            raise TransportRejection(
                str(exc),
                name=type(exc).__name__,
                description="unsupported protocol",
            ) from exc
        except httpx.RequestError as exc:
            code, number = describe_network_error(exc)
            logger.debug(
                "request got no response method=%s url=%s error=%s code=%s",
                info.method,
                info.url,
                exc.__class__.__name__,
                code,
            )
            raise TransportRejection(
                str(exc) or exc.__class__.__name__,
                name=type(exc).__name__,
                code=code,
                number=number,
                request=info,
            ) from exc

        logger.debug(
            "response received method=%s url=%s http_status=%s",
            info.method,
            info.url,
            response.status_code,
        )
        return self._settle(response, info)

    def _settle(self, response: httpx.Response, info: RequestInfo) -> ResponseInfo:
        try:
            body = decode_body(
                response.content,
                response_type=info.response_type,
                encoding=response.encoding,
            )
        except ValueError as exc:
            if response.is_success:
                raise DecodeRejection(
                    exc,
                    syntax=isinstance(exc, json.JSONDecodeError),
                ) from exc
            body = response.content.decode("utf-8", errors="replace")

        settled = ResponseInfo(
            status=response.status_code,
            status_text=response.reason_phrase,
            headers=dict(response.headers),
            data=body,
        )
        if settled.is_success:
            return settled
        raise TransportRejection(
            f"Request failed with status code {response.status_code}",
            name="HTTPStatusError",
            code=BAD_RESPONSE_CODE if response.status_code >= 500 else BAD_REQUEST_CODE,
            request=info,
            response=settled,
        )


def describe_network_error(exc: BaseException) -> tuple[str | None, int | None]:
    """Map a network failure to an errno-style code and number."""

    for cause in _iter_causes(exc):
        if isinstance(cause, socket.gaierror):
            return DNS_NOT_FOUND_CODE, cause.errno
        if isinstance(cause, OSError) and cause.errno in errno.errorcode:
            return errno.errorcode[cause.errno], cause.errno
    if isinstance(exc, httpx.TimeoutException):
        return TIMEOUT_CODE, None
    return None, None


def _iter_causes(exc: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def _drop_none(params: Mapping[str, Any] | None) -> dict[str, Any] | None:
    if params is None:
        return None
    return {key: value for key, value in params.items() if value is not None}


def _body_kwargs(data: Any) -> dict[str, Any]:
    if data is None:
        return {}
    if isinstance(data, FormData):
        return {"data": data.fields() or None, "files": data.files()}
    if isinstance(data, (bytes, str)):
        return {"content": data}
    if isinstance(data, (bytearray, memoryview)):
        return {"content": bytes(data)}
    return {"json": data}


__all__ = [
    "DNS_NOT_FOUND_CODE",
    "TIMEOUT_CODE",
    "AsyncTransport",
    "build_default_headers",
    "build_default_timeout",
    "describe_network_error",
]
