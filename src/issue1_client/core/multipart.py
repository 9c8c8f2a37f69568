"""Multipart image attachment.

Two encoders implement the same ``FormEncoder`` protocol:

* ``ServerFormEncoder`` encodes the form eagerly into a byte body (the
  payload is raw bytes or a stream that gets drained first);
* ``BrowserFormEncoder`` hands a ``FormData`` to the transport, which encodes
  it while sending (the payload is a prepared form or a file-like blob).

Which one is used is a configuration choice, see ``resolve_form_encoder``.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterable, Mapping
from typing import Any, Protocol

import httpx

from .errors import EmptyPayloadError, MissingImageFieldError, UnsupportedPayloadError
from .models import ImageFragment

IMAGE_FIELD = "image"
JSON_FIELD = "JSON"
DEFAULT_IMAGE_NAME = "issue1-client.jpg"
IMAGE_CONTENT_TYPE = "image/*"
IMAGE_PART_HEADERS = {"Content-Transfer-Encoding": "binary"}

# Only used to drive httpx's encoder; never requested.
_ENCODING_URL = "http://multipart.invalid/"


class FormData:
    """Ordered multipart form: plain text fields plus file parts."""

    def __init__(self) -> None:
        self._fields: list[tuple[str, str]] = []
        self._files: list[tuple[str, tuple[str, Any, str, dict[str, str]]]] = []

    def append(
        self,
        name: str,
        value: Any,
        *,
        filename: str | None = None,
        content_type: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        if isinstance(value, str) and filename is None:
            self._fields.append((name, value))
            return
        self._files.append(
            (
                name,
                (
                    filename or name,
                    value,
                    content_type or "application/octet-stream",
                    dict(headers or {}),
                ),
            )
        )

    def has(self, name: str) -> bool:
        return any(key == name for key, _ in self._fields) or any(
            key == name for key, _ in self._files
        )

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def __len__(self) -> int:
        return len(self._fields) + len(self._files)

    def fields(self) -> dict[str, list[str]]:
        grouped: dict[str, list[str]] = {}
        for name, value in self._fields:
            grouped.setdefault(name, []).append(value)
        return grouped

    def files(self) -> list[tuple[str, tuple[str, Any, str, dict[str, str]]]]:
        return list(self._files)


def encode_form(form: FormData) -> tuple[bytes, dict[str, str]]:
    """Encode ``form`` to a multipart body and its Content-Type/Length headers."""

    request = httpx.Request(
        "POST",
        _ENCODING_URL,
        data=form.fields() or None,
        files=form.files(),
    )
    content = request.read()
    headers = {
        "Content-Type": request.headers["Content-Type"],
        "Content-Length": request.headers.get("Content-Length", str(len(content))),
    }
    return content, headers


class FormEncoder(Protocol):
    name: str

    async def encode(
        self,
        image_data: Any,
        *,
        headers: Mapping[str, str] | None,
        other_data: Any,
        image_name: str,
    ) -> ImageFragment: ...


class ServerFormEncoder:
    """Encode the form into bytes before the request is issued."""

    name = "server"

    async def encode(
        self,
        image_data: Any,
        *,
        headers: Mapping[str, str] | None,
        other_data: Any,
        image_name: str,
    ) -> ImageFragment:
        form = FormData()
        if other_data:
            form.append(JSON_FIELD, json.dumps(other_data))
        if isinstance(image_data, (bytes, bytearray, memoryview)):
            buffer = bytes(image_data)
        elif _is_stream(image_data):
            buffer = await drain_stream(image_data)
            if not buffer:
                raise EmptyPayloadError("provided stream has no data")
        else:
            raise UnsupportedPayloadError(
                "only bytes-like buffers or readable streams are supported as image data"
                f" with the {self.name} form encoder, got {type(image_data).__name__}"
            )
        _append_image(form, buffer, image_name)
        content, form_headers = encode_form(form)
        return ImageFragment(data=content, headers={**(headers or {}), **form_headers})


class BrowserFormEncoder:
    """Pass a ``FormData`` through to the transport."""

    name = "browser"

    async def encode(
        self,
        image_data: Any,
        *,
        headers: Mapping[str, str] | None,
        other_data: Any,
        image_name: str,
    ) -> ImageFragment:
        if headers is None:
            headers = {}
        if isinstance(image_data, FormData):
            if not image_data.has(IMAGE_FIELD):
                raise MissingImageFieldError(
                    f"FormData provided as image data but no item present under the key {IMAGE_FIELD!r}"
                )
            return ImageFragment(data=image_data, headers=headers)
        if not _is_blob(image_data):
            raise UnsupportedPayloadError(
                "only FormData or file-like objects are supported as image data"
                f" with the {self.name} form encoder, got {type(image_data).__name__}"
            )
        form = FormData()
        _append_image(form, image_data, image_name)
        return ImageFragment(data=form, headers=headers)


_ENCODERS: dict[str, type[ServerFormEncoder] | type[BrowserFormEncoder]] = {
    ServerFormEncoder.name: ServerFormEncoder,
    BrowserFormEncoder.name: BrowserFormEncoder,
}


def resolve_form_encoder(name: str) -> FormEncoder:
    try:
        return _ENCODERS[name]()
    except KeyError:
        raise ValueError(f"unknown form encoding: {name!r}") from None


async def attach_image_to_request(
    image_data: Any,
    *,
    headers: Mapping[str, str] | None = None,
    other_data: Any = None,
    image_name: str = DEFAULT_IMAGE_NAME,
    encoder: FormEncoder | None = None,
) -> ImageFragment:
    """Build the multipart fragment for ``image_data``; never sends anything."""

    encoder = encoder or ServerFormEncoder()
    return await encoder.encode(
        image_data,
        headers=headers,
        other_data=other_data,
        image_name=image_name,
    )


async def drain_stream(stream: Any) -> bytes:
    """Read a stream to its end and return everything it produced."""

    if isinstance(stream, AsyncIterable):
        chunks = [bytes(chunk) async for chunk in stream]
        return b"".join(chunks)
    data = await asyncio.to_thread(stream.read)
    if isinstance(data, str):
        raise UnsupportedPayloadError("image stream must be opened in binary mode")
    return bytes(data or b"")


def _append_image(form: FormData, data: Any, image_name: str) -> None:
    form.append(
        IMAGE_FIELD,
        data,
        filename=image_name,
        content_type=IMAGE_CONTENT_TYPE,
        headers=IMAGE_PART_HEADERS,
    )


def _is_stream(value: object) -> bool:
    return isinstance(value, AsyncIterable) or _is_blob(value)


def _is_blob(value: object) -> bool:
    return callable(getattr(value, "read", None))


__all__ = [
    "IMAGE_FIELD",
    "JSON_FIELD",
    "DEFAULT_IMAGE_NAME",
    "IMAGE_CONTENT_TYPE",
    "IMAGE_PART_HEADERS",
    "FormData",
    "FormEncoder",
    "ServerFormEncoder",
    "BrowserFormEncoder",
    "encode_form",
    "resolve_form_encoder",
    "attach_image_to_request",
    "drain_stream",
]
