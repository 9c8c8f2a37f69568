"""Public async client entrypoint."""

from __future__ import annotations

from types import TracebackType

from .client_shared import resolve_encoder, validate_client_config
from .config import Issue1ClientConfig
from .core.async_transport import AsyncTransport
from .core.errors import ClientClosedError
from .core.models import RequestDescriptor, ResponseInfo
from .core.multipart import FormEncoder
from .resources.feed import FeedServiceClient
from .resources.users import UserServiceClient


class _GuardedTransport:
    """Guard wrapper to block requests after client close."""

    def __init__(self, owner: "Issue1Client", delegate: AsyncTransport) -> None:
        self._owner = owner
        self._delegate = delegate

    async def request(self, url: str, descriptor: RequestDescriptor) -> ResponseInfo:
        self._owner._ensure_open()
        return await self._delegate.request(url, descriptor)


class Issue1Client:
    """Public async issue#1 REST client."""

    def __init__(
        self,
        *,
        config: Issue1ClientConfig | None = None,
        transport: AsyncTransport | None = None,
        encoder: FormEncoder | None = None,
    ) -> None:
        self._config = config or Issue1ClientConfig()
        validate_client_config(self._config)

        self._transport = transport or AsyncTransport(self._config)
        guarded = _GuardedTransport(self, self._transport)
        self._closed = False
        self.users = UserServiceClient(
            self._config.base_url,
            transport=guarded,
            encoder=resolve_encoder(config=self._config, encoder=encoder),
        )
        self.feed = FeedServiceClient(self._config.base_url, transport=guarded)

    @property
    def config(self) -> Issue1ClientConfig:
        return self._config

    def _ensure_open(self) -> None:
        if self._closed:
            raise ClientClosedError("Issue1Client is already closed")

    async def close(self) -> None:
        if self._closed:
            return
        await self._transport.close()
        self._closed = True

    async def __aenter__(self) -> "Issue1Client":
        self._ensure_open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        await self.close()
        return False


__all__ = [
    "Issue1Client",
]
