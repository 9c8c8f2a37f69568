"""User service endpoints: users, bookmarks and profile pictures."""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping
from typing import Any

from ..core.async_pagination import aiterate_pages
from ..core.builders import attach_auth_token_to_header, build_url, generate_query_params
from ..core.dispatcher import Transport, make_request
from ..core.models import RequestDescriptor, User
from ..core.multipart import DEFAULT_IMAGE_NAME, FormEncoder, attach_image_to_request


async def get_user(
    base_url: str,
    username: str,
    auth_token: str | None = None,
    *,
    transport: Transport | None = None,
) -> User:
    """Get the user under ``username``.

    Email and other confidential fields are only returned when the token
    belongs to that user.
    """

    return await make_request(
        build_url(base_url, f"/users/{username}"),
        RequestDescriptor(headers=attach_auth_token_to_header(auth_token)),
        transport=transport,
    )


async def add_user(
    base_url: str,
    user: User,
    *,
    transport: Transport | None = None,
) -> User:
    return await make_request(
        build_url(base_url, "/users"),
        RequestDescriptor(method="POST", data=user),
        transport=transport,
    )


async def update_user(
    base_url: str,
    username: str,
    user: User,
    auth_token: str | None,
    *,
    transport: Transport | None = None,
) -> User:
    """Update the user under ``username`` with the values set on ``user``."""

    return await make_request(
        build_url(base_url, f"/users/{username}"),
        RequestDescriptor(
            method="PUT",
            headers=attach_auth_token_to_header(auth_token),
            data=user,
        ),
        transport=transport,
    )


async def delete_user(
    base_url: str,
    username: str,
    auth_token: str | None,
    *,
    transport: Transport | None = None,
) -> Any:
    return await make_request(
        build_url(base_url, f"/users/{username}"),
        RequestDescriptor(method="DELETE", headers=attach_auth_token_to_header(auth_token)),
        transport=transport,
    )


async def search_users(
    base_url: str,
    pattern: str = "",
    *,
    limit: int | None = None,
    offset: int | None = None,
    sorting_order: str | None = None,
    sort_parameter: str | None = None,
    only_ids: bool = False,
    transport: Transport | None = None,
) -> list[User]:
    """Search for users matching ``pattern``.

    ``sort_parameter`` is one of ``creation_time``, ``username``,
    ``first-name`` or ``last-name``; ``sorting_order`` is ``asc`` or ``dsc``.
    Both are passed to the server unchecked.
    """

    return await make_request(
        build_url(base_url, "/users"),
        RequestDescriptor(
            params=generate_query_params(
                pattern=pattern,
                limit=limit,
                offset=offset,
                sorting_order=sorting_order,
                sort_parameter=sort_parameter,
                only_ids=only_ids,
            ),
        ),
        transport=transport,
    )


async def get_users(
    base_url: str,
    *,
    limit: int | None = None,
    offset: int | None = None,
    sorting_order: str | None = None,
    sort_parameter: str | None = None,
    only_ids: bool = False,
    transport: Transport | None = None,
) -> list[User]:
    return await search_users(
        base_url,
        "",
        limit=limit,
        offset=offset,
        sorting_order=sorting_order,
        sort_parameter=sort_parameter,
        only_ids=only_ids,
        transport=transport,
    )


async def iter_users(
    base_url: str,
    pattern: str = "",
    *,
    per_page: int = 25,
    start_page: int = 1,
    sorting_order: str | None = None,
    sort_parameter: str | None = None,
    max_pages: int = 10_000,
    transport: Transport | None = None,
) -> AsyncIterator[list[User]]:
    """Yield pages of ``search_users`` results until the server runs out."""

    async def fetch_page(limit: int, offset: int) -> list[User]:
        return await search_users(
            base_url,
            pattern,
            limit=limit,
            offset=offset,
            sorting_order=sorting_order,
            sort_parameter=sort_parameter,
            transport=transport,
        )

    async for page in aiterate_pages(
        fetch_page,
        per_page=per_page,
        start_page=start_page,
        max_pages=max_pages,
    ):
        yield list(page)


async def add_post_bookmark(
    base_url: str,
    username: str,
    post_id: int | str,
    auth_token: str | None,
    *,
    transport: Transport | None = None,
) -> Any:
    return await make_request(
        build_url(base_url, f"/users/{username}/bookmarks/{post_id}"),
        RequestDescriptor(method="PUT", headers=attach_auth_token_to_header(auth_token)),
        transport=transport,
    )


async def get_user_bookmarks(
    base_url: str,
    username: str,
    auth_token: str | None,
    *,
    transport: Transport | None = None,
) -> Mapping[str, Any]:
    """Return the user's bookmarks keyed by bookmark time."""

    return await make_request(
        build_url(base_url, f"/users/{username}/bookmarks"),
        RequestDescriptor(headers=attach_auth_token_to_header(auth_token)),
        transport=transport,
    )


async def delete_bookmark(
    base_url: str,
    username: str,
    post_id: int | str,
    auth_token: str | None,
    *,
    transport: Transport | None = None,
) -> Any:
    return await make_request(
        build_url(base_url, f"/users/{username}/bookmarks/{post_id}"),
        RequestDescriptor(method="DELETE", headers=attach_auth_token_to_header(auth_token)),
        transport=transport,
    )


async def add_profile_picture(
    base_url: str,
    username: str,
    auth_token: str | None,
    image_data: Any,
    image_name: str = DEFAULT_IMAGE_NAME,
    *,
    encoder: FormEncoder | None = None,
    transport: Transport | None = None,
) -> str:
    """Set ``image_data`` as the user's profile picture.

    Returns the URL of the stored image.
    """

    fragment = await attach_image_to_request(
        image_data,
        headers=attach_auth_token_to_header(auth_token),
        image_name=image_name,
        encoder=encoder,
    )
    return await make_request(
        build_url(base_url, f"/users/{username}/picture"),
        RequestDescriptor(method="PUT").with_fragment(fragment),
        transport=transport,
    )


async def remove_profile_picture(
    base_url: str,
    username: str,
    auth_token: str | None,
    *,
    transport: Transport | None = None,
) -> Any:
    return await make_request(
        build_url(base_url, f"/users/{username}/picture"),
        RequestDescriptor(method="DELETE", headers=attach_auth_token_to_header(auth_token)),
        transport=transport,
    )


class UserServiceClient:
    """User endpoints bound to a fixed base URL."""

    def __init__(
        self,
        base_url: str,
        *,
        transport: Transport | None = None,
        encoder: FormEncoder | None = None,
    ) -> None:
        self.base_url = base_url
        self._transport = transport
        self._encoder = encoder

    async def get_user(self, username: str, auth_token: str | None = None) -> User:
        return await get_user(self.base_url, username, auth_token, transport=self._transport)

    async def add_user(self, user: User) -> User:
        return await add_user(self.base_url, user, transport=self._transport)

    async def update_user(self, username: str, user: User, auth_token: str | None) -> User:
        return await update_user(
            self.base_url, username, user, auth_token, transport=self._transport
        )

    async def delete_user(self, username: str, auth_token: str | None) -> Any:
        return await delete_user(self.base_url, username, auth_token, transport=self._transport)

    async def search_users(
        self,
        pattern: str = "",
        *,
        limit: int | None = None,
        offset: int | None = None,
        sorting_order: str | None = None,
        sort_parameter: str | None = None,
        only_ids: bool = False,
    ) -> list[User]:
        return await search_users(
            self.base_url,
            pattern,
            limit=limit,
            offset=offset,
            sorting_order=sorting_order,
            sort_parameter=sort_parameter,
            only_ids=only_ids,
            transport=self._transport,
        )

    async def get_users(
        self,
        *,
        limit: int | None = None,
        offset: int | None = None,
        sorting_order: str | None = None,
        sort_parameter: str | None = None,
        only_ids: bool = False,
    ) -> list[User]:
        return await get_users(
            self.base_url,
            limit=limit,
            offset=offset,
            sorting_order=sorting_order,
            sort_parameter=sort_parameter,
            only_ids=only_ids,
            transport=self._transport,
        )

    def iter_users(
        self,
        pattern: str = "",
        *,
        per_page: int = 25,
        start_page: int = 1,
        sorting_order: str | None = None,
        sort_parameter: str | None = None,
    ) -> AsyncIterator[list[User]]:
        return iter_users(
            self.base_url,
            pattern,
            per_page=per_page,
            start_page=start_page,
            sorting_order=sorting_order,
            sort_parameter=sort_parameter,
            transport=self._transport,
        )

    async def add_post_bookmark(
        self, username: str, post_id: int | str, auth_token: str | None
    ) -> Any:
        return await add_post_bookmark(
            self.base_url, username, post_id, auth_token, transport=self._transport
        )

    async def get_user_bookmarks(self, username: str, auth_token: str | None) -> Mapping[str, Any]:
        return await get_user_bookmarks(
            self.base_url, username, auth_token, transport=self._transport
        )

    async def delete_bookmark(
        self, username: str, post_id: int | str, auth_token: str | None
    ) -> Any:
        return await delete_bookmark(
            self.base_url, username, post_id, auth_token, transport=self._transport
        )

    async def add_profile_picture(
        self,
        username: str,
        auth_token: str | None,
        image_data: Any,
        image_name: str = DEFAULT_IMAGE_NAME,
    ) -> str:
        return await add_profile_picture(
            self.base_url,
            username,
            auth_token,
            image_data,
            image_name,
            encoder=self._encoder,
            transport=self._transport,
        )

    async def remove_profile_picture(self, username: str, auth_token: str | None) -> Any:
        return await remove_profile_picture(
            self.base_url, username, auth_token, transport=self._transport
        )


def new_user_service_client(
    base_url: str,
    *,
    transport: Transport | None = None,
    encoder: FormEncoder | None = None,
) -> UserServiceClient:
    return UserServiceClient(base_url, transport=transport, encoder=encoder)


__all__ = [
    "get_user",
    "add_user",
    "update_user",
    "delete_user",
    "search_users",
    "get_users",
    "iter_users",
    "add_post_bookmark",
    "get_user_bookmarks",
    "delete_bookmark",
    "add_profile_picture",
    "remove_profile_picture",
    "UserServiceClient",
    "new_user_service_client",
]
