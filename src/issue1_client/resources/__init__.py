"""Resource clients."""

from .feed import FeedServiceClient, new_feed_service_client
from .users import UserServiceClient, new_user_service_client

__all__ = [
    "FeedServiceClient",
    "UserServiceClient",
    "new_feed_service_client",
    "new_user_service_client",
]
