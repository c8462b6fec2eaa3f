"""
Adapters package for the Gateway Service.

Contains RPC client wrappers for internal dependencies (Auth, Geo, User).
These adapters encapsulate:

- Service names and request shapes
- Error decoding into shared errors

Keep adapters thin and side-effect free outside of explicit calls.
"""

from .auth_client import AuthClient
from .geo_client import GeoClient
from .user_client import UserClient

__all__ = [
    "AuthClient",
    "GeoClient",
    "UserClient",
]
