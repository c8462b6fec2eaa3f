"""
User service client for Gateway.
"""

from typing import Optional

from shared.contracts import (
    USER_SERVICE,
    GetProfileRequest,
    ListUsersRequest,
    ListUsersResponse,
    UserResponse,
)
from shared.rpc import CallContext, RpcClient


class UserClient:
    """Client for communicating with User service."""

    def __init__(self, user_service_url: str, timeout: float = 10.0,
                 rpc: Optional[RpcClient] = None):
        self.user_service_url = user_service_url
        self.rpc = rpc or RpcClient(USER_SERVICE, user_service_url, timeout=timeout)

    async def get_profile(self, email: str, ctx: CallContext) -> UserResponse:
        return await self.rpc.call(
            "GetProfile",
            GetProfileRequest(email=email),
            UserResponse,
            ctx,
        )

    async def list_users(self, page: int, per_page: int, ctx: CallContext) -> ListUsersResponse:
        return await self.rpc.call(
            "ListUsers",
            ListUsersRequest(page=page, per_page=per_page),
            ListUsersResponse,
            ctx,
        )

    async def ping(self) -> bool:
        return await self.rpc.ping()

    async def close(self):
        await self.rpc.close()
