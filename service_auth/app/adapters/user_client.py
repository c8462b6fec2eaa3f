"""
User service client for Auth.
"""

from typing import Optional

from shared.contracts import (
    USER_SERVICE,
    CreateUserRequest,
    GetProfileRequest,
    User,
    UserResponse,
)
from shared.logging import get_logger
from shared.rpc import CallContext, RpcClient


class UserClient:
    """Client for the account lookups Auth needs from the User service."""

    def __init__(self, user_service_url: str, timeout: float = 10.0,
                 rpc: Optional[RpcClient] = None):
        self.user_service_url = user_service_url
        self.logger = get_logger("auth.user_client")
        self.rpc = rpc or RpcClient(USER_SERVICE, user_service_url, timeout=timeout)

    async def get_profile(self, email: str, password: str = "",
                          ctx: Optional[CallContext] = None) -> User:
        response = await self.rpc.call(
            "GetProfile",
            GetProfileRequest(email=email, password=password),
            UserResponse,
            ctx,
        )
        return response.user

    async def create_user(self, email: str, password: str,
                          ctx: Optional[CallContext] = None) -> User:
        response = await self.rpc.call(
            "CreateUser",
            CreateUserRequest(email=email, password=password),
            UserResponse,
            ctx,
        )
        self.logger.info("User created", user_id=response.user.id)
        return response.user

    async def ping(self) -> bool:
        return await self.rpc.ping()

    async def close(self):
        await self.rpc.close()
