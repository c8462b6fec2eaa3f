"""
Auth service client for Gateway.
"""

from typing import Optional

from shared.contracts import AUTH_SERVICE, LoginRequest, RegisterRequest, TokenResponse
from shared.logging import get_logger
from shared.rpc import CallContext, RpcClient


class AuthClient:
    """Client for communicating with Auth service."""

    def __init__(self, auth_service_url: str, timeout: float = 10.0,
                 rpc: Optional[RpcClient] = None):
        self.auth_service_url = auth_service_url
        self.logger = get_logger("gateway.auth_client")
        self.rpc = rpc or RpcClient(AUTH_SERVICE, auth_service_url, timeout=timeout)

    async def register(self, email: str, password: str,
                       ctx: Optional[CallContext] = None) -> TokenResponse:
        return await self.rpc.call(
            "Register",
            RegisterRequest(email=email, password=password),
            TokenResponse,
            ctx,
        )

    async def login(self, email: str, password: str,
                    ctx: Optional[CallContext] = None) -> TokenResponse:
        return await self.rpc.call(
            "Login",
            LoginRequest(email=email, password=password),
            TokenResponse,
            ctx,
        )

    async def ping(self) -> bool:
        return await self.rpc.ping()

    async def close(self):
        await self.rpc.close()
