"""
Auth service client for Geo.
"""

from typing import Optional

from shared.contracts import AUTH_SERVICE, ValidateTokenRequest, ValidateTokenResponse
from shared.rpc import CallContext, RpcClient


class AuthClient:
    """Validates caller tokens with the Auth service."""

    def __init__(self, auth_service_url: str, timeout: float = 10.0,
                 rpc: Optional[RpcClient] = None):
        self.auth_service_url = auth_service_url
        self.rpc = rpc or RpcClient(AUTH_SERVICE, auth_service_url, timeout=timeout)

    async def validate_token(self, token: str,
                             ctx: Optional[CallContext] = None) -> ValidateTokenResponse:
        return await self.rpc.call(
            "ValidateToken",
            ValidateTokenRequest(token=token),
            ValidateTokenResponse,
            ctx,
        )

    async def ping(self) -> bool:
        return await self.rpc.ping()

    async def close(self):
        await self.rpc.close()
