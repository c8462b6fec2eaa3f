"""
Geo service client for Gateway.
"""

from typing import Optional

from shared.contracts import (
    GEO_SERVICE,
    GeocodeRequest,
    GeocodeResponse,
    SearchAddressRequest,
    SearchAddressResponse,
)
from shared.rpc import CallContext, RpcClient


class GeoClient:
    """Client for communicating with Geo service.

    Callers pass the end user's ``authorization`` metadata in ``ctx``.
    """

    def __init__(self, geo_service_url: str, timeout: float = 10.0,
                 rpc: Optional[RpcClient] = None):
        self.geo_service_url = geo_service_url
        self.rpc = rpc or RpcClient(GEO_SERVICE, geo_service_url, timeout=timeout)

    async def search_address(self, query: str, ctx: CallContext) -> SearchAddressResponse:
        return await self.rpc.call(
            "SearchAddress",
            SearchAddressRequest(query=query),
            SearchAddressResponse,
            ctx,
        )

    async def geocode(self, address: str, ctx: CallContext) -> GeocodeResponse:
        return await self.rpc.call(
            "Geocode",
            GeocodeRequest(address=address),
            GeocodeResponse,
            ctx,
        )

    async def ping(self) -> bool:
        return await self.rpc.ping()

    async def close(self):
        await self.rpc.close()
