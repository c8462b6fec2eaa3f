"""
Geo service for the address lookup access layer.
"""

from typing import Optional

from fastapi import Request

from shared.base_service import BaseService
from shared.config import ServiceConfig
from shared.contracts import (
    GEO_SERVICE,
    GeocodeRequest,
    GeocodeResponse,
    SearchAddressRequest,
    SearchAddressResponse,
    rpc_path,
)
from shared.rpc import CallContext, run_with_deadline
from .adapters.auth_client import AuthClient
from .caching import GeoCache, RedisCache
from .engine import GeoEngine
from .providers import GeoProvider, build_provider


class GeoService(BaseService):
    """Geo service implementation."""

    def __init__(self, config: Optional[ServiceConfig] = None,
                 auth_client: Optional[AuthClient] = None,
                 cache: Optional[GeoCache] = None,
                 provider: Optional[GeoProvider] = None):
        super().__init__("geo", 50052, config=config)
        self.auth_client = auth_client or AuthClient(
            self.config.auth_service_url,
            timeout=self.config.rpc_timeout_seconds
        )
        self.cache = cache or RedisCache(self.config.redis_url)
        self.provider = provider or build_provider(self.config)
        self.engine = GeoEngine(
            self.auth_client,
            self.cache,
            self.provider,
            self.metrics,
            cache_ttl=self.config.geo_cache_ttl_seconds
        )

        self._setup_geo_routes()

    def _setup_geo_routes(self):
        """Set up geo-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "geo",
                "message": "Address lookup access layer - Geo Service",
                "provider": self.provider.name,
                "version": "1.0.0"
            }

        @self.app.post(rpc_path(GEO_SERVICE, "SearchAddress"), response_model=SearchAddressResponse)
        async def search_address(payload: SearchAddressRequest, request: Request):
            ctx = CallContext.from_request(request)
            return await run_with_deadline(ctx, self.engine.search_address(ctx, payload.query))

        @self.app.post(rpc_path(GEO_SERVICE, "Geocode"), response_model=GeocodeResponse)
        async def geocode(payload: GeocodeRequest, request: Request):
            ctx = CallContext.from_request(request)
            return await run_with_deadline(ctx, self.engine.geocode(ctx, payload.address))

    async def shutdown(self):
        await self.auth_client.close()
        await self.provider.close()
        await self.cache.close()

    async def _check_dependencies(self):
        """Check geo dependencies."""
        return {
            "redis": "ok" if await self.cache.ping() else "error",
            "auth": "ok" if await self.auth_client.ping() else "error",
        }


def create_app(**kwargs):
    """Create FastAPI application."""
    service = GeoService(**kwargs)
    return service.app


if __name__ == "__main__":
    service = GeoService()
    service.run()
