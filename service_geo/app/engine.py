"""
Cache-through lookup engine for the Geo service.

Every call authenticates the caller against the Auth service, then reads
through the cache to the provider:

    validate token -> cache get -> [provider -> cache set] -> return

Search keys keep the query verbatim, so case and whitespace variants never
share an entry. Geocode keys use the trimmed coordinate strings.
"""

import time
from typing import Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from shared.contracts import GeocodeResponse, SearchAddressResponse
from shared.errors import (
    AccessLayerException,
    AuthenticationError,
    InvalidArgumentError,
    NotFoundError,
    ServiceError,
    UnavailableError,
)
from shared.logging import get_logger, set_user_context
from shared.metrics import MetricsCollector
from shared.rpc import AUTHORIZATION_METADATA, CallContext, run_with_deadline
from shared.tracing import add_span_attributes, trace_operation
from .adapters.auth_client import AuthClient
from .caching import CacheUnavailableError, GeoCache
from .providers import GeoProvider, ProviderError


SEARCH_KEY_PREFIX = "search:"
GEOCODE_KEY_PREFIX = "geo:"
DEFAULT_CACHE_TTL = 24 * 60 * 60

ASCII_WHITESPACE = " \t\n\r\x0b\x0c"

M = TypeVar("M", bound=BaseModel)


def search_key(query: str) -> str:
    return SEARCH_KEY_PREFIX + query


def parse_coordinates(address: str) -> Tuple[str, str]:
    """Split ``"lat,lon"`` into trimmed parts.

    Exactly one comma and two non-empty parts are required; the values are
    not checked to be numbers.
    """
    parts = address.split(",")
    if len(parts) != 2:
        raise InvalidArgumentError("invalid coordinates format")
    lat = parts[0].strip(ASCII_WHITESPACE)
    lon = parts[1].strip(ASCII_WHITESPACE)
    if not lat or not lon:
        raise InvalidArgumentError("invalid coordinates format")
    return lat, lon


def geocode_key(lat: str, lon: str) -> str:
    return f"{GEOCODE_KEY_PREFIX}{lat},{lon}"


class GeoEngine:
    """Authenticated cache-through address search and reverse geocoding."""

    def __init__(self, auth_client: AuthClient, cache: GeoCache, provider: GeoProvider,
                 metrics: MetricsCollector, cache_ttl: int = DEFAULT_CACHE_TTL):
        self.auth_client = auth_client
        self.cache = cache
        self.provider = provider
        self.metrics = metrics
        self.cache_ttl = cache_ttl
        self.logger = get_logger("geo.engine")

    async def search_address(self, ctx: CallContext, query: str) -> SearchAddressResponse:
        with trace_operation("geo.search_address"):
            await self._authenticate(ctx)

            key = search_key(query)
            cached = await self._cache_get("search_address", key, SearchAddressResponse)
            if cached is not None:
                return cached

            addresses = await self._call_provider("search_address", ctx, self.provider.address_search, query)
            response = SearchAddressResponse(addresses=addresses)
            if addresses:
                await self._cache_set(key, response)
            return response

    async def geocode(self, ctx: CallContext, address: str) -> GeocodeResponse:
        with trace_operation("geo.geocode"):
            await self._authenticate(ctx)

            lat, lon = parse_coordinates(address)
            key = geocode_key(lat, lon)
            cached = await self._cache_get("geocode", key, GeocodeResponse)
            if cached is not None:
                return cached

            addresses = await self._call_provider("geocode", ctx, self.provider.geocode, lat, lon)
            if not addresses:
                raise NotFoundError("address not found")

            response = GeocodeResponse(addresses=addresses)
            await self._cache_set(key, response)
            return response

    async def _authenticate(self, ctx: CallContext) -> str:
        """Validate the caller's token; returns the caller's user id."""
        token = ctx.get(AUTHORIZATION_METADATA)
        if not token:
            raise AuthenticationError("no token provided")

        try:
            result = await self.auth_client.validate_token(token, ctx.child())
        except AccessLayerException as e:
            self.logger.warning("Token validation call failed", code=e.code)
            raise AuthenticationError("invalid token")

        if not result.valid:
            raise AuthenticationError("token is not valid")

        set_user_context(result.user_id)
        add_span_attributes(user_id=result.user_id)
        return result.user_id

    async def _cache_get(self, operation: str, key: str, model: Type[M]) -> Optional[M]:
        try:
            raw = await self.cache.get(key)
        except CacheUnavailableError as e:
            self.logger.warning("Cache unavailable, falling through to provider", error=str(e))
            self.metrics.increment_counter("geo_cache_lookups_total", operation=operation, result="error")
            return None

        if raw is None:
            self.metrics.increment_counter("geo_cache_lookups_total", operation=operation, result="miss")
            return None

        try:
            value = model.model_validate_json(raw)
        except ValidationError:
            self.logger.warning("Discarding unreadable cache entry", key=key)
            self.metrics.increment_counter("geo_cache_lookups_total", operation=operation, result="error")
            return None

        self.metrics.increment_counter("geo_cache_lookups_total", operation=operation, result="hit")
        return value

    async def _cache_set(self, key: str, response: BaseModel):
        stored = await self.cache.set(key, response.model_dump_json(), self.cache_ttl)
        if not stored:
            self.logger.warning("Cache write failed", key=key)

    async def _call_provider(self, operation: str, ctx: CallContext, func, *args):
        status = "error"
        start = time.perf_counter()
        try:
            addresses = await run_with_deadline(ctx, func(*args))
            status = "ok"
            return addresses
        except ProviderError as e:
            self.logger.error("Provider call failed", operation=operation, provider=self.provider.name, error=str(e))
            raise ServiceError(f"failed to {operation}: {e}")
        except UnavailableError:
            status = "timeout"
            raise
        finally:
            self.metrics.increment_counter("provider_requests_total", operation=operation, status=status)
            self.metrics.observe_histogram(
                "provider_request_duration_seconds",
                time.perf_counter() - start,
                operation=operation
            )
