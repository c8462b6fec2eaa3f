"""
DaData suggestions API binding.
"""

import math
from typing import Any, Dict, List, Optional

import httpx

from shared.circuit_breaker import CircuitBreaker, CircuitBreakerOpenException
from shared.contracts import Address
from shared.logging import get_logger
from .base import GeoProvider, ProviderError


SUGGEST_ADDRESS_PATH = "/suggestions/api/4_1/rs/suggest/address"
GEOLOCATE_ADDRESS_PATH = "/suggestions/api/4_1/rs/geolocate/address"


def _as_coordinate(value: str) -> float:
    try:
        coordinate = float(value)
    except ValueError:
        raise ProviderError(f"invalid coordinate {value!r}")
    if not math.isfinite(coordinate):
        raise ProviderError(f"invalid coordinate {value!r}")
    return coordinate


def _text(data: Dict[str, Any], field: str) -> str:
    value = data.get(field)
    return "" if value is None else str(value)


def parse_suggestions(body: Any) -> List[Address]:
    """Normalise a suggestions response into addresses."""
    if not isinstance(body, dict):
        raise ProviderError("malformed response body")
    suggestions = body.get("suggestions")
    if suggestions is None:
        return []
    if not isinstance(suggestions, list):
        raise ProviderError("malformed response body")

    addresses = []
    for suggestion in suggestions:
        if not isinstance(suggestion, dict):
            raise ProviderError("malformed suggestion")
        data = suggestion.get("data") or {}
        if not isinstance(data, dict):
            raise ProviderError("malformed suggestion")
        addresses.append(Address(
            city=_text(data, "city") or _text(data, "settlement"),
            street=_text(data, "street"),
            house=_text(data, "house"),
            lat=_text(data, "geo_lat"),
            lon=_text(data, "geo_lon"),
        ))
    return addresses


class DaDataProvider(GeoProvider):
    """Address search and reverse geocoding through DaData.

    Calls go through a circuit breaker; an open breaker fails fast with
    :class:`ProviderError` like any other provider failure.
    """

    name = "dadata"

    def __init__(self, base_url: str, api_key: str, secret_key: str, *,
                 timeout: float = 10.0,
                 client: Optional[httpx.AsyncClient] = None,
                 circuit_breaker: Optional[CircuitBreaker] = None):
        self.base_url = base_url
        self._api_key = api_key
        self._secret_key = secret_key
        self.logger = get_logger("geo.provider.dadata")
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self.circuit_breaker = circuit_breaker or CircuitBreaker(
            failure_threshold=5,
            recovery_timeout=30.0,
            name="dadata"
        )

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Token {self._api_key}",
            "X-Secret": self._secret_key,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def address_search(self, query: str) -> List[Address]:
        return await self._suggest(SUGGEST_ADDRESS_PATH, {"query": query})

    async def geocode(self, lat: str, lon: str) -> List[Address]:
        payload = {"lat": _as_coordinate(lat), "lon": _as_coordinate(lon)}
        return await self._suggest(GEOLOCATE_ADDRESS_PATH, payload)

    async def _suggest(self, path: str, payload: Dict[str, Any]) -> List[Address]:
        try:
            return await self.circuit_breaker.call(self._post, path, payload)
        except CircuitBreakerOpenException as e:
            raise ProviderError(str(e)) from e

    async def _post(self, path: str, payload: Dict[str, Any]) -> List[Address]:
        try:
            response = await self._client.post(path, json=payload, headers=self._headers())
        except httpx.HTTPError as e:
            self.logger.error("DaData request failed", path=path, error=str(e))
            raise ProviderError(f"request failed: {type(e).__name__}") from e

        if response.status_code != 200:
            self.logger.error("DaData returned error status", path=path, status_code=response.status_code)
            raise ProviderError(f"unexpected status {response.status_code}")

        try:
            body = response.json()
        except ValueError as e:
            raise ProviderError("malformed response body") from e

        return parse_suggestions(body)

    async def close(self):
        await self._client.aclose()
