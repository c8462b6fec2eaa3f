"""
In-memory provider for local runs and tests.
"""

import asyncio
from typing import Dict, List, Optional, Tuple

from shared.contracts import Address
from .base import GeoProvider, ProviderError


SUKHAREVSKAYA_11 = Address(
    city="Москва",
    street="Сухаревская",
    house="11",
    lat="55.77412",
    lon="37.624065",
)


class StaticProvider(GeoProvider):
    """Answers from fixed tables and counts its calls.

    Search results are keyed by the exact query, geocode results by the
    ``(lat, lon)`` string pair.
    """

    name = "static"

    def __init__(self,
                 search_results: Optional[Dict[str, List[Address]]] = None,
                 geocode_results: Optional[Dict[Tuple[str, str], List[Address]]] = None,
                 *,
                 error: Optional[ProviderError] = None,
                 delay: float = 0.0):
        self.search_results = dict(search_results or {})
        self.geocode_results = dict(geocode_results or {})
        self.error = error
        self.delay = delay
        self.search_calls = 0
        self.geocode_calls = 0

    @classmethod
    def with_sample_data(cls) -> "StaticProvider":
        return cls(
            search_results={"сухаревская 11": [SUKHAREVSKAYA_11]},
            geocode_results={(SUKHAREVSKAYA_11.lat, SUKHAREVSKAYA_11.lon): [SUKHAREVSKAYA_11]},
        )

    @property
    def calls(self) -> int:
        return self.search_calls + self.geocode_calls

    async def _respond(self, result: List[Address]) -> List[Address]:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(result)

    async def address_search(self, query: str) -> List[Address]:
        self.search_calls += 1
        return await self._respond(self.search_results.get(query, []))

    async def geocode(self, lat: str, lon: str) -> List[Address]:
        self.geocode_calls += 1
        return await self._respond(self.geocode_results.get((lat, lon), []))
