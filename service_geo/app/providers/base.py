"""
Geocoding provider interface.
"""

from abc import ABC, abstractmethod
from typing import List

from shared.contracts import Address


class ProviderError(Exception):
    """The provider call failed: transport, status or body."""
    pass


class GeoProvider(ABC):
    """External geocoding capability.

    Both operations may return an empty list. Implementations hold no state
    beyond credentials captured at construction.
    """

    name = "provider"

    @abstractmethod
    async def address_search(self, query: str) -> List[Address]:
        """Free-text address suggestions."""

    @abstractmethod
    async def geocode(self, lat: str, lon: str) -> List[Address]:
        """Addresses nearest to a coordinate pair."""

    async def close(self):
        pass
