"""
Geocoding providers.
"""

from shared.config import BaseConfig
from .base import GeoProvider, ProviderError
from .dadata import DaDataProvider
from .static import StaticProvider


def build_provider(config: BaseConfig) -> GeoProvider:
    """Construct the provider named by ``GEO_PROVIDER``."""
    if config.geo_provider == "dadata":
        return DaDataProvider(
            config.dadata_url,
            config.dadata_api_key,
            config.dadata_secret_key,
            timeout=config.provider_timeout_seconds,
        )
    if config.geo_provider == "static":
        return StaticProvider.with_sample_data()
    raise ValueError(f"unknown geo provider: {config.geo_provider}")


__all__ = [
    "GeoProvider",
    "ProviderError",
    "DaDataProvider",
    "StaticProvider",
    "build_provider",
]
