"""
Asset provider factory.
"""
import os
from typing import Dict, Optional, Type

from asset_proxy.core.exceptions import ConfigurationError
from asset_proxy.services.providers.base import BaseAssetProvider
from asset_proxy.services.providers.flaticon import FlaticonProvider
from asset_proxy.services.providers.freepik import FreepikProvider

DEFAULT_PROVIDER = "freepik"

PROVIDERS: Dict[str, Type[BaseAssetProvider]] = {
    "freepik": FreepikProvider,
    "flaticon": FlaticonProvider,
}


def create_provider(name: Optional[str] = None) -> BaseAssetProvider:
    """Build the provider named by ASSET_PROVIDER (default freepik)."""
    name = (name or os.getenv("ASSET_PROVIDER") or DEFAULT_PROVIDER).strip().lower()
    if name not in PROVIDERS:
        raise ConfigurationError(
            f"Unknown ASSET_PROVIDER '{name}' (expected one of: {', '.join(sorted(PROVIDERS))})"
        )
    return PROVIDERS[name]()
