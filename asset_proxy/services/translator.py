"""Translate generic asset queries into provider calls and normalize the result.

One search issues exactly one provider request. Provider failures are folded
into a failed SearchResult so callers always get the same envelope shape;
a missing credential raises ConfigurationError before anything is sent.
"""

import logging
from typing import Optional

from asset_proxy.core.exceptions import ProviderRequestFailed
from asset_proxy.schemas.assets import AssetKind, SearchQuery, SearchResult
from asset_proxy.services.providers.base import BaseAssetProvider

logger = logging.getLogger(__name__)

FAILURE_LABELS = {
    AssetKind.ICON: "Failed to fetch icons",
    AssetKind.THREE_D: "Failed to fetch 3D assets",
    AssetKind.ILLUSTRATION: "Failed to fetch illustrations",
    AssetKind.ANIMATION: "Failed to fetch animations",
}
GENERIC_FAILURE_LABEL = "Failed to fetch assets"


class AssetQueryTranslator:
    def __init__(self, provider: BaseAssetProvider):
        self.provider = provider

    def search(self, query: SearchQuery, error_label: Optional[str] = None) -> SearchResult:
        self.provider.ensure_configured()

        profile = self.provider.profile_for(query.kind)
        request = self.provider.build_request(query)

        try:
            payload = self.provider.fetch(request)
        except ProviderRequestFailed as e:
            logger.error(f"{self.provider.name} search failed for {query.kind.value} '{query.term}': {e}")
            return SearchResult(
                success=False,
                error=error_label or FAILURE_LABELS.get(query.kind, GENERIC_FAILURE_LABEL),
                message=e.message,
                status_code=e.status_code,
            )

        assets, pagination = self.provider.normalize(query.kind, payload)
        logger.info(
            f"{self.provider.name} returned {len(assets)} {query.kind.value} assets for '{query.term}'"
        )

        return SearchResult(
            success=True,
            data=assets,
            pagination=pagination,
            note=profile.note,
        )
