"""
Base class for asset search providers.

Each provider owns a profile table mapping every AssetKind onto its own
endpoint, filters and term augmentation, plus a normalizer that reshapes its
payload into NormalizedAsset rows.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from asset_proxy.core.exceptions import ConfigurationError
from asset_proxy.schemas.assets import AssetKind, NormalizedAsset, SearchQuery

UNTITLED = "Untitled"


@dataclass(frozen=True)
class KindProfile:
    """How one provider serves one asset kind."""
    endpoint: str
    filters: Dict[str, Any] = field(default_factory=dict)
    term_suffix: str = ""
    note: Optional[str] = None
    size_param: str = "limit"
    item_shape: str = "resource"


@dataclass(frozen=True)
class ProviderRequest:
    path: str
    params: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=dict)
    method: str = "GET"


class BaseAssetProvider(ABC):
    """Abstract base class for asset search providers."""

    ENV_KEY = ""
    MAX_PAGE_SIZE = 100
    PROFILES: Dict[AssetKind, KindProfile] = {}

    def __init__(self, api_key: Optional[str] = None):
        self._api_key = api_key

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name."""

    @property
    def api_key(self) -> Optional[str]:
        return self._api_key

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key and self._api_key.strip())

    def ensure_configured(self) -> None:
        if not self.is_configured:
            raise ConfigurationError(f"{self.ENV_KEY} environment variable is not set")

    def profile_for(self, kind: AssetKind) -> KindProfile:
        return self.PROFILES[kind]

    def close(self) -> None:
        """Release transport resources owned by the provider."""

    def clamp_page_size(self, page_size: int) -> int:
        return max(1, min(page_size, self.MAX_PAGE_SIZE))

    def augmented_term(self, query: SearchQuery) -> str:
        return query.term + self.profile_for(query.kind).term_suffix

    @abstractmethod
    def build_request(self, query: SearchQuery) -> ProviderRequest:
        """
        Translate a generic query into this provider's request.

        Args:
            query: Normalized search query

        Returns:
            Provider request with page size already clamped
        """

    @abstractmethod
    def fetch(self, request: ProviderRequest) -> Dict[str, Any]:
        """
        Issue the request and return the decoded JSON payload.

        Raises:
            ProviderRequestFailed: transport error or non-2xx response
        """

    @abstractmethod
    def normalize(
        self, kind: AssetKind, payload: Dict[str, Any]
    ) -> Tuple[List[NormalizedAsset], Dict[str, Any]]:
        """
        Map a provider payload into (assets, pagination).

        Rows without an id are dropped; every other row degrades gracefully.
        """


def pick_display_name(item: Dict[str, Any], fields: Sequence[str]) -> str:
    for key in fields:
        value = item.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return UNTITLED


def asset_id(item: Dict[str, Any]) -> Optional[str]:
    value = item.get("id")
    if value is None or value == "":
        return None
    return str(value)


def extract_error_message(body: Any) -> Optional[str]:
    """Best-effort message from a provider's structured error body."""
    if not isinstance(body, dict):
        return None
    for key in ("message", "error", "detail"):
        value = body.get(key)
        if isinstance(value, str) and value:
            return value
        if isinstance(value, dict):
            nested = extract_error_message(value)
            if nested:
                return nested
    return None


def as_list(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, dict)]
