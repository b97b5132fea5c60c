"""Flaticon API v3 provider.

Uses a temporary bearer token obtained via POST /app/authentication with the
API key. Only icons are served natively; other kinds are approximated by
keyword-augmented icon searches.
"""

import logging
import os
import time
from typing import Any, Dict, List, Optional, Tuple

import httpx

from asset_proxy.core.exceptions import ProviderRequestFailed
from asset_proxy.schemas.assets import AssetKind, NormalizedAsset, SearchQuery, ThumbnailUrls
from asset_proxy.services.providers.base import (
    BaseAssetProvider,
    KindProfile,
    ProviderRequest,
    as_list,
    asset_id,
    extract_error_message,
    pick_display_name,
)

logger = logging.getLogger(__name__)

BASE_URL = "https://api.flaticon.com/v3"
SEARCH_ENDPOINT = "/search/icons/priority"
TOKEN_REFRESH_MARGIN = 60
DEFAULT_TOKEN_TTL = 3600

NAME_FIELDS = ("description", "name", "title")


def _approximated(label: str, suffix: str) -> KindProfile:
    return KindProfile(
        endpoint=SEARCH_ENDPOINT,
        term_suffix=suffix,
        note=f"Flaticon does not have native {label}. Showing matching icons instead.",
        item_shape="icon",
    )


class FlaticonProvider(BaseAssetProvider):
    """Flaticon bearer-token API."""

    ENV_KEY = "FLATICON_API_KEY"
    MAX_PAGE_SIZE = 100
    PROFILES = {
        AssetKind.ICON: KindProfile(endpoint=SEARCH_ENDPOINT, item_shape="icon"),
        AssetKind.THREE_D: _approximated("3D assets", " 3d"),
        AssetKind.ILLUSTRATION: _approximated("illustrations", " illustration"),
        AssetKind.ANIMATION: _approximated("Lottie animations", " animated"),
        AssetKind.VECTOR: _approximated("vectors", " vector"),
        AssetKind.PHOTO: _approximated("photos", " photo"),
    }

    def __init__(self, api_key: Optional[str] = None, client: Optional[httpx.Client] = None):
        super().__init__(api_key if api_key is not None else os.getenv(self.ENV_KEY))
        self._owns_client = client is None
        self._client = client or httpx.Client(base_url=BASE_URL)
        self._token: Optional[str] = None
        self._token_expires_at = 0.0

    @property
    def name(self) -> str:
        return "flaticon"

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def build_request(self, query: SearchQuery) -> ProviderRequest:
        profile = self.profile_for(query.kind)
        params = {
            "q": self.augmented_term(query),
            "page": query.page,
            profile.size_param: self.clamp_page_size(query.page_size),
        }
        params.update(profile.filters)
        return ProviderRequest(
            path=profile.endpoint,
            params=params,
            headers={"Accept": "application/json"},
        )

    def fetch(self, request: ProviderRequest) -> Dict[str, Any]:
        headers = {**request.headers, "Authorization": f"Bearer {self._get_token()}"}
        logger.info(f"[FLATICON] {request.method} {request.path} params={request.params}")
        response = self._send(request.method, request.path, params=request.params, headers=headers)
        return _decode(response)

    def normalize(
        self, kind: AssetKind, payload: Dict[str, Any]
    ) -> Tuple[List[NormalizedAsset], Dict[str, Any]]:
        assets = []
        for item in as_list(payload.get("data")):
            asset = _parse_icon(item)
            if asset:
                assets.append(asset)
            else:
                logger.warning("Dropping Flaticon item without id")

        pagination = payload.get("metadata", payload.get("meta"))
        return assets, pagination if isinstance(pagination, dict) else {}

    def _get_token(self) -> str:
        if self._token and time.time() < self._token_expires_at - TOKEN_REFRESH_MARGIN:
            return self._token

        response = self._send(
            "POST",
            "/app/authentication",
            files={"apikey": (None, (self._api_key or "").encode())},
            headers={"Accept": "application/json"},
        )
        body = _decode(response)
        data = body["data"] if isinstance(body.get("data"), dict) else body

        token = data.get("token")
        if not token:
            raise ProviderRequestFailed("Flaticon authentication response missing token", 502)

        try:
            expires_at = float(data.get("expires"))
        except (TypeError, ValueError):
            expires_at = time.time() + DEFAULT_TOKEN_TTL

        self._token = token
        self._token_expires_at = expires_at
        logger.info("Flaticon bearer token refreshed")
        return token

    def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            message = _response_error_message(e.response) or str(e)
            logger.error(f"Flaticon API error {e.response.status_code}: {message}")
            raise ProviderRequestFailed(message, e.response.status_code) from e
        except httpx.HTTPError as e:
            logger.error(f"Flaticon request failed: {e}")
            raise ProviderRequestFailed(str(e)) from e
        return response


def _decode(response: httpx.Response) -> Dict[str, Any]:
    try:
        body = response.json()
    except ValueError as e:
        raise ProviderRequestFailed("Flaticon returned a non-JSON response", 502) from e
    return body if isinstance(body, dict) else {}


def _response_error_message(response: httpx.Response) -> Optional[str]:
    try:
        return extract_error_message(response.json())
    except ValueError:
        return None


def _sized_images(item: Dict[str, Any]) -> List[Tuple[int, str]]:
    images = item.get("images")
    if not isinstance(images, dict):
        return []

    sized = []
    for size, url in images.items():
        try:
            sized.append((int(size), url))
        except (TypeError, ValueError):
            continue
    return sorted((s, u) for s, u in sized if isinstance(u, str) and u)


def _parse_icon(item: Dict[str, Any]) -> Optional[NormalizedAsset]:
    item_id = asset_id(item)
    if not item_id:
        return None

    sized = _sized_images(item)
    by_size = dict(sized)
    smallest = sized[0][1] if sized else None
    largest = sized[-1][1] if sized else None

    urls = ThumbnailUrls(
        small=by_size.get(64, smallest),
        medium=by_size.get(128, largest),
        original=largest,
    )

    return NormalizedAsset(
        id=item_id,
        display_name=pick_display_name(item, NAME_FIELDS),
        thumbnail_urls=urls,
        preview_url=by_size.get(512, largest),
    )
