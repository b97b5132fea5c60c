"""Freepik API v1 provider.

Authenticates with the x-freepik-api-key header. Icons have their own
endpoint; every other kind goes through /resources with content-type
filters. Freepik has no animation category, so animations are served as
keyword-augmented vector searches and flagged with a note.
"""

import logging
import os
from typing import Any, Dict, List, Optional, Tuple

import requests

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

BASE_URL = "https://api.freepik.com/v1"

FREEMIUM = {"filters[license][freemium]": 1}
VECTOR = {"filters[content_type][vector]": 1}
PHOTO = {"filters[content_type][photo]": 1}

ANIMATION_NOTE = (
    "Freepik does not have native Lottie animations. "
    "Showing animated/motion vectors instead."
)

ICON_NAME_FIELDS = ("description", "name", "title")
RESOURCE_NAME_FIELDS = ("title", "filename")


class FreepikProvider(BaseAssetProvider):
    """Freepik keyed-credential REST API."""

    ENV_KEY = "FREEPIK_API_KEY"
    MAX_PAGE_SIZE = 100
    PROFILES = {
        AssetKind.ICON: KindProfile(
            endpoint="/icons", filters=FREEMIUM, size_param="per_page", item_shape="icon",
        ),
        AssetKind.THREE_D: KindProfile(
            endpoint="/resources",
            filters={**VECTOR, "filters[vector][style]": "3d", **FREEMIUM},
            term_suffix=" 3d",
        ),
        AssetKind.ILLUSTRATION: KindProfile(endpoint="/resources", filters={**VECTOR, **FREEMIUM}),
        AssetKind.ANIMATION: KindProfile(
            endpoint="/resources",
            filters={**VECTOR, **FREEMIUM},
            term_suffix=" animation motion",
            note=ANIMATION_NOTE,
        ),
        AssetKind.VECTOR: KindProfile(endpoint="/resources", filters={**VECTOR, **FREEMIUM}),
        AssetKind.PHOTO: KindProfile(endpoint="/resources", filters={**PHOTO, **FREEMIUM}),
    }

    def __init__(self, api_key: Optional[str] = None, session: Optional[requests.Session] = None):
        super().__init__(api_key if api_key is not None else os.getenv(self.ENV_KEY))
        self._owns_session = session is None
        self._session = session or requests.Session()

    @property
    def name(self) -> str:
        return "freepik"

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def build_request(self, query: SearchQuery) -> ProviderRequest:
        profile = self.profile_for(query.kind)
        params: Dict[str, Any] = {
            "term": self.augmented_term(query),
            "page": query.page,
            profile.size_param: self.clamp_page_size(query.page_size),
            "order": "relevance",
        }
        params.update(profile.filters)
        return ProviderRequest(
            path=profile.endpoint,
            params=params,
            headers={
                "x-freepik-api-key": self._api_key or "",
                "Accept-Language": "en-US",
            },
        )

    def fetch(self, request: ProviderRequest) -> Dict[str, Any]:
        url = f"{BASE_URL}{request.path}"
        logger.info(f"[FREEPIK] {request.method} {url} params={request.params}")

        try:
            response = self._session.request(
                request.method, url, params=request.params, headers=request.headers
            )
            response.raise_for_status()
        except requests.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            message = _response_error_message(e.response) or str(e)
            logger.error(f"Freepik API error {status_code}: {message}")
            raise ProviderRequestFailed(message, status_code) from e
        except requests.RequestException as e:
            logger.error(f"Freepik request failed: {e}")
            raise ProviderRequestFailed(str(e)) from e

        try:
            body = response.json()
        except ValueError as e:
            logger.error(f"Freepik returned a non-JSON body: {e}")
            raise ProviderRequestFailed("Freepik returned a non-JSON response", 502) from e

        if not isinstance(body, dict):
            logger.error(f"Freepik returned a {type(body).__name__} body instead of an object")
            raise ProviderRequestFailed("Freepik returned an unexpected response", 502)
        return body

    def normalize(
        self, kind: AssetKind, payload: Dict[str, Any]
    ) -> Tuple[List[NormalizedAsset], Dict[str, Any]]:
        parse = _parse_icon if self.profile_for(kind).item_shape == "icon" else _parse_resource

        assets = []
        for item in as_list(payload.get("data")):
            asset = parse(item)
            if asset:
                assets.append(asset)
            else:
                logger.warning("Dropping Freepik item without id")

        pagination = payload.get("meta")
        return assets, pagination if isinstance(pagination, dict) else {}


def _response_error_message(response: Optional[requests.Response]) -> Optional[str]:
    if response is None:
        return None
    try:
        return extract_error_message(response.json())
    except ValueError:
        return None


def _thumbnail_size(thumb: Dict[str, Any]) -> int:
    size = thumb.get("size", thumb.get("width"))
    try:
        return int(size)
    except (TypeError, ValueError):
        return 0


def _thumbnail_url(thumbnails: List[Dict[str, Any]], size: int) -> Optional[str]:
    for thumb in thumbnails:
        if _thumbnail_size(thumb) == size and thumb.get("url"):
            return thumb["url"]
    return _first_url(thumbnails)


def _first_url(thumbnails: List[Dict[str, Any]]) -> Optional[str]:
    for thumb in thumbnails:
        if thumb.get("url"):
            return thumb["url"]
    return None


def _parse_icon(item: Dict[str, Any]) -> Optional[NormalizedAsset]:
    item_id = asset_id(item)
    if not item_id:
        return None

    thumbnails = [t for t in as_list(item.get("thumbnails")) if t.get("url")]
    largest = max(thumbnails, key=_thumbnail_size)["url"] if thumbnails else None
    source = _source_url(item)
    urls = ThumbnailUrls(
        small=_thumbnail_url(thumbnails, 64) or source,
        medium=_thumbnail_url(thumbnails, 128) or source,
        original=largest or source,
    )

    return NormalizedAsset(
        id=item_id,
        display_name=pick_display_name(item, ICON_NAME_FIELDS),
        thumbnail_urls=urls,
        preview_url=urls.medium or urls.original,
    )


def _source_url(item: Dict[str, Any]) -> Optional[str]:
    image = item.get("image")
    if not isinstance(image, dict):
        return None
    source = image.get("source")
    if not isinstance(source, dict):
        return None
    return source.get("url") or None


def _parse_resource(item: Dict[str, Any]) -> Optional[NormalizedAsset]:
    item_id = asset_id(item)
    if not item_id:
        return None

    thumbnails = as_list(item.get("thumbnails"))
    source = _source_url(item)
    keyed_small = next(
        (t["url"] for t in thumbnails if t.get("key") == "small" and t.get("url")), None
    )
    small = keyed_small or _first_url(thumbnails) or source
    urls = ThumbnailUrls(
        small=small,
        medium=source or small,
        original=source or _first_url(thumbnails),
    )

    return NormalizedAsset(
        id=item_id,
        display_name=pick_display_name(item, RESOURCE_NAME_FIELDS),
        thumbnail_urls=urls,
        preview_url=source or urls.medium,
    )
