"""
Tests for the Flaticon bearer-token provider.
"""
import time

import httpx
import pytest

from asset_proxy.core.exceptions import ProviderRequestFailed
from asset_proxy.schemas.assets import AssetKind, SearchQuery
from asset_proxy.services.providers.flaticon import BASE_URL, FlaticonProvider

SEARCH_PAYLOAD = {
    "data": [
        {
            "id": 3001,
            "description": "Rocket",
            "images": {
                "16": "https://cdn.flaticon.example/3001-16.png",
                "64": "https://cdn.flaticon.example/3001-64.png",
                "128": "https://cdn.flaticon.example/3001-128.png",
                "512": "https://cdn.flaticon.example/3001-512.png",
            },
        },
        {
            "id": 3002,
            "images": {"24": "https://cdn.flaticon.example/3002-24.png", "256": "https://cdn.flaticon.example/3002-256.png"},
        },
        {"description": "no id"},
    ],
    "metadata": {"page": 1, "count": 2, "total": 40},
}


class FlaticonStub:
    """Records requests and answers the auth and search endpoints."""

    def __init__(self, search_status=200, search_body=None):
        self.requests = []
        self.search_status = search_status
        self.search_body = SEARCH_PAYLOAD if search_body is None else search_body

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.endswith("/app/authentication"):
            return httpx.Response(200, json={"data": {"token": "tok-123", "expires": time.time() + 3600}})
        return httpx.Response(self.search_status, json=self.search_body)

    @property
    def search_requests(self):
        return [r for r in self.requests if "/search/icons/" in r.url.path]

    @property
    def auth_requests(self):
        return [r for r in self.requests if r.url.path.endswith("/app/authentication")]


def make_provider(stub, api_key="flt-test-key"):
    client = httpx.Client(base_url=BASE_URL, transport=httpx.MockTransport(stub))
    return FlaticonProvider(api_key=api_key, client=client)


class TestFlaticonRequests:

    def test_icon_search_sends_bearer_token(self):
        stub = FlaticonStub()
        provider = make_provider(stub)

        provider.fetch(provider.build_request(SearchQuery(term="rocket", page=2, page_size=10)))

        search = stub.search_requests[0]
        assert search.url.path == "/v3/search/icons/priority"
        assert search.url.params["q"] == "rocket"
        assert search.url.params["page"] == "2"
        assert search.url.params["limit"] == "10"
        assert search.headers["Authorization"] == "Bearer tok-123"

    def test_token_reused_until_expiry(self):
        stub = FlaticonStub()
        provider = make_provider(stub)
        request = provider.build_request(SearchQuery())

        provider.fetch(request)
        provider.fetch(request)

        assert len(stub.auth_requests) == 1
        assert len(stub.search_requests) == 2

    def test_page_size_capped(self):
        provider = make_provider(FlaticonStub())

        request = provider.build_request(SearchQuery(page_size=500))

        assert request.params["limit"] == 100

    def test_non_icon_kinds_are_approximated(self):
        provider = make_provider(FlaticonStub())

        request = provider.build_request(SearchQuery(term="cat", kind=AssetKind.ANIMATION))

        assert request.params["q"] == "cat animated"
        assert provider.profile_for(AssetKind.ANIMATION).note
        assert provider.profile_for(AssetKind.ICON).note is None

    def test_error_status_is_reported(self):
        stub = FlaticonStub(search_status=429, search_body={"error": {"message": "Too many requests"}})
        provider = make_provider(stub)

        with pytest.raises(ProviderRequestFailed) as exc_info:
            provider.fetch(provider.build_request(SearchQuery()))

        assert exc_info.value.status_code == 429
        assert exc_info.value.message == "Too many requests"

    def test_missing_token_in_auth_response(self):
        def handler(request):
            return httpx.Response(200, json={"data": {}})

        provider = make_provider(handler)

        with pytest.raises(ProviderRequestFailed) as exc_info:
            provider.fetch(provider.build_request(SearchQuery()))

        assert exc_info.value.status_code == 502


class TestFlaticonNormalize:

    def test_sized_images_mapped(self):
        provider = make_provider(FlaticonStub())

        assets, pagination = provider.normalize(AssetKind.ICON, SEARCH_PAYLOAD)

        rocket = assets[0]
        assert rocket.id == "3001"
        assert rocket.display_name == "Rocket"
        assert rocket.thumbnail_urls.small == "https://cdn.flaticon.example/3001-64.png"
        assert rocket.thumbnail_urls.medium == "https://cdn.flaticon.example/3001-128.png"
        assert rocket.thumbnail_urls.original == "https://cdn.flaticon.example/3001-512.png"
        assert rocket.preview_url == "https://cdn.flaticon.example/3001-512.png"
        assert pagination == {"page": 1, "count": 2, "total": 40}

    def test_missing_sizes_fall_back(self):
        provider = make_provider(FlaticonStub())

        assets, _ = provider.normalize(AssetKind.ICON, SEARCH_PAYLOAD)

        other = assets[1]
        assert other.display_name == "Untitled"
        assert other.thumbnail_urls.small == "https://cdn.flaticon.example/3002-24.png"
        assert other.thumbnail_urls.medium == "https://cdn.flaticon.example/3002-256.png"
        assert other.preview_url == "https://cdn.flaticon.example/3002-256.png"
        assert len(assets) == 2


class TestFlaticonClose:

    def test_owned_client_closed(self):
        provider = FlaticonProvider(api_key="flt-test-key")

        provider.close()

        assert provider._client.is_closed

    def test_injected_client_left_open(self):
        client = httpx.Client(base_url=BASE_URL, transport=httpx.MockTransport(FlaticonStub()))
        provider = FlaticonProvider(api_key="flt-test-key", client=client)

        provider.close()

        assert not client.is_closed
