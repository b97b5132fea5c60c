"""
Pytest configuration and fixtures for asset proxy tests.
"""
import json
import os
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

# Set test environment before importing app modules
os.environ["LOG_LEVEL"] = "DEBUG"
os.environ["ASSET_PROVIDER"] = "freepik"
os.environ["FREEPIK_API_KEY"] = "fpk-test-key-for-testing"
os.environ["DOWNLOADS_BACKEND"] = "memory"
os.environ["STATIC_DIR"] = str(Path(__file__).parent.parent / "public")


def make_response(status_code=200, body=None, url="https://api.freepik.com/v1/icons"):
    """Build a real requests.Response carrying a JSON (or raw text) body."""
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    response.encoding = "utf-8"
    if isinstance(body, (dict, list)):
        response._content = json.dumps(body).encode()
        response.headers["Content-Type"] = "application/json"
    else:
        response._content = (body or "").encode()
    return response


@pytest.fixture
def mock_session():
    """requests.Session double; set .request.return_value per test."""
    session = MagicMock(spec=requests.Session)
    session.request.return_value = make_response(200, {"data": [], "meta": {}})
    return session


@pytest.fixture
def freepik_provider(mock_session):
    from asset_proxy.services.providers.freepik import FreepikProvider
    return FreepikProvider(api_key="fpk-test-key-for-testing", session=mock_session)


@pytest.fixture
def icon_payload():
    """Freepik /icons response."""
    return {
        "data": [
            {
                "id": 1001,
                "description": "Shopping cart",
                "name": "cart",
                "thumbnails": [
                    {"size": 64, "url": "https://cdn.example.com/1001-64.png"},
                    {"size": 128, "url": "https://cdn.example.com/1001-128.png"},
                    {"size": 512, "url": "https://cdn.example.com/1001-512.png"},
                ],
            },
            {
                "id": 1002,
                "description": "",
                "name": "heart",
                "thumbnails": [{"size": 256, "url": "https://cdn.example.com/1002-256.png"}],
            },
            {
                "id": 1003,
                "thumbnails": [],
            },
            {
                "id": 1004,
                "name": "star",
                "thumbnails": [],
                "image": {"source": {"url": "https://cdn.example.com/1004.png"}},
            },
        ],
        "meta": {"pagination": {"page": 1, "per_page": 3, "total": 3}},
    }


@pytest.fixture
def resource_payload():
    """Freepik /resources response."""
    return {
        "data": [
            {
                "id": 2001,
                "title": "Rocket launch",
                "filename": "rocket.zip",
                "image": {"source": {"url": "https://img.example.com/2001.jpg"}},
                "thumbnails": [{"key": "small", "url": "https://img.example.com/2001-small.jpg"}],
            },
            {
                "id": 2002,
                "filename": "planet.zip",
                "thumbnails": [{"key": "large", "url": "https://img.example.com/2002-large.jpg"}],
            },
            {
                "id": 2003,
                "title": "   ",
                "image": "not-a-dict",
            },
        ],
        "meta": {"current_page": 1, "last_page": 9, "per_page": 3, "total": 27},
    }


@pytest.fixture
def test_app(freepik_provider):
    """App with the Freepik provider wired to the mock session and memory counters."""
    from asset_proxy.core.config import Settings
    from asset_proxy.main import create_app

    app = create_app(Settings(downloads_backend="memory", static_dir=Path(os.environ["STATIC_DIR"])))
    app.state.asset_provider = freepik_provider
    return app


@pytest.fixture
def test_client(test_app):
    """Create a test client for API testing."""
    from fastapi.testclient import TestClient
    return TestClient(test_app)
