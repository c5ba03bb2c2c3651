# shopnet/conftest.py
import sys
import os
import pytest
from pathlib import Path

import httpx

# Add repo root to PYTHONPATH
REPO_ROOT = Path(__file__).resolve().parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

os.environ.setdefault("SKIP_ENV_VALIDATION", "1")

TEST_API_BASE = "https://shop-backend.test/api"


class FakeShopBackend:
    """Scriptable stand-in for the e-commerce backend, served via httpx.MockTransport.

    Set `responses[path]` to a (status, body) tuple, a callable taking the
    request, or an exception instance to raise. Every request is recorded.
    """

    def __init__(self):
        self.responses = {}
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.startswith("/api"):
            path = path[len("/api"):]
        handler = self.responses.get(path)
        if handler is None:
            return httpx.Response(404, json={"success": False, "message": "not found"})
        if isinstance(handler, Exception):
            raise handler
        if callable(handler):
            return handler(request)
        status, body = handler
        if isinstance(body, (dict, list)):
            return httpx.Response(status, json=body)
        return httpx.Response(status, text=body)


@pytest.fixture
def fake_backend():
    return FakeShopBackend()


@pytest.fixture
def shop_client(fake_backend):
    from shopnet.features.shops.client import ShopApiClient

    http_client = httpx.Client(transport=httpx.MockTransport(fake_backend))
    client = ShopApiClient(base_url=TEST_API_BASE, timeout=1.0, http_client=http_client)
    yield client
    http_client.close()


@pytest.fixture
def api_client(shop_client):
    """TestClient for the gateway with the shop backend replaced by fake_backend."""
    from fastapi.testclient import TestClient
    from shopnet.main import app
    from shopnet.api.shops import get_shop_client

    app.dependency_overrides[get_shop_client] = lambda: shop_client
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_shop_client, None)
