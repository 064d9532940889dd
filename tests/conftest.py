"""Shared fixtures: a fake Zoho API served through httpx.MockTransport."""

import json

import httpx
import pytest
import pytest_asyncio

from zoho_crm_mcp.client import ZohoCRMClient
from zoho_crm_mcp.core.models import TenantCredentials


class FakeZoho:
    """
    Canned Zoho responses keyed by (method, path).

    A route body may be a dict (sent as JSON), None (empty body) or a
    callable taking the httpx.Request and returning an httpx.Response.
    Every request is recorded in ``requests``.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, method, path, body=None, status=200, headers=None):
        self.routes[(method, path)] = (status, body, headers or {})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(500, json={"message": f"Unexpected request {key}"})

        status, body, headers = self.routes[key]
        if callable(body):
            return body(request)
        if body is None:
            return httpx.Response(status, headers=headers)
        return httpx.Response(status, json=body, headers=headers)

    def sent(self, method, path):
        """Return recorded requests matching method and path."""
        return [
            r for r in self.requests
            if r.method == method and r.url.path == path
        ]

    def last_json(self, method, path):
        """Return the JSON body of the last matching request."""
        return json.loads(self.sent(method, path)[-1].content)


@pytest.fixture
def fake_zoho():
    return FakeZoho()


@pytest.fixture
def credentials():
    return TenantCredentials(
        base_url="https://www.zohoapis.com",
        access_token="test-token",
    )


@pytest_asyncio.fixture
async def http_client(fake_zoho):
    client = httpx.AsyncClient(transport=httpx.MockTransport(fake_zoho.handler))
    yield client
    await client.aclose()


@pytest.fixture
def crm(credentials, http_client):
    return ZohoCRMClient(credentials, http_client=http_client)


def success(record_id):
    """Zoho write acknowledgement envelope."""
    return {"data": [{"code": "SUCCESS", "status": "success", "details": {"id": record_id}}]}


def page(records, count=None, more=False, page_number=1, per_page=20):
    """Zoho list envelope."""
    return {
        "data": records,
        "info": {
            "page": page_number,
            "per_page": per_page,
            "count": len(records) if count is None else count,
            "more_records": more,
        },
    }
