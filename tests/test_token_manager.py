"""Tests for the OAuth token manager."""

import asyncio
from urllib.parse import parse_qs

import httpx
import pytest

from zoho_crm_mcp.auth.token_manager import (
    DEFAULT_TOKEN_URL,
    EXPIRY_BUFFER_MS,
    TokenManager,
    resolve_token_url,
)
from zoho_crm_mcp.core.errors import AuthenticationError
from zoho_crm_mcp.core.models import TenantCredentials


class FakeClock:
    def __init__(self, now=1_000_000.0):
        self.now = now

    def __call__(self):
        return self.now


class TokenEndpoint:
    """Counts token requests and answers with a configurable body."""

    def __init__(self, body=None, status=200):
        self.body = body if body is not None else {"access_token": "fresh", "expires_in": 3600}
        self.status = status
        self.requests = []

    def handler(self, request):
        self.requests.append(request)
        return httpx.Response(self.status, json=self.body)


def refresh_credentials(base_url=None):
    return TenantCredentials(
        base_url=base_url,
        client_id="cid",
        client_secret="secret",
        refresh_token="refresh",
    )


def make_manager(endpoint, credentials, clock=None):
    client = httpx.AsyncClient(transport=httpx.MockTransport(endpoint.handler))
    return TokenManager(credentials, client, clock=clock or FakeClock())


@pytest.mark.parametrize("base_url, expected", [
    ("https://www.zohoapis.com", "https://accounts.zoho.com/oauth/v2/token"),
    ("https://www.zohoapis.eu", "https://accounts.zoho.eu/oauth/v2/token"),
    ("https://www.zohoapis.in", "https://accounts.zoho.in/oauth/v2/token"),
    ("https://www.zohoapis.com.au", "https://accounts.zoho.com.au/oauth/v2/token"),
    ("https://www.zohoapis.com.cn", "https://accounts.zoho.com.cn/oauth/v2/token"),
    ("https://www.zohoapis.jp", "https://accounts.zoho.jp/oauth/v2/token"),
    ("https://WWW.ZOHOAPIS.EU", "https://accounts.zoho.eu/oauth/v2/token"),
])
def test_resolve_token_url(base_url, expected):
    """Test regional API domains route to their accounts server."""
    assert resolve_token_url(base_url) == expected


def test_token_url_defaults_to_global():
    """Test credentials without a base URL use the global token endpoint."""
    manager = TokenManager(refresh_credentials(), http_client=None)
    assert manager.token_url == DEFAULT_TOKEN_URL


@pytest.mark.asyncio
async def test_direct_access_token_skips_refresh():
    """Test a supplied access token is returned without any HTTP call."""
    endpoint = TokenEndpoint()
    credentials = TenantCredentials(
        access_token="direct",
        client_id="cid",
        client_secret="secret",
        refresh_token="refresh",
    )
    manager = make_manager(endpoint, credentials)

    assert await manager.get_access_token() == "direct"
    assert endpoint.requests == []


@pytest.mark.asyncio
async def test_refresh_posts_form_to_regional_endpoint():
    """Test the refresh request shape and destination."""
    endpoint = TokenEndpoint()
    manager = make_manager(endpoint, refresh_credentials("https://www.zohoapis.eu"))

    assert await manager.get_access_token() == "fresh"

    request = endpoint.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://accounts.zoho.eu/oauth/v2/token"
    form = parse_qs(request.content.decode())
    assert form == {
        "grant_type": ["refresh_token"],
        "client_id": ["cid"],
        "client_secret": ["secret"],
        "refresh_token": ["refresh"],
    }


@pytest.mark.asyncio
async def test_token_is_cached_until_buffer():
    """Test the token is reused until 60s before expiry, then refreshed."""
    endpoint = TokenEndpoint()
    clock = FakeClock()
    manager = make_manager(endpoint, refresh_credentials(), clock)

    await manager.get_access_token()
    clock.now += 3600 - EXPIRY_BUFFER_MS / 1000 - 1
    await manager.get_access_token()
    assert len(endpoint.requests) == 1

    clock.now += 1
    await manager.get_access_token()
    assert len(endpoint.requests) == 2


@pytest.mark.asyncio
async def test_concurrent_callers_share_one_refresh():
    """Test simultaneous callers wait for a single refresh."""
    endpoint = TokenEndpoint()
    manager = make_manager(endpoint, refresh_credentials())

    tokens = await asyncio.gather(*(manager.get_access_token() for _ in range(5)))

    assert tokens == ["fresh"] * 5
    assert len(endpoint.requests) == 1


@pytest.mark.asyncio
async def test_missing_credentials():
    """Test an incomplete refresh triple fails without an HTTP call."""
    endpoint = TokenEndpoint()
    manager = make_manager(endpoint, TenantCredentials(client_id="cid"))

    with pytest.raises(AuthenticationError) as exc_info:
        await manager.get_access_token()

    assert "Missing OAuth credentials" in exc_info.value.message
    assert endpoint.requests == []


@pytest.mark.asyncio
async def test_refresh_http_failure():
    """Test a non-2xx token response raises with the response text."""
    endpoint = TokenEndpoint(body={"error": "invalid_client"}, status=400)
    manager = make_manager(endpoint, refresh_credentials())

    with pytest.raises(AuthenticationError) as exc_info:
        await manager.get_access_token()

    assert exc_info.value.message.startswith("Failed to refresh OAuth token: ")
    assert "invalid_client" in exc_info.value.message


@pytest.mark.asyncio
async def test_refresh_error_in_success_body():
    """Test Zoho's 200-with-error response is rejected."""
    endpoint = TokenEndpoint(body={"error": "invalid_code"})
    manager = make_manager(endpoint, refresh_credentials())

    with pytest.raises(AuthenticationError) as exc_info:
        await manager.get_access_token()

    assert exc_info.value.message == "OAuth token refresh failed: invalid_code"


@pytest.mark.asyncio
async def test_token_cache_is_per_instance():
    """Test two managers never share a cached token."""
    first = TokenEndpoint(body={"access_token": "tenant-a", "expires_in": 3600})
    second = TokenEndpoint(body={"access_token": "tenant-b", "expires_in": 3600})

    manager_a = make_manager(first, refresh_credentials())
    manager_b = make_manager(second, refresh_credentials())

    assert await manager_a.get_access_token() == "tenant-a"
    assert await manager_b.get_access_token() == "tenant-b"


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    {"expires_in": 3600},
    {"access_token": "fresh"},
    {"api_domain": "https://www.zohoapis.com"},
])
async def test_refresh_response_without_token(body):
    """Test a 200 token response missing its fields is rejected."""
    manager = make_manager(TokenEndpoint(body=body), refresh_credentials())

    with pytest.raises(AuthenticationError) as exc_info:
        await manager.get_access_token()

    assert exc_info.value.message == "Token refresh returned no access_token"
