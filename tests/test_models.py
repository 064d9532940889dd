"""Tests for tenant credentials and core models."""

import pytest

from zoho_crm_mcp.core.errors import AuthenticationError
from zoho_crm_mcp.core.models import (
    DEFAULT_BASE_URL,
    CachedToken,
    TenantCredentials,
)


def test_from_headers_reads_all_fields():
    """Test parsing every credential header."""
    credentials = TenantCredentials.from_headers({
        "X-CRM-Base-URL": "https://www.zohoapis.eu",
        "X-CRM-Access-Token": "token",
        "X-CRM-Client-ID": "cid",
        "X-CRM-Client-Secret": "secret",
        "X-CRM-Refresh-Token": "refresh",
    })

    assert credentials.base_url == "https://www.zohoapis.eu"
    assert credentials.access_token == "token"
    assert credentials.client_id == "cid"
    assert credentials.client_secret == "secret"
    assert credentials.refresh_token == "refresh"


def test_from_headers_is_case_insensitive():
    """Test header names are matched regardless of case."""
    credentials = TenantCredentials.from_headers({"x-crm-access-token": "abc"})
    assert credentials.access_token == "abc"


def test_from_headers_treats_empty_values_as_absent():
    """Test empty header values become None."""
    credentials = TenantCredentials.from_headers({
        "X-CRM-Access-Token": "",
        "X-CRM-Base-URL": "",
    })
    assert credentials.access_token is None
    assert credentials.base_url is None


def test_api_base_url_defaults_to_global_domain():
    """Test a missing base URL falls back to zohoapis.com."""
    assert TenantCredentials(access_token="t").api_base_url == DEFAULT_BASE_URL
    assert DEFAULT_BASE_URL == "https://www.zohoapis.com"


def test_from_env():
    """Test reading credentials from ZOHO_CRM_* variables."""
    credentials = TenantCredentials.from_env({
        "ZOHO_CRM_CLIENT_ID": "cid",
        "ZOHO_CRM_CLIENT_SECRET": "secret",
        "ZOHO_CRM_REFRESH_TOKEN": "refresh",
        "UNRELATED": "ignored",
    })

    assert credentials.has_refresh_flow
    assert credentials.access_token is None


def test_validate_accepts_access_token():
    """Test a direct access token alone is enough."""
    TenantCredentials(access_token="t").validate()


def test_validate_accepts_refresh_triple():
    """Test the refresh triple alone is enough."""
    TenantCredentials(client_id="a", client_secret="b", refresh_token="c").validate()


def test_validate_rejects_partial_refresh_triple():
    """Test incomplete credentials are rejected with an authentication error."""
    credentials = TenantCredentials(client_id="a", client_secret="b")

    assert not credentials.has_refresh_flow
    with pytest.raises(AuthenticationError) as exc_info:
        credentials.validate()
    assert exc_info.value.code == "AUTHENTICATION_FAILED"
    assert exc_info.value.status_code == 401


def test_dict_round_trip():
    """Test to_dict and from_dict preserve every field."""
    credentials = TenantCredentials(
        base_url="https://www.zohoapis.in",
        client_id="a",
        client_secret="b",
        refresh_token="c",
    )
    assert TenantCredentials.from_dict(credentials.to_dict()) == credentials


def test_cached_token_validity():
    """Test a cached token is valid strictly before its expiry."""
    token = CachedToken(access_token="t", expires_at_ms=1000)

    assert token.is_valid(999)
    assert not token.is_valid(1000)
