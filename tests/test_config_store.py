"""Tests for the configuration store."""

import json
import pytest

from zoho_crm_mcp.core.models import TenantCredentials, ConfigError
from zoho_crm_mcp.core.config_store import (
    get_base_dir,
    profile_path,
    save_json,
    load_json,
    save_profile,
    load_profile,
    list_profiles,
    delete_profile,
)


@pytest.fixture
def temp_home(tmp_path, monkeypatch):
    """Set up a temporary home directory for config storage."""
    monkeypatch.setenv("ZOHO_CRM_MCP_HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def refresh_credentials():
    return TenantCredentials(
        base_url="https://www.zohoapis.eu",
        client_id="cid",
        client_secret="secret",
        refresh_token="refresh",
    )


def test_get_base_dir_with_env_var(temp_home):
    """Test get_base_dir uses ZOHO_CRM_MCP_HOME environment variable."""
    base_dir = get_base_dir()
    assert base_dir == temp_home
    assert base_dir.exists()


def test_get_base_dir_creates_directory(temp_home):
    """Test get_base_dir creates the directory if it doesn't exist."""
    temp_home.rmdir()
    assert not temp_home.exists()

    base_dir = get_base_dir()
    assert base_dir.exists()
    assert base_dir.is_dir()


def test_profile_path(temp_home):
    """Test profile_path generates correct paths."""
    assert profile_path("acme") == temp_home / "acme_profile.json"
    assert profile_path("acme", "cache") == temp_home / "acme_cache.json"


def test_save_and_load_json(temp_home):
    """Test saving and loading JSON data."""
    data = {"key1": "value1", "key2": 42, "key3": ["list", "of", "items"]}

    path = save_json("acme", "extra", data)
    assert path == temp_home / "acme_extra.json"
    assert load_json("acme", "extra") == data


def test_save_json_restricts_permissions(temp_home):
    """Test saved files are readable by the owner only."""
    path = save_json("acme", "profile", {"secret": "x"})
    assert path.stat().st_mode & 0o777 == 0o600


def test_load_json_missing_file(temp_home):
    """Test load_json raises ConfigError for missing files."""
    with pytest.raises(ConfigError) as exc_info:
        load_json("nonexistent", "profile")
    assert "not found" in str(exc_info.value).lower()


def test_load_json_invalid_json(temp_home):
    """Test load_json raises ConfigError for invalid JSON."""
    (temp_home / "broken_profile.json").write_text("{ invalid json }")

    with pytest.raises(ConfigError) as exc_info:
        load_json("broken", "profile")
    assert "invalid json" in str(exc_info.value).lower()


def test_save_and_load_profile(temp_home, refresh_credentials):
    """Test a profile round-trips through disk."""
    path = save_profile("acme-eu", refresh_credentials)

    with open(path) as f:
        saved = json.load(f)
    assert saved["name"] == "acme-eu"
    assert saved["credentials"]["client_id"] == "cid"

    assert load_profile("acme-eu") == refresh_credentials


def test_load_profile_invalid_data(temp_home):
    """Test load_profile rejects files without credentials."""
    save_json("bad", "profile", {"name": "bad"})

    with pytest.raises(ConfigError) as exc_info:
        load_profile("bad")
    assert "bad" in str(exc_info.value)


def test_list_profiles(temp_home, refresh_credentials):
    """Test list_profiles returns sorted names and ignores other files."""
    save_profile("zeta", refresh_credentials)
    save_profile("alpha", refresh_credentials)
    save_json("alpha", "cache", {})

    assert list_profiles() == ["alpha", "zeta"]


def test_delete_profile(temp_home, refresh_credentials):
    """Test deleting a profile removes its file."""
    save_profile("acme", refresh_credentials)
    delete_profile("acme")

    assert list_profiles() == []
    with pytest.raises(ConfigError):
        delete_profile("acme")
