"""Tests for the command line interface."""

import json

import httpx
import pytest

from zoho_crm_mcp.cli import main as cli
from zoho_crm_mcp.client import ZohoCRMClient
from zoho_crm_mcp.core.config_store import load_profile
from zoho_crm_mcp.core.models import ENV_FIELDS


@pytest.fixture
def clean_env(tmp_path, monkeypatch):
    """Isolate the profile store and clear credential variables."""
    monkeypatch.setenv("ZOHO_CRM_MCP_HOME", str(tmp_path))
    for var in ENV_FIELDS.values():
        monkeypatch.delenv(var, raising=False)
    return tmp_path


@pytest.fixture
def fake_client(monkeypatch, fake_zoho):
    """Route CLI-created clients to the fake Zoho API."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(fake_zoho.handler))

    def factory(credentials, **kwargs):
        return ZohoCRMClient(credentials, http_client=http_client)

    monkeypatch.setattr(cli, "create_crm_client", factory)
    return http_client


def test_no_command_prints_help(capsys):
    with pytest.raises(SystemExit) as exc_info:
        cli.main([])

    assert exc_info.value.code == 1
    assert "usage: zoho-crm-mcp" in capsys.readouterr().out


def test_operations_command(capsys):
    cli.main(["operations"])

    names = capsys.readouterr().out.split()
    assert names == ZohoCRMClient.operations()


def test_profile_save_list_delete(clean_env, capsys):
    """Test the profile lifecycle through the CLI."""
    cli.main([
        "profile", "save", "--name", "acme",
        "--base-url", "https://www.zohoapis.eu",
        "--client-id", "cid", "--client-secret", "secret", "--refresh-token", "refresh",
    ])
    assert "Saved profile 'acme'" in capsys.readouterr().out
    assert load_profile("acme").base_url == "https://www.zohoapis.eu"

    cli.main(["profile", "list"])
    assert "acme" in capsys.readouterr().out

    cli.main(["profile", "delete", "--name", "acme"])
    cli.main(["profile", "list"])
    assert "No profiles saved." in capsys.readouterr().out


def test_profile_save_rejects_incomplete_credentials(clean_env, capsys):
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["profile", "save", "--name", "acme", "--client-id", "cid"])

    assert exc_info.value.code == 1
    assert "Missing credentials" in capsys.readouterr().err


def test_profile_delete_missing(clean_env, capsys):
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["profile", "delete", "--name", "ghost"])

    assert exc_info.value.code == 1
    assert "ghost" in capsys.readouterr().err


def test_call_unknown_operation(clean_env, capsys):
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["call", "drop_database"])

    assert exc_info.value.code == 1
    assert "Unknown operation 'drop_database'" in capsys.readouterr().err


@pytest.mark.parametrize("raw", ["{not json", "[1, 2]"])
def test_call_rejects_bad_args(clean_env, monkeypatch, capsys, raw):
    monkeypatch.setenv("ZOHO_CRM_ACCESS_TOKEN", "token")

    with pytest.raises(SystemExit) as exc_info:
        cli.main(["call", "list_contacts", "--args", raw])

    assert exc_info.value.code == 1
    assert "--args" in capsys.readouterr().err


def test_call_without_credentials(clean_env, capsys):
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["call", "list_contacts"])

    assert exc_info.value.code == 1
    assert "Missing credentials" in capsys.readouterr().err


def test_call_prints_json_result(clean_env, monkeypatch, fake_zoho, fake_client, capsys):
    monkeypatch.setenv("ZOHO_CRM_ACCESS_TOKEN", "token")
    fake_zoho.add("GET", "/crm/v6/Contacts/5001", {"data": [{"id": "5001", "Last_Name": "Lovelace"}]})

    cli.main(["call", "get_contact", "--args", '{"contact_id": "5001"}'])

    result = json.loads(capsys.readouterr().out)
    assert result["id"] == "5001"
    assert result["lastName"] == "Lovelace"
    assert fake_zoho.requests[0].headers["Authorization"] == "Zoho-oauthtoken token"


def test_call_uses_saved_profile(clean_env, fake_zoho, fake_client, capsys):
    cli.main(["profile", "save", "--name", "acme", "--access-token", "profile-token"])
    capsys.readouterr()
    fake_zoho.add("DELETE", "/crm/v6/Contacts", None, status=204)

    cli.main(["call", "delete_contact", "--profile", "acme", "--args", '{"contact_id": "1"}'])

    assert "Done" in capsys.readouterr().out
    assert fake_zoho.requests[0].headers["Authorization"] == "Zoho-oauthtoken profile-token"


def test_call_reports_api_errors(clean_env, monkeypatch, fake_zoho, fake_client, capsys):
    monkeypatch.setenv("ZOHO_CRM_ACCESS_TOKEN", "token")
    fake_zoho.add("GET", "/crm/v6/Contacts/404", {"data": []})

    with pytest.raises(SystemExit) as exc_info:
        cli.main(["call", "get_contact", "--args", '{"contact_id": "404"}'])

    assert exc_info.value.code == 1
    assert "API error (NOT_FOUND): Contact not found: 404" in capsys.readouterr().err


def test_call_reports_bad_keyword_arguments(clean_env, monkeypatch, fake_client, capsys):
    monkeypatch.setenv("ZOHO_CRM_ACCESS_TOKEN", "token")

    with pytest.raises(SystemExit) as exc_info:
        cli.main(["call", "get_contact", "--args", '{"nope": 1}'])

    assert exc_info.value.code == 1
    assert "Invalid arguments for 'get_contact'" in capsys.readouterr().err


def test_call_checks_arguments_before_connecting(clean_env, capsys):
    """Test bad keyword arguments are rejected without credentials or HTTP."""
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["call", "log_call", "--args", '{"subject": "Demo"}'])

    assert exc_info.value.code == 1
    err = capsys.readouterr().err
    assert "Invalid arguments for 'log_call'" in err
    assert "Missing credentials" not in err


def test_call_does_not_mask_internal_type_errors(clean_env, monkeypatch, fake_client):
    monkeypatch.setenv("ZOHO_CRM_ACCESS_TOKEN", "token")

    async def broken(self, contact_id):
        raise TypeError("unsupported operand")

    monkeypatch.setattr(ZohoCRMClient, "get_contact", broken)

    with pytest.raises(TypeError, match="unsupported operand"):
        cli.main(["call", "get_contact", "--args", '{"contact_id": "1"}'])


def test_test_connection_command(clean_env, monkeypatch, fake_zoho, fake_client, capsys):
    monkeypatch.setenv("ZOHO_CRM_ACCESS_TOKEN", "token")
    fake_zoho.add("GET", "/crm/v6/users", {"users": [{"full_name": "Ada Lovelace"}]})

    cli.main(["test-connection"])

    assert "Connected as Ada Lovelace" in capsys.readouterr().out


def test_test_connection_failure(clean_env, monkeypatch, fake_zoho, fake_client, capsys):
    monkeypatch.setenv("ZOHO_CRM_ACCESS_TOKEN", "token")
    fake_zoho.add("GET", "/crm/v6/users", {}, status=401)

    with pytest.raises(SystemExit) as exc_info:
        cli.main(["test-connection"])

    assert exc_info.value.code == 1
    assert "Connection failed" in capsys.readouterr().err
