"""Main CLI entry point for the Zoho CRM MCP adapter."""

import argparse
import asyncio
import inspect
import json
import logging
import sys

from zoho_crm_mcp.core import (
    ConfigError,
    CrmApiError,
    TenantCredentials,
    ValidationError,
    delete_profile,
    format_error_for_logging,
    list_profiles,
    load_profile,
    save_profile,
)
from zoho_crm_mcp.client import ZohoCRMClient, create_crm_client

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )
    # Request lines from httpx would drown our own output
    logging.getLogger("httpx").setLevel(logging.WARNING)


def resolve_credentials(args) -> TenantCredentials:
    """
    Load credentials from ``--profile`` or the ZOHO_CRM_* environment.

    Raises:
        ConfigError: If the profile cannot be loaded
        AuthenticationError: If the credentials are incomplete
    """
    if args.profile:
        credentials = load_profile(args.profile)
    else:
        credentials = TenantCredentials.from_env()
    credentials.validate()
    return credentials


def parse_call_args(raw: str | None) -> dict:
    """
    Parse the ``--args`` JSON object of the call command.

    Raises:
        ValidationError: If the value is not a JSON object
    """
    if not raw:
        return {}
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON for --args: {e}")
    if not isinstance(value, dict):
        raise ValidationError("--args must be a JSON object of keyword arguments")
    return value


def print_json(value):
    print(json.dumps(value, indent=2, default=str))


def cmd_profile_save(args):
    """Handle the profile save command."""
    try:
        credentials = TenantCredentials(
            base_url=args.base_url,
            access_token=args.access_token,
            client_id=args.client_id,
            client_secret=args.client_secret,
            refresh_token=args.refresh_token,
        )
        credentials.validate()
        path = save_profile(args.name, credentials)
        print(f"Saved profile '{args.name}'")
        print(f"Configuration saved to: {path}")

    except (ConfigError, CrmApiError) as e:
        print(f"Error saving profile: {e}", file=sys.stderr)
        sys.exit(1)


def cmd_profile_list(args):
    """Handle the profile list command."""
    try:
        names = list_profiles()
    except OSError as e:
        print(f"Error listing profiles: {e}", file=sys.stderr)
        sys.exit(1)

    if not names:
        print("No profiles saved.")
        return

    print(f"Saved profiles ({len(names)}):")
    for name in names:
        print(f"  {name}")


def cmd_profile_delete(args):
    """Handle the profile delete command."""
    try:
        delete_profile(args.name)
        print(f"Deleted profile '{args.name}'")
    except (ConfigError, OSError) as e:
        print(f"Error deleting profile: {e}", file=sys.stderr)
        sys.exit(1)


async def _test_connection(credentials: TenantCredentials, args) -> dict:
    async with create_crm_client(credentials, timeout_seconds=args.timeout) as client:
        return await client.test_connection()


def cmd_test_connection(args):
    """Handle the test-connection command."""
    try:
        credentials = resolve_credentials(args)
    except (ConfigError, CrmApiError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    result = asyncio.run(_test_connection(credentials, args))
    if not result["connected"]:
        print(f"Connection failed: {result['message']}", file=sys.stderr)
        sys.exit(1)
    print(f"✓ {result['message']}")


def cmd_operations(args):
    """Handle the operations command."""
    for name in ZohoCRMClient.operations():
        print(name)


async def _call(credentials: TenantCredentials, args, kwargs: dict):
    async with create_crm_client(
        credentials, timeout_seconds=args.timeout, max_retries=args.max_retries
    ) as client:
        operation = getattr(client, args.operation)
        return await operation(**kwargs)


def bind_call_args(operation: str, kwargs: dict):
    """
    Check ``kwargs`` against the operation's signature.

    Raises:
        ValidationError: If the arguments do not fit the signature
    """
    signature = inspect.signature(getattr(ZohoCRMClient, operation))
    try:
        signature.bind(None, **kwargs)
    except TypeError as e:
        raise ValidationError(f"Invalid arguments for '{operation}': {e}")


def cmd_call(args):
    """Handle the call command - run one operation and print its JSON result."""
    if args.operation not in ZohoCRMClient.operations():
        print(f"Error: Unknown operation '{args.operation}'.", file=sys.stderr)
        print("Run 'zoho-crm-mcp operations' to list them.", file=sys.stderr)
        sys.exit(1)

    try:
        kwargs = parse_call_args(args.args)
        bind_call_args(args.operation, kwargs)
        credentials = resolve_credentials(args)
    except (ConfigError, CrmApiError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        result = asyncio.run(_call(credentials, args, kwargs))
    except CrmApiError as e:
        logger.debug(f"Operation failed: {format_error_for_logging(e)}")
        print(f"API error ({e.code}): {e.message}", file=sys.stderr)
        sys.exit(1)

    if result is None:
        print("✓ Done")
    else:
        print_json(result)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zoho-crm-mcp",
        description="Zoho CRM adapter CLI",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Profile commands
    profile_parser = subparsers.add_parser("profile", help="Manage saved credential profiles")
    profile_subparsers = profile_parser.add_subparsers(dest="profile_command")

    save_parser = profile_subparsers.add_parser("save", help="Save a credential profile")
    save_parser.add_argument("--name", required=True, help="Profile name (e.g., 'acme-eu')")
    save_parser.add_argument("--base-url", help="API domain (e.g., 'https://www.zohoapis.eu')")
    save_parser.add_argument("--access-token", help="Pre-obtained access token")
    save_parser.add_argument("--client-id", help="OAuth client id")
    save_parser.add_argument("--client-secret", help="OAuth client secret")
    save_parser.add_argument("--refresh-token", help="OAuth refresh token")
    save_parser.set_defaults(func=cmd_profile_save)

    list_parser = profile_subparsers.add_parser("list", help="List saved profiles")
    list_parser.set_defaults(func=cmd_profile_list)

    delete_parser = profile_subparsers.add_parser("delete", help="Delete a saved profile")
    delete_parser.add_argument("--name", required=True, help="Profile name")
    delete_parser.set_defaults(func=cmd_profile_delete)

    # Commands that talk to Zoho share credential options
    remote = argparse.ArgumentParser(add_help=False)
    remote.add_argument("--profile", help="Saved profile name (default: ZOHO_CRM_* environment)")
    remote.add_argument("--timeout", type=float, default=30.0, help="Request timeout in seconds")

    test_parser = subparsers.add_parser(
        "test-connection", parents=[remote], help="Check that the credentials work"
    )
    test_parser.set_defaults(func=cmd_test_connection)

    operations_parser = subparsers.add_parser("operations", help="List available operations")
    operations_parser.set_defaults(func=cmd_operations)

    call_parser = subparsers.add_parser(
        "call", parents=[remote], help="Run one operation and print the result as JSON"
    )
    call_parser.add_argument("operation", help="Operation name (e.g., 'list_contacts')")
    call_parser.add_argument("--args", help="Keyword arguments as a JSON object")
    call_parser.add_argument(
        "--max-retries", type=int, default=0, help="Retries for rate limits and network errors"
    )
    call_parser.set_defaults(func=cmd_call)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if not getattr(args, "func", None):
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == "__main__":
    main()
