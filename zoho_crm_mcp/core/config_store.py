"""Configuration and persistence for tenant credential profiles."""

import json
import logging
import os
from pathlib import Path

from .models import TenantCredentials, ConfigError

logger = logging.getLogger(__name__)

PROFILE_SUFFIX = "profile"


def get_base_dir() -> Path:
    """
    Get the base directory for storing configuration.

    The directory is determined by:
    1. Environment variable ZOHO_CRM_MCP_HOME if set
    2. Otherwise, ~/.zoho_crm_mcp

    The directory is created if it does not exist.

    Returns:
        Path to the base directory
    """
    env_home = os.environ.get("ZOHO_CRM_MCP_HOME")
    if env_home:
        base_dir = Path(env_home)
    else:
        base_dir = Path.home() / ".zoho_crm_mcp"

    base_dir.mkdir(parents=True, exist_ok=True)
    return base_dir


def profile_path(name: str, suffix: str = PROFILE_SUFFIX) -> Path:
    """
    Get the path for a named configuration file.

    Args:
        name: Profile name (e.g., "acme-eu")
        suffix: File suffix (default: "profile")

    Returns:
        Path to the configuration file
    """
    return get_base_dir() / f"{name}_{suffix}.json"


def save_json(name: str, suffix: str, data: dict) -> Path:
    """
    Save a dictionary as JSON to a configuration file.

    Args:
        name: Profile name
        suffix: File suffix
        data: Dictionary to save

    Returns:
        Path to the saved file
    """
    path = profile_path(name, suffix)
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with open(path, "w") as f:
            json.dump(data, f, indent=2)
        # Profiles hold OAuth secrets
        path.chmod(0o600)
        logger.debug(f"Saved JSON to {path}")
        return path
    except OSError as e:
        raise ConfigError(f"Failed to save JSON to {path}: {e}")


def load_json(name: str, suffix: str) -> dict:
    """
    Load a dictionary from a configuration file.

    Raises:
        ConfigError: If the file does not exist or JSON is invalid
    """
    path = profile_path(name, suffix)

    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        with open(path, "r") as f:
            data = json.load(f)
        logger.debug(f"Loaded JSON from {path}")
        return data
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}")
    except OSError as e:
        raise ConfigError(f"Failed to load JSON from {path}: {e}")


def save_profile(name: str, credentials: TenantCredentials) -> Path:
    """
    Save tenant credentials under a profile name.

    Args:
        name: Profile name
        credentials: Credentials to persist

    Returns:
        Path to the saved file
    """
    data = {"name": name, "credentials": credentials.to_dict()}
    return save_json(name, PROFILE_SUFFIX, data)


def load_profile(name: str) -> TenantCredentials:
    """
    Load tenant credentials saved under a profile name.

    Raises:
        ConfigError: If the profile does not exist or is invalid
    """
    data = load_json(name, PROFILE_SUFFIX)
    try:
        return TenantCredentials.from_dict(data["credentials"])
    except (KeyError, TypeError, AttributeError) as e:
        raise ConfigError(f"Failed to parse profile '{name}': {e}")


def list_profiles() -> list[str]:
    """Return saved profile names, sorted."""
    suffix = f"_{PROFILE_SUFFIX}"
    return sorted(
        path.stem[: -len(suffix)]
        for path in get_base_dir().glob(f"*{suffix}.json")
    )


def delete_profile(name: str) -> None:
    """
    Delete a saved profile.

    Raises:
        ConfigError: If the profile does not exist
    """
    path = profile_path(name)
    if not path.exists():
        raise ConfigError(f"Profile '{name}' not found")
    path.unlink()
    logger.info(f"Deleted profile '{name}'")
