"""Core data models for the Zoho CRM adapter."""

import os
from dataclasses import dataclass
from typing import Any, Mapping

from .errors import AuthenticationError

DEFAULT_BASE_URL = "https://www.zohoapis.com"

# Request headers carrying per-tenant credentials
HEADER_FIELDS = {
    "base_url": "X-CRM-Base-URL",
    "access_token": "X-CRM-Access-Token",
    "client_id": "X-CRM-Client-ID",
    "client_secret": "X-CRM-Client-Secret",
    "refresh_token": "X-CRM-Refresh-Token",
}

ENV_FIELDS = {
    "base_url": "ZOHO_CRM_BASE_URL",
    "access_token": "ZOHO_CRM_ACCESS_TOKEN",
    "client_id": "ZOHO_CRM_CLIENT_ID",
    "client_secret": "ZOHO_CRM_CLIENT_SECRET",
    "refresh_token": "ZOHO_CRM_REFRESH_TOKEN",
}


@dataclass(frozen=True)
class TenantCredentials:
    """
    Credentials for one tenant, supplied with each incoming request.

    Either ``access_token`` is set (a pre-obtained bearer token), or all of
    ``client_id``, ``client_secret`` and ``refresh_token`` are set so a token
    can be obtained through the refresh flow.
    """
    base_url: str | None = None
    access_token: str | None = None
    client_id: str | None = None
    client_secret: str | None = None
    refresh_token: str | None = None

    @property
    def api_base_url(self) -> str:
        """Return the API domain, falling back to the global Zoho domain."""
        return self.base_url or DEFAULT_BASE_URL

    @property
    def has_refresh_flow(self) -> bool:
        """True when all refresh-flow fields are present."""
        return bool(self.client_id and self.client_secret and self.refresh_token)

    def validate(self) -> None:
        """
        Check that the credentials allow obtaining a token.

        Raises:
            AuthenticationError: If neither a token nor a refresh triple is set
        """
        if self.access_token or self.has_refresh_flow:
            return
        raise AuthenticationError(
            "Missing credentials. Provide either X-CRM-Access-Token, or all of "
            "X-CRM-Client-ID, X-CRM-Client-Secret, and X-CRM-Refresh-Token."
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert TenantCredentials to a dictionary."""
        return {
            "base_url": self.base_url,
            "access_token": self.access_token,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "refresh_token": self.refresh_token,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TenantCredentials":
        """Create TenantCredentials from a dictionary."""
        return cls(**{name: data.get(name) or None for name in HEADER_FIELDS})

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "TenantCredentials":
        """
        Parse tenant credentials from request headers.

        Header names are matched case-insensitively and empty values are
        treated as absent.
        """
        lowered = {key.lower(): value for key, value in headers.items()}
        return cls(**{
            name: lowered.get(header.lower()) or None
            for name, header in HEADER_FIELDS.items()
        })

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "TenantCredentials":
        """Read tenant credentials from ZOHO_CRM_* environment variables."""
        if environ is None:
            environ = os.environ
        return cls(**{
            name: environ.get(var) or None for name, var in ENV_FIELDS.items()
        })


@dataclass
class CachedToken:
    """An access token obtained through the refresh flow."""
    access_token: str
    expires_at_ms: float

    def is_valid(self, now_ms: float) -> bool:
        return now_ms < self.expires_at_ms


class ConfigError(Exception):
    """Raised when there is an error loading or saving configuration."""
    pass
