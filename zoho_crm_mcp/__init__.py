"""
Zoho CRM adapter exposing CRM-agnostic operations on canonical entities.

Example:
    from zoho_crm_mcp import TenantCredentials, create_crm_client

    credentials = TenantCredentials.from_headers(request.headers)
    async with create_crm_client(credentials) as crm:
        contacts = await crm.list_contacts(limit=10)
"""

from .core import (
    TenantCredentials,
    CrmApiError,
    RateLimitError,
    AuthenticationError,
    NotFoundError,
    ValidationError,
    ConfigError,
)
from .client import ZohoCRMClient, create_crm_client

__version__ = "0.1.0"

__all__ = [
    "TenantCredentials",
    "CrmApiError",
    "RateLimitError",
    "AuthenticationError",
    "NotFoundError",
    "ValidationError",
    "ConfigError",
    "ZohoCRMClient",
    "create_crm_client",
]
